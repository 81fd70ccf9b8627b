"""Configuracao da conexao com a API ITSLanguage.

Carregada de variaveis de ambiente (``ITSLANGUAGE_*``, campos aninhados com
``__``, ex: ``ITSLANGUAGE_STREAMING__READY_TIMEOUT_S``) ou de arquivo YAML.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from itslanguage.exceptions import SettingsParseError, SettingsValidationError

DEFAULT_API_URL = "https://api.itslanguage.nl"


class StreamingConfig(BaseModel):
    """Configuracao das sessoes de streaming de gravacao."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    # None = espera indefinida pelo evento ready do recorder
    ready_timeout_s: float | None = None

    @field_validator("ready_timeout_s")
    @classmethod
    def timeout_must_be_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            msg = f"ready_timeout_s must be > 0, got {v}"
            raise ValueError(msg)
        return v


class ConnectionSettings(BaseSettings):
    """Settings de uma Connection: endpoints REST/WebSocket e credenciais.

    Construir a classe le o ambiente; argumentos explicitos vencem.
    """

    model_config = SettingsConfigDict(
        env_prefix="ITSLANGUAGE_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        frozen=True,
        extra="forbid",
    )

    api_url: str = DEFAULT_API_URL
    ws_url: str | None = None
    realm: str = "default"
    oauth2_token: str | None = None
    ws_token: str | None = None
    auth_principal: str | None = None
    auth_password: str | None = None
    timeout_s: float = 30.0
    streaming: StreamingConfig = StreamingConfig()

    @field_validator("api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @classmethod
    def from_env(cls, **overrides: object) -> ConnectionSettings:
        """Cria settings a partir de ``ITSLANGUAGE_*``; overrides nao-None vencem."""
        try:
            return cls(**{k: v for k, v in overrides.items() if v is not None})
        except Exception as e:
            raise SettingsValidationError("<env>", [str(e)]) from e

    @classmethod
    def from_yaml_path(cls, path: str | Path) -> ConnectionSettings:
        """Carrega settings a partir de arquivo YAML."""
        path = Path(path)
        if not path.exists():
            raise SettingsParseError(str(path), "File not found")

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise SettingsParseError(str(path), f"Could not read file: {e}") from e

        return cls.from_yaml_string(raw, source_path=str(path))

    @classmethod
    def from_yaml_string(cls, raw: str, source_path: str = "<string>") -> ConnectionSettings:
        """Carrega settings a partir de string YAML."""
        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise SettingsParseError(source_path, f"Invalid YAML: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise SettingsParseError(source_path, "YAML content must be a mapping")

        try:
            return cls.model_validate(data)
        except Exception as e:
            errors = [str(e)]
            raise SettingsValidationError(source_path, errors) from e
