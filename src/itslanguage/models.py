"""Modelos de dominio da API administrativa ITSLanguage.

Campos em snake_case no Python e camelCase no JSON (aliases). Tipos sao
validados na construcao: ``Organisation(id=5, name="x")`` levanta
``pydantic.ValidationError``.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs at runtime
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _DomainModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    def to_api(self, *fields: str) -> dict[str, Any]:
        """Serializa para o corpo JSON da API (camelCase).

        Args:
            fields: Se informado, restringe aos campos listados (nomes Python).
        """
        include = set(fields) if fields else None
        return self.model_dump(mode="json", by_alias=True, include=include)


class Organisation(_DomainModel):
    """Organisation: tenant de alunos e challenges."""

    id: str | None = None
    name: str
    created: datetime | None = None
    updated: datetime | None = None


class BasicAuth(_DomainModel):
    """Credenciais basic auth de um tenant.

    principal e credentials sao gerados pelo backend quando omitidos.
    """

    tenant_id: str
    principal: str | None = None
    credentials: str | None = None
    created: datetime | None = None
    updated: datetime | None = None


class Student(_DomainModel):
    """Aluno pertencente a uma Organisation."""

    organisation_id: str
    id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    gender: str | None = None
    birth_year: int | None = None
    created: datetime | None = None
    updated: datetime | None = None


class SpeechChallenge(_DomainModel):
    """Challenge de fala livre, escopado por organisation."""

    organisation_id: str
    id: str | None = None
    topic: str | None = None
    reference_audio_url: str | None = None
    created: datetime | None = None
    updated: datetime | None = None


class SpeechRecording(_DomainModel):
    """Gravacao de um aluno para um SpeechChallenge.

    ``challenge`` guarda o id do challenge, nao o objeto.
    """

    challenge: str
    student: Student
    id: str | None = None
    audio: bytes | None = None
    audio_url: str | None = None
    created: datetime | None = None
    updated: datetime | None = None


class PronunciationChallenge(_DomainModel):
    """Challenge de pronuncia com audio de referencia."""

    id: str | None = None
    transcription: str
    reference_audio_url: str | None = None
    status: str | None = None
    created: datetime | None = None
    updated: datetime | None = None
