"""Exceptions tipadas do SDK ITSLanguage.

Hierarquia:
    ITSLanguageError (base)
    +-- ConfigError
    |   +-- SettingsParseError
    |   +-- SettingsValidationError
    +-- InvalidArgumentError
    +-- MissingFieldError
    +-- AuthenticationError
    +-- ApiError
    +-- RecordingError
    |   +-- InvalidStateError
    |   +-- SessionConflictError
    |   +-- RecorderTimeoutError
    |   +-- InvalidTransitionError
    +-- TransportError
    +-- RemoteRpcError
"""

from __future__ import annotations

from typing import Any


class ITSLanguageError(Exception):
    """Base para todas as exceptions do SDK."""


# --- Configuracao ---


class ConfigError(ITSLanguageError):
    """Erro de configuracao da conexao."""


class SettingsParseError(ConfigError):
    """Falha ao parsear arquivo de configuracao."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse settings '{path}': {reason}")


class SettingsValidationError(ConfigError):
    """Configuracao invalida (tipos errados, campos desconhecidos)."""

    def __init__(self, path: str, errors: list[str]) -> None:
        self.path = path
        self.errors = errors
        detail = "; ".join(errors)
        super().__init__(f"Invalid settings '{path}': {detail}")


# --- Argumentos ---


class InvalidArgumentError(ITSLanguageError):
    """Parametro ausente ou de tipo invalido."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class MissingFieldError(ITSLanguageError):
    """Campo obrigatorio vazio ou ausente."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} field is required")


# --- REST ---


class AuthenticationError(ITSLanguageError):
    """Conexao sem credenciais para requests autorizadas."""

    def __init__(self, detail: str = "Please authenticate first") -> None:
        self.detail = detail
        super().__init__(detail)


class ApiError(ITSLanguageError):
    """Resposta de erro da API REST."""

    def __init__(self, status_code: int, errors: list[Any] | None = None) -> None:
        self.status_code = status_code
        self.errors = errors or []
        msg = f"API request failed with status {status_code}"
        if self.errors:
            msg += f": {self.errors}"
        super().__init__(msg)


# --- Gravacao ---


class RecordingError(ITSLanguageError):
    """Erro relacionado a sessoes de streaming de gravacao."""


class InvalidStateError(RecordingError):
    """Recorder em estado que nao permite iniciar a sessao."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class SessionConflictError(RecordingError):
    """Ja existe uma gravacao em andamento nesta conexao."""

    def __init__(self, recording_id: str) -> None:
        self.recording_id = recording_id
        super().__init__(f"Session with recordingId {recording_id} still in progress")


class RecorderTimeoutError(RecordingError):
    """Recorder nao ficou pronto dentro do timeout configurado."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Recorder was not ready within {timeout_seconds}s")


class InvalidTransitionError(RecordingError):
    """Transicao de estado invalida na maquina de estados da sessao."""

    def __init__(self, from_state: str, to_state: str) -> None:
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"Invalid transition: {from_state} -> {to_state}")


# --- RPC ---


class TransportError(ITSLanguageError):
    """Canal RPC fechado ou quebrado."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(detail)


class RemoteRpcError(ITSLanguageError):
    """Erro retornado pelo backend para uma chamada RPC.

    Carrega o payload remoto sem alteracao: URI do erro, argumentos
    posicionais e nomeados.
    """

    def __init__(
        self,
        error: str,
        args: list[Any] | None = None,
        kwargs: dict[str, Any] | None = None,
    ) -> None:
        self.error = error
        self.error_args = list(args or [])
        self.error_kwargs = dict(kwargs or {})
        msg = error
        if self.error_args:
            msg += f" {self.error_args}"
        super().__init__(msg)
