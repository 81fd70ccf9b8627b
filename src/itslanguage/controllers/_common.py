"""Logica compartilhada entre controllers REST."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from itslanguage.exceptions import ApiError, MissingFieldError

if TYPE_CHECKING:
    from itslanguage.connection import Connection


def require_field(value: str | None, field: str) -> str:
    """Devolve ``value`` ou levanta MissingFieldError se vazio/None."""
    if not value:
        raise MissingFieldError(field)
    return value


def expect_list(data: Any, path: str) -> list[dict[str, Any]]:
    """Garante que a resposta de um endpoint de listagem e uma lista."""
    if not isinstance(data, list):
        raise ApiError(200, [f"Expected a list from {path}, got {type(data).__name__}"])
    return data


class BaseController:
    """Base dos controllers: guarda a Connection usada nas requests."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    @property
    def connection(self) -> Connection:
        return self._connection
