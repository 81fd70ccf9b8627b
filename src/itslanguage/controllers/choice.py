"""Funcoes prontas para a API de choice challenges.

Sem modelo dedicado: os challenges sao dicts no formato JSON da API.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import httpx

from itslanguage.controllers._common import require_field
from itslanguage.exceptions import InvalidArgumentError

if TYPE_CHECKING:
    from itslanguage.connection import Connection

_PATH = "/challenges/choice"


async def create_choice_challenge(connection: Connection, challenge: Mapping[str, Any]) -> Any:
    """Cria um choice challenge."""
    return await connection.secure_post(_PATH, json=dict(challenge))


async def get_choice_challenge_by_id(connection: Connection, challenge_id: str | None) -> Any:
    require_field(challenge_id, "challengeId")
    return await connection.secure_get(f"{_PATH}/{challenge_id}")


async def get_all_choice_challenges(
    connection: Connection,
    filters: Mapping[str, Any] | httpx.QueryParams | None = None,
) -> Any:
    """Lista os choice challenges, opcionalmente filtrados.

    Args:
        filters: Query params (mapping ou ``httpx.QueryParams``).

    Raises:
        InvalidArgumentError: Se ``filters`` nao e mapping nem QueryParams.
    """
    if filters is None:
        return await connection.secure_get(_PATH)
    if not isinstance(filters, (Mapping, httpx.QueryParams)):
        raise InvalidArgumentError("The filters should be a mapping or httpx.QueryParams")
    return await connection.secure_get(_PATH, params=httpx.QueryParams(filters))
