"""Testes das funcoes de choice challenge."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from itslanguage.controllers import (
    create_choice_challenge,
    get_all_choice_challenges,
    get_choice_challenge_by_id,
)
from itslanguage.exceptions import InvalidArgumentError, MissingFieldError

if TYPE_CHECKING:
    from collections.abc import Callable

    from itslanguage.connection import Connection

API = "https://api.itslanguage.nl"


@pytest.fixture
def requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def connection(
    requests: list[httpx.Request],
    make_connection: Callable[..., Connection],
) -> Connection:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "POST":
            return httpx.Response(201, json={"id": "c1", **json.loads(request.content)})
        if request.url.path.endswith("/c1"):
            return httpx.Response(200, json={"id": "c1"})
        return httpx.Response(200, json=[{"id": "c1"}, {"id": "c2"}])

    return make_connection(handler)


class TestCreate:
    async def test_posts_challenge(
        self, connection: Connection, requests: list[httpx.Request]
    ) -> None:
        challenge = {"question": "Color?", "choices": ["red", "blue"]}

        result = await create_choice_challenge(connection, challenge)

        assert requests[0].method == "POST"
        assert str(requests[0].url) == f"{API}/challenges/choice"
        assert json.loads(requests[0].content) == challenge
        assert result["id"] == "c1"


class TestGetById:
    async def test_get(self, connection: Connection, requests: list[httpx.Request]) -> None:
        result = await get_choice_challenge_by_id(connection, "c1")
        assert str(requests[0].url) == f"{API}/challenges/choice/c1"
        assert result == {"id": "c1"}

    async def test_requires_id(self, connection: Connection, requests: list[httpx.Request]) -> None:
        with pytest.raises(MissingFieldError, match="challengeId field is required"):
            await get_choice_challenge_by_id(connection, "")
        assert requests == []


class TestGetAll:
    async def test_without_filters(
        self, connection: Connection, requests: list[httpx.Request]
    ) -> None:
        result = await get_all_choice_challenges(connection)

        assert str(requests[0].url) == f"{API}/challenges/choice"
        assert [c["id"] for c in result] == ["c1", "c2"]

    async def test_mapping_filters(
        self, connection: Connection, requests: list[httpx.Request]
    ) -> None:
        await get_all_choice_challenges(connection, {"status": "prepared", "limit": 5})

        params = requests[0].url.params
        assert params["status"] == "prepared"
        assert params["limit"] == "5"

    async def test_query_params_filters(
        self, connection: Connection, requests: list[httpx.Request]
    ) -> None:
        filters = httpx.QueryParams([("tag", "a"), ("tag", "b")])

        await get_all_choice_challenges(connection, filters)

        assert requests[0].url.params.get_list("tag") == ["a", "b"]

    @pytest.mark.parametrize("filters", ["status=prepared", ["status"], 5])
    async def test_invalid_filters(
        self,
        connection: Connection,
        requests: list[httpx.Request],
        filters: object,
    ) -> None:
        with pytest.raises(InvalidArgumentError, match="The filters should be"):
            await get_all_choice_challenges(connection, filters)  # type: ignore[arg-type]
        assert requests == []
