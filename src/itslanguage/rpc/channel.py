"""Contrato do canal RPC usado pela sessao de streaming."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

NOT_OPEN_MESSAGE = "WebSocket connection was not open"


@runtime_checkable
class RPCChannel(Protocol):
    """Canal de chamadas remotas sobre um socket bidirecional aberto.

    Cada chamada termina em sucesso (valor retornado) ou falha
    (``RemoteRpcError`` levantado), e pode entregar zero ou mais resultados
    intermediarios via ``on_progress`` antes do resultado final.
    """

    @property
    def is_open(self) -> bool: ...

    async def call(
        self,
        procedure: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        on_progress: Callable[[Any], None] | None = None,
    ) -> Any: ...
