"""WampChannel — adaptador RPCChannel sobre uma sessao WAMP do autobahn.

O transporte (WebSocket, serializer, handshake, autenticacao por ticket,
multiplexacao de chamadas) e do autobahn. Este modulo so traduz:

- ``Component`` do autobahn -> open()/close() com erros tipados;
- ``ApplicationError`` -> RemoteRpcError (payload remoto sem alteracao);
- perda de sessao/transporte -> TransportError;
- ``CallResult`` do autobahn -> valor devolvido ao caller (``unwrap_result``).

O lifecycle tipico e:
    1. open() inicia o componente e espera o join da sessao
    2. call() chama a procedure e aguarda o resultado final
    3. close() encerra a sessao e libera o transporte
"""

from __future__ import annotations

import asyncio
import inspect
from typing import TYPE_CHECKING, Any

from autobahn.asyncio.component import Component
from autobahn.wamp.exception import ApplicationError, TransportLost
from autobahn.wamp.types import CallOptions
from autobahn.wamp.types import CallResult as WampCallResult

from itslanguage._types import CallResult
from itslanguage.exceptions import RemoteRpcError, TransportError
from itslanguage.logging import get_logger
from itslanguage.rpc.channel import NOT_OPEN_MESSAGE

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

logger = get_logger("rpc.wamp")

_CLOSED_MESSAGE = "WebSocket connection was closed"


def unwrap_result(args: Sequence[Any], kwargs: Mapping[str, Any]) -> Any:
    """Converte args/kwargs de um resultado no valor devolvido ao caller.

    Um unico valor posicional e devolvido diretamente; apenas kwargs
    devolve o dict; combinacoes viram CallResult.
    """
    if kwargs:
        if args:
            return CallResult(args=tuple(args), kwargs=dict(kwargs))
        return dict(kwargs)
    if not args:
        return None
    if len(args) == 1:
        return args[0]
    return CallResult(args=tuple(args))


def _from_wamp_result(result: Any) -> Any:
    # autobahn devolve o valor cru quando ha um unico resultado posicional
    if isinstance(result, WampCallResult):
        return unwrap_result(result.results or (), result.kwresults or {})
    return result


class WampChannel:
    """Canal RPC WAMP com autenticacao por ticket.

    Args:
        url: URL do router WAMP (ex: "wss://api.itslanguage.nl/ws").
        realm: Realm WAMP.
        ticket: Ticket de autenticacao (tipicamente o token OAuth2). Sem
            ticket, a sessao e anonima.
        authid: authid anunciado quando ha ticket.
        open_timeout_s: Tempo maximo ate o join da sessao.
        component_factory: Factory do componente autobahn (injetavel para testes).
    """

    def __init__(
        self,
        url: str,
        realm: str = "default",
        *,
        ticket: str | None = None,
        authid: str = "oauth2",
        open_timeout_s: float = 10.0,
        component_factory: Callable[..., Any] = Component,
    ) -> None:
        self._url = url
        self._realm = realm
        self._ticket = ticket
        self._authid = authid
        self._open_timeout_s = open_timeout_s
        self._component_factory = component_factory
        self._component: Any = None
        self._session: Any = None
        self._session_id: int | None = None
        self._joined: asyncio.Future[Any] | None = None
        self._open = False

    @property
    def is_open(self) -> bool:
        """True enquanto a sessao WAMP estiver ativa."""
        return self._open

    @property
    def session_id(self) -> int | None:
        """ID da sessao WAMP atribuido pelo router no join."""
        return self._session_id

    def _authentication(self) -> dict[str, Any]:
        if self._ticket is None:
            return {}
        return {"ticket": {"authid": self._authid, "ticket": self._ticket}}

    async def open(self) -> None:
        """Conecta ao router e espera o join da sessao WAMP.

        Idempotente — chamadas em canal ja aberto sao no-op.

        Raises:
            TransportError: Se a conexao, a autenticacao ou o join falharem.
        """
        if self._open:
            return

        loop = asyncio.get_running_loop()
        self._joined = loop.create_future()
        component = self._component_factory(
            transports=[{"type": "websocket", "url": self._url, "max_retries": 0}],
            realm=self._realm,
            authentication=self._authentication(),
        )
        component.on("join", self._on_join)
        component.on("leave", self._on_leave)
        component.on("disconnect", self._on_disconnect)
        self._component = component

        done = asyncio.ensure_future(component.start(loop=loop))
        done.add_done_callback(self._on_component_done)

        try:
            session = await asyncio.wait_for(asyncio.shield(self._joined), self._open_timeout_s)
        except TimeoutError as e:
            self._joined.cancel()
            self._release()
            raise TransportError(
                f"WAMP handshake timed out after {self._open_timeout_s}s"
            ) from e
        except TransportError:
            self._release()
            raise

        self._session = session
        self._open = True
        logger.info("wamp_session_opened", url=self._url, session_id=self._session_id)

    async def call(
        self,
        procedure: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        *,
        on_progress: Callable[[Any], None] | None = None,
    ) -> Any:
        """Chama uma procedure remota e aguarda o resultado final.

        Args:
            procedure: URI da procedure (ex: "nl.itslanguage.recording.write").
            args: Argumentos posicionais.
            kwargs: Argumentos nomeados.
            on_progress: Callback para resultados progressivos, chamado antes
                do resultado final.

        Returns:
            Valor do resultado (ver ``unwrap_result``).

        Raises:
            TransportError: Se o canal nao esta aberto ou caiu durante a chamada.
            RemoteRpcError: Se o backend respondeu com erro.
        """
        session = self._session
        if not self._open or session is None:
            raise TransportError(NOT_OPEN_MESSAGE)

        call_kwargs = dict(kwargs or {})
        if on_progress is not None:
            call_kwargs["options"] = CallOptions(
                on_progress=self._progress_handler(procedure, on_progress)
            )

        try:
            result = await session.call(procedure, *args, **call_kwargs)
        except ApplicationError as e:
            logger.debug("call_error", procedure=procedure, error=e.error)
            raise RemoteRpcError(e.error, list(e.args), dict(e.kwargs or {})) from e
        except TransportLost as e:
            self._open = False
            raise TransportError(_CLOSED_MESSAGE) from e

        return _from_wamp_result(result)

    def _progress_handler(
        self,
        procedure: str,
        on_progress: Callable[[Any], None],
    ) -> Callable[..., None]:
        def handler(*args: Any, **kwargs: Any) -> None:
            try:
                on_progress(unwrap_result(args, kwargs))
            except Exception:
                # Falha do consumidor nao derruba a chamada nem a sessao
                logger.exception("progress_callback_failed", procedure=procedure)

        return handler

    async def close(self) -> None:
        """Encerra a sessao WAMP e libera o transporte.

        Idempotente — chamadas em canal ja fechado sao no-op.
        """
        component = self._component
        if component is None:
            return

        self._component = None
        self._session = None
        self._open = False

        stopping = component.stop()
        if inspect.isawaitable(stopping):
            try:
                await stopping
            except (ApplicationError, TransportLost, OSError) as e:
                logger.debug("wamp_stop_error", url=self._url, error=str(e))

        logger.info("wamp_session_closed", url=self._url, session_id=self._session_id)

    # ------------------------------------------------------------------
    # Eventos do componente
    # ------------------------------------------------------------------

    def _on_join(self, session: Any, details: Any = None, *_: Any) -> None:
        self._session_id = getattr(details, "session", None)
        if self._joined is not None and not self._joined.done():
            self._joined.set_result(session)

    def _on_leave(self, session: Any, details: Any = None, *_: Any) -> None:
        reason = getattr(details, "reason", None)
        if self._joined is not None and not self._joined.done():
            self._joined.set_exception(TransportError(f"Session aborted by router: {reason}"))
            return
        logger.info("wamp_session_left", url=self._url, reason=reason)
        self._open = False
        self._release()

    def _on_disconnect(self, *_: Any, **__: Any) -> None:
        if self._open:
            logger.warning("wamp_connection_lost", url=self._url)
        self._open = False
        self._release()

    def _on_component_done(self, done: asyncio.Future[Any]) -> None:
        error = None if done.cancelled() else done.exception()
        self._open = False
        if self._joined is not None and not self._joined.done():
            detail = error if error is not None else "component stopped before join"
            self._joined.set_exception(
                TransportError(f"Could not connect to {self._url}: {detail}")
            )
        elif error is not None:
            logger.warning("wamp_component_failed", url=self._url, error=str(error))

    def _release(self) -> None:
        """Para o componente (sem reconexao) e libera o transporte."""
        component = self._component
        if component is None:
            return
        self._component = None
        self._session = None

        stopping = component.stop()
        if inspect.isawaitable(stopping):
            task = asyncio.ensure_future(stopping)
            task.add_done_callback(self._on_stop_done)

    def _on_stop_done(self, task: asyncio.Future[Any]) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.debug("wamp_stop_error", url=self._url, error=str(task.exception()))
