"""Connection — estado de uma conexao com a API ITSLanguage.

Agrupa as settings, o cliente HTTP (REST autorizado), o canal RPC
(streaming) e o slot da gravacao em andamento.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from itslanguage.config import ConnectionSettings
from itslanguage.exceptions import ApiError, AuthenticationError, ConfigError, TransportError
from itslanguage.logging import get_logger
from itslanguage.recording.slot import RecordingSlot
from itslanguage.rpc.wamp import WampChannel

if TYPE_CHECKING:
    from types import TracebackType

    from itslanguage.rpc.channel import RPCChannel

logger = get_logger("connection")


class Connection:
    """Conexao com a API REST e com o router WebSocket.

    Args:
        settings: Settings da conexao (default: ConnectionSettings()).
        http_client: Cliente httpx a usar (injetavel para testes). Se None,
            a Connection cria e fecha o seu proprio.
        rpc_channel: Canal RPC ja aberto. Se None, use ``open_rpc()``.
    """

    def __init__(
        self,
        settings: ConnectionSettings | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        rpc_channel: RPCChannel | None = None,
    ) -> None:
        self._settings = settings or ConnectionSettings()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self._settings.timeout_s)
        self._rpc = rpc_channel
        self._recording_slot = RecordingSlot()

    @property
    def settings(self) -> ConnectionSettings:
        return self._settings

    @property
    def recording_slot(self) -> RecordingSlot:
        """Slot com o recording id em andamento nesta conexao."""
        return self._recording_slot

    @property
    def rpc(self) -> RPCChannel | None:
        return self._rpc

    @property
    def rpc_open(self) -> bool:
        return self._rpc is not None and self._rpc.is_open

    # ------------------------------------------------------------------
    # REST
    # ------------------------------------------------------------------

    def _auth_kwargs(self) -> dict[str, Any]:
        settings = self._settings
        if settings.oauth2_token:
            return {"headers": {"Authorization": f"Bearer {settings.oauth2_token}"}}
        if settings.auth_principal and settings.auth_password:
            return {"auth": httpx.BasicAuth(settings.auth_principal, settings.auth_password)}
        raise AuthenticationError()

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Executa request autorizada e devolve o corpo JSON (ou None se vazio).

        Raises:
            AuthenticationError: Sem token nem basic auth configurados.
            TransportError: Falha de rede.
            ApiError: Resposta com status de erro.
        """
        url = self._settings.api_url + path
        request_kwargs = self._auth_kwargs()
        request_kwargs.update(kwargs)

        try:
            response = await self._http.request(method, url, **request_kwargs)
        except httpx.HTTPError as e:
            logger.error("http_request_failed", method=method, url=url, error=str(e))
            raise TransportError(f"HTTP request to {url} failed: {e}") from e

        if response.is_error:
            errors = _extract_errors(response)
            logger.warning(
                "api_error",
                method=method,
                url=url,
                status_code=response.status_code,
            )
            raise ApiError(response.status_code, errors)

        logger.debug("api_request", method=method, url=url, status_code=response.status_code)
        if not response.content:
            return None
        return response.json()

    async def secure_get(self, path: str, params: Any = None) -> Any:
        return await self._request("GET", path, params=params)

    async def secure_post(
        self,
        path: str,
        json: Any = None,
        *,
        files: Any = None,
        data: Any = None,
    ) -> Any:
        if files is not None:
            return await self._request("POST", path, files=files, data=data)
        return await self._request("POST", path, json=json)

    async def secure_delete(self, path: str) -> Any:
        return await self._request("DELETE", path)

    def add_access_token(self, url: str) -> str:
        """Anexa ``access_token`` a URL (ex: downloads de audio)."""
        token = self._settings.oauth2_token
        if not token:
            return url
        return str(httpx.URL(url).copy_merge_params({"access_token": token}))

    # ------------------------------------------------------------------
    # RPC
    # ------------------------------------------------------------------

    async def open_rpc(self) -> RPCChannel:
        """Abre (ou reutiliza) o canal WAMP configurado em ``ws_url``.

        Raises:
            ConfigError: Se ``ws_url`` nao esta configurado.
            TransportError: Se a conexao/handshake falhar.
        """
        if self._rpc is not None and self._rpc.is_open:
            return self._rpc

        settings = self._settings
        if not settings.ws_url:
            raise ConfigError("ws_url is required to open the RPC channel")

        channel = WampChannel(
            settings.ws_url,
            settings.realm,
            ticket=settings.ws_token or settings.oauth2_token,
        )
        await channel.open()
        self._rpc = channel
        return channel

    async def aclose(self) -> None:
        """Fecha o canal RPC (se WAMP) e o cliente HTTP proprio."""
        if isinstance(self._rpc, WampChannel):
            await self._rpc.close()
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> Connection:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()


def _extract_errors(response: httpx.Response) -> list[Any]:
    """Extrai a lista de erros do corpo de uma resposta de erro."""
    try:
        body = response.json()
    except ValueError:
        return [response.text] if response.text else []

    if isinstance(body, dict):
        errors = body.get("errors")
        if isinstance(errors, list):
            return errors
        return [body]
    if isinstance(body, list):
        return body
    return [body]
