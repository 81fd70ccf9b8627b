"""StreamingRecordingSession — orquestrador do streaming de uma gravacao.

Coordena o recorder, o canal RPC e a sequencia de procedures remotas que
transmite uma gravacao ao vivo para o backend:

    init_challenge -> init_recording -> init_audio -> write* -> close

Regras:
- Pre-condicoes sao verificadas de forma sincrona, antes de qualquer RPC.
- Se o recorder nao tem aprovacao de midia, espera o evento ``ready``.
- O slot da conexao recebe o recording id quando init_recording retorna.
- Chunks sao escritos um por vez, na ordem de emissao. Chunks emitidos antes
  de init_audio terminar ficam na fila.
- ``close`` so e chamado apos ``recorded`` e apos o ultimo write resolver.
- Qualquer desfecho terminal (sucesso, erro RPC, timeout, cancel) limpa o
  slot e remove todas as inscricoes feitas no recorder.
- Erros RPC sao propagados sem alteracao. Sem retries.
"""

from __future__ import annotations

import asyncio
import base64
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from itslanguage._types import Procedure, RecorderEvent, RecordingProgress, RecordingState
from itslanguage.exceptions import (
    InvalidArgumentError,
    InvalidStateError,
    MissingFieldError,
    RecorderTimeoutError,
    SessionConflictError,
    TransportError,
)
from itslanguage.logging import get_logger
from itslanguage.models import SpeechChallenge, SpeechRecording, Student
from itslanguage.recording.state_machine import RecordingStateMachine
from itslanguage.rpc.channel import NOT_OPEN_MESSAGE

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Generator, Sequence

    from itslanguage.recording.recorder import AudioRecorder
    from itslanguage.recording.slot import RecordingSlot
    from itslanguage.rpc.channel import RPCChannel

logger = get_logger("recording.session")

# Marca o fim do stream de progresso
_END = object()


def validate_preconditions(
    challenge: object,
    recorder: AudioRecorder | None,
    channel: RPCChannel | None,
    slot: RecordingSlot,
) -> None:
    """Verifica se uma sessao de streaming pode comecar.

    Raises:
        InvalidArgumentError: challenge ou recorder ausente/invalido.
        MissingFieldError: challenge.id ou challenge.organisationId vazio.
        InvalidStateError: recorder ja esta gravando.
        SessionConflictError: o slot ja tem uma gravacao em andamento.
        TransportError: canal RPC ausente ou fechado.
    """
    if not isinstance(challenge, SpeechChallenge):
        raise InvalidArgumentError("challenge parameter is required or invalid")
    if not challenge.id:
        raise MissingFieldError("challenge.id")
    if not challenge.organisation_id:
        raise MissingFieldError("challenge.organisationId")
    if recorder is None:
        raise InvalidArgumentError("recorder parameter is required or invalid")
    if recorder.is_recording():
        raise InvalidStateError("Recorder should not yet be recording")
    if slot.recording_id is not None:
        raise SessionConflictError(slot.recording_id)
    if channel is None or not channel.is_open:
        raise TransportError(NOT_OPEN_MESSAGE)


class StreamingRecordingSession:
    """Uma sessao de streaming de gravacao, do pedido ao resultado final.

    Canal de resultado tipado: ``await session.result()`` (ou
    ``await session``) devolve o SpeechRecording final; ``session.progress()``
    itera os resultados parciais e termina quando a sessao termina.

    Lifecycle tipico:
        session = start_streaming_recording(challenge, recorder, channel=..., slot=...)
        async for partial in session.progress():
            ...
        recording = await session.result()

    Args:
        challenge: Challenge validado.
        recorder: Recorder que produz os chunks.
        channel: Canal RPC aberto.
        slot: Slot da conexao para o recording id em andamento.
        ready_timeout_s: Espera maxima pelo evento ``ready`` (None = sem limite).
        audio_url_resolver: Transforma o audioUrl do backend (ex: anexa o
            access token).
        state_machine: RecordingStateMachine (opcional, cria default se None).
    """

    def __init__(
        self,
        challenge: SpeechChallenge,
        recorder: AudioRecorder,
        channel: RPCChannel,
        slot: RecordingSlot,
        *,
        ready_timeout_s: float | None = None,
        audio_url_resolver: Callable[[str], str] | None = None,
        state_machine: RecordingStateMachine | None = None,
    ) -> None:
        self._challenge = challenge
        self._recorder = recorder
        self._channel = channel
        self._slot = slot
        self._ready_timeout_s = ready_timeout_s
        self._audio_url_resolver = audio_url_resolver
        self._state_machine = state_machine or RecordingStateMachine()

        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[SpeechRecording] | None = None
        self._recording_id: str | None = None
        self._chunks_written = 0

        # Eventos do recorder na ordem de emissao: (evento, chunk)
        self._events: asyncio.Queue[tuple[RecorderEvent, Any]] = asyncio.Queue()
        self._progress: asyncio.Queue[Any] = asyncio.Queue()
        self._subscriptions: list[tuple[RecorderEvent, Callable[..., None]]] = []

    @property
    def challenge(self) -> SpeechChallenge:
        return self._challenge

    @property
    def recording_id(self) -> str | None:
        """Recording id atribuido pelo backend (None antes de init_recording)."""
        return self._recording_id

    @property
    def state(self) -> RecordingState:
        return self._state_machine.state

    @property
    def chunks_written(self) -> int:
        return self._chunks_written

    def start(self) -> StreamingRecordingSession:
        """Agenda a sessao no event loop corrente.

        Raises:
            InvalidStateError: Se a sessao ja foi iniciada.
        """
        if self._task is not None:
            raise InvalidStateError("Streaming session was already started")
        self._loop = asyncio.get_running_loop()
        # Inscreve antes de agendar: chunks emitidos logo apos start() entram na fila
        self._subscribe(RecorderEvent.DATA_AVAILABLE, self._on_data_available)
        self._subscribe(RecorderEvent.RECORDED, self._on_recorded)
        self._task = self._loop.create_task(self._run())
        self._task.add_done_callback(self._on_task_done)
        return self

    def done(self) -> bool:
        return self._task is not None and self._task.done()

    def cancel(self) -> bool:
        """Cancela a sessao. O unwind normal (slot, inscricoes) e executado.

        Returns:
            True se havia sessao em andamento para cancelar.
        """
        if self._task is None or self._task.done():
            return False
        return self._task.cancel()

    async def result(self) -> SpeechRecording:
        """Aguarda o desfecho da sessao.

        Raises:
            RemoteRpcError: Erro do backend em qualquer procedure, sem alteracao.
            RecorderTimeoutError: Recorder nao ficou pronto a tempo.
            asyncio.CancelledError: Sessao cancelada.
        """
        if self._task is None:
            raise InvalidStateError("Streaming session was not started")
        return await self._task

    def __await__(self) -> Generator[Any, None, SpeechRecording]:
        return self.result().__await__()

    async def progress(self) -> AsyncIterator[RecordingProgress]:
        """Itera os resultados parciais ate a sessao terminar."""
        while True:
            item = await self._progress.get()
            if item is _END:
                # Recoloca a marca para outros consumidores
                self._progress.put_nowait(_END)
                return
            yield item

    # ------------------------------------------------------------------
    # Fluxo
    # ------------------------------------------------------------------

    async def _run(self) -> SpeechRecording:
        challenge = self._challenge
        log = logger.bind(challenge_id=challenge.id, organisation_id=challenge.organisation_id)
        log.info("recording_session_started")

        try:
            await self._wait_until_ready()
            self._state_machine.transition(RecordingState.INITIALIZING)

            await self._call(Procedure.INIT_CHALLENGE, [challenge.organisation_id, challenge.id])

            recording_id = await self._call(Procedure.INIT_RECORDING, [])
            self._recording_id = recording_id
            self._slot.set(recording_id)
            self._progress.put_nowait(
                RecordingProgress(recording_id=recording_id, challenge_id=challenge.id)
            )
            log = log.bind(recording_id=recording_id)
            log.info("recording_initialized")

            spec = self._recorder.get_audio_specs()
            await self._call(
                Procedure.INIT_AUDIO,
                [recording_id, spec.audio_format],
                spec.to_rpc_parameters(),
            )
            self._state_machine.transition(RecordingState.STREAMING)

            await self._stream_chunks(recording_id)

            self._state_machine.transition(RecordingState.CLOSING)
            response = await self._call(Procedure.CLOSE, [recording_id])
            recording = self._build_recording(recording_id, response)
            self._state_machine.transition(RecordingState.CLOSED)

            log.info("recording_session_closed", chunks=self._chunks_written)
            return recording
        except asyncio.CancelledError:
            self._abort(RecordingState.CANCELLED)
            log.info("recording_session_cancelled", chunks=self._chunks_written)
            raise
        except Exception as exc:
            self._abort(RecordingState.FAILED)
            log.warning(
                "recording_session_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                chunks=self._chunks_written,
            )
            raise
        finally:
            self._unsubscribe_all()
            self._slot.release(self._recording_id)
            self._progress.put_nowait(_END)

    async def _wait_until_ready(self) -> None:
        """Suspende ate o recorder emitir ``ready`` (se ainda sem aprovacao)."""
        if self._recorder.has_user_media_approval():
            return

        ready = asyncio.Event()
        loop = self._require_loop()

        def on_ready(*_: Any) -> None:
            loop.call_soon_threadsafe(ready.set)

        self._subscribe(RecorderEvent.READY, on_ready)
        logger.debug("waiting_for_recorder_ready", timeout_s=self._ready_timeout_s)
        try:
            await asyncio.wait_for(ready.wait(), timeout=self._ready_timeout_s)
        except TimeoutError as e:
            raise RecorderTimeoutError(self._ready_timeout_s or 0.0) from e
        finally:
            self._unsubscribe(RecorderEvent.READY, on_ready)

    async def _stream_chunks(self, recording_id: str) -> None:
        """Escreve cada chunk em ordem ate o recorder sinalizar ``recorded``."""
        while True:
            event, chunk = await self._events.get()
            if event is RecorderEvent.RECORDED:
                return
            await self._call(Procedure.WRITE, [recording_id, _encode_chunk(chunk), "base64"])
            self._chunks_written += 1

    async def _call(
        self,
        procedure: Procedure,
        args: Sequence[Any],
        kwargs: Mapping[str, Any] | None = None,
    ) -> Any:
        logger.debug("rpc_call", procedure=procedure.value, recording_id=self._recording_id)
        if kwargs is None:
            return await self._channel.call(procedure.value, args)
        return await self._channel.call(procedure.value, args, kwargs)

    def _build_recording(self, recording_id: str, response: Any) -> SpeechRecording:
        data: Mapping[str, Any] = response if isinstance(response, Mapping) else {}
        audio_url = data.get("audioUrl")
        if audio_url and self._audio_url_resolver is not None:
            audio_url = self._audio_url_resolver(audio_url)
        student = Student(
            organisation_id=self._challenge.organisation_id,
            id=data.get("studentId"),
        )
        return SpeechRecording(
            challenge=self._challenge.id,
            student=student,
            id=recording_id,
            audio_url=audio_url,
            created=data.get("created"),
            updated=data.get("updated"),
        )

    def _abort(self, target: RecordingState) -> None:
        if not self._state_machine.is_terminal:
            self._state_machine.transition(target)

    def _on_task_done(self, task: asyncio.Task[SpeechRecording]) -> None:
        if not task.cancelled():
            # Marca a excecao como lida: quem so consome progress() nunca chama result()
            task.exception()
            return
        # Cancelada antes de rodar: _run nunca executou o finally
        if not self._state_machine.is_terminal:
            self._state_machine.transition(RecordingState.CANCELLED)
            self._unsubscribe_all()
            self._progress.put_nowait(_END)

    # ------------------------------------------------------------------
    # Inscricoes no recorder
    # ------------------------------------------------------------------

    def _require_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _on_data_available(self, chunk: Any = None, *_: Any) -> None:
        # Recorders podem emitir de outra thread
        self._require_loop().call_soon_threadsafe(
            self._events.put_nowait, (RecorderEvent.DATA_AVAILABLE, chunk)
        )

    def _on_recorded(self, *_: Any) -> None:
        self._require_loop().call_soon_threadsafe(
            self._events.put_nowait, (RecorderEvent.RECORDED, None)
        )

    def _subscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None:
        self._subscriptions.append((event, handler))
        self._recorder.subscribe(event, handler)

    def _unsubscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None:
        if (event, handler) in self._subscriptions:
            self._subscriptions.remove((event, handler))
            self._recorder.unsubscribe(event, handler)

    def _unsubscribe_all(self) -> None:
        while self._subscriptions:
            event, handler = self._subscriptions.pop()
            self._recorder.unsubscribe(event, handler)


def _encode_chunk(chunk: Any) -> str:
    if not isinstance(chunk, (bytes, bytearray, memoryview)):
        raise InvalidArgumentError(
            f"Audio chunk must be bytes-like, got {type(chunk).__name__}"
        )
    return base64.b64encode(bytes(chunk)).decode("ascii")


def start_streaming_recording(
    challenge: object,
    recorder: AudioRecorder | None,
    *,
    channel: RPCChannel | None,
    slot: RecordingSlot,
    ready_timeout_s: float | None = None,
    audio_url_resolver: Callable[[str], str] | None = None,
) -> StreamingRecordingSession:
    """Valida as pre-condicoes e inicia uma sessao de streaming.

    Deve ser chamado de dentro de um event loop em execucao. Falhas de
    pre-condicao sao levantadas aqui mesmo, antes de qualquer RPC.
    """
    validate_preconditions(challenge, recorder, channel, slot)
    session = StreamingRecordingSession(
        challenge,  # type: ignore[arg-type]
        recorder,  # type: ignore[arg-type]
        channel,  # type: ignore[arg-type]
        slot,
        ready_timeout_s=ready_timeout_s,
        audio_url_resolver=audio_url_resolver,
    )
    return session.start()
