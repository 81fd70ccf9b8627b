"""Contrato do AudioRecorder e um recorder baseado em arquivo WAV.

O SDK nao captura audio: o recorder e um colaborador externo que expoe
estado (gravando, aprovacao de midia), a especificacao do audio e uma
capacidade explicita de subscribe/unsubscribe para os eventos
``ready``, ``dataavailable`` e ``recorded``.
"""

from __future__ import annotations

import asyncio
import wave
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from itslanguage._types import AudioSpec, RecorderEvent
from itslanguage.exceptions import InvalidArgumentError, InvalidStateError
from itslanguage.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

logger = get_logger("recording.recorder")


@runtime_checkable
class AudioRecorder(Protocol):
    """Interface minima que a sessao de streaming exige do recorder."""

    def is_recording(self) -> bool: ...

    def has_user_media_approval(self) -> bool: ...

    def get_audio_specs(self) -> AudioSpec: ...

    def subscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None: ...

    def unsubscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None: ...


class RecorderEventEmitter:
    """Registro de handlers por evento, base para recorders concretos.

    Handlers sao chamados na ordem de inscricao. ``emit`` itera sobre uma
    copia, entao um handler pode se desinscrever durante o dispatch.
    """

    def __init__(self) -> None:
        self._handlers: dict[RecorderEvent, list[Callable[..., None]]] = {
            event: [] for event in RecorderEvent
        }

    def subscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None:
        self._handlers[event].append(handler)

    def unsubscribe(self, event: RecorderEvent, handler: Callable[..., None]) -> None:
        # Idempotente: handler desconhecido e no-op
        handlers = self._handlers[event]
        if handler in handlers:
            handlers.remove(handler)

    def subscriber_count(self, event: RecorderEvent) -> int:
        return len(self._handlers[event])

    def emit(self, event: RecorderEvent, *args: Any) -> None:
        for handler in list(self._handlers[event]):
            handler(*args)


class WaveFileRecorder(RecorderEventEmitter):
    """Recorder que "grava" um arquivo WAV existente.

    ``record()`` emite o conteudo do arquivo (header incluso) em chunks de
    ``chunk_ms`` milissegundos de audio como ``dataavailable`` e termina com
    ``recorded``. Com ``realtime=True`` espera a duracao de cada chunk entre
    emissoes, simulando um microfone.

    Args:
        path: Caminho do arquivo WAV (PCM).
        chunk_ms: Duracao de audio por chunk.
        realtime: Se True, cadencia os chunks em tempo real.
    """

    def __init__(self, path: str | Path, chunk_ms: int = 100, realtime: bool = False) -> None:
        super().__init__()
        if chunk_ms <= 0:
            raise InvalidArgumentError(f"chunk_ms must be > 0, got {chunk_ms}")
        self._path = Path(path)
        self._chunk_ms = chunk_ms
        self._realtime = realtime
        self._recording = False
        self._spec = self._read_spec()

    def _read_spec(self) -> AudioSpec:
        if not self._path.exists():
            raise InvalidArgumentError(f"Audio file not found: {self._path}")
        try:
            with wave.open(str(self._path), "rb") as wav:
                return AudioSpec(
                    audio_format="audio/wave",
                    channels=wav.getnchannels(),
                    sample_width=wav.getsampwidth() * 8,
                    sample_rate=wav.getframerate(),
                )
        except (wave.Error, EOFError) as e:
            raise InvalidArgumentError(f"Invalid WAV file {self._path}: {e}") from e

    @property
    def chunk_size(self) -> int:
        """Bytes por chunk, derivado de chunk_ms e do byte rate do arquivo."""
        byte_rate = self._spec.sample_rate * self._spec.channels * self._spec.sample_width // 8
        return max(1, byte_rate * self._chunk_ms // 1000)

    def is_recording(self) -> bool:
        return self._recording

    def has_user_media_approval(self) -> bool:
        # Arquivo local: nao ha permissao de midia a pedir
        return True

    def get_audio_specs(self) -> AudioSpec:
        return self._spec

    async def record(self) -> int:
        """Emite o arquivo como chunks e sinaliza o fim da gravacao.

        Returns:
            Numero de chunks emitidos.

        Raises:
            InvalidStateError: Se ja estiver gravando.
        """
        if self._recording:
            raise InvalidStateError("Recorder is already recording")

        self._recording = True
        count = 0
        try:
            data = self._path.read_bytes()
            size = self.chunk_size
            for offset in range(0, len(data), size):
                self.emit(RecorderEvent.DATA_AVAILABLE, data[offset : offset + size])
                count += 1
                await asyncio.sleep(self._chunk_ms / 1000 if self._realtime else 0)
        finally:
            self._recording = False

        logger.debug("wave_file_recorded", path=str(self._path), chunks=count)
        self.emit(RecorderEvent.RECORDED)
        return count
