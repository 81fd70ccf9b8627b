"""Tipos fundamentais do SDK ITSLanguage.

Este modulo define enums e dataclasses usados pelo canal RPC, pelo recorder
e pela sessao de streaming. Alteracoes aqui impactam o SDK inteiro.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RecorderEvent(Enum):
    """Eventos emitidos por um AudioRecorder.

    Os valores sao os nomes usados pelo recorder do browser.
    """

    READY = "ready"
    DATA_AVAILABLE = "dataavailable"
    RECORDED = "recorded"


class RecordingState(Enum):
    """Estado de uma sessao de streaming de gravacao.

    Transicoes validas:
        PENDING -> INITIALIZING (recorder pronto)
        INITIALIZING -> STREAMING (init_audio concluido)
        STREAMING -> CLOSING (evento recorded)
        CLOSING -> CLOSED (close concluido)
        Qualquer nao-terminal -> FAILED (erro RPC, timeout)
        Qualquer nao-terminal -> CANCELLED (cancel() do caller)
    """

    PENDING = "pending"
    INITIALIZING = "initializing"
    STREAMING = "streaming"
    CLOSING = "closing"
    CLOSED = "closed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Procedure(Enum):
    """Procedures RPC do protocolo de gravacao (contrato remoto)."""

    INIT_CHALLENGE = "nl.itslanguage.recording.init_challenge"
    INIT_RECORDING = "nl.itslanguage.recording.init_recording"
    INIT_AUDIO = "nl.itslanguage.recording.init_audio"
    WRITE = "nl.itslanguage.recording.write"
    CLOSE = "nl.itslanguage.recording.close"


@dataclass(frozen=True, slots=True)
class AudioSpec:
    """Especificacao do audio produzido pelo recorder.

    Repassada sem alteracao para ``init_audio``.
    """

    audio_format: str
    channels: int
    sample_width: int
    sample_rate: int

    def to_rpc_parameters(self) -> dict[str, int]:
        """Parametros de audio no formato esperado pelo backend."""
        return {
            "channels": self.channels,
            "sampleWidth": self.sample_width,
            "sampleRate": self.sample_rate,
        }


@dataclass(frozen=True, slots=True)
class RecordingProgress:
    """Resultado parcial emitido apos init_recording."""

    recording_id: str
    challenge_id: str


@dataclass(frozen=True, slots=True)
class CallResult:
    """Resultado de uma chamada RPC com multiplos valores posicionais ou nomeados."""

    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] | None = None
