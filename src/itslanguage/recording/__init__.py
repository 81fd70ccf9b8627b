"""Streaming de gravacoes de fala: sessao, slot, recorder e state machine."""

from itslanguage.recording.recorder import AudioRecorder, RecorderEventEmitter, WaveFileRecorder
from itslanguage.recording.session import (
    StreamingRecordingSession,
    start_streaming_recording,
    validate_preconditions,
)
from itslanguage.recording.slot import RecordingSlot
from itslanguage.recording.state_machine import RecordingStateMachine

__all__ = [
    "AudioRecorder",
    "RecorderEventEmitter",
    "RecordingSlot",
    "RecordingStateMachine",
    "StreamingRecordingSession",
    "WaveFileRecorder",
    "start_streaming_recording",
    "validate_preconditions",
]
