"""ITSLanguage SDK — API administrativa (REST) e gravacao por streaming (WAMP)."""

from itslanguage._types import AudioSpec, RecorderEvent, RecordingProgress, RecordingState
from itslanguage.config import ConnectionSettings, StreamingConfig
from itslanguage.connection import Connection
from itslanguage.models import (
    BasicAuth,
    Organisation,
    PronunciationChallenge,
    SpeechChallenge,
    SpeechRecording,
    Student,
)
from itslanguage.recording import (
    StreamingRecordingSession,
    WaveFileRecorder,
    start_streaming_recording,
)
from itslanguage.sdk import AdministrativeSDK

__version__ = "0.1.0"

__all__ = [
    "AdministrativeSDK",
    "AudioSpec",
    "BasicAuth",
    "Connection",
    "ConnectionSettings",
    "Organisation",
    "PronunciationChallenge",
    "RecorderEvent",
    "RecordingProgress",
    "RecordingState",
    "SpeechChallenge",
    "SpeechRecording",
    "StreamingConfig",
    "StreamingRecordingSession",
    "Student",
    "WaveFileRecorder",
    "__version__",
    "start_streaming_recording",
]
