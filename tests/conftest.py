"""Fixtures compartilhadas para todos os testes."""

from __future__ import annotations

import math
import os
import struct
import wave
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from itslanguage.config import ConnectionSettings
from itslanguage.connection import Connection
from itslanguage.models import SpeechChallenge

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

API_URL = "https://api.itslanguage.nl"


def write_wav(
    path: Path,
    *,
    sample_rate: int = 16000,
    channels: int = 1,
    duration_s: float = 0.5,
) -> Path:
    """Escreve WAV PCM 16-bit com tom de 440Hz."""
    n_frames = int(sample_rate * duration_s)
    samples = []
    for i in range(n_frames):
        value = int(32767 * 0.5 * math.sin(2 * math.pi * 440.0 * i / sample_rate))
        samples.extend([value] * channels)
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(channels)
        wav.setsampwidth(2)
        wav.setframerate(sample_rate)
        wav.writeframes(struct.pack(f"<{len(samples)}h", *samples))
    return path


@pytest.fixture
def wav_path(tmp_path: Path) -> Path:
    """WAV de 0.5s, 16kHz, mono, 16-bit."""
    return write_wav(tmp_path / "sample.wav")


@pytest.fixture
def speech_challenge() -> SpeechChallenge:
    return SpeechChallenge(organisation_id="fb", id="4")


@pytest.fixture
def settings() -> ConnectionSettings:
    return ConnectionSettings(
        api_url=API_URL,
        ws_url="ws://router.test/ws",
        oauth2_token="token",
    )


@pytest.fixture
def make_connection(
    settings: ConnectionSettings,
) -> Callable[[Callable[[httpx.Request], httpx.Response]], Connection]:
    """Factory de Connection com transporte HTTP fake.

    Uso: ``connection = make_connection(handler)`` onde ``handler`` recebe o
    httpx.Request e devolve o httpx.Response.
    """

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> Connection:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return Connection(settings, http_client=client)

    return _make


@pytest.fixture
def wav_factory(tmp_path: Path) -> Callable[..., Path]:
    """Factory de WAVs em tmp_path: ``wav_factory("x.wav", channels=2)``."""

    def _make(name: str, **kwargs: Any) -> Path:
        return write_wav(tmp_path / name, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """ConnectionSettings le ITSLANGUAGE_* do ambiente: isola os testes dele."""
    for name in list(os.environ):
        if name.startswith("ITSLANGUAGE_"):
            monkeypatch.delenv(name)
