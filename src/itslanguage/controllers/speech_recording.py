"""Controller de SpeechRecording.

Consulta gravacoes existentes via REST e inicia gravacoes novas via
streaming RPC (ver ``itslanguage.recording.session``).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from itslanguage.controllers._common import BaseController, expect_list, require_field
from itslanguage.logging import get_logger
from itslanguage.models import SpeechRecording, Student
from itslanguage.recording.session import start_streaming_recording

if TYPE_CHECKING:
    from itslanguage.models import SpeechChallenge
    from itslanguage.recording.recorder import AudioRecorder
    from itslanguage.recording.session import StreamingRecordingSession

logger = get_logger("controllers.speech_recording")


def _recordings_path(challenge_id: str) -> str:
    return f"/challenges/speech/{challenge_id}/recordings"


class SpeechRecordingController(BaseController):
    def _to_recording(
        self,
        organisation_id: str,
        challenge_id: str,
        data: dict[str, Any],
    ) -> SpeechRecording:
        audio_url = data.get("audioUrl")
        if audio_url:
            audio_url = self._connection.add_access_token(audio_url)
        return SpeechRecording(
            challenge=challenge_id,
            student=Student(organisation_id=organisation_id, id=data.get("studentId")),
            id=data.get("id"),
            audio_url=audio_url,
            created=data.get("created"),
            updated=data.get("updated"),
        )

    async def get_speech_recording(
        self,
        organisation_id: str | None = None,
        challenge_id: str | None = None,
        recording_id: str | None = None,
    ) -> SpeechRecording:
        organisation_id = require_field(organisation_id, "organisationId")
        challenge_id = require_field(challenge_id, "challengeId")
        require_field(recording_id, "recordingId")

        data = await self._connection.secure_get(f"{_recordings_path(challenge_id)}/{recording_id}")
        return self._to_recording(organisation_id, challenge_id, data)

    async def list_speech_recordings(
        self,
        organisation_id: str | None = None,
        challenge_id: str | None = None,
    ) -> list[SpeechRecording]:
        organisation_id = require_field(organisation_id, "organisationId")
        challenge_id = require_field(challenge_id, "challengeId")

        path = _recordings_path(challenge_id)
        data = await self._connection.secure_get(path)
        return [
            self._to_recording(organisation_id, challenge_id, item)
            for item in expect_list(data, path)
        ]

    def start_streaming_speech_recording(
        self,
        challenge: SpeechChallenge,
        recorder: AudioRecorder,
    ) -> StreamingRecordingSession:
        """Inicia o streaming de uma gravacao para ``challenge``.

        Usa o canal RPC e o slot desta conexao. Deve ser chamado de dentro
        de um event loop em execucao; pre-condicoes falham aqui mesmo.

        Returns:
            Sessao em andamento: ``await session`` devolve o SpeechRecording,
            ``session.progress()`` itera os resultados parciais.
        """
        connection = self._connection
        return start_streaming_recording(
            challenge,
            recorder,
            channel=connection.rpc,
            slot=connection.recording_slot,
            ready_timeout_s=connection.settings.streaming.ready_timeout_s,
            audio_url_resolver=connection.add_access_token,
        )
