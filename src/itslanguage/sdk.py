"""AdministrativeSDK — fachada que agrupa todos os controllers.

Exemplo:
    async with Connection(ConnectionSettings.from_env()) as connection:
        sdk = AdministrativeSDK(connection)
        organisations = await sdk.list_organisations()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from itslanguage.controllers import (
    BasicAuthController,
    OrganisationController,
    PronunciationChallengeController,
    SpeechChallengeController,
    SpeechRecordingController,
    StudentController,
    create_choice_challenge,
    get_all_choice_challenges,
    get_choice_challenge_by_id,
)

if TYPE_CHECKING:
    from collections.abc import Mapping

    import httpx

    from itslanguage.connection import Connection
    from itslanguage.models import (
        BasicAuth,
        Organisation,
        PronunciationChallenge,
        SpeechChallenge,
        SpeechRecording,
        Student,
    )
    from itslanguage.recording.recorder import AudioRecorder
    from itslanguage.recording.session import StreamingRecordingSession


class AdministrativeSDK:
    """Ponto de entrada unico para a API administrativa.

    Cada metodo delega para o controller do respectivo modelo; todos
    compartilham a mesma Connection (e portanto o mesmo slot de gravacao).
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection
        self._organisations = OrganisationController(connection)
        self._basic_auths = BasicAuthController(connection)
        self._students = StudentController(connection)
        self._speech_challenges = SpeechChallengeController(connection)
        self._speech_recordings = SpeechRecordingController(connection)
        self._pronunciation_challenges = PronunciationChallengeController(connection)

    @property
    def connection(self) -> Connection:
        return self._connection

    # --- Organisation ---

    async def create_organisation(self, organisation: Organisation) -> Organisation:
        return await self._organisations.create_organisation(organisation)

    async def get_organisation(self, organisation_id: str) -> Organisation:
        return await self._organisations.get_organisation(organisation_id)

    async def list_organisations(self) -> list[Organisation]:
        return await self._organisations.list_organisations()

    # --- BasicAuth ---

    async def create_basic_auth(self, basic_auth: BasicAuth) -> BasicAuth:
        return await self._basic_auths.create_basic_auth(basic_auth)

    # --- Student ---

    async def create_student(self, student: Student) -> Student:
        return await self._students.create_student(student)

    async def get_student(self, organisation_id: str, student_id: str) -> Student:
        return await self._students.get_student(organisation_id, student_id)

    async def list_students(self, organisation_id: str) -> list[Student]:
        return await self._students.list_students(organisation_id)

    # --- SpeechChallenge ---

    async def create_speech_challenge(
        self,
        challenge: SpeechChallenge,
        reference_audio: bytes | None = None,
    ) -> SpeechChallenge:
        return await self._speech_challenges.create_speech_challenge(challenge, reference_audio)

    async def get_speech_challenge(self, organisation_id: str, challenge_id: str) -> SpeechChallenge:
        return await self._speech_challenges.get_speech_challenge(organisation_id, challenge_id)

    async def list_speech_challenges(self, organisation_id: str) -> list[SpeechChallenge]:
        return await self._speech_challenges.list_speech_challenges(organisation_id)

    # --- SpeechRecording ---

    async def get_speech_recording(
        self,
        organisation_id: str,
        challenge_id: str,
        recording_id: str,
    ) -> SpeechRecording:
        return await self._speech_recordings.get_speech_recording(
            organisation_id, challenge_id, recording_id
        )

    async def list_speech_recordings(
        self,
        organisation_id: str,
        challenge_id: str,
    ) -> list[SpeechRecording]:
        return await self._speech_recordings.list_speech_recordings(organisation_id, challenge_id)

    def start_streaming_speech_recording(
        self,
        challenge: SpeechChallenge,
        recorder: AudioRecorder,
    ) -> StreamingRecordingSession:
        return self._speech_recordings.start_streaming_speech_recording(challenge, recorder)

    # --- PronunciationChallenge ---

    async def create_pronunciation_challenge(
        self,
        challenge: PronunciationChallenge,
        audio: bytes,
    ) -> PronunciationChallenge:
        return await self._pronunciation_challenges.create_pronunciation_challenge(challenge, audio)

    async def get_pronunciation_challenge(self, challenge_id: str) -> PronunciationChallenge:
        return await self._pronunciation_challenges.get_pronunciation_challenge(challenge_id)

    async def list_pronunciation_challenges(self) -> list[PronunciationChallenge]:
        return await self._pronunciation_challenges.list_pronunciation_challenges()

    async def delete_pronunciation_challenge(self, challenge_id: str) -> str:
        return await self._pronunciation_challenges.delete_pronunciation_challenge(challenge_id)

    # --- ChoiceChallenge ---

    async def create_choice_challenge(self, challenge: Mapping[str, Any]) -> Any:
        return await create_choice_challenge(self._connection, challenge)

    async def get_choice_challenge_by_id(self, challenge_id: str) -> Any:
        return await get_choice_challenge_by_id(self._connection, challenge_id)

    async def get_all_choice_challenges(
        self,
        filters: Mapping[str, Any] | httpx.QueryParams | None = None,
    ) -> Any:
        return await get_all_choice_challenges(self._connection, filters)
