"""Testes dos controllers REST contra um transporte HTTP fake."""

from __future__ import annotations

import json
from datetime import datetime
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import httpx
import pytest

from itslanguage.controllers import (
    BasicAuthController,
    OrganisationController,
    PronunciationChallengeController,
    SpeechChallengeController,
    SpeechRecordingController,
    StudentController,
)
from itslanguage.exceptions import ApiError, InvalidArgumentError, MissingFieldError
from itslanguage.models import (
    BasicAuth,
    Organisation,
    PronunciationChallenge,
    SpeechChallenge,
    Student,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from itslanguage.connection import Connection

API = "https://api.itslanguage.nl"
_DATE = "2014-12-31T23:59:59Z"
_AUDIO_URL = "https://api.itslanguage.nl/download/Ysjd7bUGseu8-bsJ"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class FakeApi:
    """Handler httpx que registra requests e responde com um corpo fixo."""

    def __init__(self, body: Any = None, status: int = 200) -> None:
        self.body = body
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is None:
            return httpx.Response(self.status)
        return httpx.Response(self.status, json=self.body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture
def api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def connection(api: FakeApi, make_connection: Callable[..., Connection]) -> Connection:
    return make_connection(api)


# ---------------------------------------------------------------------------
# Organisation
# ---------------------------------------------------------------------------


class TestOrganisationController:
    async def test_create(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "fb", "name": "Facebook", "created": _DATE, "updated": _DATE}
        api.status = 201
        controller = OrganisationController(connection)

        result = await controller.create_organisation(Organisation(id="fb", name="Facebook"))

        assert api.last.method == "POST"
        assert str(api.last.url) == f"{API}/organisations"
        assert api.last_json() == {"id": "fb", "name": "Facebook"}
        assert result.id == "fb"
        assert isinstance(result.created, datetime)

    async def test_create_requires_model(self, api: FakeApi, connection: Connection) -> None:
        controller = OrganisationController(connection)
        with pytest.raises(InvalidArgumentError, match='"Organisation" is required'):
            await controller.create_organisation({"name": "Facebook"})  # type: ignore[arg-type]
        assert api.requests == []

    async def test_get(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "fb", "name": "Facebook"}
        result = await OrganisationController(connection).get_organisation("fb")

        assert str(api.last.url) == f"{API}/organisations/fb"
        assert result == Organisation(id="fb", name="Facebook")

    async def test_get_requires_id(self, connection: Connection) -> None:
        with pytest.raises(MissingFieldError, match="organisationId field is required"):
            await OrganisationController(connection).get_organisation("")

    async def test_list(self, api: FakeApi, connection: Connection) -> None:
        api.body = [{"id": "fb", "name": "Facebook"}, {"id": "gg", "name": "Google"}]
        result = await OrganisationController(connection).list_organisations()
        assert [o.id for o in result] == ["fb", "gg"]

    async def test_list_with_non_list_body(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"unexpected": True}
        with pytest.raises(ApiError):
            await OrganisationController(connection).list_organisations()

    async def test_api_error_propagates(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"errors": [{"message": "name is required"}]}
        api.status = 422
        with pytest.raises(ApiError) as exc_info:
            await OrganisationController(connection).create_organisation(Organisation(name=""))
        assert exc_info.value.status_code == 422


# ---------------------------------------------------------------------------
# BasicAuth
# ---------------------------------------------------------------------------


class TestBasicAuthController:
    async def test_generated_credentials_are_returned(
        self, api: FakeApi, connection: Connection
    ) -> None:
        api.body = {
            "tenantId": "4",
            "principal": "principal",
            "credentials": "generated",
            "created": _DATE,
            "updated": _DATE,
        }
        result = await BasicAuthController(connection).create_basic_auth(
            BasicAuth(tenant_id="4", principal="principal")
        )

        assert str(api.last.url) == f"{API}/basicauths"
        assert api.last_json() == {"tenantId": "4", "principal": "principal", "credentials": None}
        assert result.credentials == "generated"
        assert result.created is not None

    async def test_given_credentials_are_kept(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"tenantId": "4", "principal": "principal"}
        result = await BasicAuthController(connection).create_basic_auth(
            BasicAuth(tenant_id="4", principal="principal", credentials="secret")
        )
        assert result.credentials == "secret"

    async def test_requires_model(self, connection: Connection) -> None:
        with pytest.raises(InvalidArgumentError):
            await BasicAuthController(connection).create_basic_auth(None)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Student
# ---------------------------------------------------------------------------


class TestStudentController:
    async def test_create(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "6", "firstName": "Mark", "lastName": "Zuckerberg", "created": _DATE}
        student = Student(organisation_id="fb", first_name="Mark", last_name="Zuckerberg")

        result = await StudentController(connection).create_student(student)

        assert str(api.last.url) == f"{API}/organisations/fb/students"
        assert api.last_json()["firstName"] == "Mark"
        assert result.id == "6"
        assert result.organisation_id == "fb"

    async def test_create_requires_organisation(self, connection: Connection) -> None:
        with pytest.raises(MissingFieldError, match="organisationId"):
            await StudentController(connection).create_student(Student(organisation_id=""))

    async def test_get(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "6", "firstName": "Mark"}
        result = await StudentController(connection).get_student("fb", "6")
        assert str(api.last.url) == f"{API}/organisations/fb/students/6"
        assert result.first_name == "Mark"

    async def test_get_requires_student_id(self, connection: Connection) -> None:
        with pytest.raises(MissingFieldError, match="studentId"):
            await StudentController(connection).get_student("fb", None)

    async def test_list(self, api: FakeApi, connection: Connection) -> None:
        api.body = [{"id": "6"}, {"id": "7"}]
        result = await StudentController(connection).list_students("fb")
        assert [s.id for s in result] == ["6", "7"]
        assert all(s.organisation_id == "fb" for s in result)


# ---------------------------------------------------------------------------
# SpeechChallenge
# ---------------------------------------------------------------------------


class TestSpeechChallengeController:
    async def test_create_json(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "4", "topic": "Hi", "created": _DATE}
        result = await SpeechChallengeController(connection).create_speech_challenge(
            SpeechChallenge(organisation_id="fb", id="4", topic="Hi")
        )

        assert str(api.last.url) == f"{API}/challenges/speech"
        assert api.last_json() == {"id": "4", "topic": "Hi"}
        assert result.organisation_id == "fb"
        assert result.topic == "Hi"

    async def test_create_with_reference_audio(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "4", "referenceAudioUrl": _AUDIO_URL}
        result = await SpeechChallengeController(connection).create_speech_challenge(
            SpeechChallenge(organisation_id="fb", topic="Hi"), b"RIFF...."
        )

        assert api.last.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="referenceAudio"' in api.last.content
        assert result.reference_audio_url == _AUDIO_URL

    async def test_create_rejects_non_bytes_audio(self, connection: Connection) -> None:
        with pytest.raises(InvalidArgumentError):
            await SpeechChallengeController(connection).create_speech_challenge(
                SpeechChallenge(organisation_id="fb"), "audio"  # type: ignore[arg-type]
            )

    async def test_get(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "4", "topic": "Hi"}
        result = await SpeechChallengeController(connection).get_speech_challenge("fb", "4")
        assert str(api.last.url) == f"{API}/challenges/speech/4"
        assert result.organisation_id == "fb"

    async def test_list(self, api: FakeApi, connection: Connection) -> None:
        api.body = [{"id": "4"}]
        result = await SpeechChallengeController(connection).list_speech_challenges("fb")
        assert result[0].id == "4"

    async def test_list_requires_organisation(self, connection: Connection) -> None:
        with pytest.raises(MissingFieldError, match="organisationId"):
            await SpeechChallengeController(connection).list_speech_challenges(None)


# ---------------------------------------------------------------------------
# SpeechRecording
# ---------------------------------------------------------------------------


def _recording_body() -> dict[str, Any]:
    return {
        "id": "5",
        "created": _DATE,
        "updated": _DATE,
        "audioUrl": _AUDIO_URL,
        "studentId": "6",
    }


class TestSpeechRecordingController:
    @pytest.mark.parametrize(
        ("args", "field"),
        [
            ((), "organisationId"),
            (("fb",), "challengeId"),
            (("fb", "4"), "recordingId"),
        ],
    )
    async def test_get_requires_fields(
        self, connection: Connection, args: tuple[str, ...], field: str
    ) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            await SpeechRecordingController(connection).get_speech_recording(*args)
        assert exc_info.value.field == field

    async def test_get(self, api: FakeApi, connection: Connection) -> None:
        api.body = _recording_body()
        result = await SpeechRecordingController(connection).get_speech_recording("fb", "4", "5")

        assert api.last.method == "GET"
        assert str(api.last.url) == f"{API}/challenges/speech/4/recordings/5"
        assert result.id == "5"
        assert result.challenge == "4"
        assert result.student == Student(organisation_id="fb", id="6")
        assert result.audio is None
        assert result.audio_url == _AUDIO_URL + "?access_token=token"
        assert result.created == result.updated

    @pytest.mark.parametrize(("args", "field"), [((), "organisationId"), (("fb",), "challengeId")])
    async def test_list_requires_fields(
        self, connection: Connection, args: tuple[str, ...], field: str
    ) -> None:
        with pytest.raises(MissingFieldError, match=f"{field} field is required"):
            await SpeechRecordingController(connection).list_speech_recordings(*args)

    async def test_list(self, api: FakeApi, connection: Connection) -> None:
        api.body = [_recording_body()]
        result = await SpeechRecordingController(connection).list_speech_recordings("fb", "4")

        assert str(api.last.url) == f"{API}/challenges/speech/4/recordings"
        assert len(result) == 1
        assert result[0].audio_url == _AUDIO_URL + "?access_token=token"

    async def test_start_streaming_delegates_with_connection_state(
        self, connection: Connection, speech_challenge: SpeechChallenge
    ) -> None:
        recorder = object()
        target = "itslanguage.controllers.speech_recording.start_streaming_recording"
        with patch(target) as mock_start:
            session = SpeechRecordingController(connection).start_streaming_speech_recording(
                speech_challenge, recorder  # type: ignore[arg-type]
            )

        assert session is mock_start.return_value
        mock_start.assert_called_once_with(
            speech_challenge,
            recorder,
            channel=connection.rpc,
            slot=connection.recording_slot,
            ready_timeout_s=None,
            audio_url_resolver=connection.add_access_token,
        )


# ---------------------------------------------------------------------------
# PronunciationChallenge
# ---------------------------------------------------------------------------


class TestPronunciationChallengeController:
    async def test_create_uploads_reference_audio(
        self, api: FakeApi, connection: Connection
    ) -> None:
        api.body = {
            "id": "test",
            "transcription": "Hi",
            "referenceAudioUrl": _AUDIO_URL,
            "status": "preparing",
            "created": _DATE,
            "updated": _DATE,
        }
        controller = PronunciationChallengeController(connection)

        result = await controller.create_pronunciation_challenge(
            PronunciationChallenge(id="test", transcription="Hi"), b"RIFF...."
        )

        assert api.last.method == "POST"
        assert str(api.last.url) == f"{API}/challenges/pronunciation"
        assert b'name="referenceAudio"' in api.last.content
        assert b'name="transcription"' in api.last.content
        assert result.status == "preparing"
        assert result.reference_audio_url == _AUDIO_URL

    async def test_create_requires_model(self, connection: Connection) -> None:
        with pytest.raises(InvalidArgumentError, match="PronunciationChallenge"):
            await PronunciationChallengeController(connection).create_pronunciation_challenge(
                None, b""  # type: ignore[arg-type]
            )

    async def test_create_requires_bytes(self, connection: Connection) -> None:
        with pytest.raises(InvalidArgumentError, match="audio"):
            await PronunciationChallengeController(connection).create_pronunciation_challenge(
                PronunciationChallenge(transcription="Hi"), None  # type: ignore[arg-type]
            )

    async def test_get(self, api: FakeApi, connection: Connection) -> None:
        api.body = {"id": "test", "transcription": "Hi", "status": "prepared"}
        result = await PronunciationChallengeController(connection).get_pronunciation_challenge(
            "test"
        )
        assert str(api.last.url) == f"{API}/challenges/pronunciation/test"
        assert result.status == "prepared"

    async def test_get_requires_id(self, connection: Connection) -> None:
        with pytest.raises(MissingFieldError, match="challengeId field is required"):
            await PronunciationChallengeController(connection).get_pronunciation_challenge(None)

    async def test_list(self, api: FakeApi, connection: Connection) -> None:
        api.body = [{"id": "a", "transcription": "Hi"}, {"id": "b", "transcription": "Bye"}]
        result = await PronunciationChallengeController(connection).list_pronunciation_challenges()
        assert [c.transcription for c in result] == ["Hi", "Bye"]

    async def test_delete_returns_id(self, api: FakeApi, connection: Connection) -> None:
        api.status = 204
        result = await PronunciationChallengeController(connection).delete_pronunciation_challenge(
            "test"
        )
        assert api.last.method == "DELETE"
        assert str(api.last.url) == f"{API}/challenges/pronunciation/test"
        assert result == "test"
