"""Controller de SpeechChallenge."""

from __future__ import annotations

from typing import Any

from itslanguage.controllers._common import BaseController, expect_list, require_field
from itslanguage.exceptions import InvalidArgumentError
from itslanguage.models import SpeechChallenge

_PATH = "/challenges/speech"


def _to_challenge(organisation_id: str, data: dict[str, Any]) -> SpeechChallenge:
    return SpeechChallenge.model_validate({**data, "organisationId": organisation_id})


class SpeechChallengeController(BaseController):
    async def create_speech_challenge(
        self,
        challenge: SpeechChallenge,
        reference_audio: bytes | None = None,
    ) -> SpeechChallenge:
        """Cria um speech challenge, opcionalmente com audio de referencia.

        Com audio, o corpo e multipart (campos + arquivo ``referenceAudio``).
        """
        if not isinstance(challenge, SpeechChallenge):
            raise InvalidArgumentError('challenge parameter of type "SpeechChallenge" is required')
        organisation_id = require_field(challenge.organisation_id, "organisationId")

        fields = {k: v for k, v in challenge.to_api("id", "topic").items() if v is not None}
        if reference_audio is None:
            data = await self._connection.secure_post(_PATH, json=fields)
        else:
            if not isinstance(reference_audio, (bytes, bytearray)):
                raise InvalidArgumentError('referenceAudio parameter of type "bytes" is required')
            data = await self._connection.secure_post(
                _PATH,
                files={"referenceAudio": ("reference.wav", bytes(reference_audio), "audio/wave")},
                data=fields,
            )
        return _to_challenge(organisation_id, data)

    async def get_speech_challenge(
        self,
        organisation_id: str | None,
        challenge_id: str | None,
    ) -> SpeechChallenge:
        organisation_id = require_field(organisation_id, "organisationId")
        require_field(challenge_id, "challengeId")
        data = await self._connection.secure_get(f"{_PATH}/{challenge_id}")
        return _to_challenge(organisation_id, data)

    async def list_speech_challenges(self, organisation_id: str | None) -> list[SpeechChallenge]:
        organisation_id = require_field(organisation_id, "organisationId")
        data = await self._connection.secure_get(_PATH)
        return [_to_challenge(organisation_id, item) for item in expect_list(data, _PATH)]
