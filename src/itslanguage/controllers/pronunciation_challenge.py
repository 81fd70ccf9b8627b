"""Controller de PronunciationChallenge (organisation derivada do token)."""

from __future__ import annotations

from itslanguage.controllers._common import BaseController, expect_list, require_field
from itslanguage.exceptions import InvalidArgumentError
from itslanguage.logging import get_logger
from itslanguage.models import PronunciationChallenge

logger = get_logger("controllers.pronunciation_challenge")

_PATH = "/challenges/pronunciation"


class PronunciationChallengeController(BaseController):
    async def create_pronunciation_challenge(
        self,
        challenge: PronunciationChallenge,
        audio: bytes,
    ) -> PronunciationChallenge:
        """Cria um pronunciation challenge com o audio de referencia.

        O corpo e multipart: campos do challenge + arquivo ``referenceAudio``.
        """
        if not isinstance(challenge, PronunciationChallenge):
            raise InvalidArgumentError(
                'challenge parameter of type "PronunciationChallenge" is required'
            )
        if not isinstance(audio, (bytes, bytearray)):
            raise InvalidArgumentError('audio parameter of type "bytes" is required')

        fields = {
            k: v for k, v in challenge.to_api("id", "transcription").items() if v is not None
        }
        data = await self._connection.secure_post(
            _PATH,
            files={"referenceAudio": ("reference.wav", bytes(audio), "audio/wave")},
            data=fields,
        )
        created = PronunciationChallenge.model_validate(data)
        logger.info(
            "pronunciation_challenge_created",
            challenge_id=created.id,
            status=created.status,
        )
        return created

    async def get_pronunciation_challenge(self, challenge_id: str | None) -> PronunciationChallenge:
        require_field(challenge_id, "challengeId")
        data = await self._connection.secure_get(f"{_PATH}/{challenge_id}")
        return PronunciationChallenge.model_validate(data)

    async def list_pronunciation_challenges(self) -> list[PronunciationChallenge]:
        data = await self._connection.secure_get(_PATH)
        return [PronunciationChallenge.model_validate(item) for item in expect_list(data, _PATH)]

    async def delete_pronunciation_challenge(self, challenge_id: str | None) -> str:
        """Remove o challenge. Devolve o proprio ``challenge_id``."""
        challenge_id = require_field(challenge_id, "challengeId")
        await self._connection.secure_delete(f"{_PATH}/{challenge_id}")
        logger.info("pronunciation_challenge_deleted", challenge_id=challenge_id)
        return challenge_id
