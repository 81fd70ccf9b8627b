"""Controllers REST por modelo de dominio."""

from itslanguage.controllers.basic_auth import BasicAuthController
from itslanguage.controllers.choice import (
    create_choice_challenge,
    get_all_choice_challenges,
    get_choice_challenge_by_id,
)
from itslanguage.controllers.organisation import OrganisationController
from itslanguage.controllers.pronunciation_challenge import PronunciationChallengeController
from itslanguage.controllers.speech_challenge import SpeechChallengeController
from itslanguage.controllers.speech_recording import SpeechRecordingController
from itslanguage.controllers.student import StudentController

__all__ = [
    "BasicAuthController",
    "OrganisationController",
    "PronunciationChallengeController",
    "SpeechChallengeController",
    "SpeechRecordingController",
    "StudentController",
    "create_choice_challenge",
    "get_all_choice_challenges",
    "get_choice_challenge_by_id",
]
