from enum import Enum
from typing import Optional

from . import AnswerRecord
from .reveal import QuestionState


class Verdict(Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    NONE = "none"          # nothing to grade


def grade(correct_option: Optional[str], user_selection: Optional[str]) -> Verdict:
    """Exact letter comparison. No partial credit."""
    if correct_option is None or user_selection is None:
        return Verdict.NONE
    if user_selection == correct_option:
        return Verdict.CORRECT
    return Verdict.INCORRECT


def grade_state(answer: AnswerRecord, state: QuestionState) -> Verdict:
    return grade(answer.correct_option, state.user_selection)
