"""
Quiz session loop: shuffled rounds of questions, each driven by logical input events.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Protocol, Tuple

from . import Bank, Option
from .config import QuizConfig, DEFAULT_CONFIG
from .grading import Verdict, grade_state
from .reveal import Event, Outcome, QuestionState
from .session import Presentation, ShufflePolicy

logger = logging.getLogger(__name__)

HINT_TYPE_ANSWER = "type your answer"
HINT_NO_OPTIONS = "no options available"


@dataclass(frozen=True)
class QuestionView:
    """Everything a display surface needs to draw one frame."""
    description: Tuple[str, ...]
    options: Optional[Tuple[Option, ...]]
    revealed: bool
    correct_option: Optional[str]
    user_selection: Optional[str]
    reason: Tuple[str, ...]
    verdict: Verdict = Verdict.NONE
    hint: str = ""
    round_number: int = 1
    position: int = 1
    round_size: int = 1


class DisplaySurface(Protocol):
    def render(self, view: QuestionView) -> None:
        ...


class InputSource(Protocol):
    """Any iterable of logical events: a list, a generator, terminal_events()."""

    def __iter__(self) -> Iterator[Event]:
        ...


@dataclass
class QuizStats:
    """Counters for the running process only; nothing is saved."""
    seen: int = 0
    revealed: int = 0     # questions whose answer was shown at least once
    answered: int = 0
    correct: int = 0
    wrong: int = 0
    rounds: int = 0

    @property
    def accuracy(self) -> Optional[float]:
        if self.answered == 0:
            return None
        return self.correct / self.answered

    def record(self, state: QuestionState, verdict: Verdict):
        self.seen += 1
        if state.reveal_count:
            self.revealed += 1
        if verdict is Verdict.CORRECT:
            self.answered += 1
            self.correct += 1
        elif verdict is Verdict.INCORRECT:
            self.answered += 1
            self.wrong += 1

    def as_dict(self) -> Dict[str, int]:
        return {
            'seen': self.seen,
            'revealed': self.revealed,
            'answered': self.answered,
            'correct': self.correct,
            'wrong': self.wrong,
            'rounds': self.rounds,
        }


def build_view(presentation: Presentation, state: QuestionState) -> QuestionView:
    question, answer = presentation.entry
    if question.is_multiple_choice:
        hint = HINT_TYPE_ANSWER if state.user_selection is None else ""
    else:
        hint = HINT_NO_OPTIONS
    return QuestionView(
        description=question.description,
        options=question.options,
        revealed=state.revealed,
        correct_option=answer.correct_option,
        user_selection=state.user_selection,
        reason=answer.reason,
        verdict=grade_state(answer, state),
        hint=hint,
        round_number=presentation.round_number,
        position=presentation.position,
        round_size=presentation.round_size,
    )


class QuizSession:
    """Runs rounds x questions until a Quit event (or the input runs dry)."""

    def __init__(self, bank: Bank, display: DisplaySurface, events: InputSource,
                 policy: Optional[ShufflePolicy] = None, config: Optional[QuizConfig] = None):
        if len(bank) == 0:
            raise ValueError("Cannot start a quiz on an empty bank")
        self.bank = bank
        self.display = display
        self.events = events
        self.config = config or DEFAULT_CONFIG
        self.policy = policy or ShufflePolicy(seed=self.config.seed,
                                              shuffle_options=self.config.shuffle_options)
        self.stats = QuizStats()

    def run(self) -> QuizStats:
        events = iter(self.events)
        for presentation in self.policy.presentations(self.bank.entries):
            self.stats.rounds = presentation.round_number
            outcome = self._present(presentation, events)
            if outcome is Outcome.QUIT:
                logger.debug("session ended: %s", self.stats.as_dict())
                return self.stats
        return self.stats

    def _present(self, presentation: Presentation, events) -> Outcome:
        state = QuestionState(presentation.entry.question)
        while True:
            self.display.render(build_view(presentation, state))
            event = next(events, None)
            if event is None:
                logger.debug("input source exhausted, quitting")
                outcome = Outcome.QUIT
            else:
                outcome = state.handle(event)
            if outcome is not Outcome.STAY:
                self.stats.record(state, grade_state(presentation.entry.answer, state))
                return outcome
