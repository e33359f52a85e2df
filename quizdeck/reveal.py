"""
Per-question reveal/answer state and the logical input events that drive it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from . import QuestionRecord


@dataclass(frozen=True)
class ToggleReveal:
    pass


@dataclass(frozen=True)
class SelectOption:
    letter: str


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event = Union[ToggleReveal, SelectOption, Advance, Quit]


class RevealState(Enum):
    HIDDEN = "hidden"
    REVEALED = "revealed"


class Outcome(Enum):
    STAY = "stay"          # keep showing the current question
    ADVANCE = "advance"    # move to the next question
    QUIT = "quit"          # end the session


class QuestionState:
    """Reveal flag and user selection for the question currently on screen.

    A fresh instance is created for every presentation.
    """

    def __init__(self, question: QuestionRecord):
        self.question = question
        self.state = RevealState.HIDDEN
        self.user_selection: Optional[str] = None
        self.reveal_count = 0     # hidden -> revealed transitions, do-overs included

    @property
    def revealed(self) -> bool:
        return self.state is RevealState.REVEALED

    def _reveal(self):
        self.state = RevealState.REVEALED
        self.reveal_count += 1

    def toggle(self):
        if self.state is RevealState.HIDDEN:
            self._reveal()
        else:
            # back to hidden is a do-over
            self.state = RevealState.HIDDEN
            self.user_selection = None

    def select(self, letter: str) -> bool:
        """Record ``letter`` and reveal. Returns False (and changes nothing) when not allowed."""
        if self.state is not RevealState.HIDDEN:
            return False
        if letter not in self.question.labels:
            return False
        self.user_selection = letter
        self._reveal()
        return True

    def handle(self, event: Event) -> Outcome:
        if isinstance(event, Quit):
            return Outcome.QUIT
        if isinstance(event, Advance):
            return Outcome.ADVANCE
        if isinstance(event, ToggleReveal):
            self.toggle()
        elif isinstance(event, SelectOption):
            self.select(event.letter)
        else:
            raise TypeError(f"Unknown event: {event!r}")
        return Outcome.STAY

    def __repr__(self):
        return f"QuestionState({self.state.value}, selection={self.user_selection!r})"
