"""
Presentation order for a quiz: shuffled rounds and per-presentation option relabeling.
"""

import logging
import string
from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Sequence

import numpy as np

from . import BankEntry, Option

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Presentation:
    """One question as it appears on screen during a round."""
    round_number: int
    position: int          # 1-based position inside the round
    round_size: int
    entry: BankEntry

    @property
    def is_last_in_round(self) -> bool:
        return self.position == self.round_size


class ShufflePolicy:
    """Decides question order per round and option order per presentation."""

    def __init__(self, seed: Optional[int] = None, shuffle_options: bool = True,
                 rng: Optional[np.random.Generator] = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.shuffle_options = shuffle_options

    def shuffle_round(self, entries: Sequence[BankEntry]) -> List[BankEntry]:
        """Return a uniformly random permutation of ``entries`` as a new list."""
        order = self.rng.permutation(len(entries))
        return [entries[int(i)] for i in order]

    def relabel(self, entry: BankEntry) -> BankEntry:
        """Shuffle a multiple-choice entry's options and re-letter them A, B, C...

        Returns a new entry; the correct option follows its text to the new label.
        Free-text entries are returned as they are.
        """
        question, answer = entry
        if question.options is None:
            return entry

        order = self.rng.permutation(len(question.options))
        shuffled = [question.options[int(i)] for i in order]

        new_options = []
        new_correct = None
        for label, opt in zip(string.ascii_uppercase, shuffled):
            if opt.label == answer.correct_option and new_correct is None:
                new_correct = label
            new_options.append(Option(label, opt.text))

        return BankEntry(
            replace(question, options=tuple(new_options)),
            replace(answer, correct_option=new_correct),
        )

    def present(self, entry: BankEntry) -> BankEntry:
        if self.shuffle_options:
            return self.relabel(entry)
        return entry

    def rounds(self, entries: Sequence[BankEntry]) -> Iterator[List[BankEntry]]:
        """Endless sequence of shuffled rounds over the full bank."""
        entries = list(entries)
        if not entries:
            raise ValueError("Cannot run rounds over an empty bank")
        while True:
            yield self.shuffle_round(entries)

    def presentations(self, entries: Sequence[BankEntry]) -> Iterator[Presentation]:
        """Endless sequence of presentations, round after round."""
        for round_number, round_entries in enumerate(self.rounds(entries), 1):
            logger.debug("starting round %d with %d questions", round_number, len(round_entries))
            size = len(round_entries)
            for position, entry in enumerate(round_entries, 1):
                yield Presentation(round_number, position, size, self.present(entry))
