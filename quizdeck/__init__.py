import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

import pandas as pd

from .config import QuizConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class QuizdeckError(Exception):
    """Base class for errors raised while loading a question bank."""


class BankIOError(QuizdeckError, OSError):
    """The bank file could not be opened, read or decoded."""

    def __init__(self, path, message: str):
        self.path = str(path)
        super().__init__(f"cannot read {self.path}: {message}")


class Option(NamedTuple):
    label: str
    text: str


@dataclass(frozen=True)
class QuestionRecord:
    description: Tuple[str, ...]
    options: Optional[Tuple[Option, ...]] = None

    @property
    def is_multiple_choice(self) -> bool:
        return self.options is not None

    @property
    def labels(self) -> Tuple[str, ...]:
        if self.options is None:
            return ()
        return tuple(opt.label for opt in self.options)

    def option_text(self, label: str) -> Optional[str]:
        for opt in self.options or ():
            if opt.label == label:
                return opt.text
        return None


@dataclass(frozen=True)
class AnswerRecord:
    correct_option: Optional[str] = None
    reason: Tuple[str, ...] = ()


class BankEntry(NamedTuple):
    question: QuestionRecord
    answer: AnswerRecord


class Bank:
    """Read-only, ordered set of parsed question/answer pairs.

    Built once at startup. Rounds reorder copies of the entry list, the
    bank itself is never rewritten.
    """

    def __init__(self, entries: Sequence[BankEntry], source: Optional[str] = None):
        self._entries: Tuple[BankEntry, ...] = tuple(entries)
        self.source = source

    @classmethod
    def from_text(cls, text: str, config: Optional[QuizConfig] = None,
                  source: Optional[str] = None) -> 'Bank':
        from .bank_parser import parse_bank

        entries = parse_bank(text, config)
        logger.debug("parsed %d entries from %s", len(entries), source or "<text>")
        return cls(entries, source=source)

    @classmethod
    def load_from_file(cls, filepath: Union[str, Path],
                       config: Optional[QuizConfig] = None) -> 'Bank':
        """Read a UTF-8 bank file and parse it. Nothing is loaded on error."""
        path = Path(filepath)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except UnicodeDecodeError as e:
            raise BankIOError(path, f"not valid UTF-8 ({e.reason})") from e
        except OSError as e:
            raise BankIOError(path, e.strerror or str(e)) from e
        return cls.from_text(text, config, source=str(path))

    @property
    def entries(self) -> Tuple[BankEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BankEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> BankEntry:
        return self._entries[index]

    def multiple_choice_count(self) -> int:
        return sum(1 for entry in self._entries if entry.question.is_multiple_choice)

    def to_frame(self) -> pd.DataFrame:
        """One row per entry, in file order."""
        rows = []
        for number, (question, answer) in enumerate(self._entries, 1):
            rows.append({
                'question': number,
                'description': question.description[0],
                'kind': 'multiple-choice' if question.is_multiple_choice else 'free-text',
                'options': len(question.options) if question.options is not None else 0,
                'correct': answer.correct_option or '',
                'reason_lines': len(answer.reason),
            })
        columns = ['question', 'description', 'kind', 'options', 'correct', 'reason_lines']
        return pd.DataFrame(rows, columns=columns).set_index('question')

    def summary(self) -> Dict[str, int]:
        multiple_choice = self.multiple_choice_count()
        return {
            'total': len(self._entries),
            'multiple_choice': multiple_choice,
            'free_text': len(self._entries) - multiple_choice,
        }

    def __str__(self):
        counts = self.summary()
        outstrs = [f"Bank: {self.source or '<text>'}"]
        for key, value in counts.items():
            outstrs.append(f'{key}: {value}')
        return '\n\t'.join(outstrs)


__all__ = [
    'AnswerRecord',
    'Bank',
    'BankEntry',
    'BankIOError',
    'DEFAULT_CONFIG',
    'Option',
    'QuestionRecord',
    'QuizConfig',
    'QuizdeckError',
]
