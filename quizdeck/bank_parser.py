"""
Parser for plain-text question banks.

A bank is a sequence of blocks separated by a blank line. Each block is::

    Question
    <description lines>
    ===                 (optional, starts multiple-choice options)
    A.<option text>
    B.<option text>
    Answer
    <correct letter>    (only after a === section)
    <reason lines>

Every block runs through a small state machine. The first malformed block
aborts the whole load.
"""

import logging
import string
from enum import Enum
from typing import List, Optional, Tuple

from . import AnswerRecord, BankEntry, Option, QuestionRecord, QuizdeckError
from .config import QuizConfig, DEFAULT_CONFIG

logger = logging.getLogger(__name__)

QUESTION_MARKER = "Question"
ANSWER_MARKER = "Answer"
OPTIONS_MARKER = "==="
BLOCK_DELIMITER = "\n\n"

OPTION_LABELS = string.ascii_uppercase


class FormatError(QuizdeckError, ValueError):
    """A bank document is malformed."""

    def __init__(self, reason: str, block_number: Optional[int] = None,
                 line_number: Optional[int] = None, line: Optional[str] = None):
        self.reason = reason
        self.block_number = block_number
        self.line_number = line_number
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        where = []
        if self.block_number is not None:
            where.append(f"block {self.block_number}")
        if self.line_number is not None:
            where.append(f"line {self.line_number}")
        message = self.reason
        if where:
            message = f"{message} ({', '.join(where)})"
        if self.line is not None:
            message = f"{message}: {self.line!r}"
        return message


class ParserState(Enum):
    START = "start"
    READ_DESCRIPTION = "read_description"
    READ_OPTIONS = "read_options"
    READ_CORRECT_OPTION = "read_correct_option"
    READ_REASON = "read_reason"


def split_blocks(text: str) -> List[str]:
    """Trim the document and split it into question blocks."""
    text = text.replace("\r\n", "\n").strip()
    if not text:
        return []
    return text.split(BLOCK_DELIMITER)


def parse_option_line(line: str) -> Option:
    """Parse ``A.text`` into ``Option('A', 'text')``.

    The label is the first character. The text is whatever follows the first
    dot (empty without one); further dots are replaced by single spaces.
    """
    if not line or line[0] not in OPTION_LABELS:
        raise FormatError("bad option syntax")
    _, *rest = line.split(".")
    return Option(line[0], " ".join(rest))


class BlockParser:
    """State machine for a single question block."""

    def __init__(self, block_number: int = 1, config: Optional[QuizConfig] = None):
        self.block_number = block_number
        self.config = config or DEFAULT_CONFIG
        self.state = ParserState.START
        self.description: List[str] = []
        self.options: Optional[List[Option]] = None
        self.correct_option: Optional[str] = None
        self.reason: List[str] = []
        self.line_number = 0

        self._handlers = {
            ParserState.START: self._read_start,
            ParserState.READ_DESCRIPTION: self._read_description,
            ParserState.READ_OPTIONS: self._read_options,
            ParserState.READ_CORRECT_OPTION: self._read_correct_option,
            ParserState.READ_REASON: self._read_reason,
        }

    def feed(self, line: str):
        self.line_number += 1
        try:
            self._handlers[self.state](line)
        except FormatError as e:
            if e.block_number is None:
                raise FormatError(e.reason, self.block_number, self.line_number, line) from None
            raise

    def _read_start(self, line: str):
        if line.rstrip() != QUESTION_MARKER:
            raise FormatError("missing Question header")
        self.state = ParserState.READ_DESCRIPTION

    def _read_description(self, line: str):
        marker = line.rstrip()
        if marker == ANSWER_MARKER:
            self.state = ParserState.READ_REASON
        elif marker == OPTIONS_MARKER:
            self.options = []
            self.state = ParserState.READ_OPTIONS
        else:
            self.description.append(line)

    def _read_options(self, line: str):
        if line.rstrip() == ANSWER_MARKER:
            self.state = ParserState.READ_CORRECT_OPTION
            return
        self.options.append(parse_option_line(line))

    def _read_correct_option(self, line: str):
        letter = line.strip()
        if len(letter) != 1:
            raise FormatError("expected a single correct option letter")

        if len(self.options) > self.config.max_options:
            raise FormatError(f"too many options ({len(self.options)} > {self.config.max_options})")
        seen = set()
        for opt in self.options:
            if opt.label in seen:
                raise FormatError(f"duplicate option label {opt.label!r}")
            seen.add(opt.label)
        if letter not in seen:
            raise FormatError("correct option not among options")

        self.correct_option = letter
        self.state = ParserState.READ_REASON

    def _read_reason(self, line: str):
        self.reason.append(line)

    def finish(self) -> BankEntry:
        """Validate the final state and build the records."""
        if self.state is not ParserState.READ_REASON:
            raise FormatError(f"block ended prematurely in state {self.state.value}",
                              self.block_number)
        if not any(line.strip() for line in self.description):
            raise FormatError("empty description", self.block_number)
        if not self.reason:
            if self.correct_option is None or self.config.require_reason:
                raise FormatError("empty reason", self.block_number)

        options: Optional[Tuple[Option, ...]] = None
        if self.options is not None:
            options = tuple(self.options)
        question = QuestionRecord(description=tuple(self.description), options=options)
        answer = AnswerRecord(correct_option=self.correct_option, reason=tuple(self.reason))
        return BankEntry(question, answer)


def parse_block(block: str, block_number: int = 1,
                config: Optional[QuizConfig] = None) -> BankEntry:
    parser = BlockParser(block_number, config)
    for line in block.split("\n"):
        parser.feed(line)
    return parser.finish()


def parse_bank(text: str, config: Optional[QuizConfig] = None) -> List[BankEntry]:
    """Parse a whole bank document. Raises FormatError on the first bad block."""
    blocks = split_blocks(text)
    if not blocks:
        raise FormatError("empty bank")

    entries = []
    for block_number, block in enumerate(blocks, 1):
        entries.append(parse_block(block, block_number, config))

    multiple_choice = sum(1 for entry in entries if entry.question.is_multiple_choice)
    logger.debug("parsed %d blocks (%d multiple-choice)", len(entries), multiple_choice)
    return entries
