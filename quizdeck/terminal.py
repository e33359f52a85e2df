"""
Terminal front-end: raw-ish input mode, key decoding and a plain text display.
"""

import logging
import string
import sys
import termios
from typing import IO, Iterator, List, Optional

from .config import QuizConfig, DEFAULT_CONFIG
from .grading import Verdict
from .quiz import QuestionView
from .reveal import Advance, Event, Quit, SelectOption, ToggleReveal

logger = logging.getLogger(__name__)

CLEAR_SCREEN = "\x1b[2J\x1b[1;1H"
ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"
ESCAPE = "\x1b"


class TerminalGuard:
    """Puts the terminal in unbuffered, no-echo mode and always restores it.

    Use as a context manager. Does nothing when stdin is not a tty.
    """

    def __init__(self, stdin: Optional[IO] = None, stdout: Optional[IO] = None,
                 alternate_screen: bool = True):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.alternate_screen = alternate_screen
        self._saved_attrs = None
        self._fd = None

    @property
    def active(self) -> bool:
        return self._saved_attrs is not None

    def __enter__(self) -> 'TerminalGuard':
        if not self.stdin.isatty():
            logger.debug("stdin is not a tty, leaving terminal mode alone")
            return self
        self._fd = self.stdin.fileno()
        self._saved_attrs = termios.tcgetattr(self._fd)

        attrs = termios.tcgetattr(self._fd)
        attrs[3] &= ~(termios.ICANON | termios.ECHO)   # get chars immediately, no echo
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0
        termios.tcsetattr(self._fd, termios.TCSADRAIN, attrs)
        if self.alternate_screen:
            self.stdout.write(ENTER_ALT_SCREEN)
            self.stdout.flush()
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._saved_attrs is None:
            return False
        try:
            if self.alternate_screen:
                self.stdout.write(LEAVE_ALT_SCREEN)
                self.stdout.flush()
        finally:
            termios.tcsetattr(self._fd, termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
            logger.debug("terminal restored")
        return False


def decode_key(char: str, config: Optional[QuizConfig] = None) -> Optional[Event]:
    """Map one typed character to a logical event (None if it means nothing)."""
    config = config or DEFAULT_CONFIG
    if char in config.quit_keys:
        return Quit()
    if char in config.reveal_keys:
        return ToggleReveal()
    if char in config.advance_keys:
        return Advance()
    if len(char) == 1 and char in string.ascii_letters:
        return SelectOption(char.upper())
    return None


def _skip_escape_sequence(stream: IO, introducer: str):
    """Consume the rest of a CSI (``Esc [``) or SS3 (``Esc O``) key sequence."""
    if introducer == "O":
        stream.read(1)
        return
    while True:
        char = stream.read(1)
        # final byte of a CSI sequence is in @..~
        if char == "" or "@" <= char <= "~":
            return


def terminal_events(stream: Optional[IO] = None,
                    config: Optional[QuizConfig] = None) -> Iterator[Event]:
    """Endless event stream read one character at a time. EOF means Quit.

    Arrow and function keys arrive as escape sequences and are discarded.
    """
    stream = stream or sys.stdin
    pending = None
    while True:
        char = pending if pending is not None else stream.read(1)
        pending = None
        if char == "":
            yield Quit()
            return
        if char == ESCAPE:
            follow = stream.read(1)
            if follow in ("[", "O"):
                _skip_escape_sequence(stream, follow)
                continue
            pending = follow
        event = decode_key(char, config)
        if event is not None:
            yield event


def format_view(view: QuestionView) -> List[str]:
    lines = [f"Round {view.round_number} | Question {view.position}/{view.round_size}", ""]
    lines.append("Question:")
    lines.extend(view.description)

    if view.options is not None:
        lines.append("")
        for label, text in view.options:
            marker = "  "
            if view.revealed and label == view.correct_option:
                marker = "* "
            elif label == view.user_selection:
                marker = "> "
            lines.append(f"{marker}{label}. {text}")

    lines.append("")
    if not view.revealed:
        if view.options is not None:
            lines.append(f"({view.hint}: press a letter, space to reveal, enter for next)")
        else:
            lines.append(f"({view.hint}: space to reveal, enter for next)")
        return lines

    lines.append("Answer:")
    if view.correct_option is not None:
        lines.append(f"✅ Correct answer: {view.correct_option}")
    if view.user_selection is not None:
        lines.append(f"📝 Your answer: {view.user_selection}")
    if view.verdict is Verdict.CORRECT:
        lines.append("🎯 Correct!")
    elif view.verdict is Verdict.INCORRECT:
        lines.append("❌ Wrong.")
    lines.extend(view.reason)
    lines.append("")
    lines.append("(space to hide and try again, enter for next)")
    return lines


class TerminalDisplay:
    """Redraws the whole screen for every frame."""

    def __init__(self, stream: Optional[IO] = None, clear: bool = True):
        self.stream = stream or sys.stdout
        self.clear = clear

    def render(self, view: QuestionView) -> None:
        if self.clear:
            self.stream.write(CLEAR_SCREEN)
        self.stream.write("\n".join(format_view(view)))
        self.stream.write("\n")
        self.stream.flush()
