import io
import os
import termios

import pytest

from quizdeck import Option
from quizdeck.config import QuizConfig
from quizdeck.grading import Verdict
from quizdeck.quiz import QuestionView
from quizdeck.reveal import Advance, Quit, SelectOption, ToggleReveal
from quizdeck.terminal import (
    CLEAR_SCREEN,
    ENTER_ALT_SCREEN,
    LEAVE_ALT_SCREEN,
    TerminalDisplay,
    TerminalGuard,
    decode_key,
    format_view,
    terminal_events,
)


def _view(**overrides):
    values = dict(
        description=("Which one?",),
        options=(Option("A", "foo"), Option("B", "bar")),
        revealed=False,
        correct_option="B",
        user_selection=None,
        reason=("bar is right",),
        hint="type your answer",
    )
    values.update(overrides)
    return QuestionView(**values)


def test_decode_key_defaults():
    assert decode_key(" ") == ToggleReveal()
    assert decode_key("\n") == Advance()
    assert decode_key("\r") == Advance()
    assert decode_key("\x04") == Quit()
    assert decode_key("\x1b") is None
    assert decode_key("b") == SelectOption("B")
    assert decode_key("Q") == SelectOption("Q")
    assert decode_key("7") is None
    assert decode_key("é") is None


def test_decode_key_custom_config():
    config = QuizConfig(quit_keys=("~",), reveal_keys=("r",))
    assert decode_key("~", config) == Quit()
    assert decode_key("r", config) == ToggleReveal()


def test_terminal_events_skip_noise_and_quit_on_eof():
    events = list(terminal_events(io.StringIO("a 9\nx")))
    assert events == [SelectOption("A"), ToggleReveal(), Advance(), SelectOption("X"), Quit()]


@pytest.mark.parametrize("keys, expected", [
    ("\x1b[Ab", [SelectOption("B"), Quit()]),            # up arrow
    ("\x1bOBa", [SelectOption("A"), Quit()]),            # down arrow, application mode
    ("\x1b[1;5Cx", [SelectOption("X"), Quit()]),         # ctrl+right
    ("\x1b[15~ ", [ToggleReveal(), Quit()]),             # F5
])
def test_arrow_and_function_keys_are_ignored(keys, expected):
    assert list(terminal_events(io.StringIO(keys))) == expected


def test_bare_escape_is_ignored_by_default():
    assert list(terminal_events(io.StringIO("\x1bb"))) == [SelectOption("B"), Quit()]


def test_escape_can_still_be_configured_as_quit():
    config = QuizConfig(quit_keys=("\x1b",))
    events = terminal_events(io.StringIO("\x1b[Dx\x1bx"), config)
    assert list(events) == [SelectOption("X"), Quit(), SelectOption("X"), Quit()]


def test_hidden_view_does_not_leak_answer():
    text = "\n".join(format_view(_view()))
    assert "Which one?" in text
    assert "A. foo" in text
    assert "bar is right" not in text
    assert "Correct answer" not in text
    assert "type your answer" in text


def test_revealed_view_shows_verdict_and_reason():
    lines = format_view(_view(revealed=True, user_selection="A", verdict=Verdict.INCORRECT))
    assert "✅ Correct answer: B" in lines
    assert "📝 Your answer: A" in lines
    assert "❌ Wrong." in lines
    assert "bar is right" in lines
    assert "* B. bar" in lines
    assert "> A. foo" in lines


def test_free_text_view():
    lines = format_view(_view(options=None, correct_option=None, revealed=True,
                              hint="no options available", reason=("4",)))
    assert "4" in lines
    assert not any("Correct answer" in line for line in lines)


def test_display_clears_and_writes():
    out = io.StringIO()
    TerminalDisplay(out).render(_view())
    assert out.getvalue().startswith(CLEAR_SCREEN)
    assert "Which one?" in out.getvalue()


def test_guard_is_noop_without_tty():
    stdin, stdout = io.StringIO(), io.StringIO()
    with TerminalGuard(stdin, stdout) as guard:
        assert not guard.active
    assert stdout.getvalue() == ""


@pytest.fixture
def pty_stdin():
    if not hasattr(os, "openpty"):
        pytest.skip("no pseudo-terminal support")
    master, slave = os.openpty()
    attrs = termios.tcgetattr(slave)
    attrs[3] |= termios.ICANON | termios.ECHO
    termios.tcsetattr(slave, termios.TCSANOW, attrs)
    stdin = os.fdopen(slave, "r")
    yield stdin
    stdin.close()
    os.close(master)


def _lflags(stream):
    return termios.tcgetattr(stream.fileno())[3]


def test_guard_sets_raw_input_and_restores_on_exit(pty_stdin):
    before = termios.tcgetattr(pty_stdin.fileno())
    stdout = io.StringIO()
    with TerminalGuard(pty_stdin, stdout) as guard:
        assert guard.active
        assert not _lflags(pty_stdin) & termios.ICANON
        assert not _lflags(pty_stdin) & termios.ECHO
    assert not guard.active
    assert termios.tcgetattr(pty_stdin.fileno()) == before
    assert stdout.getvalue() == ENTER_ALT_SCREEN + LEAVE_ALT_SCREEN


@pytest.mark.parametrize("error", [RuntimeError, KeyboardInterrupt, OSError])
def test_guard_restores_terminal_when_session_fails(pty_stdin, error):
    before = termios.tcgetattr(pty_stdin.fileno())
    stdout = io.StringIO()
    with pytest.raises(error):
        with TerminalGuard(pty_stdin, stdout):
            assert not _lflags(pty_stdin) & termios.ICANON
            raise error("boom")
    assert termios.tcgetattr(pty_stdin.fileno()) == before
    assert _lflags(pty_stdin) & termios.ICANON
    assert _lflags(pty_stdin) & termios.ECHO
    assert stdout.getvalue().endswith(LEAVE_ALT_SCREEN)


def test_guard_without_alternate_screen(pty_stdin):
    stdout = io.StringIO()
    with TerminalGuard(pty_stdin, stdout, alternate_screen=False):
        pass
    assert stdout.getvalue() == ""
