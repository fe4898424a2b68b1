from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional

from rich.console import Console
from rich.style import Style
from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Static

from typing_drill.config import Palette
from typing_drill.errors import SessionCancelled, SessionFinished, TerminalError
from typing_drill.metrics import Keystroke, SessionResult

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

CANCELLED_RETURN_CODE = SessionCancelled.exit_code


# ---------------------------
# Session state
# ---------------------------

class TypingSession:
    """
    Cursor, keystroke log and counters for one attempt at a target string.

    Counters move once per registered character and never go back;
    backspace only moves the cursor.
    """

    def __init__(self, target: str, clock: Clock = time.monotonic) -> None:
        if not target:
            raise ValueError("target string is empty")
        self.target = target
        self._clock = clock
        self._typed: List[str] = []
        self._keys: List[Keystroke] = []
        self.correct = 0
        self.incorrect = 0

    @property
    def cursor(self) -> int:
        return len(self._typed)

    @property
    def finished(self) -> bool:
        return self.cursor == len(self.target)

    @property
    def keys(self) -> List[Keystroke]:
        return list(self._keys)

    def type_char(self, char: str) -> bool:
        """Register one printable key; returns whether it matched."""
        if self.finished:
            raise SessionFinished("session already reached the end of the target")
        self._keys.append(Keystroke(self._clock(), char))
        matched = char == self.target[self.cursor]
        if matched:
            self.correct += 1
        else:
            self.incorrect += 1
        self._typed.append(char)
        return matched

    def backspace(self) -> None:
        if self._typed:
            self._typed.pop()

    def result(self) -> SessionResult:
        return SessionResult(
            target=self.target,
            keys=tuple(self._keys),
            correct=self.correct,
            incorrect=self.incorrect,
        )

    def render(self, palette: Palette) -> Text:
        # Typed cells show what was typed, the rest show the target.
        text = Text()
        for i, expected in enumerate(self.target):
            if i < self.cursor:
                typed = self._typed[i]
                style = palette.correct if typed == expected else palette.incorrect
                text.append(typed, style=style)
            elif i == self.cursor:
                text.append(expected, style=Style.parse(palette.pending) + Style(reverse=True))
            else:
                text.append(expected, style=palette.pending)
        return text


# ---------------------------
# UI
# ---------------------------

class TargetView(Static):
    """Target string with per-key coloring."""
    pass


class SessionApp(App[Optional[SessionResult]]):
    CSS = """
    Screen {
        height: auto;
        background: transparent;
    }

    TargetView {
        height: auto;
        background: transparent;
    }
    """

    ENABLE_COMMAND_PALETTE = False

    BINDINGS = [
        Binding("escape", "cancel", "Cancel", show=False, priority=True),
        Binding("ctrl+c", "cancel", "Cancel", show=False, priority=True),
    ]

    def __init__(self, target: str, key_palette: Palette, clock: Clock = time.monotonic) -> None:
        super().__init__()
        self.session = TypingSession(target, clock=clock)
        self.key_palette = key_palette

    def compose(self) -> ComposeResult:
        self.target_view = TargetView()
        yield self.target_view

    def on_mount(self) -> None:
        self._render_target()

    def on_key(self, event: events.Key) -> None:
        if self.session.finished:
            return
        if event.key == "backspace":
            self.session.backspace()
        elif event.is_printable and event.character:
            self.session.type_char(event.character)
        else:
            return
        event.stop()
        self._render_target()
        if self.session.finished:
            self.exit(self.session.result())

    def action_cancel(self) -> None:
        self.exit(None, return_code=CANCELLED_RETURN_CODE)

    def _render_target(self) -> None:
        self.target_view.update(self.session.render(self.key_palette))


def run_session(
    target: str,
    palette: Palette,
    console: Optional[Console] = None,
    clock: Clock = time.monotonic,
) -> SessionResult:
    """Run one inline session; textual restores the terminal on every exit path."""
    console = console or Console()
    app = SessionApp(target, palette, clock=clock)
    result = app.run(inline=True, inline_no_clear=True, mouse=False)
    if app.return_code == CANCELLED_RETURN_CODE:
        raise SessionCancelled()
    if app.return_code:
        raise TerminalError(f"terminal session failed with code {app.return_code}")
    if result is None:
        # ctrl+q quits without a result
        raise SessionCancelled()
    console.line()
    logger.debug("session finished: %d keys", len(result.keys))
    return result
