from __future__ import annotations

from typing import List

from typing_drill.metrics import Keystroke, SessionResult
from typing_drill.session import TypingSession


class FakeClock:
    """Advances by a fixed step on every call."""

    def __init__(self, start: float = 100.0, step: float = 0.25) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


def make_result(n_keys: int, correct: int, elapsed: float, target: str = "") -> SessionResult:
    if n_keys == 1:
        stamps = [0.0]
    else:
        stamps = [i * elapsed / (n_keys - 1) for i in range(n_keys)]
    keys = tuple(Keystroke(t, "x") for t in stamps)
    return SessionResult(
        target=target or "x" * max(n_keys, 1),
        keys=keys,
        correct=correct,
        incorrect=n_keys - correct,
    )


def type_through(target: str, typed: List[str], clock=None) -> SessionResult:
    """Feed keys to a session; "\\b" stands for backspace."""
    session = TypingSession(target, clock=clock or FakeClock())
    for key in typed:
        if key == "\b":
            session.backspace()
        else:
            session.type_char(key)
    return session.result()


def perfect_runner(clock=None):
    """Session runner that types every target without mistakes."""
    attempts: List[str] = []

    def run(target: str) -> SessionResult:
        attempts.append(target)
        return type_through(target, list(target), clock=clock)

    run.attempts = attempts  # type: ignore[attr-defined]
    return run
