from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple


# ---------------------------
# Session records
# ---------------------------

@dataclass(frozen=True)
class Keystroke:
    timestamp: float
    character: str


@dataclass(frozen=True)
class SessionResult:
    target: str
    keys: Tuple[Keystroke, ...]
    correct: int
    incorrect: int

    # ---------------------------
    # Typing math
    # ---------------------------

    @property
    def elapsed(self) -> float:
        """Seconds between the first and the last keystroke."""
        if not self.keys:
            return 0.0
        return self.keys[-1].timestamp - self.keys[0].timestamp

    @property
    def cpm(self) -> float:
        return compute_cpm(len(self.keys), self.elapsed)

    @property
    def wpm(self) -> float:
        return self.cpm / 5.0

    @property
    def accuracy(self) -> float:
        if not self.keys:
            return 0.0
        return self.correct / len(self.keys)

    @property
    def accuracy_percent(self) -> float:
        if not self.keys:
            return 0.0
        return self.correct * 100.0 / len(self.keys)


def compute_cpm(chars: int, elapsed_sec: float) -> float:
    if elapsed_sec <= 0:
        return 0.0
    return chars * 60.0 / elapsed_sec


def format_report(result: SessionResult) -> List[str]:
    return [
        f"wpm: {result.wpm:.2f}",
        f"accuracy: {result.accuracy_percent:.2f}%",
    ]
