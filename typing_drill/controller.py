from __future__ import annotations

import enum
import itertools
import logging
import random
from typing import Callable, Iterable, Iterator, Optional, Sequence

from rich.console import Console

from typing_drill.config import Configuration, PermutationStrategy, RandomStrategy
from typing_drill.errors import SessionCancelled
from typing_drill.generators import check_strategy, permutation_tests, random_test
from typing_drill.metrics import SessionResult, format_report

logger = logging.getLogger(__name__)

SessionRunner = Callable[[str], SessionResult]
Reporter = Callable[[SessionResult], None]


class Verdict(enum.Enum):
    PASSED = "passed"
    RETRY = "retry"


class SessionState(enum.Enum):
    RUNNING = "running"
    PASSED = "passed"
    CANCELLED = "cancelled"


def evaluate(result: SessionResult, config: Configuration) -> Verdict:
    """Unset thresholds always pass; accuracy is compared as a percentage."""
    if config.min_wpm is not None and result.wpm < config.min_wpm:
        return Verdict.RETRY
    if config.min_accuracy is not None and result.accuracy_percent < config.min_accuracy:
        return Verdict.RETRY
    return Verdict.PASSED


def console_reporter(console: Console) -> Reporter:
    def report(result: SessionResult) -> None:
        for line in format_report(result):
            console.print(line, highlight=False)
        console.line()

    return report


# ---------------------------
# Retry loop
# ---------------------------

class ThresholdGate:
    """Re-runs one target string until the thresholds are cleared."""

    def __init__(self, config: Configuration, run_session: SessionRunner, report: Reporter) -> None:
        self.config = config
        self.run_session = run_session
        self.report = report
        self.state: Optional[SessionState] = None
        self.attempts = 0

    def run(self, target: str) -> SessionResult:
        self.state = SessionState.RUNNING
        self.attempts = 0
        while True:
            self.attempts += 1
            try:
                result = self.run_session(target)
            except SessionCancelled:
                self.state = SessionState.CANCELLED
                logger.info("attempt %d cancelled", self.attempts)
                raise
            self.report(result)
            verdict = evaluate(result, self.config)
            logger.info(
                "attempt %d: wpm=%.2f accuracy=%.2f%% -> %s",
                self.attempts, result.wpm, result.accuracy_percent, verdict.value,
            )
            if verdict is Verdict.PASSED:
                self.state = SessionState.PASSED
                return result


# ---------------------------
# Outer driver
# ---------------------------

class Drill:
    def __init__(
        self,
        config: Configuration,
        words: Sequence[str],
        run_session: SessionRunner,
        rng: Optional[random.Random] = None,
        console: Optional[Console] = None,
        report: Optional[Reporter] = None,
    ) -> None:
        check_strategy(config.strategy, words)
        self.config = config
        self.words = list(words)
        self.rng = rng or random.Random()
        self.console = console or Console()
        self.gate = ThresholdGate(config, run_session, report or console_reporter(self.console))

    def run(self) -> int:
        """Runs every session; returns how many targets were cleared."""
        strategy = self.config.strategy
        if isinstance(strategy, RandomStrategy):
            return self._run_random(strategy)
        if isinstance(strategy, PermutationStrategy):
            return self._run_permutation(strategy)
        raise TypeError(f"unsupported strategy {strategy!r}")

    def _rounds(self) -> Iterable[int]:
        if self.config.rounds == 0:
            return itertools.count(1)
        return range(1, self.config.rounds + 1)

    def _random_targets(self, strategy: RandomStrategy) -> Iterator[str]:
        for _ in self._rounds():
            yield random_test(self.rng, self.words, strategy.word_count)

    def _run_random(self, strategy: RandomStrategy) -> int:
        cleared = 0
        for target in self._random_targets(strategy):
            self.gate.run(target)
            cleared += 1
        return cleared

    def _run_permutation(self, strategy: PermutationStrategy) -> int:
        tests = permutation_tests(
            self.rng, self.words, strategy.combination_size, strategy.repetition_count
        )
        logger.info("%d permutation tests", len(tests))
        for i, target in enumerate(tests, start=1):
            self.console.print(f"{i} / {len(tests)}", highlight=False)
            self.gate.run(target)
        return len(tests)
