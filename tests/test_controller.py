"""Tests for threshold gating and the outer drill driver."""

import io
import random

import pytest
from rich.console import Console

from typing_drill.config import Configuration, PermutationStrategy, RandomStrategy
from typing_drill.controller import (
    Drill,
    SessionState,
    ThresholdGate,
    Verdict,
    console_reporter,
    evaluate,
)
from typing_drill.errors import ConfigurationError, SessionCancelled

from tests.helpers import make_result, perfect_runner

SLOW = make_result(10, 8, 4.0)  # wpm 30, accuracy 80 %
RANDOM_2 = RandomStrategy(word_count=2)


def scripted_runner(results):
    """Hands out prepared results (or raises prepared errors) in order."""
    queue = list(results)
    seen = []

    def run(target):
        seen.append(target)
        item = queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    run.seen = seen
    return run


def quiet_console():
    return Console(file=io.StringIO(), width=80)


class TestEvaluate:
    def test_no_thresholds_pass(self):
        assert evaluate(SLOW, Configuration(RANDOM_2)) is Verdict.PASSED

    def test_wpm_below_minimum_retries(self):
        assert evaluate(SLOW, Configuration(RANDOM_2, min_wpm=40)) is Verdict.RETRY

    def test_accuracy_above_minimum_passes(self):
        config = Configuration(RANDOM_2, min_wpm=None, min_accuracy=70)
        assert evaluate(SLOW, config) is Verdict.PASSED

    def test_accuracy_below_minimum_retries(self):
        assert evaluate(SLOW, Configuration(RANDOM_2, min_accuracy=90)) is Verdict.RETRY

    def test_both_must_hold(self):
        config = Configuration(RANDOM_2, min_wpm=20, min_accuracy=85)
        assert evaluate(SLOW, config) is Verdict.RETRY
        config = Configuration(RANDOM_2, min_wpm=20, min_accuracy=80)
        assert evaluate(SLOW, config) is Verdict.PASSED

    def test_equal_to_minimum_passes(self):
        assert evaluate(SLOW, Configuration(RANDOM_2, min_wpm=30)) is Verdict.PASSED

    def test_accuracy_equal_to_minimum_passes(self):
        result = make_result(100, 29, 10.0)
        assert evaluate(result, Configuration(RANDOM_2, min_accuracy=29)) is Verdict.PASSED


class TestThresholdGate:
    def test_single_run_without_thresholds(self):
        reported = []
        runner = scripted_runner([SLOW])
        gate = ThresholdGate(Configuration(RANDOM_2), runner, reported.append)
        assert gate.run("cat dog") is SLOW
        assert runner.seen == ["cat dog"]
        assert reported == [SLOW]
        assert gate.state is SessionState.PASSED

    def test_retries_same_text_until_pass(self):
        fast = make_result(10, 10, 1.0)
        reported = []
        runner = scripted_runner([SLOW, SLOW, fast])
        gate = ThresholdGate(Configuration(RANDOM_2, min_wpm=40), runner, reported.append)
        assert gate.run("cat dog") is fast
        assert runner.seen == ["cat dog"] * 3
        assert reported == [SLOW, SLOW, fast]
        assert gate.attempts == 3

    def test_cancel_propagates_without_report(self):
        reported = []
        runner = scripted_runner([SLOW, SessionCancelled()])
        gate = ThresholdGate(Configuration(RANDOM_2, min_wpm=40), runner, reported.append)
        with pytest.raises(SessionCancelled):
            gate.run("cat dog")
        assert reported == [SLOW]
        assert gate.state is SessionState.CANCELLED

    def test_console_report(self):
        console = quiet_console()
        console_reporter(console)(SLOW)
        assert console.file.getvalue() == "wpm: 30.00\naccuracy: 80.00%\n\n"


class TestDrill:
    WORDS = ["cat", "dog", "fish", "bird"]

    def test_random_one_round(self):
        console = quiet_console()
        runner = perfect_runner()
        drill = Drill(Configuration(RANDOM_2), self.WORDS, runner, rng=random.Random(1), console=console)
        assert drill.run() == 1
        assert len(runner.attempts) == 1
        picked = runner.attempts[0].split(" ")
        assert len(picked) == 2 and set(picked) <= set(self.WORDS)
        assert "accuracy: 100.00%" in console.file.getvalue()

    def test_random_rounds_use_fresh_targets(self):
        words = ["cat", "dog", "fish", "bird", "frog", "mole", "newt", "hare", "lynx", "wren"]
        seeded = random.Random(7)
        expected = [" ".join(seeded.sample(words, 3)) for _ in range(3)]
        runner = perfect_runner()
        config = Configuration(RandomStrategy(word_count=3), rounds=3)
        drill = Drill(config, words, runner, rng=random.Random(7), console=quiet_console())
        assert drill.run() == 3
        assert runner.attempts == expected
        assert len(set(runner.attempts)) > 1

    def test_endless_rounds_stop_on_cancel(self):
        runner = scripted_runner([SLOW, SLOW, SessionCancelled()])
        config = Configuration(RANDOM_2, rounds=0)
        drill = Drill(config, self.WORDS, runner, rng=random.Random(7), console=quiet_console())
        with pytest.raises(SessionCancelled):
            drill.run()
        assert len(runner.seen) == 3

    def test_permutation_progress_lines(self):
        console = quiet_console()
        runner = perfect_runner()
        words = ["a", "b", "c", "d", "e"]
        config = Configuration(PermutationStrategy(combination_size=2, repetition_count=1))
        drill = Drill(config, words, runner, rng=random.Random(3), console=console)
        assert drill.run() == 3
        assert len(runner.attempts) == 3
        lines = console.file.getvalue().splitlines()
        assert [line for line in lines if " / " in line] == ["1 / 3", "2 / 3", "3 / 3"]

    def test_permutation_cancel_stops_remaining(self):
        runner = scripted_runner([SLOW, SessionCancelled(), SLOW])
        config = Configuration(PermutationStrategy(combination_size=1, repetition_count=2))
        drill = Drill(config, self.WORDS, runner, rng=random.Random(3), console=quiet_console())
        with pytest.raises(SessionCancelled):
            drill.run()
        assert len(runner.seen) == 2

    def test_too_many_random_words_fail_fast(self):
        runner = scripted_runner([])
        with pytest.raises(ConfigurationError):
            Drill(Configuration(RandomStrategy(word_count=5)), self.WORDS, runner)
        assert runner.seen == []
