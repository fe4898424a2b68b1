from __future__ import annotations

import random
from typing import List, Sequence

from typing_drill.config import PermutationStrategy, RandomStrategy, Strategy
from typing_drill.errors import ConfigurationError


def check_word_count(n: int, words: Sequence[str]) -> None:
    if not 1 <= n <= len(words):
        raise ConfigurationError(
            f"cannot pick {n} words from a set of {len(words)}"
        )


def random_test(rng: random.Random, words: Sequence[str], n: int) -> str:
    check_word_count(n, words)
    return " ".join(rng.sample(list(words), n))


def permutation_tests(
    rng: random.Random,
    words: Sequence[str],
    combination: int,
    repetition: int,
) -> List[str]:
    """
    Shuffle the whole set once, cut it into chunks of `combination` words
    and repeat each chunk's phrase `repetition` times.
    """
    if combination < 1 or repetition < 1:
        raise ConfigurationError("combination and repetition must be positive")
    shuffled = list(words)
    rng.shuffle(shuffled)

    tests: List[str] = []
    for start in range(0, len(shuffled), combination):
        phrase = " ".join(shuffled[start:start + combination])
        tests.append(" ".join([phrase] * repetition))
    return tests


def check_strategy(strategy: Strategy, words: Sequence[str]) -> None:
    if isinstance(strategy, RandomStrategy):
        check_word_count(strategy.word_count, words)
    elif not isinstance(strategy, PermutationStrategy):
        raise ConfigurationError(f"unknown strategy {strategy!r}")
