from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Union

from rich.errors import StyleSyntaxError
from rich.style import Style

from typing_drill.errors import ConfigurationError

logger = logging.getLogger(__name__)


# ---------------------------
# Config file location
# ---------------------------

def default_config_path() -> Path:
    """
    User config lives next to other XDG config:
    - $XDG_CONFIG_HOME/typing-drill/config.json
    - ~/.config/typing-drill/config.json otherwise
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "typing-drill" / "config.json"
    return Path.home() / ".config" / "typing-drill" / "config.json"


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    path = path or default_config_path()
    if not path.exists():
        logger.debug("no config file at %s", path)
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigurationError(f"cannot read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a JSON object")
    logger.info("loaded config from %s", path)
    return data


# ---------------------------
# Key styles
# ---------------------------

DEFAULT_STYLES: Dict[str, str] = {
    "pending": "magenta",
    "correct": "default",
    "incorrect": "red underline",
}


@dataclass(frozen=True)
class Palette:
    pending: str = DEFAULT_STYLES["pending"]
    correct: str = DEFAULT_STYLES["correct"]
    incorrect: str = DEFAULT_STYLES["incorrect"]

    def __post_init__(self) -> None:
        for name in DEFAULT_STYLES:
            value = getattr(self, name)
            try:
                Style.parse(value)
            except StyleSyntaxError as exc:
                raise ConfigurationError(f"invalid {name} style {value!r}: {exc}") from exc

    @classmethod
    def from_config(cls, config: Dict[str, object]) -> "Palette":
        styles = config.get("styles", {})
        if not isinstance(styles, dict):
            raise ConfigurationError("'styles' must be an object")
        unknown = set(styles) - set(DEFAULT_STYLES)
        if unknown:
            raise ConfigurationError(f"unknown style names: {', '.join(sorted(unknown))}")
        return cls(**{name: str(value) for name, value in styles.items()})


# ---------------------------
# Generation strategies
# ---------------------------

@dataclass(frozen=True)
class RandomStrategy:
    word_count: int

    def __post_init__(self) -> None:
        if self.word_count < 1:
            raise ConfigurationError("word count must be positive")


@dataclass(frozen=True)
class PermutationStrategy:
    combination_size: int
    repetition_count: int

    def __post_init__(self) -> None:
        if self.combination_size < 1:
            raise ConfigurationError("combination size must be positive")
        if self.repetition_count < 1:
            raise ConfigurationError("repetition count must be positive")


Strategy = Union[RandomStrategy, PermutationStrategy]


# ---------------------------
# Resolved configuration
# ---------------------------

@dataclass(frozen=True)
class Configuration:
    strategy: Strategy
    min_wpm: Optional[float] = None
    min_accuracy: Optional[float] = None
    rounds: int = 1
    palette: Palette = field(default_factory=Palette)

    def __post_init__(self) -> None:
        if self.min_wpm is not None and not (math.isfinite(self.min_wpm) and self.min_wpm > 0):
            raise ConfigurationError("minimum wpm must be a positive number")
        if self.min_accuracy is not None and not 0 <= self.min_accuracy <= 100:
            raise ConfigurationError("minimum accuracy must be between 0 and 100")
        if self.rounds < 0:
            raise ConfigurationError("rounds cannot be negative")

    @property
    def has_thresholds(self) -> bool:
        return self.min_wpm is not None or self.min_accuracy is not None


def _optional_float(config: Dict[str, object], key: str) -> Optional[float]:
    value = config.get(key)
    if value is None:
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' must be a number, got {value!r}") from exc


def resolve_configuration(
    strategy: Strategy,
    file_config: Dict[str, object],
    min_wpm: Optional[float] = None,
    min_accuracy: Optional[float] = None,
    rounds: int = 1,
) -> Configuration:
    """Merge command line values over the config file ones."""
    if min_wpm is None:
        min_wpm = _optional_float(file_config, "min_wpm")
    if min_accuracy is None:
        min_accuracy = _optional_float(file_config, "min_accuracy")
    return Configuration(
        strategy=strategy,
        min_wpm=min_wpm,
        min_accuracy=min_accuracy,
        rounds=rounds,
        palette=Palette.from_config(file_config),
    )
