from __future__ import annotations

import logging
import os
import sys
from typing import List, TextIO

from typing_drill.errors import TerminalError, WordSetError

logger = logging.getLogger(__name__)

MIN_WORDS = 2


def split_words(text: str) -> List[str]:
    """One word per line; blank lines are dropped, order is kept."""
    return [line for line in text.splitlines() if line]


def read_words(stream: TextIO) -> List[str]:
    try:
        text = stream.read()
    except UnicodeDecodeError as exc:
        raise WordSetError(f"Input stream is not valid UTF-8: {exc.reason}") from exc
    words = split_words(text)
    if len(words) < MIN_WORDS:
        raise WordSetError("Input stream doesn't contain words")
    logger.info("read %d words", len(words))
    return words


def reattach_tty(stream: TextIO = sys.stdin) -> None:
    """
    After slurping a piped word list, point fd 0 back at the controlling
    terminal so the key reader sees the keyboard instead of the pipe.
    """
    if stream.isatty():
        return
    try:
        fd = os.open("/dev/tty", os.O_RDONLY)
    except OSError as exc:
        raise TerminalError(f"no controlling terminal: {exc}") from exc
    try:
        os.dup2(fd, stream.fileno())
    finally:
        os.close(fd)
    logger.debug("standard input re-attached to /dev/tty")
