from __future__ import annotations

import argparse
import functools
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from typing_drill import __version__
from typing_drill.config import (
    PermutationStrategy,
    RandomStrategy,
    Strategy,
    load_config,
    resolve_configuration,
)
from typing_drill.controller import Drill, SessionRunner
from typing_drill.errors import TypingDrillError
from typing_drill.session import run_session
from typing_drill.words import read_words, reattach_tty

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typing-drill",
        description="Typing drills built from a word list read from standard input.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-w", "--min-wpm", type=float, help="repeat a test until this wpm is reached")
    parser.add_argument(
        "-a", "--min-accuracy", type=float, help="repeat a test until this accuracy (percent) is reached"
    )
    parser.add_argument("-f", "--file", type=Path, help="read words from FILE instead of standard input")
    parser.add_argument("--config", type=Path, help="config file (default: XDG config dir)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log more (repeatable)")

    # --seed goes after the mode: `random 3 --seed 1`
    seeded = argparse.ArgumentParser(add_help=False)
    seeded.add_argument("--seed", type=int, help="seed for word selection")

    sub = parser.add_subparsers(dest="generate", required=True)

    rnd = sub.add_parser("random", parents=[seeded], help="random words from the set")
    rnd.add_argument("words", type=int, help="number of words per test")
    rnd.add_argument(
        "--rounds", type=int, default=1, help="number of tests to run, 0 repeats until cancelled"
    )

    perm = sub.add_parser("permutation", parents=[seeded], help="every word of the set, in shuffled chunks")
    perm.add_argument("-c", "--combination", type=int, required=True, help="words per chunk")
    perm.add_argument("-r", "--repetition", type=int, required=True, help="times each chunk is repeated")
    return parser


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def strategy_from_args(args: argparse.Namespace) -> Strategy:
    if args.generate == "random":
        return RandomStrategy(word_count=args.words)
    return PermutationStrategy(combination_size=args.combination, repetition_count=args.repetition)


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    session_runner: Optional[SessionRunner] = None,
    console: Optional[Console] = None,
) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    stdin = stdin or sys.stdin
    console = console or Console()
    err_console = Console(stderr=True)

    try:
        config = resolve_configuration(
            strategy_from_args(args),
            load_config(args.config),
            min_wpm=args.min_wpm,
            min_accuracy=args.min_accuracy,
            rounds=getattr(args, "rounds", 1),
        )
        if args.file is not None:
            with args.file.open(encoding="utf-8") as fh:
                words = read_words(fh)
        else:
            words = read_words(stdin)
        logger.info("%s over %d words", type(config.strategy).__name__, len(words))
        runner = session_runner or functools.partial(run_session, palette=config.palette, console=console)
        drill = Drill(config, words, runner, rng=random.Random(args.seed), console=console)
        if session_runner is None and args.file is None:
            reattach_tty(stdin)
        drill.run()
    except TypingDrillError as exc:
        err_console.print(f"[bold red]error:[/] {escape(str(exc))}", highlight=False)
        return exc.exit_code
    except OSError as exc:
        err_console.print(f"[bold red]error:[/] {escape(str(exc))}", highlight=False)
        return 1
    return 0
