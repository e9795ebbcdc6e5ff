#!/usr/bin/env python3
"""Console entry point for the git simulator."""

import argparse
import logging
import sys
import traceback
from pathlib import Path

import logbook

from gitsim.core import CommandEngine, CommandResult, ResultKind
from gitsim.models.config import SimulatorConfig

logger = logging.getLogger(__name__)

PROMPT = "$ "


def setup_logging(verbosity: int) -> None:
    """Route log records to stderr at a level chosen by -v flags."""
    if verbosity <= 0:
        level = logbook.WARNING
    elif verbosity == 1:
        level = logbook.INFO
    else:
        level = logbook.DEBUG

    logging.basicConfig(
        level=logging.DEBUG if verbosity >= 2 else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logbook.NullHandler().push_application()
    logbook.StderrHandler(
        level=level,
        format_string="{record.level_name} {record.channel}: {record.message}",
    ).push_application()


def setup_exception_hook() -> None:
    """Log uncaught exceptions before the interpreter reports them."""
    original_hook = sys.excepthook

    def exception_hook(exc_type, exc_value, exc_tb):
        tb_str = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
        logger.error(f"Uncaught exception:\n{tb_str}")
        original_hook(exc_type, exc_value, exc_tb)

    sys.excepthook = exception_hook


def ask(question: str, default: str) -> str | None:
    """Prompt on the terminal for a value the command needs."""
    try:
        return input(f"{question} [{default}] ").strip() or None
    except EOFError:
        return None


def print_result(result: CommandResult) -> None:
    if not result.text:
        return
    stream = sys.stderr if result.kind is ResultKind.ERROR else sys.stdout
    print(result.text, file=stream)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="gitsim",
        description="Interactive git simulator for learning git commands",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a simulator config file (defaults to ~/.config/gitsim/config.json)",
    )
    parser.add_argument(
        "-c",
        "--command",
        dest="commands",
        action="append",
        default=[],
        help="Run a command line and exit (can be given multiple times)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (can be specified multiple times)",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.verbose)
    setup_exception_hook()

    config = SimulatorConfig.load(args.config)
    engine = CommandEngine(config=config, prompt=ask)

    if args.commands:
        failed = False
        for line in args.commands:
            result = engine.run(line)
            print_result(result)
            failed = failed or result.is_error
        return 1 if failed else 0

    while True:
        try:
            line = input(f"({engine.repository.current_branch_name}) {PROMPT}")
        except (EOFError, KeyboardInterrupt):
            print()
            return 0
        if line.strip() in ("exit", "quit"):
            return 0
        print_result(engine.run(line))


if __name__ == "__main__":
    sys.exit(main())
