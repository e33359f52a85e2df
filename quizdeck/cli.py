#!/usr/bin/env python3
"""
Command line entry point: ``quizdeck BANK``.
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import Bank, BankIOError
from .bank_parser import FormatError
from .config import DEFAULT_CONFIG, load_config
from .quiz import QuizSession, QuizStats
from .terminal import TerminalDisplay, TerminalGuard, terminal_events

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quizdeck",
        description="Shuffle through a plain-text question bank in the terminal.",
    )
    parser.add_argument("bank", help="Path to the question bank file")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for reproducible shuffling")
    parser.add_argument("--no-option-shuffle", action="store_true",
                        help="Keep multiple-choice options in file order")
    parser.add_argument("--require-reason", action="store_true",
                        help="Require reason text for multiple-choice answers too")
    parser.add_argument("--config", default=None, help="JSON config file")
    parser.add_argument("--check", action="store_true",
                        help="Validate the bank, print an overview and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None,
                        help="Write logs to this file instead of stderr")
    return parser


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    level = logging.DEBUG if verbose else logging.WARNING
    handler_kwargs = {'filename': log_file} if log_file else {'stream': sys.stderr}
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        **handler_kwargs,
    )


def show_check(bank: Bank):
    print(f"📚 {bank.source}: {len(bank)} questions")
    print(bank.to_frame().to_string())
    counts = bank.summary()
    print(f"\nMultiple-choice: {counts['multiple_choice']} | Free-text: {counts['free_text']}")


def show_final_stats(stats: QuizStats):
    print("\n📊 === Session Complete ===")
    print(f"Questions seen: {stats.seen} (rounds started: {stats.rounds})")
    print(f"Answers revealed: {stats.revealed}")
    if stats.answered:
        print(f"✅ Correct: {stats.correct}")
        print(f"❌ Wrong: {stats.wrong}")
        print(f"📈 Accuracy: {stats.accuracy:.1%}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        config = load_config(args.config) if args.config else DEFAULT_CONFIG
        config = config.with_overrides(
            seed=args.seed,
            shuffle_options=False if args.no_option_shuffle else None,
            require_reason=True if args.require_reason else None,
        )
    except (OSError, ValueError) as e:
        print(f"Error: bad config: {e}", file=sys.stderr)
        return 1

    try:
        bank = Bank.load_from_file(args.bank, config)
    except BankIOError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except FormatError as e:
        print(f"Error: wrong format in {args.bank}: {e}", file=sys.stderr)
        return 1

    logger.info("loaded %s", bank)
    if args.check:
        show_check(bank)
        return 0

    session = QuizSession(bank, TerminalDisplay(), terminal_events(config=config), config=config)
    try:
        with TerminalGuard():
            stats = session.run()
    except KeyboardInterrupt:
        stats = session.stats
    show_final_stats(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
