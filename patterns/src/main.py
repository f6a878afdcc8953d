"""Command line entry point for the pattern catalog.

Usage:
    python -m patterns.src.main list
    python -m patterns.src.main run factory
    python -m patterns.src.main run --all
"""

import argparse
import sys
from typing import List, Optional

import structlog

from patterns.src.config import get_config
from patterns.src.registry import get_demo, list_demos
from shared.logging import configure_logging

logger = structlog.get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_UNKNOWN_DEMO = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="patterns",
        description="Run design pattern and language idiom demos"
    )
    subcommands = parser.add_subparsers(dest="command", required=True)

    subcommands.add_parser("list", help="List available demos")

    run = subcommands.add_parser("run", help="Run one demo or all of them")
    target = run.add_mutually_exclusive_group(required=True)
    target.add_argument("name", nargs="?", help="Demo name as shown by 'list'")
    target.add_argument("--all", action="store_true", help="Run every demo in name order")

    return parser


def _print_transcript(lines: List[str]) -> None:
    for line in lines:
        print(line)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Args:
        argv: Arguments without the program name (defaults to sys.argv)

    Returns:
        Process exit code: 0 on success, 2 for an unknown demo, 1 when a
        demo fails
    """
    args = build_parser().parse_args(argv)
    config = get_config()

    configure_logging(
        log_level=config.log_level,
        json_logs=config.json_logs,
        service_name=config.service_name
    )

    if args.command == "list":
        for demo in list_demos():
            print(f"{demo.name:<16} {demo.summary}")
        return EXIT_OK

    if args.all:
        demos = list_demos()
    else:
        try:
            demos = [get_demo(args.name)]
        except KeyError as e:
            print(e.args[0], file=sys.stderr)
            return EXIT_UNKNOWN_DEMO

    try:
        for demo in demos:
            if args.all:
                print(f"=== {demo.name} ===")
            _print_transcript(demo.run())
    except Exception as e:
        logger.error("demo_failed", error=str(e), exc_info=True)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
