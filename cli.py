"""
Routewise CLI

Usage:
    routewise "who is the president?"      # one-shot: one turn, then exit
    routewise                              # interactive: one message per line
    routewise --search none "hello"        # disable the search branch
    routewise -v                           # debug logging

Exit codes:
    0  graceful completion
    1  a turn failed in the response stage
    2  configuration error (e.g. GOOGLE_API_KEY missing)
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional, TextIO

from ai import ConfigurationError
from config import SEARCH_MODES, load_settings, setup_logging
from services import ChatService

logger = logging.getLogger("routewise")

EXIT_OK = 0
EXIT_TURN_FAILED = 1
EXIT_CONFIG_ERROR = 2

QUIT_COMMANDS = {"exit", "quit", ":q"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routewise",
        description="Chat assistant that classifies each message and searches when needed.",
    )
    parser.add_argument("message", nargs="?", help="Run a single turn with this message and exit")
    parser.add_argument("--search", choices=SEARCH_MODES, help="Override SEARCH_MODE")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run_interactive(service: ChatService, stdin: TextIO, stdout: TextIO) -> int:
    """Read messages line by line until EOF or a quit command."""
    session_id = "cli"
    failed = False

    stdout.write("Routewise ready. Type 'exit' to quit.\n")
    for line in stdin:
        message = line.strip()
        if not message:
            continue
        if message.lower() in QUIT_COMMANDS:
            break

        response = service.process_message(message, session_id=session_id)
        if response.success:
            stdout.write(f"{response.message}\n")
        else:
            failed = True
            print(f"❌ {response.message}", file=sys.stderr)
        stdout.flush()

    return EXIT_TURN_FAILED if failed else EXIT_OK


def run_once(service: ChatService, message: str, stdout: TextIO) -> int:
    """Run a single turn."""
    response = service.process_message(message)
    if not response.success:
        print(f"❌ {response.message}", file=sys.stderr)
        return EXIT_TURN_FAILED

    stdout.write(f"{response.message}\n")
    return EXIT_OK


def main(
    argv: Optional[List[str]] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    args = build_parser().parse_args(argv)
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.search:
        settings = dataclasses.replace(settings, search_mode=args.search)

    setup_logging("DEBUG" if args.verbose else settings.log_level)

    service = ChatService(settings)
    try:
        if args.message:
            return run_once(service, args.message, stdout)
        return run_interactive(service, stdin, stdout)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return EXIT_OK
    finally:
        service.close()


if __name__ == "__main__":
    sys.exit(main())
