"""Command-line entrypoint for the ``check``, ``in`` and ``out`` resource scripts."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from .bootstrap import ServiceContainer, create_container
from .exceptions import ArtifactoryResourceError, InvalidRequestError
from .modules.command import CheckRequest, InRequest, OutRequest

log = logging.getLogger(__name__)

COMMANDS = ("check", "in", "out")


def run_command(container: ServiceContainer, args: Sequence[str], stdin: TextIO, stdout: TextIO) -> None:
    """Read the request for ``args[0]`` from ``stdin`` and write the JSON response to ``stdout``."""
    if not args:
        raise InvalidRequestError("No command argument specified")
    command = args[0]
    if command not in COMMANDS:
        raise InvalidRequestError(f"Unknown command '{command}'")
    payload = container.read_payload(stdin)
    if command == "check":
        response = container.check_handler.handle(CheckRequest.from_payload(payload))
    elif command == "in":
        response = container.in_handler.handle(InRequest.from_payload(payload), _directory(args))
    else:
        response = container.out_handler.handle(OutRequest.from_payload(payload), _directory(args))
    json.dump(response.as_dict(), stdout)
    stdout.write("\n")
    stdout.flush()


def _directory(args: Sequence[str]) -> Path:
    if len(args) < 2:
        raise InvalidRequestError(f"No directory argument specified for '{args[0]}'")
    directory = Path(args[1])
    if not directory.is_dir():
        raise InvalidRequestError(f"'{directory}' is not a directory")
    return directory


def main(argv: Optional[Sequence[str]] = None, container: Optional[ServiceContainer] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    container = container or create_container()
    try:
        run_command(container, args, sys.stdin, sys.stdout)
    except ArtifactoryResourceError as exc:
        log.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
