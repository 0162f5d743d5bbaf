"""winprocenum - command line entry point."""

import io
import sys

from loguru import logger
from pydantic import ValidationError

from winprocenum.config import get_settings
from winprocenum.errors import ProcEnumError
from winprocenum.logger import setup_logger
from winprocenum.models import Snapshot
from winprocenum.process_api import ProcessApi
from winprocenum.snapshot import build_snapshot


def format_record_line(index: int, pid: int, name: str) -> str:
    """Format one snapshot entry for display."""
    return f"({index:^3}) PID: {pid:<5} | Name: {name}"


def format_settings_error(error: ValidationError) -> str:
    """Collapse a settings validation error into one line."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in item['loc'])}: {item['msg']}" for item in error.errors()
    )
    return f"Invalid configuration: {problems}"


def print_snapshot(snapshot: Snapshot) -> None:
    """
    Print one line per record to stdout.

    Characters the console codec cannot represent are replaced, so a name
    decoded with U+FFFD still prints on a cp1252 or cp437 stream.
    """
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(errors="replace")
    for index, record in enumerate(snapshot):
        print(format_record_line(index, record.pid, record.name))


def main(api: ProcessApi | None = None) -> int:
    """Entry point for winprocenum. Returns the process exit status."""
    try:
        settings = get_settings()
    except ValidationError as e:
        print(format_settings_error(e), file=sys.stderr)
        return 1

    setup_logger(settings.LOG_LEVEL)

    try:
        snapshot = build_snapshot(api, settings)
    except ProcEnumError as e:
        logger.debug(f"Snapshot aborted: {e!r}")
        print(f"Error enumerating processes: {e}", file=sys.stderr)
        return 1

    print_snapshot(snapshot)
    return 0


if __name__ == "__main__":
    sys.exit(main())
