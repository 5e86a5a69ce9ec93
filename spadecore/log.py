"""Coloured console logging with a day/month timestamp."""

from __future__ import annotations

import sys
from datetime import datetime

_MESSAGE_LIMIT = 1023
_TIME_COLOR = "\x1B[38;2;210;10;200m"
_RESET = "\x1B[0;37m"
_END = _RESET + "\n"


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` as ``dd/mm HH:MM:SS``."""
    return moment.strftime("%d/%m %H:%M:%S")


def log_print_with_time(message: str) -> None:
    """Print ``message`` after a coloured local timestamp, cut to 1023 chars."""
    stamp = format_timestamp(datetime.now())
    sys.stdout.write(f"{_TIME_COLOR}{stamp}{_RESET} {message[:_MESSAGE_LIMIT]}")
    sys.stdout.flush()


def log_debug(message: str) -> None:
    log_print_with_time("\x1B[0;35mDEBUG: " + message + _END)


def log_info(message: str) -> None:
    log_print_with_time("\x1B[0;36mINFO: " + message + _END)


def log_status(message: str) -> None:
    log_print_with_time("\x1B[0;32mSTATUS: " + message + _END)


def log_warning(message: str) -> None:
    log_print_with_time("\x1B[0;33mWARNING: " + message + _END)


def log_error(message: str) -> None:
    """Write an error line to standard error, without a timestamp."""
    sys.stderr.write("\x1B[0;31mERROR: " + message + _END)
    sys.stderr.flush()