"""Nanosecond clock and elapsed-time checks."""

from __future__ import annotations

import time

_U64 = 1 << 64


def get_nanos() -> int:
    """Wall-clock time in nanoseconds."""
    return time.time_ns()


def diff_is_older(now: int, before: int, diff: int) -> bool:
    """Whether at least ``diff`` has passed from ``before`` to ``now``.

    The difference is taken as an unsigned 64-bit value, so a ``before``
    later than ``now`` counts as a very long time ago.
    """
    return (now - before) % _U64 >= diff


class Cooldown:
    """A timestamp that moves forward each time its interval has passed."""

    def __init__(self, start: int = 0) -> None:
        self.last = start

    def elapsed(self, now: int, interval: int) -> bool:
        """Report whether ``interval`` has passed; if so, restart from ``now``."""
        if diff_is_older(now, self.last, interval):
            self.last = now
            return True
        return False