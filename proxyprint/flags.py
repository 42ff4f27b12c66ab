"""Bit flags used to configure a log sink."""

from __future__ import annotations

from enum import IntFlag


def bit(index: int) -> int:
    """Return the flag value for ``index``: ``1 << (index + 1)``."""
    if index < -1:
        raise ValueError(f"bit index must be at least -1, got {index}")
    return 1 << (index + 1)


class LogFlags(IntFlag):
    """Destinations and detail options of a log."""

    Console = bit(1)
    File = bit(2)
    FatalQuit = bit(3)
    DetailTime = bit(4)
    DetailFile = bit(5)
    DetailLine = bit(6)
    DetailColumn = DetailLine | bit(7)
    DetailFunction = bit(8)
    DetailThread = bit(9)
    DetailErrorStacktrace = bit(10)
    DetailFatalStacktrace = bit(11)

    DetailStacktrace = DetailErrorStacktrace | DetailFatalStacktrace
    DetailAll = DetailTime | DetailFile | DetailLine | DetailColumn | DetailFunction | DetailThread
    DetailAllStacktrace = DetailAll | DetailStacktrace


def is_set(flags: int, mask: int) -> bool:
    """True when every bit of ``mask`` is set in ``flags``."""
    return (flags & mask) == mask


def is_any_set(flags: int, mask: int) -> bool:
    """True when at least one bit of ``mask`` is set in ``flags``."""
    return (flags & mask) != 0