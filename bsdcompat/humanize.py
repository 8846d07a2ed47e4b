"""Format a number of bytes in a short, human-readable form."""

from __future__ import annotations

import enum
import locale
from typing import Union

_MAXSCALE = 7


class HumanizeFlag(enum.IntFlag):
    """Formatting flags (DECIMAL to DIVISOR_1000) and scale flags."""

    DECIMAL = 0x01
    NOSPACE = 0x02
    B = 0x04
    DIVISOR_1000 = 0x08
    GETSCALE = 0x10
    AUTOSCALE = 0x20


_SCALE_FLAGS = HumanizeFlag.AUTOSCALE | HumanizeFlag.GETSCALE


def _prefixes(flags: int) -> list:
    kilo = "k" if flags & HumanizeFlag.DIVISOR_1000 else "K"
    first = "B" if flags & HumanizeFlag.B else ""
    return [first, kilo, "M", "G", "T", "P", "E"]


def humanize_number(number: int, suffix: str, scale: int, flags: int,
                    length: int) -> Union[str, int]:
    """Render ``number`` to fit in a buffer of ``length`` bytes.

    ``scale`` is a power of the divisor to apply, or AUTOSCALE to pick the
    largest one that fits, or GETSCALE to return that power as an int
    instead of text.  The text is cut to ``length - 1`` characters, as a
    terminated buffer of that size would hold it.  Raises ValueError when
    the request cannot be satisfied.
    """
    if scale < 0:
        raise ValueError(f"negative scale: {scale}")
    if scale >= _MAXSCALE and (scale & _SCALE_FLAGS) == 0:
        raise ValueError(f"scale out of range: {scale}")

    divisor = 1000 if flags & HumanizeFlag.DIVISOR_1000 else 1024
    prefixes = _prefixes(flags)

    if number < 0:
        sign = -1
        value = number * -100
        baselen = 3  # sign, digit, prefix
    else:
        sign = 1
        value = number * 100
        baselen = 2  # digit, prefix

    if flags & HumanizeFlag.NOSPACE:
        sep = ""
    else:
        sep = " "
        baselen += 1
    baselen += len(suffix)

    if length < baselen + 1:
        raise ValueError(f"length {length} too small, need at least {baselen + 1}")

    if scale & _SCALE_FLAGS:
        # Use any additional columns that are available.
        limit = 100 * 10 ** (length - baselen)
        # Divide until it fits, once more if rounding would overflow.
        power = 0
        while value >= limit - 50 and power < _MAXSCALE:
            value //= divisor
            power += 1
        if scale & HumanizeFlag.GETSCALE:
            return power
    else:
        power = min(scale, _MAXSCALE)
        value //= divisor ** power

    if power >= len(prefixes):
        raise ValueError(f"number too large to scale: {number}")
    prefix = prefixes[power]

    if value < 995 and power > 0 and flags & HumanizeFlag.DECIMAL:
        if length < baselen + 1 + 2:
            raise ValueError(f"length {length} too small for a decimal digit")
        rounded = (value + 5) // 10
        whole, tenth = divmod(rounded, 10)
        point = locale.localeconv()["decimal_point"]
        text = f"{sign * whole}{point}{tenth}{sep}{prefix}{suffix}"
    else:
        text = f"{sign * ((value + 50) // 100)}{sep}{prefix}{suffix}"

    return text[:length - 1]