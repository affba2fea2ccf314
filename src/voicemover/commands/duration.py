"""Delay parsing and formatting for scheduled moves."""

from __future__ import annotations

from typing import Optional
import re


_BARE_SECONDS = re.compile(r"[0-9]+")
_COMPONENT = re.compile(r"([0-9]+)\s*([hms])")
_WHITESPACE = re.compile(r"\s*")
_UNIT_ORDER = "hms"
_UNIT_SECONDS = {"h": 3600, "m": 60, "s": 1}


def parse_delay_ms(value: Optional[str]) -> Optional[int]:
    """Parse a delay such as ``90``, ``30s``, ``5m`` or ``1h 2m 3s``.

    Returns the delay in milliseconds, or ``None`` when nothing usable was
    found. A delay that adds up to zero is treated as unparseable.

    Components are read left to right in ``h``, ``m``, ``s`` order, each one
    optional. Scanning stops at the first text that does not continue the
    sequence, so ``"5m later"`` reads as five minutes and ``"abc"`` reads as
    nothing at all.
    """

    if value is None:
        return None

    text = str(value).strip().lower()
    if not text:
        return None

    if _BARE_SECONDS.fullmatch(text):
        return _positive_ms(int(text))

    total_seconds = 0
    position = 0
    next_unit = 0
    while next_unit < len(_UNIT_ORDER):
        match = _COMPONENT.match(text, position)
        if match is None:
            break

        unit = match.group(2)
        unit_index = _UNIT_ORDER.index(unit)
        if unit_index < next_unit:
            # Units must appear in h, m, s order.
            break

        total_seconds += int(match.group(1)) * _UNIT_SECONDS[unit]
        next_unit = unit_index + 1
        position = _WHITESPACE.match(text, match.end()).end()

    return _positive_ms(total_seconds)


def format_ms(ms: int) -> str:
    """Render milliseconds as ``1h 2m 3s``, rounded to the nearest second."""

    total_seconds = (max(int(ms), 0) + 500) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if seconds or not parts:
        parts.append(f"{seconds}s")
    return " ".join(parts)


def _positive_ms(seconds: int) -> Optional[int]:
    ms = seconds * 1000
    return ms if ms > 0 else None
