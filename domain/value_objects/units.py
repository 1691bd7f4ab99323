"""
Unit conversion helpers.

Monitoring tools print sizes with SI-looking suffixes (``MB``, ``GB``)
while actually meaning binary multiples, so every prefix here is a power
of 1024. Nothing in this module raises on bad input.
"""

import re

KIB = 1024
MIB = 1024 ** 2
GIB = 1024 ** 3
TIB = 1024 ** 4

UNIT_MULTIPLIERS = {
    "B": 1,
    "KB": KIB,
    "kB": KIB,
    "KiB": KIB,
    "MB": MIB,
    "MiB": MIB,
    "GB": GIB,
    "GiB": GIB,
    "TB": TIB,
    "TiB": TIB,
}

_SIZE_TOKEN_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*([A-Za-z]*)\s*$")


def bytes_from_size_token(value: float, unit: str) -> float:
    """
    Convert a number and its unit suffix to bytes.

    Unknown units are treated as bytes already and returned unchanged.
    """
    multiplier = UNIT_MULTIPLIERS.get(unit.strip())
    if multiplier is None:
        return value
    return value * multiplier


def parse_size_token(token: str) -> float:
    """Convert a human size like ``"1.2MiB"`` to bytes, ``0.0`` if unreadable."""
    match = _SIZE_TOKEN_RE.match(token or "")
    if not match:
        return 0.0
    number, unit = match.groups()
    return bytes_from_size_token(float(number), unit)


def parse_percent(token: str) -> float:
    """Convert ``"45.3%"`` to ``45.3``; anything unparsable becomes ``0.0``."""
    try:
        return float(str(token).strip().rstrip("%"))
    except (TypeError, ValueError):
        return 0.0


def clamp_percent(value: float) -> float:
    """Clamp a percentage into [0, 100]."""
    return max(0.0, min(100.0, value))
