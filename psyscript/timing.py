"""Sentinel-or-number timing values used by sequence steps.

Example:
    >>> Timing.parse("250").value
    250
    >>> Timing.parse("inf").to_json()
    'inf'
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union

Number = Union[int, float]

NONE_TOKEN = "n"
INFINITE_TOKEN = "inf"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_TIME_TO_MS: Dict[str, float] = {
    "ms": 1.0,
    "s": 1000.0,
}


class TimingKind(str, Enum):
    """Tag of a timing value."""

    NONE = "none"
    INFINITE = "infinite"
    VALUE = "value"


def parse_number(token: str) -> Number:
    """Parse a finite number token, keeping integral tokens as ``int``.

    Raises:
        ValueError: If the token is not a finite decimal number.

    Example:
        >>> parse_number("1.5")
        1.5
    """
    text = token.strip()
    if _INTEGER_RE.fullmatch(text):
        return int(text)
    if not _DECIMAL_RE.fullmatch(text):
        raise ValueError(f"Expected a decimal number, got '{token}'.")
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"Expected a finite number, got '{token}'.")
    return number


@dataclass(frozen=True)
class Timing:
    """Millisecond duration that may also be absent (``n``) or unbounded (``inf``)."""

    kind: TimingKind
    value: Optional[Number] = None

    @classmethod
    def none(cls) -> "Timing":
        return cls(kind=TimingKind.NONE)

    @classmethod
    def infinite(cls) -> "Timing":
        return cls(kind=TimingKind.INFINITE)

    @classmethod
    def of(cls, value: Number) -> "Timing":
        return cls(kind=TimingKind.VALUE, value=value)

    @classmethod
    def parse(cls, token: str) -> "Timing":
        """Classify a script token as ``n``, ``inf`` or a number.

        Raises:
            ValueError: If the token is neither sentinel nor a finite number.
        """
        if token == NONE_TOKEN:
            return cls.none()
        if token == INFINITE_TOKEN:
            return cls.infinite()
        return cls.of(parse_number(token))

    @property
    def is_none(self) -> bool:
        return self.kind is TimingKind.NONE

    @property
    def is_infinite(self) -> bool:
        return self.kind is TimingKind.INFINITE

    def to(self, target_unit: str) -> Optional[float]:
        """Return the magnitude in ``ms`` or ``s``; ``None`` for ``n`` and ``inf`` for unbounded."""
        target = target_unit.strip().lower()
        if target not in _TIME_TO_MS:
            raise ValueError(f"Unsupported time unit '{target_unit}'.")
        if self.is_none:
            return None
        if self.is_infinite:
            return math.inf
        return float(self.value) / _TIME_TO_MS[target]

    def to_json(self) -> Union[str, Number]:
        """Encode back to the script's representation."""
        if self.is_none:
            return NONE_TOKEN
        if self.is_infinite:
            return INFINITE_TOKEN
        return self.value  # type: ignore[return-value]

    def __str__(self) -> str:
        return str(self.to_json())
