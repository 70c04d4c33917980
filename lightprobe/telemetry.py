#!/usr/bin/env python3

# Board prints free-form lines such as
#   CIE x: 0.312700 CIE y: 0.329000 Lux: 412.50 Color Temperature: 6504
# mixed with its own log text. Labels are case sensitive.

import logging
import math
import re
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Context, Decimal

logger = logging.getLogger(__name__)

PLACEHOLDER = '-'

# enough digits for any finite float at the widest precision
_DECIMAL_CONTEXT = Context(prec=400)

_NUMBER = r'([\d.]+)'

PATTERNS = {
    'cie_x': re.compile(r'CIE x: ' + _NUMBER),
    'cie_y': re.compile(r'CIE y: ' + _NUMBER),
    'lux': re.compile(r'Lux: ' + _NUMBER),
    'color_temp_k': re.compile(r'Color Temperature: ' + _NUMBER),
}

# decimal places shown for each field
PRECISION = {
    'cie_x': 6,
    'cie_y': 6,
    'lux': 2,
    'color_temp_k': 0,
}


@dataclass(frozen=True)
class Reading():
    cie_x: float | None = None
    cie_y: float | None = None
    lux: float | None = None
    color_temp_k: float | None = None

    @property
    def has_chromaticity(self) -> bool:
        return self.cie_x is not None and self.cie_y is not None

    @property
    def is_empty(self) -> bool:
        return all(value is None for value in asdict(self).values())

    def as_dict(self) -> dict[str, float]:
        return {name: value for name, value in asdict(self).items() if value is not None}


def _parse_field(name: str, line: str) -> float | None:
    match = PATTERNS[name].search(line)
    if match is None:
        return None

    try:
        return float(match.group(1))
    except ValueError:
        logger.debug('ignoring malformed %s value %r', name, match.group(1))
        return None


def decode(line: str) -> Reading:
    return Reading(**{name: _parse_field(name, line) for name in PATTERNS})


def format_value(name: str, value: float | None) -> str:
    if value is None:
        return PLACEHOLDER

    places = PRECISION[name]
    if not math.isfinite(value):
        return f'{value:.{places}f}'

    # ties round away from zero, 0.125 -> 0.13
    rounded = Decimal(repr(value)).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP, context=_DECIMAL_CONTEXT)
    return f'{rounded:f}'


def format_reading(reading: Reading) -> dict[str, str]:
    """Render every field at its display precision, '-' when absent."""
    return {name: format_value(name, getattr(reading, name)) for name in PATTERNS}
