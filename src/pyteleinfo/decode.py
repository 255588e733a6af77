"""Decode raw (label, value) pairs into typed Tags via a label dispatch table."""

import logging
import re
from typing import Callable

from .errors import FrameSyntaxError
from .types import Tag, TagKind, TagValue, TariffOption, TariffPeriod, UnknownLiteral

logger = logging.getLogger(__name__)

# Optional sign + ASCII digits; int() alone would also accept blanks and underscores
_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1

_OPTIONS: dict[str, TariffOption] = {o.value: o for o in TariffOption}
_PERIODS: dict[str, TariffPeriod] = {p.value: p for p in TariffPeriod}


def parse_i32(raw: str) -> int:
    """Parse a base-10 signed 32-bit integer; raise FrameSyntaxError naming raw on failure."""
    if not _INT_PATTERN.fullmatch(raw):
        raise FrameSyntaxError(f"Number parse error on {raw}", raw=raw)
    num = int(raw)
    if num < _I32_MIN or num > _I32_MAX:
        raise FrameSyntaxError(f"Number parse error on {raw}", raw=raw)
    return num


def _parse_option(raw: str) -> TariffOption | UnknownLiteral:
    option = _OPTIONS.get(raw)
    return option if option is not None else UnknownLiteral(raw)


def _parse_period(raw: str) -> TariffPeriod | UnknownLiteral:
    period = _PERIODS.get(raw)
    return period if period is not None else UnknownLiteral(raw)


def _parse_char(raw: str) -> str:
    if not raw:
        raise FrameSyntaxError("HHPHC should be one char long", raw=raw)
    return raw[0]


def _parse_str(raw: str) -> str:
    return raw


_RULES: dict[str, tuple[TagKind, Callable[[str], TagValue]]] = {
    "ADCO": (TagKind.ADCO, _parse_str),
    "OPTARIF": (TagKind.OPTARIF, _parse_option),
    "ISOUSC": (TagKind.ISOUSC, parse_i32),
    "BASE": (TagKind.BASE, parse_i32),
    "HCHC": (TagKind.HCHC, parse_i32),
    "HCHP": (TagKind.HCHP, parse_i32),
    "PTEC": (TagKind.PTEC, _parse_period),
    "IINST": (TagKind.IINST, parse_i32),
    "ADPS": (TagKind.ADPS, parse_i32),
    "IMAX": (TagKind.IMAX, parse_i32),
    "PAPP": (TagKind.PAPP, parse_i32),
    "HHPHC": (TagKind.HHPHC, _parse_char),
    "MOTDETAT": (TagKind.MOTDETAT, _parse_str),
}

KNOWN_LABELS = frozenset(_RULES)


def decode_tag(label: str, value: str) -> Tag:
    """
    Decode one group into a Tag.

    - Known labels get a typed payload (int, enum or str).
    - Unknown labels become Tag(UNKNOWN, label, value) rather than an error.
    - OPTARIF/PTEC literals outside the known set become UnknownLiteral(raw).

    Raises FrameSyntaxError when a numeric field is not a valid i32 or HHPHC is empty.
    Values are not range-checked.
    """
    rule = _RULES.get(label)
    if rule is None:
        logger.debug("Unknown label %r (value %r)", label, value)
        return Tag.unknown(label, value)
    kind, parse = rule
    return Tag(kind, label, parse(value))
