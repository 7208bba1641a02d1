"""
Derived fields (pure helpers).

Rules shared by all helpers:
- absent or unparsable input -> None (expected data variability)
- never "" or 0 as a stand-in for "no data"

The one exception is course_number(): the course id is part of a primary
key, so a malformed compound id raises ShapeError instead of defaulting.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, List, Optional

from catalogflat.cardinality import as_list, children
from catalogflat.errors import ShapeError


_DIGIT_RE = re.compile(r"[0-9]")
_TIME_12H_RE = re.compile(r"(1[0-2]|0?[1-9]):([0-5][0-9]) (AM|PM)")
_DATE_RE = re.compile(r"([0-9]{4})-([0-9]{2})-([0-9]{2})")
_NUMBER_RE = re.compile(r"[0-9]+")


def parse_credits(credit_hours: Any) -> Optional[int]:
    """
    Return the first digit of a free-text credit-hours field.

    "3 hours." -> 3, "1 TO 4 hours." -> 1, "variable" -> None.
    Ranges are not split into min/max.
    """
    if credit_hours is None:
        return None
    match = _DIGIT_RE.search(str(credit_hours))
    return int(match.group(0)) if match else None


def to_24h(time12: Any) -> Optional[str]:
    """
    Convert 'H:MM AM|PM' to 'HH:MM'.

    Anything that is not exactly that form (e.g. "ARRANGED") gives None.
    """
    if not isinstance(time12, str):
        return None
    match = _TIME_12H_RE.fullmatch(time12.strip())
    if not match:
        return None
    hours_s, minutes, period = match.groups()
    hours = int(hours_s) % 12 + (12 if period == "PM" else 0)
    return f"{hours:02d}:{minutes}"


def gen_ed_codes(categories: Any) -> Optional[str]:
    """
    Encode gen-ed categories as a colon-terminated code string.

    Accepts zero, one or many <category> nodes and reads
    genEdAttributes/genEdAttribute/@code of each, in input order:
    [US, CS] -> "US:CS:". No codes -> None.
    """
    codes: List[str] = []
    for category in as_list(categories):
        for attribute in children(category, "genEdAttributes", "genEdAttribute"):
            if not isinstance(attribute, dict):
                raise ShapeError(f"gen-ed attribute is not a tree: {attribute!r}")
            code = attribute.get("code")
            if code is not None and str(code).strip():
                codes.append(str(code).strip())
    return "".join(f"{code}:" for code in codes) or None


def course_number(compound_id: Any) -> int:
    """
    Split "CS 411" into its numeric course id (411).

    Raises ShapeError unless the id has exactly two tokens and the
    second one is numeric.
    """
    if not isinstance(compound_id, str):
        raise ShapeError(f"course id must be a string like 'CS 411', got {compound_id!r}")
    parts = compound_id.split()
    if len(parts) != 2 or not _NUMBER_RE.fullmatch(parts[1]):
        raise ShapeError(f"course id must look like 'SUBJECT NUMBER', got {compound_id!r}")
    return int(parts[1])


def parse_date(value: Any) -> Optional[date]:
    """
    Parse '2020-01-21Z' (or any value starting with an ISO date) into a date.
    """
    if not isinstance(value, str):
        return None
    match = _DATE_RE.match(value.strip())
    if not match:
        return None
    try:
        return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def indicator(flag: Any) -> Optional[bool]:
    """
    Resolve a Y/N indicator. Absent -> None, "Y" -> True, anything else -> False.
    """
    if flag is None:
        return None
    text = str(flag).strip().upper()
    if not text:
        return None
    return text == "Y"


def as_text(value: Any) -> Optional[str]:
    # the decoder turns "1404" into 1404; text columns want the string back
    if value is None:
        return None
    return str(value)
