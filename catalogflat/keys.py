"""
Key propagation.

A Lineage carries the identifying keys of every ancestor visited on the
way down the tree (year -> term -> subject -> course -> section -> meeting).
Projectors read parent-key columns from the lineage only, so a record's
foreign keys always match the ancestor node that was actually traversed,
even when a node's own redundant <parents> block says something else.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Optional

from catalogflat.cardinality import child
from catalogflat.errors import ShapeError


@dataclass(frozen=True)
class Lineage:
    calendar_year: Optional[int] = None
    term_id: Optional[int] = None
    subject_id: Optional[str] = None
    course_id: Optional[int] = None
    crn: Optional[int] = None
    meeting_id: Optional[int] = None

    def descend(self, **keys: Any) -> "Lineage":
        """
        Return a new lineage with the keys of one more level added.

        Keys that are already set cannot be overwritten: a descendant never
        re-derives an ancestor's key.
        """
        known = {f.name for f in fields(self)}
        for name, value in keys.items():
            if name not in known:
                raise TypeError(f"unknown lineage key: {name}")
            if value is None:
                raise ShapeError(f"missing identifying key {name!r} below {self}")
            if getattr(self, name) is not None:
                raise ShapeError(f"lineage key {name!r} is already set to {getattr(self, name)!r}")
        return replace(self, **keys)

    def require(self, *names: str) -> None:
        """
        Raise ShapeError unless every named key is set.
        """
        missing = [name for name in names if getattr(self, name) is None]
        if missing:
            raise ShapeError(f"lineage is missing {', '.join(missing)}: {self}")


def term_lineage(term_root: Any) -> Lineage:
    """
    Build the root lineage of a term document ({"term": {...}}).

    The calendar year comes from the term's parents block when the document
    has one; the term id is mandatory.
    """
    term = child(term_root, "term")
    if term is None:
        raise ShapeError("document has no <term> root")
    year = child(term, "parents", "calendarYear", "id")
    lineage = Lineage(calendar_year=year) if year is not None else Lineage()
    return lineage.descend(term_id=child(term, "id"))
