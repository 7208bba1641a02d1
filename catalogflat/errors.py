"""
Exception types raised by the traversal.

- ShapeError: the document does not have the structure the projectors rely on
  (a primary key cannot be derived, or a node is not a tree). Never defaulted.
- IncompleteTermError: a document that a term needs could not be fetched, so
  the whole term is withheld.
"""

from __future__ import annotations

from typing import Iterable


class CatalogError(Exception):
    """Base class for all catalogflat errors."""


class ShapeError(CatalogError, ValueError):
    """A node does not have the shape required to build a record."""


class IncompleteTermError(CatalogError):
    """One or more documents of a term could not be fetched."""

    def __init__(self, term: str, urls: Iterable[str]) -> None:
        self.term = term
        self.urls = list(urls)
        super().__init__(f"term {term}: could not fetch {', '.join(self.urls)}")
