"""
Term traversal and the bounded work queue over terms.

Failure policy (one term = one unit):
- If the term root or any of its subject documents cannot be fetched, the
  whole term is withheld (IncompleteTermError). Nothing of it is written.
- ShapeError from a projector propagates out of collect_term() unchanged.
- run_terms() isolates units: a failing term is logged and reported in its
  TermResult, the other terms carry on.
"""

from __future__ import annotations

import sqlite3
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from loguru import logger

from catalogflat.cardinality import child
from catalogflat.config import DB_PATH, SUBJECT_WORKERS, TERM_WORKERS
from catalogflat.errors import CatalogError, IncompleteTermError, ShapeError
from catalogflat.fetch import Fetch, cascade_url, fetch_tree
from catalogflat.keys import term_lineage
from catalogflat.model import Batch
from catalogflat.project import subject_refs, walk_subject
from catalogflat.storage import open_sink, write_batch


@dataclass
class TermResult:
    """
    Outcome of one term unit. `error` is None on success.
    """

    url: str
    term_id: Optional[int] = None
    counts: Dict[str, int] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _subject_url(subject_ref: Any) -> str:
    href = child(subject_ref, "href")
    if not isinstance(href, str) or not href:
        raise ShapeError(f"subject reference has no href: {subject_ref!r}")
    return cascade_url(href)


def collect_term(
    term_root: Any,
    fetch: Fetch = fetch_tree,
    subject_workers: int = SUBJECT_WORKERS,
) -> Batch:
    """
    Fetch every subject document of a term and project all levels.

    Subject documents are fetched concurrently (at most `subject_workers`
    at a time); records keep the subject order of the term document.
    """
    lineage = term_lineage(term_root)
    refs = subject_refs(term_root)
    urls = [_subject_url(ref) for ref in refs]

    with ThreadPoolExecutor(max_workers=max(1, subject_workers)) as pool:
        docs = list(pool.map(fetch, urls))

    missing = [url for url, doc in zip(urls, docs) if doc is None]
    if missing:
        raise IncompleteTermError(str(lineage.term_id), missing)

    batch = Batch()
    for ref, doc in zip(refs, docs):
        batch.extend(walk_subject(ref, doc, lineage))

    logger.info("Term {}: {} subjects -> {}", lineage.term_id, len(refs), batch.counts())
    return batch


def load_term(
    url: str,
    db_path: str | Path = DB_PATH,
    fetch: Fetch = fetch_tree,
    subject_workers: int = SUBJECT_WORKERS,
) -> Tuple[Optional[int], Dict[str, int]]:
    """
    Fetch, project and store one term in a single transaction.

    Returns (term_id, rows written per entity).
    """
    term_root = fetch(url)
    if term_root is None:
        raise IncompleteTermError(url, [url])

    term_id = term_lineage(term_root).term_id
    batch = collect_term(term_root, fetch=fetch, subject_workers=subject_workers)

    with open_sink(db_path) as conn:
        counts = write_batch(conn, batch)

    logger.info("Term {} committed: {}", term_id, counts)
    return term_id, counts


def run_terms(
    urls: Iterable[str],
    db_path: str | Path = DB_PATH,
    fetch: Fetch = fetch_tree,
    workers: int = TERM_WORKERS,
    subject_workers: int = SUBJECT_WORKERS,
) -> List[TermResult]:
    """
    Load many terms with at most `workers` terms in flight.

    Results are returned in input order, one per URL.
    """

    def unit(url: str) -> TermResult:
        try:
            term_id, counts = load_term(url, db_path=db_path, fetch=fetch, subject_workers=subject_workers)
        except (CatalogError, sqlite3.Error) as exc:
            logger.error("Term {} failed: {}", url, exc)
            return TermResult(url=url, error=str(exc))
        return TermResult(url=url, term_id=term_id, counts=counts)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        return list(pool.map(unit, list(urls)))
