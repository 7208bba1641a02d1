"""
CLI (Command Line Interface).

    catalogflat terms [--db PATH]
    catalogflat load 2020/spring 2020/fall [--db PATH] [--workers N]
    catalogflat export 2020/spring [--out-dir DIR]

Terms can be given as YEAR/term or as the full URL of the term document.

Note:
- Diagnostics go to stderr through loguru; command output is plain text on stdout
- Exit code is non-zero if any term could not be loaded
"""

from __future__ import annotations

import argparse
import sqlite3
from pathlib import Path

from catalogflat.config import DB_PATH, OUT_DIR, SUBJECT_WORKERS, TERM_WORKERS
from catalogflat.errors import CatalogError
from catalogflat.fetch import SCHEDULE_URL, fetch_tree, term_url
from catalogflat.logs import configure_logging
from catalogflat.pipeline import collect_term, run_terms
from catalogflat.project import project_terms
from catalogflat.storage import export_json, open_sink, write_terms


def _resolve_terms(specs: list[str]) -> list[str] | None:
    """
    Turn term specs into URLs. Prints the problem and returns None on bad input.
    """
    urls: list[str] = []
    for spec in specs:
        try:
            urls.append(term_url(spec))
        except ValueError as exc:
            print(exc)
            return None
    return urls


def _cmd_terms(args: argparse.Namespace) -> int:
    """
    List all terms of the schedule summary, optionally storing them.
    """
    schedule = fetch_tree(SCHEDULE_URL)
    if schedule is None:
        print(f"Could not fetch {SCHEDULE_URL}")
        return 1

    try:
        terms = project_terms(schedule)
    except CatalogError as exc:
        print(f"Unexpected schedule document: {exc}")
        return 1

    for t in terms:
        print(f"{t.term_id} | {t.term_name or '(no name)'} | {t.term_detail_url or ''}")

    if args.db:
        try:
            with open_sink(args.db) as conn:
                n = write_terms(conn, terms)
        except sqlite3.Error as exc:
            print(f"Could not store terms: {exc}")
            return 1
        print(f"Stored {n} terms in {args.db}")

    return 0


def _cmd_load(args: argparse.Namespace) -> int:
    """
    Load the given terms into SQLite, one transaction per term.
    """
    urls = _resolve_terms(args.terms)
    if urls is None:
        return 1

    results = run_terms(
        urls,
        db_path=args.db,
        fetch=fetch_tree,
        workers=args.workers,
        subject_workers=args.subject_workers,
    )

    failed = 0
    for r in results:
        if r.ok:
            total = sum(r.counts.values())
            print(f"OK    {r.term_id} ({total} rows) {r.url}")
        else:
            failed += 1
            print(f"FAIL  {r.url}: {r.error}")

    print(f"Loaded {len(results) - failed}/{len(results)} terms into {args.db}")
    return 1 if failed else 0


def _cmd_export(args: argparse.Namespace) -> int:
    """
    Collect one term and write one JSON file per entity.
    """
    urls = _resolve_terms([args.term])
    if urls is None:
        return 1
    url = urls[0]

    term_root = fetch_tree(url)
    if term_root is None:
        print(f"Could not fetch {url}")
        return 1

    try:
        batch = collect_term(term_root, fetch=fetch_tree, subject_workers=args.subject_workers)
    except CatalogError as exc:
        print(f"Term {url} failed: {exc}")
        return 1

    paths = export_json(batch, args.out_dir)
    for entity, path in paths.items():
        print(f"{entity:<12} {len(getattr(batch, entity)):>6}  {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="catalogflat", description="Flatten course catalog documents into tables")
    parser.add_argument("--log-level", type=str, default=None, help="DEBUG, INFO, WARNING, ...")
    sub = parser.add_subparsers(dest="command", required=True)

    p_terms = sub.add_parser("terms", help="List available terms")
    p_terms.add_argument("--db", type=Path, default=None, help="Also store the terms in this SQLite file")

    p_load = sub.add_parser("load", help="Load terms into SQLite")
    p_load.add_argument("terms", nargs="+", help="Terms as YEAR/term (e.g. 2020/spring) or URL")
    p_load.add_argument("--db", type=Path, default=DB_PATH, help="SQLite file")
    p_load.add_argument("--workers", type=int, default=TERM_WORKERS, help="Terms loaded in parallel")
    p_load.add_argument("--subject-workers", type=int, default=SUBJECT_WORKERS, help="Subject documents fetched in parallel per term")

    p_export = sub.add_parser("export", help="Write one term as JSON files")
    p_export.add_argument("term", type=str, help="Term as YEAR/term or URL")
    p_export.add_argument("--out-dir", type=Path, default=OUT_DIR, help="Output directory")
    p_export.add_argument("--subject-workers", type=int, default=SUBJECT_WORKERS, help="Subject documents fetched in parallel")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.log_level)

    if args.command == "terms":
        raise SystemExit(_cmd_terms(args))
    if args.command == "load":
        raise SystemExit(_cmd_load(args))
    if args.command == "export":
        raise SystemExit(_cmd_export(args))

    raise SystemExit(2)
