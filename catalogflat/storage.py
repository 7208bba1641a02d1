"""
Record sinks: SQLite tables and JSON files.

SQLite layout: one table per entity, columns in COLUMNS order (flatten.py).
Foreign keys are enforced, so a section can never be stored without its
course, or a meeting without its section.

Design rationale:
- one connection per term (open_sink), closed on every exit path
- one transaction per term (write_batch): all six entity tables commit
  together or not at all
- one executemany per entity and term, never a round trip per record
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Sequence, Tuple

from loguru import logger

from catalogflat.flatten import COLUMNS, ENTITIES, to_rows
from catalogflat.model import Batch, TermRecord


_TABLES: Dict[str, str] = {
    "terms": """
        CREATE TABLE IF NOT EXISTS terms (
            term_id INTEGER PRIMARY KEY,
            term_name TEXT,
            term_detail_url TEXT,
            calendar_year INTEGER,
            public_indicator INTEGER,
            archive_indicator INTEGER,
            attending_term INTEGER,
            default_term INTEGER,
            enrolling_term INTEGER
        )
    """,
    "subjects": """
        CREATE TABLE IF NOT EXISTS subjects (
            subject_id TEXT NOT NULL,
            subject_name TEXT,
            department_code TEXT,
            term_id INTEGER NOT NULL,
            PRIMARY KEY (term_id, subject_id)
        )
    """,
    "departments": """
        CREATE TABLE IF NOT EXISTS departments (
            term_id INTEGER NOT NULL,
            subject_id TEXT NOT NULL,
            department_name TEXT,
            college_code TEXT,
            department_code TEXT,
            contact_name TEXT,
            contact_title TEXT,
            address_line1 TEXT,
            address_line2 TEXT,
            phone_number TEXT,
            url TEXT,
            description TEXT,
            PRIMARY KEY (term_id, subject_id),
            FOREIGN KEY (term_id, subject_id) REFERENCES subjects (term_id, subject_id)
        )
    """,
    "courses": """
        CREATE TABLE IF NOT EXISTS courses (
            subject_id TEXT NOT NULL,
            term_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL,
            course_name TEXT,
            credit_hours TEXT,
            description TEXT,
            section_info TEXT,
            degree_attributes TEXT,
            registration_notes TEXT,
            schedule_info TEXT,
            gen_ed_codes TEXT,
            PRIMARY KEY (term_id, subject_id, course_id),
            FOREIGN KEY (term_id, subject_id) REFERENCES subjects (term_id, subject_id)
        )
    """,
    "sections": """
        CREATE TABLE IF NOT EXISTS sections (
            crn INTEGER NOT NULL,
            term_id INTEGER NOT NULL,
            course_id INTEGER NOT NULL,
            subject_id TEXT NOT NULL,
            section_number TEXT,
            credits INTEGER,
            status_code TEXT,
            part_of_term TEXT,
            enrollment_status TEXT,
            section_text TEXT,
            section_notes TEXT,
            capp_area TEXT,
            start_date TEXT,
            end_date TEXT,
            PRIMARY KEY (term_id, crn),
            FOREIGN KEY (term_id, subject_id, course_id)
                REFERENCES courses (term_id, subject_id, course_id)
        )
    """,
    "meetings": """
        CREATE TABLE IF NOT EXISTS meetings (
            crn INTEGER NOT NULL,
            term_id INTEGER NOT NULL,
            meeting_id INTEGER NOT NULL,
            type_code TEXT,
            type_name TEXT,
            start_time TEXT,
            end_time TEXT,
            days_of_week TEXT,
            building_name TEXT,
            room_number TEXT,
            PRIMARY KEY (term_id, crn, meeting_id),
            FOREIGN KEY (term_id, crn) REFERENCES sections (term_id, crn)
        )
    """,
    "instructors": """
        CREATE TABLE IF NOT EXISTS instructors (
            crn INTEGER NOT NULL,
            term_id INTEGER NOT NULL,
            meeting_id INTEGER NOT NULL,
            full_name TEXT,
            last_name TEXT,
            first_name TEXT,
            FOREIGN KEY (term_id, crn, meeting_id) REFERENCES meetings (term_id, crn, meeting_id)
        )
    """,
}


# ---------------------------------------------------------------------------
# SQLite
# ---------------------------------------------------------------------------


def insert_sql(entity: str) -> str:
    columns = COLUMNS[entity]
    placeholders = ", ".join("?" for _ in columns)
    return f"INSERT INTO {entity} ({', '.join(columns)}) VALUES ({placeholders})"


def _sql_value(value: Any) -> Any:
    # dates are stored as ISO text
    if isinstance(value, date):
        return value.isoformat()
    return value


def _sql_rows(records: Sequence[Any]) -> List[Tuple[Any, ...]]:
    return [tuple(_sql_value(v) for v in row) for row in to_rows(records)]


def create_schema(conn: sqlite3.Connection) -> None:
    """
    Create all entity tables (no-op for tables that already exist).
    """
    with conn:
        for ddl in _TABLES.values():
            conn.execute(ddl)


@contextmanager
def open_sink(db_path: str | Path) -> Iterator[sqlite3.Connection]:
    """
    Open a scoped SQLite connection with foreign keys enforced and the
    schema in place. The connection is closed when the block exits,
    whether it succeeded or not.
    """
    target = str(db_path)
    if target != ":memory:":
        Path(target).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(target, timeout=30)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
        create_schema(conn)
        yield conn
    finally:
        conn.close()


def write_batch(conn: sqlite3.Connection, batch: Batch) -> Dict[str, int]:
    """
    Insert all records of one batch in a single transaction, parents first.

    Any sqlite3.Error rolls the whole batch back and is re-raised.
    Returns the number of rows written per entity.
    """
    written: Dict[str, int] = {}
    try:
        with conn:
            for entity in ENTITIES:
                records = getattr(batch, entity)
                if records:
                    conn.executemany(insert_sql(entity), _sql_rows(records))
                written[entity] = len(records)
    except sqlite3.Error as exc:
        logger.error("Batch rolled back: {}", exc)
        raise
    return written


def write_terms(conn: sqlite3.Connection, terms: Iterable[TermRecord]) -> int:
    rows = _sql_rows(list(terms))
    with conn:
        conn.executemany(insert_sql("terms"), rows)
    return len(rows)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _json_default(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def export_json(batch: Batch, out_dir: str | Path) -> Dict[str, Path]:
    """
    Write one <entity>.json file per entity level into out_dir.

    Creates the directory if needed. Returns the written paths.
    """
    out_path = Path(out_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    written: Dict[str, Path] = {}
    for entity in ENTITIES:
        records = [asdict(r) for r in getattr(batch, entity)]
        target = out_path / f"{entity}.json"
        target.write_text(
            json.dumps(records, ensure_ascii=False, indent=2, default=_json_default),
            encoding="utf-8",
        )
        written[entity] = target
    return written
