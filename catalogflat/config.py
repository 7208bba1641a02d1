"""
Configuration for catalogflat.

Every value can be overridden through an environment variable; the CLI
flags override these again per invocation.
"""

from __future__ import annotations

import os
from pathlib import Path

# Paths
PACKAGE_DIR = Path(__file__).resolve().parent
DATA_DIR = PACKAGE_DIR / "data"

DB_PATH = Path(os.getenv("CATALOGFLAT_DB", str(DATA_DIR / "catalog.sqlite3")))
OUT_DIR = Path(os.getenv("CATALOGFLAT_OUT_DIR", str(DATA_DIR / "processed")))

# Source
BASE_URL = os.getenv("CATALOGFLAT_BASE_URL", "https://courses.illinois.edu/cisapp/explorer").rstrip("/")
HTTP_TIMEOUT = float(os.getenv("CATALOGFLAT_HTTP_TIMEOUT", "30"))

# Work queue: terms in flight, and subject documents in flight per term
TERM_WORKERS = max(1, int(os.getenv("CATALOGFLAT_TERM_WORKERS", "2")))
SUBJECT_WORKERS = max(1, int(os.getenv("CATALOGFLAT_SUBJECT_WORKERS", "4")))

LOG_LEVEL = os.getenv("CATALOGFLAT_LOG_LEVEL", "INFO").upper()
