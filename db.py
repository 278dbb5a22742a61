"""SQLite progress store: students and their per-category fluency progress."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

from db_pool import SQLiteConnectionPool
from schemas import ProgressRecord, ProgressUpdate, Student

logger = logging.getLogger(__name__)

DB_PATH = os.getenv("DB_PATH", "data.db")

# Initialize connection pool
_pool = SQLiteConnectionPool(DB_PATH, max_connections=10)


def _conn():
    """Return a context manager for acquiring a pooled SQLite connection."""
    return _pool.get_connection()


def _exec(sql: str, params: Iterable = ()):
    with _pool.get_connection() as con:
        cur = con.execute(sql, params)
        con.commit()
        return cur


def _query(sql: str, params: Iterable = ()) -> list[sqlite3.Row]:
    with _pool.get_connection() as con:
        cur = con.execute(sql, params)
        return cur.fetchall()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _require(value: Optional[str], name: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{name} is required")
    return text


def init() -> None:
    """Create the store's tables if they do not exist yet."""
    with _conn() as con:
        con.executescript(
            """
            CREATE TABLE IF NOT EXISTS students (
              id          TEXT PRIMARY KEY,
              name        TEXT NOT NULL,
              grade       INTEGER NOT NULL,
              section     TEXT NOT NULL DEFAULT '',
              initials    TEXT NOT NULL DEFAULT '',
              created_at  TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS student_progress (
              id                TEXT PRIMARY KEY,
              student_id        TEXT NOT NULL,
              fact_category_id  TEXT NOT NULL,
              phase             TEXT NOT NULL CHECK (phase IN ('counting','deriving','mastery')),
              accuracy          INTEGER NOT NULL DEFAULT 0,
              efficiency        INTEGER NOT NULL DEFAULT 0,
              flexibility       INTEGER NOT NULL DEFAULT 0,
              strategy_use      INTEGER NOT NULL DEFAULT 0,
              last_practiced    TEXT NOT NULL,
              updated_at        TEXT NOT NULL,
              UNIQUE (student_id, fact_category_id)
            );

            CREATE INDEX IF NOT EXISTS idx_progress_student ON student_progress(student_id);
            """
        )
        con.commit()
    logger.debug("Progress store ready at %s", DB_PATH)


# -------------- students --------------
def _row_to_student(row: sqlite3.Row) -> Student:
    return Student.model_validate(dict(row))


def create_student(
    name: str,
    grade: int,
    *,
    section: str = "",
    initials: Optional[str] = None,
    student_id: Optional[str] = None,
) -> Student:
    """Insert a student; ``initials`` default to the first letters of ``name``."""
    name = _require(name, "name")
    sid = (student_id or "").strip() or str(uuid4())
    if initials is None:
        initials = "".join(part[0] for part in name.split() if part).upper()
    student = Student(
        id=sid,
        name=name,
        grade=grade,
        section=section,
        initials=initials,
        created_at=datetime.now(timezone.utc),
    )
    _exec(
        """
        INSERT INTO students (id, name, grade, section, initials, created_at)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (
            student.id,
            student.name,
            student.grade,
            student.section,
            student.initials,
            student.created_at.isoformat(),
        ),
    )
    return student


def get_student(student_id: str) -> Optional[Student]:
    rows = _query("SELECT * FROM students WHERE id = ?", (student_id,))
    if not rows:
        return None
    return _row_to_student(rows[0])


# -------------- progress --------------
_PROGRESS_COLUMNS = (
    "id, student_id, fact_category_id, phase, accuracy, efficiency, "
    "flexibility, strategy_use, last_practiced, updated_at"
)


def _row_to_progress(row: sqlite3.Row) -> ProgressRecord:
    return ProgressRecord.model_validate(dict(row))


def get_student_progress(student_id: str) -> List[ProgressRecord]:
    """Return every progress record for ``student_id`` in insertion order."""
    rows = _query(
        f"SELECT {_PROGRESS_COLUMNS} FROM student_progress WHERE student_id = ? ORDER BY rowid",
        (student_id,),
    )
    return [_row_to_progress(row) for row in rows]


def get_student_progress_by_category(
    student_id: str, fact_category_id: str
) -> Optional[ProgressRecord]:
    rows = _query(
        f"""
        SELECT {_PROGRESS_COLUMNS} FROM student_progress
        WHERE student_id = ? AND fact_category_id = ?
        """,
        (student_id, fact_category_id),
    )
    if not rows:
        return None
    return _row_to_progress(rows[0])


def upsert_student_progress(update: ProgressUpdate | Dict[str, Any]) -> ProgressRecord:
    """Insert or overwrite the record for ``(student_id, fact_category_id)``.

    An existing record keeps its id, its position in the student's list and its
    ``last_practiced`` timestamp; the scores, phase and ``updated_at`` change.
    """
    if not isinstance(update, ProgressUpdate):
        update = ProgressUpdate.model_validate(update)
    student_id = _require(update.student_id, "student_id")
    category_id = _require(update.fact_category_id, "fact_category_id")
    now = _now_iso()
    _exec(
        """
        INSERT INTO student_progress
          (id, student_id, fact_category_id, phase, accuracy, efficiency,
           flexibility, strategy_use, last_practiced, updated_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(student_id, fact_category_id) DO UPDATE SET
          phase = excluded.phase,
          accuracy = excluded.accuracy,
          efficiency = excluded.efficiency,
          flexibility = excluded.flexibility,
          strategy_use = excluded.strategy_use,
          updated_at = excluded.updated_at
        """,
        (
            str(uuid4()),
            student_id,
            category_id,
            update.phase,
            update.accuracy,
            update.efficiency,
            update.flexibility,
            update.strategy_use,
            now,
            now,
        ),
    )
    record = get_student_progress_by_category(student_id, category_id)
    if record is None:
        raise sqlite3.DatabaseError(
            f"Progress for {student_id}/{category_id} vanished after upsert"
        )
    return record


def delete_student_progress(student_id: str) -> int:
    """Remove all progress for ``student_id``; returns the number of rows deleted."""
    cur = _exec("DELETE FROM student_progress WHERE student_id = ?", (student_id,))
    return cur.rowcount
