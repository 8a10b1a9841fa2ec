from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date
from pathlib import Path
from typing import Iterator

from models import ActivityType, HourEntry, Project
from utils import month_bounds

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a database operation fails."""


def _get_db_path() -> Path:
    """Get database path from environment variable or default location."""
    if env_path := os.environ.get("TIMELOG_DB"):
        return Path(env_path)
    return Path(__file__).parent / "data" / "timelog.db"


DB_PATH = _get_db_path()

_connection: sqlite3.Connection | None = None

DEFAULT_ACTIVITY_TYPES = [
    ActivityType(name="Development", short_label="🔧", is_billable_work=True),
    ActivityType(name="Leave", short_label="🏖️", is_billable_work=False),
    ActivityType(name="National Day", short_label="🇷🇴", is_billable_work=False),
]


def get_connection() -> sqlite3.Connection:
    """Return the process-wide connection, opening it on first use."""
    global _connection
    if _connection is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        try:
            _connection = sqlite3.connect(DB_PATH, check_same_thread=False)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database {DB_PATH}: {e}") from e
        _connection.row_factory = sqlite3.Row
        _connection.execute("PRAGMA foreign_keys = ON")
    return _connection


def close_db() -> None:
    global _connection
    if _connection is not None:
        _connection.close()
        _connection = None


@contextmanager
def _transaction(action: str) -> Iterator[sqlite3.Connection]:
    """Commit on success, roll back and raise StorageError on failure."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
    except sqlite3.Error as e:
        conn.rollback()
        logger.error("Failed to %s: %s", action, e)
        raise StorageError(f"Failed to {action}: {e}") from e


def _query(sql: str, params: tuple = ()) -> list[sqlite3.Row]:
    try:
        return get_connection().execute(sql, params).fetchall()
    except sqlite3.Error as e:
        logger.error("Query failed: %s", e)
        raise StorageError(f"Query failed: {e}") from e


def init_db():
    """Create tables if they don't exist."""
    with _transaction("create schema") as conn:
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS projects (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                accounting_id INTEGER NOT NULL
            );

            CREATE TABLE IF NOT EXISTS activity_types (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                short_label TEXT NOT NULL,
                is_billable_work INTEGER NOT NULL DEFAULT 1
            );

            CREATE TABLE IF NOT EXISTS hour_entries (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                date TEXT NOT NULL,
                activity_type_id INTEGER NOT NULL,
                project_id INTEGER NOT NULL,
                hours REAL NOT NULL CHECK (hours > 0),
                FOREIGN KEY (activity_type_id) REFERENCES activity_types(id),
                FOREIGN KEY (project_id) REFERENCES projects(id)
            );

            CREATE INDEX IF NOT EXISTS idx_entries_date ON hour_entries(date);
            CREATE INDEX IF NOT EXISTS idx_entries_project ON hour_entries(project_id);
            CREATE INDEX IF NOT EXISTS idx_entries_activity ON hour_entries(activity_type_id);
        """)


def seed_defaults() -> int:
    """Insert the default activity types into an empty database. Returns count inserted."""
    if list_activity_types():
        return 0
    with _transaction("seed activity types") as conn:
        for activity in DEFAULT_ACTIVITY_TYPES:
            conn.execute(
                "INSERT INTO activity_types (name, short_label, is_billable_work) VALUES (?, ?, ?)",
                (activity.name, activity.short_label, int(activity.is_billable_work)),
            )
    logger.info("Seeded %d default activity types", len(DEFAULT_ACTIVITY_TYPES))
    return len(DEFAULT_ACTIVITY_TYPES)


# --- Projects ---


def _row_to_project(row: sqlite3.Row) -> Project:
    return Project(id=row["id"], name=row["name"], accounting_id=row["accounting_id"])


def list_projects() -> list[Project]:
    rows = _query("SELECT * FROM projects ORDER BY name COLLATE NOCASE, id")
    return [_row_to_project(row) for row in rows]


def get_project(project_id: int) -> Project | None:
    rows = _query("SELECT * FROM projects WHERE id = ?", (project_id,))
    return _row_to_project(rows[0]) if rows else None


def create_project(name: str, accounting_id: int) -> int:
    with _transaction("create project") as conn:
        cursor = conn.execute(
            "INSERT INTO projects (name, accounting_id) VALUES (?, ?)",
            (name, accounting_id),
        )
    logger.info("Created project %r (id=%s)", name, cursor.lastrowid)
    return cursor.lastrowid  # type: ignore[return-value]


def update_project(project_id: int, name: str, accounting_id: int) -> None:
    with _transaction("update project") as conn:
        cursor = conn.execute(
            "UPDATE projects SET name = ?, accounting_id = ? WHERE id = ?",
            (name, accounting_id, project_id),
        )
    if cursor.rowcount == 0:
        raise StorageError(f"Project {project_id} not found")
    logger.info("Updated project %s", project_id)


def can_delete_project(project_id: int) -> bool:
    """Check if a project can be deleted (has no hour entries)."""
    rows = _query(
        "SELECT COUNT(*) as count FROM hour_entries WHERE project_id = ?", (project_id,)
    )
    return rows[0]["count"] == 0


def delete_project(project_id: int) -> bool:
    """Delete a project. Returns False if it still has hour entries."""
    if not can_delete_project(project_id):
        return False
    with _transaction("delete project") as conn:
        conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    logger.info("Deleted project %s", project_id)
    return True


# --- Activity types ---


def _row_to_activity_type(row: sqlite3.Row) -> ActivityType:
    return ActivityType(
        id=row["id"],
        name=row["name"],
        short_label=row["short_label"],
        is_billable_work=bool(row["is_billable_work"]),
    )


def list_activity_types() -> list[ActivityType]:
    rows = _query("SELECT * FROM activity_types ORDER BY id")
    return [_row_to_activity_type(row) for row in rows]


def get_activity_type(activity_type_id: int) -> ActivityType | None:
    rows = _query("SELECT * FROM activity_types WHERE id = ?", (activity_type_id,))
    return _row_to_activity_type(rows[0]) if rows else None


def create_activity_type(name: str, short_label: str, is_billable_work: bool) -> int:
    with _transaction("create activity type") as conn:
        cursor = conn.execute(
            "INSERT INTO activity_types (name, short_label, is_billable_work) VALUES (?, ?, ?)",
            (name, short_label, int(is_billable_work)),
        )
    logger.info("Created activity type %r (id=%s)", name, cursor.lastrowid)
    return cursor.lastrowid  # type: ignore[return-value]


def update_activity_type(
    activity_type_id: int, name: str, short_label: str, is_billable_work: bool
) -> None:
    with _transaction("update activity type") as conn:
        cursor = conn.execute(
            "UPDATE activity_types SET name = ?, short_label = ?, is_billable_work = ? WHERE id = ?",
            (name, short_label, int(is_billable_work), activity_type_id),
        )
    if cursor.rowcount == 0:
        raise StorageError(f"Activity type {activity_type_id} not found")
    logger.info("Updated activity type %s", activity_type_id)


def can_delete_activity_type(activity_type_id: int) -> bool:
    """Check if an activity type can be deleted (has no hour entries)."""
    rows = _query(
        "SELECT COUNT(*) as count FROM hour_entries WHERE activity_type_id = ?",
        (activity_type_id,),
    )
    return rows[0]["count"] == 0


def delete_activity_type(activity_type_id: int) -> bool:
    """Delete an activity type. Returns False if it still has hour entries."""
    if not can_delete_activity_type(activity_type_id):
        return False
    with _transaction("delete activity type") as conn:
        conn.execute("DELETE FROM activity_types WHERE id = ?", (activity_type_id,))
    logger.info("Deleted activity type %s", activity_type_id)
    return True


# --- Hour entries ---


def _row_to_entry(row: sqlite3.Row) -> HourEntry:
    return HourEntry(
        id=row["id"],
        date=date.fromisoformat(row["date"]),
        activity_type_id=row["activity_type_id"],
        project_id=row["project_id"],
        hours=row["hours"],
    )


def list_entries_for_date(d: date) -> list[HourEntry]:
    rows = _query("SELECT * FROM hour_entries WHERE date = ? ORDER BY id", (d.isoformat(),))
    return [_row_to_entry(row) for row in rows]


def list_entries_in_range(start: date, end: date) -> list[HourEntry]:
    """Get entries between two dates (inclusive)."""
    rows = _query(
        "SELECT * FROM hour_entries WHERE date >= ? AND date <= ? ORDER BY date, id",
        (start.isoformat(), end.isoformat()),
    )
    return [_row_to_entry(row) for row in rows]


def list_entries_for_month(year: int, month: int) -> list[HourEntry]:
    return list_entries_in_range(*month_bounds(year, month))


def _insert_entry(conn: sqlite3.Connection, entry: HourEntry) -> int:
    cursor = conn.execute(
        "INSERT INTO hour_entries (date, activity_type_id, project_id, hours) VALUES (?, ?, ?, ?)",
        (entry.date.isoformat(), entry.activity_type_id, entry.project_id, entry.hours),
    )
    return cursor.lastrowid  # type: ignore[return-value]


def create_entry(entry: HourEntry) -> int:
    with _transaction("create hour entry") as conn:
        entry_id = _insert_entry(conn, entry)
    logger.info("Created %sh entry on %s (id=%s)", entry.hours, entry.date, entry_id)
    return entry_id


def update_entry(entry: HourEntry) -> None:
    if entry.id is None:
        raise StorageError("Cannot update an hour entry without an id")
    with _transaction("update hour entry") as conn:
        cursor = conn.execute(
            """
            UPDATE hour_entries
            SET date = ?, activity_type_id = ?, project_id = ?, hours = ?
            WHERE id = ?
            """,
            (entry.date.isoformat(), entry.activity_type_id, entry.project_id, entry.hours, entry.id),
        )
    if cursor.rowcount == 0:
        raise StorageError(f"Hour entry {entry.id} not found")
    logger.info("Updated hour entry %s", entry.id)


def delete_entry(entry_id: int) -> None:
    with _transaction("delete hour entry") as conn:
        conn.execute("DELETE FROM hour_entries WHERE id = ?", (entry_id,))
    logger.info("Deleted hour entry %s", entry_id)


def delete_entries_for_date(d: date) -> int:
    """Delete every entry on a date. Returns count deleted."""
    with _transaction("delete hour entries") as conn:
        cursor = conn.execute("DELETE FROM hour_entries WHERE date = ?", (d.isoformat(),))
    logger.info("Deleted %d hour entries on %s", cursor.rowcount, d)
    return cursor.rowcount


def replace_entries_for_date(d: date, entries: list[HourEntry]) -> int:
    """Replace all entries on a date in one transaction. Returns count created."""
    with _transaction("replace hour entries") as conn:
        conn.execute("DELETE FROM hour_entries WHERE date = ?", (d.isoformat(),))
        for entry in entries:
            _insert_entry(conn, entry.copy_to(d))
    logger.info("Replaced hour entries on %s with %d entries", d, len(entries))
    return len(entries)


def get_db_stats() -> dict[str, int]:
    """Row counts per table, for --db-info."""
    return {
        "projects": _query("SELECT COUNT(*) as count FROM projects")[0]["count"],
        "activity_types": _query("SELECT COUNT(*) as count FROM activity_types")[0]["count"],
        "hour_entries": _query("SELECT COUNT(*) as count FROM hour_entries")[0]["count"],
    }
