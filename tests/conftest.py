"""Shared fixtures for tests."""

from __future__ import annotations

import importlib
import os
import tempfile
from datetime import date
from typing import Generator

import pytest

# Point storage at a throwaway database before anything imports it
_fallback_fd, _fallback_db = tempfile.mkstemp(suffix=".db")
os.close(_fallback_fd)
os.environ["TIMELOG_DB"] = _fallback_db


@pytest.fixture
def temp_database(tmp_path, monkeypatch) -> Generator:
    """Fresh, initialised database with the default activity types."""
    import storage

    storage.close_db()
    monkeypatch.setenv("TIMELOG_DB", str(tmp_path / "test_timelog.db"))
    importlib.reload(storage)
    storage.init_db()
    storage.seed_defaults()

    yield storage

    storage.close_db()


@pytest.fixture
def project(temp_database):
    """A project named Acme with accounting id 102."""
    project_id = temp_database.create_project("Acme", 102)
    return temp_database.get_project(project_id)


@pytest.fixture
def activity_types(temp_database):
    """The seeded activity types keyed by name."""
    return {a.name: a for a in temp_database.list_activity_types()}


@pytest.fixture
def sample_entry(project, activity_types):
    """An 8h Development entry on 2024-03-04 (not saved)."""
    from models import HourEntry

    return HourEntry(
        date=date(2024, 3, 4),
        activity_type_id=activity_types["Development"].id,
        project_id=project.id,
        hours=8.0,
    )


@pytest.fixture
def palette():
    from config import Palette

    return Palette()


def press(view, *keys):
    """Send keys to a view, feeding every command result back in. Returns the last message."""
    from messages import Key

    last = None
    for key in keys:
        command = view.update(Key(key))
        while command is not None and command.delay is None and not command.blocking:
            last = command()
            command = view.update(last)
    return last
