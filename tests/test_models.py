"""Tests for models.py and clipboard.py."""

from __future__ import annotations

from datetime import date

from clipboard import Clipboard
from models import ActivityType, HourEntry


def entry(d: date, hours: float = 8.0, entry_id: int | None = 1) -> HourEntry:
    return HourEntry(date=d, activity_type_id=1, project_id=2, hours=hours, id=entry_id)


class TestModels:
    """Tests for the dataclasses."""

    def test_activity_display_name(self):
        activity = ActivityType(name="Development", short_label="🔧")
        assert activity.display_name == "🔧 Development"
        assert activity.is_billable_work

    def test_copy_to_drops_id(self):
        copy = entry(date(2024, 3, 4), 7.5, entry_id=9).copy_to(date(2024, 3, 5))
        assert copy.id is None
        assert copy.date == date(2024, 3, 5)
        assert (copy.activity_type_id, copy.project_id, copy.hours) == (1, 2, 7.5)


class TestClipboard:
    """Tests for the single-slot clipboard."""

    def test_yank_empty_day_is_noop(self):
        clipboard = Clipboard()
        clipboard.yank(date(2024, 3, 4), [entry(date(2024, 3, 4))])
        assert clipboard.yank(date(2024, 3, 5), []) == 0
        assert clipboard.source_date == date(2024, 3, 4)
        assert len(clipboard.entries) == 1

    def test_yank_replaces_previous(self):
        clipboard = Clipboard()
        clipboard.yank(date(2024, 3, 4), [entry(date(2024, 3, 4))])
        count = clipboard.yank(date(2024, 3, 6), [entry(date(2024, 3, 6)), entry(date(2024, 3, 6), 1)])
        assert count == 2
        assert clipboard.source_date == date(2024, 3, 6)

    def test_entries_for_target(self):
        clipboard = Clipboard()
        clipboard.yank(date(2024, 3, 4), [entry(date(2024, 3, 4), 6), entry(date(2024, 3, 4), 2)])
        pasted = clipboard.entries_for(date(2024, 3, 8))
        assert [e.date for e in pasted] == [date(2024, 3, 8)] * 2
        assert [e.hours for e in pasted] == [6, 2]
        assert all(e.id is None for e in pasted)

    def test_invalidate_only_source_date(self):
        clipboard = Clipboard()
        clipboard.yank(date(2024, 3, 4), [entry(date(2024, 3, 4))])
        assert not clipboard.invalidate(date(2024, 3, 5))
        assert not clipboard.is_empty()
        assert clipboard.invalidate(date(2024, 3, 4))
        assert clipboard.is_empty()
        assert clipboard.source_date is None
