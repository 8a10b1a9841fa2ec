"""Tests for summary.py - monthly aggregation and the report checklist."""

from __future__ import annotations

from datetime import date

import pytest

from models import ActivityType, HourEntry, Project
from summary import calculate_stats, checklist_pairs, filter_entries, initial_selection

DEV = ActivityType("Development", "🔧", True, id=1)
LEAVE = ActivityType("Leave", "🏖️", False, id=2)
ACME = Project("Acme", 102, id=10)
GLOBEX = Project("Globex", 40, id=20)

ACTIVITIES = {a.id: a for a in (DEV, LEAVE)}
PROJECTS = {p.id: p for p in (ACME, GLOBEX)}


def entry(day: int, activity: ActivityType, project: Project, hours: float) -> HourEntry:
    return HourEntry(date(2024, 3, day), activity.id, project.id, hours)  # type: ignore[arg-type]


@pytest.fixture
def entries() -> list[HourEntry]:
    return [
        entry(4, DEV, ACME, 6),
        entry(4, DEV, GLOBEX, 2),
        entry(5, DEV, GLOBEX, 8),
        entry(6, LEAVE, ACME, 8),
        entry(7, DEV, ACME, 4),
    ]


class TestCalculateStats:
    """Tests for calculate_stats."""

    def test_totals(self, entries):
        stats = calculate_stats(entries, ACTIVITIES, PROJECTS)
        assert stats.total_hours == 28
        assert stats.total_days == 4
        assert stats.average_per_day == 7

    def test_breakdowns(self, entries):
        stats = calculate_stats(entries, ACTIVITIES, PROJECTS)
        assert stats.project_hours == {"Acme": 18, "Globex": 10}
        assert stats.activity_hours == {"Development": 20, "Leave": 8}
        assert stats.project_activity_hours == {
            "Acme": {"Development": 10, "Leave": 8},
            "Globex": {"Development": 10},
        }

    def test_daily_breakdown_sorted_by_date(self, entries):
        stats = calculate_stats(list(reversed(entries)), ACTIVITIES, PROJECTS)
        assert list(stats.daily_breakdown) == [date(2024, 3, d) for d in (4, 5, 6, 7)]
        assert len(stats.daily_breakdown[date(2024, 3, 4)]) == 2

    def test_empty(self):
        stats = calculate_stats([], ACTIVITIES, PROJECTS)
        assert stats.total_hours == 0
        assert stats.average_per_day == 0

    def test_unknown_project_counts_in_totals_only(self):
        stats = calculate_stats([HourEntry(date(2024, 3, 4), 1, 999, 3)], ACTIVITIES, PROJECTS)
        assert stats.total_hours == 3
        assert stats.project_activity_hours == {}


class TestChecklist:
    """Tests for checklist ordering and default selection."""

    def test_ordered_by_project_then_activity_hours(self, entries):
        stats = calculate_stats(entries, ACTIVITIES, PROJECTS)
        assert checklist_pairs(stats) == [
            ("Acme", "Development", 10),
            ("Acme", "Leave", 8),
            ("Globex", "Development", 10),
        ]

    def test_defaults_follow_billable_flag(self, entries):
        stats = calculate_stats(entries, ACTIVITIES, PROJECTS)
        selection = initial_selection(stats, [DEV, LEAVE])
        assert selection == {
            "Acme": {"Development": True, "Leave": False},
            "Globex": {"Development": True},
        }

    def test_filter_entries_keeps_checked_pairs(self, entries):
        selection = {"Acme": {"Development": True, "Leave": False}, "Globex": {"Development": False}}
        kept = filter_entries(entries, selection, ACTIVITIES, PROJECTS)
        assert [(e.date.day, e.hours) for e in kept] == [(4, 6), (7, 4)]
