"""Monthly aggregation of hour entries for reports."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from models import ActivityType, HourEntry, Project

# project name -> activity name -> included in the mail report
ReportSelection = dict[str, dict[str, bool]]


@dataclass
class StatsLine:
    project_name: str
    activity_name: str
    hours: float


@dataclass
class WorkhourStats:
    total_hours: float = 0.0
    total_days: int = 0
    average_per_day: float = 0.0
    project_hours: dict[str, float] = field(default_factory=dict)
    activity_hours: dict[str, float] = field(default_factory=dict)
    project_activity_hours: dict[str, dict[str, float]] = field(default_factory=dict)
    daily_breakdown: dict[date, list[StatsLine]] = field(default_factory=dict)


def calculate_stats(
    entries: list[HourEntry],
    activity_types: dict[int, ActivityType],
    projects: dict[int, Project],
) -> WorkhourStats:
    """Aggregate entries by project, activity and day.

    Entries pointing at an unknown project or activity still count towards
    the totals but are left out of the per-pair breakdown.
    """
    project_hours: dict[str, float] = defaultdict(float)
    activity_hours: dict[str, float] = defaultdict(float)
    pair_hours: dict[str, dict[str, float]] = defaultdict(lambda: defaultdict(float))
    daily: dict[date, list[StatsLine]] = defaultdict(list)
    total = 0.0

    for entry in entries:
        total += entry.hours
        project = projects.get(entry.project_id)
        activity = activity_types.get(entry.activity_type_id)
        project_name = project.name if project else ""
        activity_name = activity.name if activity else ""
        if project:
            project_hours[project_name] += entry.hours
        if activity:
            activity_hours[activity_name] += entry.hours
        if project and activity:
            pair_hours[project_name][activity_name] += entry.hours
        daily[entry.date].append(StatsLine(project_name, activity_name, entry.hours))

    days = len(daily)
    return WorkhourStats(
        total_hours=total,
        total_days=days,
        average_per_day=total / days if days else 0.0,
        project_hours=dict(project_hours),
        activity_hours=dict(activity_hours),
        project_activity_hours={name: dict(acts) for name, acts in pair_hours.items()},
        daily_breakdown=dict(sorted(daily.items())),
    )


def checklist_pairs(stats: WorkhourStats) -> list[tuple[str, str, float]]:
    """(project, activity, hours) ordered by project hours then activity hours, largest first."""
    pairs = []
    projects = sorted(stats.project_hours.items(), key=lambda item: (-item[1], item[0]))
    for project_name, _ in projects:
        activities = stats.project_activity_hours.get(project_name, {})
        for activity_name, hours in sorted(activities.items(), key=lambda item: (-item[1], item[0])):
            pairs.append((project_name, activity_name, hours))
    return pairs


def initial_selection(stats: WorkhourStats, activity_types: list[ActivityType]) -> ReportSelection:
    """Every pair checked if and only if its activity counts as billable work."""
    billable = {activity.name: activity.is_billable_work for activity in activity_types}
    selection: ReportSelection = {}
    for project_name, activity_name, _ in checklist_pairs(stats):
        selection.setdefault(project_name, {})[activity_name] = billable.get(activity_name, False)
    return selection


def filter_entries(
    entries: list[HourEntry],
    selection: ReportSelection,
    activity_types: dict[int, ActivityType],
    projects: dict[int, Project],
) -> list[HourEntry]:
    """Keep only entries whose (project, activity) pair is checked."""
    kept = []
    for entry in entries:
        project = projects.get(entry.project_id)
        activity = activity_types.get(entry.activity_type_id)
        if project and activity and selection.get(project.name, {}).get(activity.name, False):
            kept.append(entry)
    return kept
