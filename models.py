from __future__ import annotations

from dataclasses import dataclass
from datetime import date


@dataclass
class Project:
    name: str
    accounting_id: int
    id: int | None = None


@dataclass
class ActivityType:
    name: str
    short_label: str
    is_billable_work: bool = True
    id: int | None = None

    @property
    def display_name(self) -> str:
        return f"{self.short_label} {self.name}"


@dataclass
class HourEntry:
    date: date
    activity_type_id: int
    project_id: int
    hours: float
    id: int | None = None

    def copy_to(self, target: date) -> HourEntry:
        """Same activity, project and hours on another date, without an id."""
        return HourEntry(
            date=target,
            activity_type_id=self.activity_type_id,
            project_id=self.project_id,
            hours=self.hours,
        )


@dataclass
class ReportMetadata:
    from_company: str
    to_company: str
    invoice_name: str
