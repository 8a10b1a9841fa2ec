"""Messages exchanged between views, modals and the host loop.

A view's update() mutates the view and returns at most one Command. Running a
command produces exactly one message, which the host feeds back into the same
update loop.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable


@dataclass
class Command:
    func: Callable[[], object]
    delay: float | None = None
    blocking: bool = False
    on_error: Callable[[Exception], object] | None = None

    def __call__(self) -> object:
        return self.func()

    def fail(self, error: Exception) -> object:
        """The message to deliver when func raised instead of returning one."""
        if self.on_error is not None:
            return self.on_error(error)
        return ShowNotification(f"Background task failed: {error}", "error")


def emit(message: object) -> Command:
    """A command that immediately yields message."""
    return Command(lambda: message)


@dataclass(frozen=True)
class Key:
    key: str


# --- Application ---


@dataclass(frozen=True)
class QuitRequested:
    pass


@dataclass(frozen=True)
class ShowNotification:
    message: str
    kind: str = "info"  # error, warning, success, info


@dataclass(frozen=True)
class ClearNotification:
    token: int


def notify(message: str, kind: str = "info") -> Command:
    return emit(ShowNotification(message, kind))


def notify_error(message: str, error: Exception | None = None) -> Command:
    if error is not None:
        message = f"{message}: {error}"
    return notify(message, "error")


# --- Calendar: day view ---


@dataclass(frozen=True)
class DayViewClosed:
    pass


@dataclass(frozen=True)
class DayViewCreateRequested:
    date: date


@dataclass(frozen=True)
class DayViewEditRequested:
    date: date
    entry_id: int


@dataclass(frozen=True)
class DayViewDeleteRequested:
    date: date
    entry_id: int


# --- Calendar: workhour CRUD modals ---


@dataclass(frozen=True)
class WorkhourCreateSubmitted:
    date: date
    activity_type_id: int
    project_id: int
    hours: float


@dataclass(frozen=True)
class WorkhourCreateCancelled:
    pass


@dataclass(frozen=True)
class WorkhourEditSubmitted:
    entry_id: int
    date: date
    activity_type_id: int
    project_id: int
    hours: float


@dataclass(frozen=True)
class WorkhourEditCancelled:
    pass


@dataclass(frozen=True)
class WorkhourDeleteConfirmed:
    entry_id: int
    date: date


@dataclass(frozen=True)
class WorkhourDeleteCancelled:
    pass


# --- Calendar: report ---


@dataclass(frozen=True)
class ReportClosed:
    pass


@dataclass(frozen=True)
class ReportGenerated:
    path: str


@dataclass(frozen=True)
class ReportGenerationFailed:
    error: str


@dataclass(frozen=True)
class SignatureImageSelected:
    path: str


# --- Projects ---


@dataclass(frozen=True)
class ProjectCreateSubmitted:
    name: str
    accounting_id: int


@dataclass(frozen=True)
class ProjectEditSubmitted:
    project_id: int
    name: str
    accounting_id: int


@dataclass(frozen=True)
class ProjectDeleteConfirmed:
    project_id: int


@dataclass(frozen=True)
class ProjectModalCancelled:
    pass


# --- Activity types ---


@dataclass(frozen=True)
class ActivityTypeCreateSubmitted:
    name: str
    short_label: str
    is_billable_work: bool


@dataclass(frozen=True)
class ActivityTypeEditSubmitted:
    activity_type_id: int
    name: str
    short_label: str
    is_billable_work: bool


@dataclass(frozen=True)
class ActivityTypeDeleteConfirmed:
    activity_type_id: int


@dataclass(frozen=True)
class ActivityTypeModalCancelled:
    pass
