"""Modal dialogs layered over the calendar, projects and activity type screens.

Every modal exposes update(key) -> Command | None and render(palette). A modal
never touches the database: terminal transitions are returned as messages and
the owning view performs the write.
"""

from __future__ import annotations

from datetime import date

from rich.console import RenderableType
from rich.text import Text

from config import Palette
from forms import Checkbox, FieldForm, Form, SelectOption, SingleSelect, TextField
from messages import (
    ActivityTypeCreateSubmitted,
    ActivityTypeDeleteConfirmed,
    ActivityTypeEditSubmitted,
    ActivityTypeModalCancelled,
    Command,
    DayViewClosed,
    DayViewCreateRequested,
    DayViewDeleteRequested,
    DayViewEditRequested,
    ProjectCreateSubmitted,
    ProjectDeleteConfirmed,
    ProjectEditSubmitted,
    ProjectModalCancelled,
    WorkhourCreateCancelled,
    WorkhourCreateSubmitted,
    WorkhourDeleteCancelled,
    WorkhourDeleteConfirmed,
    WorkhourEditCancelled,
    WorkhourEditSubmitted,
    emit,
)
from models import ActivityType, HourEntry, Project
from utils import format_hours
from validators import length_range, max_length, positive_float, positive_int
from widgets import render_help_text, render_modal

FORM_HELP = [("tab/shift+tab", "navigate"), ("↑/↓", "select"), ("enter", "save"), ("esc", "cancel")]


class ConfirmModal:
    """Yes/no dialog. Subclasses supply the message and both outcomes."""

    title = "Confirm"

    def update(self, key: str) -> Command | None:
        if key in ("y", "Y", "enter"):
            return self.confirm()
        if key in ("n", "N", "escape"):
            return self.cancel()
        return None

    def confirm(self) -> Command:
        raise NotImplementedError

    def cancel(self) -> Command:
        raise NotImplementedError

    def describe(self, palette: Palette) -> Text:
        raise NotImplementedError

    def render(self, palette: Palette) -> RenderableType:
        body = self.describe(palette)
        body.append("\n\n")
        body.append("This action cannot be undone.\n\n", style=palette.warning)
        body.append_text(render_help_text([("y/enter", "confirm"), ("n/esc", "cancel")], palette))
        return render_modal(self.title, body, palette, border_style=palette.warning)


def activity_options(activity_types: list[ActivityType]) -> list[SelectOption]:
    return [
        SelectOption(a.id, a.display_name, "billable" if a.is_billable_work else "")  # type: ignore[arg-type]
        for a in activity_types
    ]


def project_options(projects: list[Project]) -> list[SelectOption]:
    return [SelectOption(p.id, p.name, f"#{p.accounting_id}") for p in projects]  # type: ignore[arg-type]


# --- Day view ---


class DayViewModal:
    """All entries logged on one day, with a movable selection."""

    def __init__(
        self,
        day: date,
        entries: list[HourEntry],
        activity_types: list[ActivityType],
        projects: list[Project],
    ):
        self.day = day
        self.entries = list(entries)
        self.activity_types = {a.id: a for a in activity_types}
        self.projects = {p.id: p for p in projects}
        self.selected_index = 0

    def refresh(self, entries: list[HourEntry]) -> None:
        """Replace the entry list, keeping the selection in range."""
        self.entries = list(entries)
        if self.selected_index >= len(self.entries):
            self.selected_index = max(len(self.entries) - 1, 0)

    @property
    def selected_entry(self) -> HourEntry | None:
        if 0 <= self.selected_index < len(self.entries):
            return self.entries[self.selected_index]
        return None

    @property
    def total_hours(self) -> float:
        return sum(entry.hours for entry in self.entries)

    def update(self, key: str) -> Command | None:
        if key in ("escape", "q"):
            return emit(DayViewClosed())
        if key == "n":
            return emit(DayViewCreateRequested(self.day))

        entry = self.selected_entry
        if key in ("e", "enter") and entry is not None:
            return emit(DayViewEditRequested(self.day, entry.id))  # type: ignore[arg-type]
        if key == "d" and entry is not None:
            return emit(DayViewDeleteRequested(self.day, entry.id))  # type: ignore[arg-type]

        if self.entries:
            if key in ("up", "k"):
                self.selected_index = (self.selected_index - 1) % len(self.entries)
            elif key in ("down", "j"):
                self.selected_index = (self.selected_index + 1) % len(self.entries)
        return None

    def describe_entry(self, entry: HourEntry) -> tuple[str, str]:
        activity = self.activity_types.get(entry.activity_type_id)
        project = self.projects.get(entry.project_id)
        activity_name = activity.display_name if activity else "Unknown activity"
        project_name = project.name if project else "No project"
        return activity_name, project_name

    def render(self, palette: Palette) -> RenderableType:
        body = Text()
        body.append(self.day.strftime("%A, %d %B %Y") + "\n\n", style=palette.date)
        if not self.entries:
            body.append("No hours logged for this day.\n", style=palette.help)
        for index, entry in enumerate(self.entries):
            activity_name, project_name = self.describe_entry(entry)
            selected = index == self.selected_index
            style = palette.focused if selected else palette.value
            body.append("▶ " if selected else "  ", style=palette.focused)
            body.append(f"{activity_name:<24} ", style=style)
            body.append(f"{project_name:<20} ", style=palette.label if not selected else style)
            body.append(f"{format_hours(entry.hours):>5}h\n", style=style)
        body.append(f"\nTotal: {format_hours(self.total_hours)}h\n\n", style=palette.total)
        body.append_text(render_help_text(
            [("↑/↓", "select"), ("n", "new"), ("e/enter", "edit"), ("d", "delete"), ("esc", "close")],
            palette,
        ))
        return render_modal("Logged Hours", body, palette)


# --- Hour entry create / edit / delete ---


def _workhour_form(activity_types: list[ActivityType], projects: list[Project]) -> Form:
    return Form(
        SingleSelect(
            "Activity",
            activity_options(activity_types),
            required=True,
            required_message="Please select an activity type",
        ),
        SingleSelect(
            "Project",
            project_options(projects),
            required=True,
            required_message="Please select a project",
        ),
        TextField(
            "Hours",
            "8",
            char_limit=5,
            required=True,
            validator=positive_float("Hours"),
        ),
    )


class _WorkhourFormModal:
    ACTIVITY, PROJECT, HOURS = range(3)
    title = ""

    def __init__(self, day: date, activity_types: list[ActivityType], projects: list[Project]):
        self.day = day
        self.form = _workhour_form(activity_types, projects)

    @property
    def activity_select(self) -> SingleSelect:
        return self.form.get_select(self.ACTIVITY)  # type: ignore[return-value]

    @property
    def project_select(self) -> SingleSelect:
        return self.form.get_select(self.PROJECT)  # type: ignore[return-value]

    @property
    def hours_field(self) -> TextField:
        return self.form.get_field(self.HOURS)  # type: ignore[return-value]

    def update(self, key: str) -> Command | None:
        if key == "escape":
            return self.cancel()
        if key == "enter":
            if self.form.validate():
                return None
            return self.submit(
                self.activity_select.selected_id,  # type: ignore[arg-type]
                self.project_select.selected_id,  # type: ignore[arg-type]
                float(self.hours_field.value.strip()),
            )
        self.form.handle_input(key)
        return None

    def submit(self, activity_type_id: int, project_id: int, hours: float) -> Command:
        raise NotImplementedError

    def cancel(self) -> Command:
        raise NotImplementedError

    def render(self, palette: Palette) -> RenderableType:
        body = Text()
        body.append(self.day.strftime("%A, %d %B %Y") + "\n\n", style=palette.date)
        body.append_text(self.form.render(palette))
        body.append("\n")
        body.append_text(render_help_text(FORM_HELP, palette))
        return render_modal(self.title, body, palette)


class WorkhourCreateModal(_WorkhourFormModal):
    title = "Log Hours"

    def submit(self, activity_type_id: int, project_id: int, hours: float) -> Command:
        return emit(WorkhourCreateSubmitted(self.day, activity_type_id, project_id, hours))

    def cancel(self) -> Command:
        return emit(WorkhourCreateCancelled())


class WorkhourEditModal(_WorkhourFormModal):
    title = "Edit Hours"

    def __init__(self, entry: HourEntry, activity_types: list[ActivityType], projects: list[Project]):
        super().__init__(entry.date, activity_types, projects)
        self.entry_id: int = entry.id  # type: ignore[assignment]
        self.activity_select.select_id(entry.activity_type_id)
        self.project_select.select_id(entry.project_id)
        self.hours_field.value = format_hours(entry.hours)

    def submit(self, activity_type_id: int, project_id: int, hours: float) -> Command:
        return emit(WorkhourEditSubmitted(self.entry_id, self.day, activity_type_id, project_id, hours))

    def cancel(self) -> Command:
        return emit(WorkhourEditCancelled())


class WorkhourDeleteModal(ConfirmModal):
    title = "Delete Hours"

    def __init__(self, entry: HourEntry, activity_name: str, project_name: str):
        self.entry = entry
        self.activity_name = activity_name
        self.project_name = project_name

    def confirm(self) -> Command:
        return emit(WorkhourDeleteConfirmed(self.entry.id, self.entry.date))  # type: ignore[arg-type]

    def cancel(self) -> Command:
        return emit(WorkhourDeleteCancelled())

    def describe(self, palette: Palette) -> Text:
        text = Text("Delete this entry?\n\n", style=palette.value)
        text.append(self.entry.date.strftime("%A, %d %B %Y") + "\n", style=palette.date)
        text.append(f"{self.activity_name}  ·  {self.project_name}  ·  {format_hours(self.entry.hours)}h",
                    style=palette.value)
        return text


# --- Projects ---


def _project_form(project: Project | None = None) -> FieldForm:
    return FieldForm(
        TextField(
            "Name",
            "Project name",
            value=project.name if project else "",
            char_limit=50,
            required=True,
            validator=length_range("Name", 2, 50),
        ),
        TextField(
            "Accounting ID",
            "102",
            value=str(project.accounting_id) if project else "",
            char_limit=10,
            required=True,
            validator=positive_int("Accounting ID"),
            help_text="Analytic account id used in the timesheet CSV",
        ),
    )


class _ProjectFormModal:
    title = ""

    def __init__(self, project: Project | None = None):
        self.form = _project_form(project)

    def update(self, key: str) -> Command | None:
        if key == "escape":
            return emit(ProjectModalCancelled())
        if key == "enter":
            if self.form.validate():
                return None
            name, accounting_id = self.form.values()
            return self.submit(name.strip(), int(accounting_id.strip()))
        self.form.handle_input(key)
        return None

    def submit(self, name: str, accounting_id: int) -> Command:
        raise NotImplementedError

    def render(self, palette: Palette) -> RenderableType:
        body = self.form.render(palette)
        body.append("\n")
        body.append_text(render_help_text(
            [("tab/shift+tab", "navigate"), ("enter", "save"), ("esc", "cancel")], palette
        ))
        return render_modal(self.title, body, palette)


class ProjectCreateModal(_ProjectFormModal):
    title = "New Project"

    def submit(self, name: str, accounting_id: int) -> Command:
        return emit(ProjectCreateSubmitted(name, accounting_id))


class ProjectEditModal(_ProjectFormModal):
    title = "Edit Project"

    def __init__(self, project: Project):
        super().__init__(project)
        self.project_id: int = project.id  # type: ignore[assignment]

    def submit(self, name: str, accounting_id: int) -> Command:
        return emit(ProjectEditSubmitted(self.project_id, name, accounting_id))


class ProjectDeleteModal(ConfirmModal):
    title = "Delete Project"

    def __init__(self, project: Project):
        self.project = project

    def confirm(self) -> Command:
        return emit(ProjectDeleteConfirmed(self.project.id))  # type: ignore[arg-type]

    def cancel(self) -> Command:
        return emit(ProjectModalCancelled())

    def describe(self, palette: Palette) -> Text:
        text = Text("Delete project ", style=palette.value)
        text.append(self.project.name, style=palette.heading)
        text.append("?")
        return text


# --- Activity types ---


def _activity_type_form(activity_type: ActivityType | None = None) -> Form:
    return Form(
        TextField(
            "Name",
            "Development",
            value=activity_type.name if activity_type else "",
            char_limit=50,
            required=True,
            validator=max_length("Name", 50),
        ),
        TextField(
            "Short label",
            "🔧",
            value=activity_type.short_label if activity_type else "",
            char_limit=20,
            required=True,
            help_text="Shown in calendar cells",
        ),
        Checkbox(
            "Is Work",
            activity_type.is_billable_work if activity_type else True,
            help_text="included in mail report",
            unchecked_help_text="excluded from mail report",
        ),
    )


class _ActivityTypeFormModal:
    title = ""

    def __init__(self, activity_type: ActivityType | None = None):
        self.form = _activity_type_form(activity_type)

    def update(self, key: str) -> Command | None:
        if key == "escape":
            return emit(ActivityTypeModalCancelled())
        if key == "enter":
            if self.form.validate():
                return None
            is_work = self.form.get_checkbox(2)
            return self.submit(
                self.form.value(0).strip(),
                self.form.value(1).strip(),
                is_work.checked if is_work else True,
            )
        self.form.handle_input(key)
        return None

    def submit(self, name: str, short_label: str, is_billable_work: bool) -> Command:
        raise NotImplementedError

    def render(self, palette: Palette) -> RenderableType:
        body = self.form.render(palette)
        body.append("\n")
        body.append_text(render_help_text(
            [("tab/shift+tab", "navigate"), ("space", "toggle"), ("enter", "save"), ("esc", "cancel")],
            palette,
        ))
        return render_modal(self.title, body, palette)


class ActivityTypeCreateModal(_ActivityTypeFormModal):
    title = "New Activity Type"

    def submit(self, name: str, short_label: str, is_billable_work: bool) -> Command:
        return emit(ActivityTypeCreateSubmitted(name, short_label, is_billable_work))


class ActivityTypeEditModal(_ActivityTypeFormModal):
    title = "Edit Activity Type"

    def __init__(self, activity_type: ActivityType):
        super().__init__(activity_type)
        self.activity_type_id: int = activity_type.id  # type: ignore[assignment]

    def submit(self, name: str, short_label: str, is_billable_work: bool) -> Command:
        return emit(ActivityTypeEditSubmitted(self.activity_type_id, name, short_label, is_billable_work))


class ActivityTypeDeleteModal(ConfirmModal):
    title = "Delete Activity Type"

    def __init__(self, activity_type: ActivityType):
        self.activity_type = activity_type

    def confirm(self) -> Command:
        return emit(ActivityTypeDeleteConfirmed(self.activity_type.id))  # type: ignore[arg-type]

    def cancel(self) -> Command:
        return emit(ActivityTypeModalCancelled())

    def describe(self, palette: Palette) -> Text:
        text = Text("Delete activity type ", style=palette.value)
        text.append(self.activity_type.display_name, style=palette.heading)
        text.append("?")
        return text
