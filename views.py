"""Top-level screens: calendar, projects, activity types, and the tabbed root.

Views are plain state machines. update(message) mutates the view and returns
at most one Command; the Textual host runs it and feeds the resulting message
back through MainView.update.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Union

from rich import box
from rich.console import Group, RenderableType
from rich.table import Table
from rich.text import Text

import storage
from clipboard import Clipboard
from config import Config, Palette
from messages import (
    ActivityTypeCreateSubmitted,
    ActivityTypeDeleteConfirmed,
    ActivityTypeEditSubmitted,
    ActivityTypeModalCancelled,
    ClearNotification,
    Command,
    DayViewClosed,
    DayViewCreateRequested,
    DayViewDeleteRequested,
    DayViewEditRequested,
    Key,
    ProjectCreateSubmitted,
    ProjectDeleteConfirmed,
    ProjectEditSubmitted,
    ProjectModalCancelled,
    QuitRequested,
    ReportClosed,
    ReportGenerated,
    ReportGenerationFailed,
    ShowNotification,
    SignatureImageSelected,
    WorkhourCreateCancelled,
    WorkhourCreateSubmitted,
    WorkhourDeleteCancelled,
    WorkhourDeleteConfirmed,
    WorkhourEditCancelled,
    WorkhourEditSubmitted,
    emit,
    notify,
    notify_error,
)
from models import ActivityType, HourEntry, Project
from report import ReportModal
from screens import (
    ActivityTypeCreateModal,
    ActivityTypeDeleteModal,
    ActivityTypeEditModal,
    DayViewModal,
    ProjectCreateModal,
    ProjectDeleteModal,
    ProjectEditModal,
    WorkhourCreateModal,
    WorkhourDeleteModal,
    WorkhourEditModal,
)
from summary import calculate_stats
from utils import (
    add_months,
    format_hours,
    get_calendar_grid,
    get_grid_end,
    get_grid_start,
    is_in_visible_grid,
    is_same_day,
)
from widgets import render_help_text, render_modal

logger = logging.getLogger(__name__)

CalendarModal = Union[DayViewModal, WorkhourCreateModal, WorkhourEditModal, WorkhourDeleteModal, ReportModal]
CRUD_MODALS = (WorkhourCreateModal, WorkhourEditModal, WorkhourDeleteModal)

DAY_STEPS = {
    "left": -1, "h": -1,
    "right": 1, "l": 1,
    "up": -7, "k": -7,
    "down": 7, "j": 7,
}

CALENDAR_HELP = [
    ("←↓↑→ / hjkl", "move by day or week"),
    ("< / >", "previous / next month"),
    ("r", "jump to today"),
    ("enter", "open day"),
    ("y", "copy day"),
    ("p", "paste day"),
    ("d / x", "delete day's hours"),
    ("g", "generate report"),
    ("1 / 2 / 3", "switch tab"),
    ("?", "toggle help"),
    ("q / esc", "quit"),
]


class CalendarView:
    """Month grid with a selected date and a modal stack.

    At most one modal is active. A create/edit/delete modal opened from the
    day view keeps the day view in saved_parent and restores it on close.
    """

    title = "Calendar"

    def __init__(self, today: date | None = None):
        self._today = today
        self.selected_date = self.today
        self.view_year = self.selected_date.year
        self.view_month = self.selected_date.month
        self.active_modal: CalendarModal | None = None
        self.saved_parent: DayViewModal | None = None
        self.show_help = False
        self.clipboard = Clipboard()
        self.activity_types: list[ActivityType] = []
        self.projects: list[Project] = []
        self.entries_by_date: dict[date, list[HourEntry]] = {}

    @property
    def today(self) -> date:
        return self._today or date.today()

    @property
    def has_modal(self) -> bool:
        return self.active_modal is not None or self.show_help

    def reload(self) -> None:
        """Load activity types, projects and every entry in the visible grid."""
        self.activity_types = storage.list_activity_types()
        self.projects = storage.list_projects()
        start = get_grid_start(self.view_year, self.view_month)
        end = get_grid_end(self.view_year, self.view_month)
        grouped: dict[date, list[HourEntry]] = defaultdict(list)
        for entry in storage.list_entries_in_range(start, end):
            grouped[entry.date].append(entry)
        self.entries_by_date = dict(grouped)

    def _safe_reload(self) -> Command | None:
        try:
            self.reload()
        except storage.StorageError as e:
            return notify_error("Failed to load hours", e)
        return None

    def entries_for(self, d: date) -> list[HourEntry]:
        return self.entries_by_date.get(d, [])

    # --- Message routing ---

    HANDLERS = {
        DayViewClosed: "_on_day_view_closed",
        DayViewCreateRequested: "_on_create_requested",
        DayViewEditRequested: "_on_edit_requested",
        DayViewDeleteRequested: "_on_delete_requested",
        WorkhourCreateSubmitted: "_on_create_submitted",
        WorkhourEditSubmitted: "_on_edit_submitted",
        WorkhourDeleteConfirmed: "_on_delete_confirmed",
        WorkhourCreateCancelled: "_on_crud_cancelled",
        WorkhourEditCancelled: "_on_crud_cancelled",
        WorkhourDeleteCancelled: "_on_crud_cancelled",
        ReportClosed: "_on_report_closed",
        ReportGenerated: "_on_report_generated",
        ReportGenerationFailed: "_on_report_failed",
        SignatureImageSelected: "_on_signature_selected",
    }

    def update(self, message: object) -> Command | None:
        if isinstance(message, Key):
            return self.handle_key(message.key)
        handler = self.HANDLERS.get(type(message))
        if handler is None:
            return None
        return getattr(self, handler)(message)

    # --- Keys ---

    def handle_key(self, key: str) -> Command | None:
        if self.show_help:
            if key in ("?", "escape", "q"):
                self.show_help = False
            return None
        if self.active_modal is not None:
            return self.active_modal.update(key)

        if key in DAY_STEPS:
            self.move_selection(DAY_STEPS[key])
            return None
        if key == "<":
            return self.shift_month(-1)
        if key == ">":
            return self.shift_month(1)
        if key == "r":
            return self.go_to_today()
        if key == "?":
            self.show_help = True
        elif key == "y":
            return self.yank()
        elif key == "p":
            return self.paste()
        elif key in ("d", "x"):
            return self.delete_day()
        elif key == "g":
            return self.open_report()
        elif key == "enter":
            self.open_day_view()
        return None

    def move_selection(self, days: int) -> bool:
        """Step the selection; steps leaving the visible grid are ignored."""
        target = self.selected_date + timedelta(days=days)
        if not is_in_visible_grid(target, self.view_year, self.view_month):
            return False
        self.selected_date = target
        return True

    def shift_month(self, months: int) -> Command | None:
        self.selected_date = add_months(self.selected_date, months)
        self.view_year = self.selected_date.year
        self.view_month = self.selected_date.month
        return self._safe_reload()

    def go_to_today(self) -> Command | None:
        self.selected_date = self.today
        self.view_year = self.selected_date.year
        self.view_month = self.selected_date.month
        return self._safe_reload()

    def yank(self) -> Command:
        d = self.selected_date
        count = self.clipboard.yank(d, self.entries_for(d))
        if not count:
            return notify("Nothing to copy", "warning")
        return notify(f"📋 Copied {count} workhour(s) from {d.isoformat()}", "success")

    def paste(self) -> Command | None:
        if self.clipboard.is_empty():
            return notify("Clipboard is empty", "warning")
        d = self.selected_date
        try:
            count = storage.replace_entries_for_date(d, self.clipboard.entries_for(d))
        except storage.StorageError as e:
            return notify_error("Failed to paste workhours", e)
        return self._safe_reload() or notify(f"Pasted {count} workhour(s) to {d.isoformat()}", "success")

    def delete_day(self) -> Command | None:
        d = self.selected_date
        try:
            count = storage.delete_entries_for_date(d)
        except storage.StorageError as e:
            return notify_error("Failed to delete workhours", e)
        self.clipboard.invalidate(d)
        if error := self._safe_reload():
            return error
        if count:
            return notify(f"Deleted {count} workhour(s) from {d.isoformat()}")
        return None

    def open_report(self) -> Command | None:
        try:
            entries = storage.list_entries_for_month(self.view_year, self.view_month)
        except storage.StorageError as e:
            return notify_error("Failed to load hours", e)
        stats = calculate_stats(
            entries,
            {a.id: a for a in self.activity_types},  # type: ignore[misc]
            {p.id: p for p in self.projects},  # type: ignore[misc]
        )
        self.active_modal = ReportModal(self.view_month, self.view_year, stats, self.activity_types)
        return None

    def open_day_view(self) -> None:
        self.active_modal = DayViewModal(
            self.selected_date,
            self.entries_for(self.selected_date),
            self.activity_types,
            self.projects,
        )

    # --- Day view and its create/edit/delete modals ---

    def _on_day_view_closed(self, message: DayViewClosed) -> None:
        if isinstance(self.active_modal, DayViewModal):
            self.active_modal = None

    def _open_crud_modal(self, modal: WorkhourCreateModal | WorkhourEditModal | WorkhourDeleteModal) -> None:
        if isinstance(self.active_modal, DayViewModal):
            self.saved_parent = self.active_modal
        self.active_modal = modal

    def _find_entry(self, entry_id: int) -> HourEntry | None:
        if isinstance(self.active_modal, DayViewModal):
            candidates = self.active_modal.entries
        else:
            candidates = [e for entries in self.entries_by_date.values() for e in entries]
        return next((e for e in candidates if e.id == entry_id), None)

    def _on_create_requested(self, message: DayViewCreateRequested) -> None:
        self._open_crud_modal(WorkhourCreateModal(message.date, self.activity_types, self.projects))

    def _on_edit_requested(self, message: DayViewEditRequested) -> None:
        entry = self._find_entry(message.entry_id)
        if entry is not None:
            self._open_crud_modal(WorkhourEditModal(entry, self.activity_types, self.projects))

    def _on_delete_requested(self, message: DayViewDeleteRequested) -> None:
        entry = self._find_entry(message.entry_id)
        if entry is None:
            return
        if isinstance(self.active_modal, DayViewModal):
            activity_name, project_name = self.active_modal.describe_entry(entry)
        else:
            activity_name, project_name = "", ""
        self._open_crud_modal(WorkhourDeleteModal(entry, activity_name, project_name))

    def _close_crud_modal(self, wrote: bool) -> Command | None:
        """Restore the saved day view, refreshed when a write happened."""
        if not isinstance(self.active_modal, CRUD_MODALS):
            return None
        error = self._safe_reload() if wrote else None
        parent = self.saved_parent
        if parent is not None:
            if wrote:
                parent.refresh(self.entries_for(parent.day))
            self.active_modal = parent
            self.saved_parent = None
        else:
            self.active_modal = None
        return error

    def _on_crud_cancelled(self, message: object) -> Command | None:
        return self._close_crud_modal(wrote=False)

    def _on_create_submitted(self, message: WorkhourCreateSubmitted) -> Command | None:
        if not isinstance(self.active_modal, WorkhourCreateModal):
            return None
        entry = HourEntry(
            date=message.date,
            activity_type_id=message.activity_type_id,
            project_id=message.project_id,
            hours=message.hours,
        )
        try:
            storage.create_entry(entry)
        except storage.StorageError as e:
            self._close_crud_modal(wrote=False)
            return notify_error("Failed to create workhour", e)
        return self._close_crud_modal(wrote=True)

    def _on_edit_submitted(self, message: WorkhourEditSubmitted) -> Command | None:
        if not isinstance(self.active_modal, WorkhourEditModal):
            return None
        entry = HourEntry(
            id=message.entry_id,
            date=message.date,
            activity_type_id=message.activity_type_id,
            project_id=message.project_id,
            hours=message.hours,
        )
        try:
            storage.update_entry(entry)
        except storage.StorageError as e:
            self._close_crud_modal(wrote=False)
            return notify_error("Failed to update workhour", e)
        return self._close_crud_modal(wrote=True)

    def _on_delete_confirmed(self, message: WorkhourDeleteConfirmed) -> Command | None:
        if not isinstance(self.active_modal, WorkhourDeleteModal):
            return None
        try:
            storage.delete_entry(message.entry_id)
        except storage.StorageError as e:
            self._close_crud_modal(wrote=False)
            return notify_error("Failed to delete workhour", e)
        return self._close_crud_modal(wrote=True)

    # --- Report ---

    def _on_report_closed(self, message: ReportClosed) -> None:
        if isinstance(self.active_modal, ReportModal):
            self.active_modal = None

    def _on_report_generated(self, message: ReportGenerated) -> Command:
        if isinstance(self.active_modal, ReportModal):
            self.active_modal = None
        return notify(f"Report saved to {message.path}", "success")

    def _on_report_failed(self, message: ReportGenerationFailed) -> Command | None:
        if isinstance(self.active_modal, ReportModal):
            self.active_modal.show_error(message.error)
            return None
        return notify_error(f"Failed to generate report: {message.error}")

    def _on_signature_selected(self, message: SignatureImageSelected) -> None:
        if isinstance(self.active_modal, ReportModal):
            self.active_modal.set_signature(message.path)

    # --- Rendering ---

    def render(self, palette: Palette) -> RenderableType:
        if self.show_help:
            return self.render_help(palette)
        if self.active_modal is not None:
            return self.active_modal.render(palette)
        return Group(self.render_grid(palette), self.render_status(palette))

    def render_help(self, palette: Palette) -> RenderableType:
        body = Text()
        for key, action in CALENDAR_HELP:
            body.append(f"{key:>14}  ", style=palette.label)
            body.append(f"{action}\n", style=palette.value)
        body.append("\n")
        body.append_text(render_help_text([("?/esc", "close")], palette))
        return render_modal("Keyboard Shortcuts", body, palette)

    def _cell(self, d: date, palette: Palette) -> Text:
        entries = self.entries_for(d)
        labels = {a.id: a.short_label for a in self.activity_types}
        in_month = d.month == self.view_month
        text = Text()
        day_style = palette.value if in_month else palette.spillover
        if is_same_day(d, self.today):
            day_style = palette.today
        text.append(f"{d.day:>2}", style=day_style)
        if entries:
            total = sum(e.hours for e in entries)
            text.append(f"  {format_hours(total)}h", style=palette.total if in_month else palette.spillover)
            for entry in entries[:2]:
                label = labels.get(entry.activity_type_id, "?")
                text.append(f"\n{label} {format_hours(entry.hours)}h", style=palette.muted)
            if len(entries) > 2:
                text.append(f"\n+{len(entries) - 2} more", style=palette.muted)
        if is_same_day(d, self.selected_date):
            text.stylize(palette.selected)
        return text

    def render_grid(self, palette: Palette) -> Table:
        title = date(self.view_year, self.view_month, 1).strftime("%B %Y")
        table = Table(
            title=Text(title, style=palette.heading),
            box=box.ROUNDED,
            show_lines=True,
            expand=True,
            border_style=palette.muted,
        )
        for name in ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"):
            table.add_column(name, header_style=palette.label, ratio=1, no_wrap=True)
        for week in get_calendar_grid(self.view_year, self.view_month):
            table.add_row(*(self._cell(d, palette) for d in week))
        return table

    def render_status(self, palette: Palette) -> Text:
        d = self.selected_date
        total = sum(e.hours for e in self.entries_for(d))
        text = Text()
        text.append(d.strftime("%A, %d %B %Y"), style=palette.date)
        text.append(f"  {format_hours(total)}h", style=palette.total)
        if not self.clipboard.is_empty() and self.clipboard.source_date is not None:
            text.append(
                f"   📋 {len(self.clipboard.entries)} from {self.clipboard.source_date.isoformat()}",
                style=palette.info,
            )
        text.append("\n")
        text.append_text(render_help_text(
            [("enter", "day"), ("y/p", "copy/paste"), ("d", "delete"), ("g", "report"), ("?", "help")],
            palette,
        ))
        return text


class TableView:
    """Selectable list of rows with create/edit/delete modals."""

    title = ""
    noun = ""
    columns: list[str] = []

    def __init__(self):
        self.rows: list = []
        self.selected_index = 0
        self.active_modal = None

    @property
    def has_modal(self) -> bool:
        return self.active_modal is not None

    @property
    def selected_row(self):
        if 0 <= self.selected_index < len(self.rows):
            return self.rows[self.selected_index]
        return None

    def load(self) -> list:
        raise NotImplementedError

    def reload(self) -> None:
        self.rows = self.load()
        if self.selected_index >= len(self.rows):
            self.selected_index = max(len(self.rows) - 1, 0)

    def cells(self, row) -> list[str]:
        raise NotImplementedError

    def create_modal(self):
        raise NotImplementedError

    def edit_modal(self, row):
        raise NotImplementedError

    def delete_modal(self, row):
        raise NotImplementedError

    HANDLERS: dict[type, str] = {}

    def update(self, message: object) -> Command | None:
        if isinstance(message, Key):
            return self.handle_key(message.key)
        handler = self.HANDLERS.get(type(message))
        if handler is None:
            return None
        return getattr(self, handler)(message)

    def handle_key(self, key: str) -> Command | None:
        if self.active_modal is not None:
            return self.active_modal.update(key)
        if key in ("up", "k"):
            self.selected_index = max(self.selected_index - 1, 0)
        elif key in ("down", "j"):
            self.selected_index = min(self.selected_index + 1, max(len(self.rows) - 1, 0))
        elif key == "n":
            self.active_modal = self.create_modal()
        elif key in ("enter", "e"):
            if (row := self.selected_row) is not None:
                self.active_modal = self.edit_modal(row)
        elif key == "d":
            if (row := self.selected_row) is not None:
                self.active_modal = self.delete_modal(row)
        return None

    def _on_cancelled(self, message: object) -> None:
        self.active_modal = None

    def _finish(self, result: Command | None) -> Command | None:
        """Close the modal and reload rows after a write attempt."""
        self.active_modal = None
        try:
            self.reload()
        except storage.StorageError as e:
            return notify_error(f"Failed to load {self.noun}s", e)
        return result

    def render(self, palette: Palette) -> RenderableType:
        if self.active_modal is not None:
            return self.active_modal.render(palette)
        table = Table(
            title=Text(self.title, style=palette.heading),
            box=box.SIMPLE_HEAD,
            expand=True,
            header_style=palette.heading,
        )
        for column in self.columns:
            table.add_column(column)
        for index, row in enumerate(self.rows):
            table.add_row(*self.cells(row), style=palette.selected if index == self.selected_index else None)
        hint = Text()
        if not self.rows:
            hint.append(f"No {self.noun}s yet. Press n to create one.\n\n", style=palette.help)
        hint.append_text(render_help_text(
            [("↑/↓", "select"), ("n", "new"), ("enter", "edit"), ("d", "delete"), ("1/2/3", "tabs")],
            palette,
        ))
        return Group(table, hint)


class ProjectsView(TableView):
    title = "Projects"
    noun = "project"
    columns = ["ID", "Name", "Accounting ID"]

    HANDLERS = {
        ProjectCreateSubmitted: "_on_create",
        ProjectEditSubmitted: "_on_edit",
        ProjectDeleteConfirmed: "_on_delete",
        ProjectModalCancelled: "_on_cancelled",
    }

    def load(self) -> list[Project]:
        return storage.list_projects()

    def cells(self, row: Project) -> list[str]:
        return [str(row.id), row.name, str(row.accounting_id)]

    def create_modal(self) -> ProjectCreateModal:
        return ProjectCreateModal()

    def edit_modal(self, row: Project) -> ProjectEditModal:
        return ProjectEditModal(row)

    def delete_modal(self, row: Project) -> ProjectDeleteModal:
        return ProjectDeleteModal(row)

    def _on_create(self, message: ProjectCreateSubmitted) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            storage.create_project(message.name, message.accounting_id)
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to create project", e))
        return self._finish(notify(f"Project '{message.name}' created", "success"))

    def _on_edit(self, message: ProjectEditSubmitted) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            storage.update_project(message.project_id, message.name, message.accounting_id)
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to update project", e))
        return self._finish(notify(f"Project '{message.name}' updated", "success"))

    def _on_delete(self, message: ProjectDeleteConfirmed) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            deleted = storage.delete_project(message.project_id)
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to delete project", e))
        if not deleted:
            return self._finish(notify("Cannot delete project: it still has logged hours", "warning"))
        return self._finish(notify("Project deleted", "success"))


class ActivityTypesView(TableView):
    title = "Activity Types"
    noun = "activity type"
    columns = ["ID", "Label", "Name", "Work"]

    HANDLERS = {
        ActivityTypeCreateSubmitted: "_on_create",
        ActivityTypeEditSubmitted: "_on_edit",
        ActivityTypeDeleteConfirmed: "_on_delete",
        ActivityTypeModalCancelled: "_on_cancelled",
    }

    def load(self) -> list[ActivityType]:
        return storage.list_activity_types()

    def cells(self, row: ActivityType) -> list[str]:
        return [str(row.id), row.short_label, row.name, "✓" if row.is_billable_work else ""]

    def create_modal(self) -> ActivityTypeCreateModal:
        return ActivityTypeCreateModal()

    def edit_modal(self, row: ActivityType) -> ActivityTypeEditModal:
        return ActivityTypeEditModal(row)

    def delete_modal(self, row: ActivityType) -> ActivityTypeDeleteModal:
        return ActivityTypeDeleteModal(row)

    def _on_create(self, message: ActivityTypeCreateSubmitted) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            storage.create_activity_type(message.name, message.short_label, message.is_billable_work)
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to create activity type", e))
        return self._finish(notify(f"Activity type '{message.name}' created", "success"))

    def _on_edit(self, message: ActivityTypeEditSubmitted) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            storage.update_activity_type(
                message.activity_type_id, message.name, message.short_label, message.is_billable_work
            )
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to update activity type", e))
        return self._finish(notify(f"Activity type '{message.name}' updated", "success"))

    def _on_delete(self, message: ActivityTypeDeleteConfirmed) -> Command | None:
        if self.active_modal is None:
            return None
        try:
            deleted = storage.delete_activity_type(message.activity_type_id)
        except storage.StorageError as e:
            return self._finish(notify_error("Failed to delete activity type", e))
        if not deleted:
            return self._finish(notify("Cannot delete activity type: it still has logged hours", "warning"))
        return self._finish(notify("Activity type deleted", "success"))


class MainView:
    """Tabbed root: routes keys to the active tab and owns the notification line."""

    TAB_KEYS = {"1": 0, "2": 1, "3": 2}
    QUIT_KEYS = ("q", "ctrl+c", "escape")

    def __init__(self, config: Config | None = None, today: date | None = None):
        self.config = config or Config()
        self.calendar = CalendarView(today)
        self.projects = ProjectsView()
        self.activity_types = ActivityTypesView()
        self.views: list[CalendarView | TableView] = [self.calendar, self.projects, self.activity_types]
        self.active_tab = 0
        self.notification: ShowNotification | None = None
        self._notification_token = 0

    @property
    def tab_names(self) -> list[str]:
        return [view.title for view in self.views]

    @property
    def active_view(self) -> CalendarView | TableView:
        return self.views[self.active_tab]

    @property
    def has_modal(self) -> bool:
        return any(view.has_modal for view in self.views)

    def load(self) -> Command | None:
        for view in self.views:
            try:
                view.reload()
            except storage.StorageError as e:
                logger.exception("Initial load of %s failed", view.title)
                return notify_error(f"Failed to load {view.title.lower()}", e)
        return None

    def update(self, message: object) -> Command | None:
        if isinstance(message, Key):
            return self.handle_key(message.key)
        if isinstance(message, ShowNotification):
            return self.show_notification(message)
        if isinstance(message, ClearNotification):
            if message.token == self._notification_token:
                self.notification = None
            return None
        return self._owner(message).update(message)

    def _owner(self, message: object) -> CalendarView | TableView:
        if type(message) in ProjectsView.HANDLERS:
            return self.projects
        if type(message) in ActivityTypesView.HANDLERS:
            return self.activity_types
        return self.calendar

    def handle_key(self, key: str) -> Command | None:
        if not self.has_modal:
            if key in self.QUIT_KEYS:
                return emit(QuitRequested())
            if key in self.TAB_KEYS:
                return self.switch_tab(self.TAB_KEYS[key])
        return self.active_view.update(Key(key))

    def switch_tab(self, index: int) -> Command | None:
        self.active_tab = index
        try:
            self.active_view.reload()
        except storage.StorageError as e:
            return notify_error(f"Failed to load {self.active_view.title.lower()}", e)
        return None

    def show_notification(self, message: ShowNotification) -> Command:
        """Show message and schedule its removal; a newer message cancels older removals."""
        self._notification_token += 1
        token = self._notification_token
        self.notification = message
        return Command(lambda: ClearNotification(token), delay=self.config.notification_seconds)

    def render(self, palette: Palette) -> RenderableType:
        return self.active_view.render(palette)
