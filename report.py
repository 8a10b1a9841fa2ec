"""Monthly report modal: choose a report kind, fill in the mail report form, export."""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable

from rich.console import RenderableType
from rich.text import Text

import exporters
from config import Palette
from exporters import ExportError
from forms import Checkbox, Form, TextField
from messages import Command, ReportClosed, ReportGenerated, ReportGenerationFailed, SignatureImageSelected, emit
from models import ActivityType, ReportMetadata
from summary import ReportSelection, WorkhourStats, checklist_pairs, initial_selection
from utils import format_hours
from widgets import render_help_text, render_modal

logger = logging.getLogger(__name__)

KIND_CSV = "Timesheet CSV"
KIND_MAIL = "Mail Report"

KINDS = [
    (KIND_CSV, "c", "All hours of the month as a timesheet import file"),
    (KIND_MAIL, "m", "PDF activity report with signatures"),
]

FROM_COMPANY, TO_COMPANY, INVOICE_NAME, SIGNATURE = range(4)
CHECKLIST_START = 4


def run_export(export: Callable[[], object]) -> object:
    """Run an exporter and turn its outcome into a report message."""
    try:
        path = export()
    except ExportError as e:
        return ReportGenerationFailed(str(e))
    return ReportGenerated(str(path))


def export_failed(error: Exception) -> ReportGenerationFailed:
    return ReportGenerationFailed(str(error))


def choose_signature() -> SignatureImageSelected:
    return SignatureImageSelected(exporters.pick_signature_image())


class ReportModal:
    """Report generator for the month shown on the calendar.

    Stages: "choose" (pick a kind), "form" (mail report details and the
    project/activity checklist), "generating" (input ignored until the export
    finishes) and "error" (shows why the export failed).
    """

    def __init__(self, month: int, year: int, stats: WorkhourStats, activity_types: list[ActivityType]):
        self.month = month
        self.year = year
        self.stats = stats
        self.pairs = checklist_pairs(stats)
        self.default_selection = initial_selection(stats, activity_types)
        self.stage = "choose"
        self.kind_index = 0
        self.error_message = ""
        self.form: Form | None = None

    @property
    def period(self) -> str:
        return date(self.year, self.month, 1).strftime("%B %Y")

    # --- Input ---

    def update(self, key: str) -> Command | None:
        if self.stage == "choose":
            return self._update_choose(key)
        if self.stage == "form":
            return self._update_form(key)
        if self.stage == "error":
            if key in ("escape", "enter", "q"):
                return emit(ReportClosed())
        return None

    def _update_choose(self, key: str) -> Command | None:
        if key in ("escape", "q"):
            return emit(ReportClosed())
        if key in ("up", "k"):
            self.kind_index = (self.kind_index - 1) % len(KINDS)
        elif key in ("down", "j"):
            self.kind_index = (self.kind_index + 1) % len(KINDS)
        elif key == "enter":
            return self._choose(KINDS[self.kind_index][0])
        else:
            for name, quick_key, _ in KINDS:
                if key == quick_key:
                    return self._choose(name)
        return None

    def _choose(self, kind: str) -> Command | None:
        if kind == KIND_CSV:
            self.stage = "generating"
            month, year = self.month, self.year
            return Command(
                lambda: run_export(lambda: exporters.generate_csv(month, year)),
                blocking=True,
                on_error=export_failed,
            )
        self.form = self._build_form()
        self.stage = "form"
        return None

    def _build_form(self) -> Form:
        checkboxes = [
            Checkbox(
                f"{project} · {activity} ({format_hours(hours)}h)",
                self.default_selection.get(project, {}).get(activity, False),
            )
            for project, activity, hours in self.pairs
        ]
        return Form(
            TextField("From company", "Provider company name", char_limit=100, required=True),
            TextField("To company", "Client company name", char_limit=100, required=True),
            TextField("Invoice name", "Invoice number", char_limit=100, required=True),
            TextField("Signature image", "press s to choose an image (optional)", char_limit=4096, read_only=True),
            *checkboxes,
        )

    def _update_form(self, key: str) -> Command | None:
        form = self.form
        if form is None:
            return None
        if key == "escape":
            self.form = None
            self.stage = "choose"
            return None
        if key == "enter":
            return self._submit(form)
        if key == "s" and form.focus_index == SIGNATURE:
            return Command(choose_signature, blocking=True)
        if key == "up":
            if form.focus_index > 0:
                form.focus(form.focus_index - 1)
            return None
        if key == "down":
            if form.focus_index < len(form) - 1:
                form.focus(form.focus_index + 1)
            return None
        form.handle_input(key)
        return None

    def _submit(self, form: Form) -> Command | None:
        if form.validate():
            return None
        metadata = ReportMetadata(
            from_company=form.value(FROM_COMPANY).strip(),
            to_company=form.value(TO_COMPANY).strip(),
            invoice_name=form.value(INVOICE_NAME).strip(),
        )
        signature = form.value(SIGNATURE)
        selection = self.selection()
        month, year = self.month, self.year
        self.stage = "generating"
        return Command(
            lambda: run_export(lambda: exporters.generate_pdf(month, year, metadata, signature, selection)),
            blocking=True,
            on_error=export_failed,
        )

    def selection(self) -> ReportSelection:
        """Checked state of every (project, activity) pair as currently shown."""
        if self.form is None:
            return {p: dict(acts) for p, acts in self.default_selection.items()}
        selection: ReportSelection = {}
        for offset, (project, activity, _) in enumerate(self.pairs):
            checkbox = self.form.get_checkbox(CHECKLIST_START + offset)
            selection.setdefault(project, {})[activity] = bool(checkbox and checkbox.checked)
        return selection

    # --- Results ---

    def set_signature(self, path: str) -> None:
        if not path or self.form is None:
            return
        field = self.form.get_field(SIGNATURE)
        if field is not None:
            field.value = path

    def show_error(self, message: str) -> None:
        logger.error("Report generation failed: %s", message)
        self.error_message = message
        self.stage = "error"

    # --- Rendering ---

    def render(self, palette: Palette) -> RenderableType:
        body = Text()
        if self.stage == "choose":
            self._render_choose(body, palette)
        elif self.stage == "form":
            self._render_form(body, palette)
        elif self.stage == "generating":
            body.append("⏳ Generating report...\n", style=palette.warning)
        else:
            body.append(f"✗ {self.error_message}\n\n", style=palette.error)
            body.append_text(render_help_text([("esc/enter", "close")], palette))
        return render_modal(f"Generate Report - {self.period}", body, palette, width=80)

    def _render_choose(self, body: Text, palette: Palette) -> None:
        body.append(
            f"{format_hours(self.stats.total_hours)}h logged on {self.stats.total_days} day(s)\n\n",
            style=palette.label,
        )
        for index, (name, quick_key, description) in enumerate(KINDS):
            selected = index == self.kind_index
            body.append("▶ " if selected else "  ", style=palette.focused)
            body.append(f"[{quick_key}] {name}", style=palette.focused if selected else palette.value)
            body.append(f"  {description}\n", style=palette.help)
        body.append("\n")
        body.append_text(render_help_text(
            [("↑/↓", "select"), ("enter", "generate"), ("c/m", "quick pick"), ("esc", "close")], palette
        ))

    def _render_form(self, body: Text, palette: Palette) -> None:
        form = self.form
        if form is None:
            return
        for index, element in enumerate(form.elements):
            if index == CHECKLIST_START:
                body.append("Include in report:\n", style=palette.heading)
            body.append_text(element.render(palette))
            if index < CHECKLIST_START:
                body.append("\n")
        if not self.pairs:
            body.append("No hours logged this month.\n", style=palette.help)
        if form.error_message:
            body.append(f"\n⚠ {form.error_message}\n", style=palette.error)
        body.append("\n")
        body.append_text(render_help_text(
            [("tab/↑↓", "navigate"), ("s", "signature"), ("space", "toggle"), ("enter", "generate"),
             ("esc", "back")],
            palette,
        ))
