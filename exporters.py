"""Monthly report exporters and the native file dialogs they use."""

from __future__ import annotations

import csv
import logging
import shutil
import subprocess
import tempfile
from datetime import date
from pathlib import Path

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

import storage
from models import ReportMetadata
from summary import ReportSelection, WorkhourStats, calculate_stats, filter_entries
from utils import format_hours

logger = logging.getLogger(__name__)

JOURNAL_ID = "hr_timesheet.analytic_journal"
CSV_HEADER = ["date", "account_id/id", "journal_id/id", "name", "unit_amount"]


class ExportError(Exception):
    """Raised when a report cannot be generated or saved."""


def account_ref(accounting_id: int) -> str:
    return f"__export__.account_analytic_account_{accounting_id}"


# --- File dialogs ---


def _command_exists(name: str) -> bool:
    return shutil.which(name) is not None


def _run_dialog(args: list[str]) -> str:
    """Run a dialog command and return what it printed, or "" if it was dismissed."""
    try:
        result = subprocess.run(args, capture_output=True, text=True, check=False)
    except OSError as e:
        logger.warning("File dialog %s failed: %s", args[0], e)
        return ""
    if result.returncode != 0:
        return ""
    return result.stdout.strip()


def pick_signature_image() -> str:
    """Ask the user for a signature image. Returns "" when no dialog is available or it was cancelled."""
    home = str(Path.home())
    if _command_exists("zenity"):
        args = [
            "zenity", "--file-selection",
            "--title=Select Signature Image",
            "--file-filter=Images | *.png *.jpg *.jpeg",
            f"--filename={home}/",
        ]
    elif _command_exists("kdialog"):
        args = ["kdialog", "--getopenfilename", home, "*.png *.jpg *.jpeg"]
    elif _command_exists("osascript"):
        script = (
            'set imageFile to choose file with prompt "Select Signature Image" of type {"public.image"}\n'
            "return POSIX path of imageFile"
        )
        args = ["osascript", "-e", script]
    else:
        return ""
    return _run_dialog(args)


def _save_dialog(source: Path, title: str, pattern: str) -> Path:
    """Let the user choose where to save source; keep it in place if no choice is made."""
    default_path = Path.home() / source.name
    if _command_exists("zenity"):
        args = [
            "zenity", "--file-selection", "--save", "--confirm-overwrite",
            f"--filename={default_path}",
            f"--title={title}",
        ]
    elif _command_exists("kdialog"):
        args = ["kdialog", "--getsavefilename", str(default_path), pattern]
    elif _command_exists("osascript"):
        script = (
            f'set saveFile to choose file name with prompt "{title}" '
            f'default name "{source.name}" default location (path to home folder)\n'
            "return POSIX path of saveFile"
        )
        args = ["osascript", "-e", script]
    else:
        return source

    target = _run_dialog(args)
    if not target:
        return source
    target_path = Path(target)
    if target_path == source:
        return source
    try:
        shutil.copyfile(source, target_path)
    except OSError as e:
        source.unlink(missing_ok=True)
        raise ExportError(f"Failed to save report to {target_path}: {e}") from e
    source.unlink(missing_ok=True)
    return target_path


# --- Data loading ---


def _load_month(year: int, month: int):
    try:
        entries = storage.list_entries_for_month(year, month)
        activity_types = {a.id: a for a in storage.list_activity_types()}
        projects = {p.id: p for p in storage.list_projects()}
    except storage.StorageError as e:
        raise ExportError(f"Failed to load hours: {e}") from e
    return entries, activity_types, projects


def _month_name(month: int) -> str:
    return date(2000, month, 1).strftime("%B")


# --- CSV ---


def generate_csv(month: int, year: int) -> Path:
    """Write the month's hours as a timesheet import CSV and return where it was saved."""
    entries, activity_types, projects = _load_month(year, month)

    path = Path(tempfile.gettempdir()) / f"timesheet_{_month_name(month)}_{year}.csv"
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            for entry in entries:
                activity = activity_types.get(entry.activity_type_id)
                project = projects.get(entry.project_id)
                if activity is None or project is None:
                    continue
                writer.writerow([
                    entry.date.isoformat(),
                    account_ref(project.accounting_id),
                    JOURNAL_ID,
                    activity.name,
                    format_hours(entry.hours),
                ])
    except OSError as e:
        path.unlink(missing_ok=True)
        raise ExportError(f"Failed to write CSV: {e}") from e

    logger.info("Wrote timesheet CSV for %s-%02d to %s", year, month, path)
    return _save_dialog(path, "Save Timesheet CSV", "*.csv")


# --- PDF ---


def generate_pdf(
    month: int,
    year: int,
    metadata: ReportMetadata,
    signature_path: str,
    selection: ReportSelection,
) -> Path:
    """Write the mail activity report for the checked (project, activity) pairs."""
    entries, activity_types, projects = _load_month(year, month)
    kept = filter_entries(entries, selection, activity_types, projects)
    stats = calculate_stats(kept, activity_types, projects)

    path = Path(tempfile.gettempdir()) / f"activity_report_{_month_name(month).lower()}_{year}.pdf"
    try:
        _write_pdf(path, month, year, metadata, signature_path, stats)
    except Exception as e:
        path.unlink(missing_ok=True)
        logger.exception("PDF generation failed")
        raise ExportError(f"Failed to generate PDF: {e}") from e

    logger.info("Wrote activity report for %s-%02d to %s", year, month, path)
    return _save_dialog(path, "Save Mail Report", "*.pdf")


def _write_pdf(
    path: Path,
    month: int,
    year: int,
    metadata: ReportMetadata,
    signature_path: str,
    stats: WorkhourStats,
) -> None:
    pdf = canvas.Canvas(str(path), pagesize=A4)
    width, height = A4
    period = f"{_month_name(month)} {year}"
    title = "Activity Report"
    y = height - 2.5 * cm

    pdf.setTitle(f"{title} - {period}")
    pdf.setFont("Helvetica-Bold", 16)
    pdf.drawCentredString(width / 2, y, title)
    y -= 1.5 * cm

    pdf.setFont("Helvetica", 10)
    for label, value in (
        ("Provider:", metadata.from_company),
        ("Client:", metadata.to_company),
        ("Invoice reference:", f"{metadata.invoice_name} - {period}"),
    ):
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(2 * cm, y, label)
        pdf.setFont("Helvetica", 10)
        pdf.drawString(6 * cm, y, value)
        y -= 0.6 * cm
    y -= 0.8 * cm

    pdf.setFont("Helvetica-Bold", 12)
    pdf.drawString(2 * cm, y, "Hours worked")
    y -= 0.9 * cm

    columns = [2 * cm, 5 * cm, 10 * cm]
    hours_right = width - 2 * cm

    def draw_header(y: float) -> float:
        pdf.setFont("Helvetica-Bold", 10)
        pdf.drawString(columns[0], y, "Date")
        pdf.drawString(columns[1], y, "Project")
        pdf.drawString(columns[2], y, "Activity")
        pdf.drawRightString(hours_right, y, "Hours")
        pdf.line(2 * cm, y - 0.2 * cm, hours_right, y - 0.2 * cm)
        pdf.setFont("Helvetica", 10)
        return y - 0.7 * cm

    y = draw_header(y)
    for day, lines in stats.daily_breakdown.items():
        for line in lines:
            pdf.drawString(columns[0], y, day.strftime("%d-%b-%Y"))
            pdf.drawString(columns[1], y, line.project_name)
            pdf.drawString(columns[2], y, line.activity_name)
            pdf.drawRightString(hours_right, y, format_hours(line.hours))
            y -= 0.6 * cm
            if y < 3 * cm:
                pdf.showPage()
                y = draw_header(height - 2 * cm)

    pdf.line(2 * cm, y + 0.4 * cm, hours_right, y + 0.4 * cm)
    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawString(columns[0], y, "Total")
    pdf.drawRightString(hours_right, y, format_hours(stats.total_hours))
    y -= 2 * cm

    if y < 6 * cm:
        pdf.showPage()
        y = height - 3 * cm

    pdf.setFont("Helvetica-Bold", 10)
    pdf.drawString(2 * cm, y, "Provider signature,")
    pdf.drawString(width / 2 + cm, y, "Client signature,")

    if signature_path:
        image = ImageReader(signature_path)
        img_width, img_height = image.getSize()
        if img_width <= 0 or img_height <= 0:
            raise ValueError("Invalid signature image dimensions")
        scale = min(6 * cm / img_width, 3 * cm / img_height, 1.0)
        draw_width = img_width * scale
        draw_height = img_height * scale
        pdf.drawImage(
            image, 2 * cm, y - 0.4 * cm - draw_height,
            width=draw_width, height=draw_height, preserveAspectRatio=True, mask="auto",
        )

    pdf.showPage()
    pdf.save()
