"""Rendering helpers and custom widgets for the timelog application."""

from __future__ import annotations

from rich.align import Align
from rich.console import RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.widgets import Static

from config import Palette

# Textual key names passed through unchanged; anything else is read from event.character
NAMED_KEYS = {
    "tab", "shift+tab", "enter", "escape", "backspace", "space",
    "up", "down", "left", "right", "ctrl+c",
}


def normalize_key(key: str, character: str | None) -> str | None:
    """Map a Textual key event to the key names the views understand."""
    if key in NAMED_KEYS:
        return key
    if character and len(character) == 1 and character.isprintable():
        return character
    return None


def render_help_text(pairs: list[tuple[str, str]], palette: Palette) -> Text:
    """Render "key action • key action" help line."""
    text = Text()
    for index, (key, action) in enumerate(pairs):
        if index:
            text.append(" • ", style=palette.muted)
        text.append(key, style=palette.label)
        text.append(f" {action}", style=palette.help)
    return text


def render_modal(
    title: str,
    body: RenderableType,
    palette: Palette,
    *,
    border_style: str | None = None,
    width: int = 72,
) -> RenderableType:
    """Center body in a rounded, titled panel."""
    panel = Panel(
        body,
        title=Text(title, style=palette.title),
        border_style=border_style or palette.focused,
        padding=(1, 2),
        width=width,
    )
    return Align.center(panel, vertical="middle")


def render_tab_bar(tabs: list[str], active: int, palette: Palette) -> Text:
    text = Text()
    for index, name in enumerate(tabs):
        label = f" {index + 1} {name} "
        text.append(label, style=palette.selected if index == active else palette.label)
        text.append("  ")
    return text


class TabBar(Static):
    """Shows the screen tabs with the active one highlighted."""

    def update_display(self, tabs: list[str], active: int, palette: Palette) -> None:
        self.update(render_tab_bar(tabs, active, palette))


class NotificationBar(Static):
    """One transient message line under the main panel."""

    ICONS = {"error": "✗", "warning": "⚠", "success": "✓", "info": "ℹ"}

    def update_display(self, message: str, kind: str, palette: Palette) -> None:
        if not message:
            self.update("")
            return
        style = getattr(palette, kind, palette.info)
        icon = self.ICONS.get(kind, self.ICONS["info"])
        self.update(Text(f"{icon} {message}", style=style))


class MainPanel(Static, can_focus=True):
    """Renders the active view and forwards every key press to the app."""

    def on_key(self, event) -> None:
        key = normalize_key(event.key, event.character)
        if key is None:
            return
        event.prevent_default()
        event.stop()
        self.app.handle_key(key)  # type: ignore[attr-defined]
