"""Tests for the widgets module."""

from __future__ import annotations

from unittest.mock import MagicMock, PropertyMock, patch

from rich.text import Text

from config import Palette
from widgets import MainPanel, NotificationBar, TabBar, normalize_key, render_help_text, render_tab_bar


class TestNormalizeKey:
    """Tests for mapping Textual key events."""

    def test_named_keys_pass_through(self):
        for key in ("enter", "escape", "tab", "shift+tab", "space", "up", "ctrl+c"):
            assert normalize_key(key, None) == key

    def test_characters_used_for_symbols(self):
        assert normalize_key("less_than_sign", "<") == "<"
        assert normalize_key("question_mark", "?") == "?"
        assert normalize_key("Y", "Y") == "Y"

    def test_unprintable_keys_dropped(self):
        assert normalize_key("f5", None) is None
        assert normalize_key("ctrl+a", "\x01") is None


class TestRenderHelpers:
    """Tests for the text helpers."""

    def test_help_text(self):
        text = render_help_text([("y", "copy"), ("p", "paste")], Palette())
        assert text.plain == "y copy • p paste"

    def test_tab_bar(self):
        text = render_tab_bar(["Calendar", "Projects"], 1, Palette())
        assert " 1 Calendar " in text.plain
        assert " 2 Projects " in text.plain


class TestTabBar:
    """Tests for the TabBar widget."""

    def test_update_display(self):
        bar = TabBar()
        bar.update = MagicMock()
        bar.update_display(["Calendar", "Projects", "Activity Types"], 0, Palette())
        bar.update.assert_called_once()
        assert "Activity Types" in bar.update.call_args[0][0].plain


class TestNotificationBar:
    """Tests for the NotificationBar widget."""

    def test_empty_message_clears(self):
        bar = NotificationBar()
        bar.update = MagicMock()
        bar.update_display("", "info", Palette())
        bar.update.assert_called_once_with("")

    def test_icon_and_style_by_kind(self):
        palette = Palette()
        bar = NotificationBar()
        bar.update = MagicMock()
        bar.update_display("Saved", "success", palette)
        rendered = bar.update.call_args[0][0]
        assert isinstance(rendered, Text)
        assert rendered.plain == "✓ Saved"
        assert rendered.style == palette.success

    def test_unknown_kind_falls_back_to_info(self):
        bar = NotificationBar()
        bar.update = MagicMock()
        bar.update_display("Hello", "other", Palette())
        assert bar.update.call_args[0][0].plain == "ℹ Hello"


class TestMainPanel:
    """Tests for key forwarding."""

    def test_forwards_normalized_key(self):
        app = MagicMock()
        event = MagicMock(key="greater_than_sign", character=">")
        with patch.object(MainPanel, "app", new_callable=PropertyMock, return_value=app):
            MainPanel().on_key(event)
        app.handle_key.assert_called_once_with(">")
        event.prevent_default.assert_called_once()
        event.stop.assert_called_once()

    def test_ignores_unknown_keys(self):
        app = MagicMock()
        event = MagicMock(key="f12", character=None)
        with patch.object(MainPanel, "app", new_callable=PropertyMock, return_value=app):
            MainPanel().on_key(event)
        app.handle_key.assert_not_called()
        event.stop.assert_not_called()
