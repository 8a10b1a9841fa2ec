#!/usr/bin/env python3
"""Timelog TUI application."""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer

import storage
from config import Config
from messages import Command, Key, QuitRequested
from views import MainView
from widgets import MainPanel, NotificationBar, TabBar

logger = logging.getLogger(__name__)


class TimelogApp(App):
    CSS = """
    Screen {
        layout: vertical;
    }

    #tab-bar {
        height: 1;
        margin: 1 1 0 1;
    }

    #main-scroll {
        height: 1fr;
        margin: 1 1 0 1;
    }

    #main-panel {
        width: 100%;
        height: auto;
    }

    #notification-bar {
        height: 1;
        margin: 0 1 1 1;
    }
    """

    # Footer shortcuts. The focused main panel handles these keys itself.
    BINDINGS = [
        Binding("q", "send_key('q')", "Quit"),
        Binding("question_mark", "send_key('?')", "Help"),
        Binding("1", "send_key('1')", "Calendar"),
        Binding("2", "send_key('2')", "Projects"),
        Binding("3", "send_key('3')", "Activity Types"),
        Binding("g", "send_key('g')", "Report"),
    ]

    def __init__(self, config: Config | None = None):
        super().__init__()
        self.config = config or Config.from_env()
        self.ui_palette = self.config.palette
        storage.init_db()
        storage.seed_defaults()
        self.root_view = MainView(self.config)

    def compose(self) -> ComposeResult:
        yield TabBar(id="tab-bar")
        with VerticalScroll(id="main-scroll"):
            yield MainPanel(id="main-panel")
        yield NotificationBar(id="notification-bar")
        yield Footer()

    def on_mount(self):
        self.schedule(self.root_view.load())
        self._refresh_display()
        self.query_one("#main-panel", MainPanel).focus()

    def on_unmount(self):
        storage.close_db()

    def handle_key(self, key: str) -> None:
        self.deliver(Key(key))

    def action_send_key(self, key: str) -> None:
        self.handle_key(key)

    def deliver(self, message: object) -> None:
        """Feed one message through the root view and run the command it returns."""
        if isinstance(message, QuitRequested):
            self.exit()
            return
        command = self.root_view.update(message)
        self.schedule(command)
        self._refresh_display()

    def schedule(self, command: Command | None) -> None:
        if command is None:
            return
        if command.delay is not None:
            self.set_timer(command.delay, lambda: self.deliver(command()))
        elif command.blocking:
            self.run_worker(lambda: self._run_blocking(command), thread=True, exit_on_error=False)
        else:
            self.call_later(lambda: self.deliver(command()))

    def _run_blocking(self, command: Command) -> None:
        try:
            message = command()
        except Exception as e:
            logger.exception("Background task failed")
            message = command.fail(e)
        self.call_from_thread(self.deliver, message)

    def _refresh_display(self):
        palette = self.ui_palette
        self.query_one("#tab-bar", TabBar).update_display(
            self.root_view.tab_names, self.root_view.active_tab, palette
        )
        self.query_one("#main-panel", MainPanel).update(self.root_view.render(palette))
        notification = self.root_view.notification
        self.query_one("#notification-bar", NotificationBar).update_display(
            notification.message if notification else "",
            notification.kind if notification else "info",
            palette,
        )


def setup_logging(config: Config) -> None:
    """Log to a file; the terminal belongs to the TUI."""
    config.log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=config.log_path,
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main():
    import sys
    if len(sys.argv) > 1 and sys.argv[1] == "--db-info":
        from datetime import datetime
        db_path = storage.DB_PATH
        print(f"Database: {db_path}")
        if db_path.exists():
            mtime = datetime.fromtimestamp(db_path.stat().st_mtime)
            size = db_path.stat().st_size
            print(f"Modified: {mtime.strftime('%Y-%m-%d %H:%M:%S')}")
            print(f"Size: {size:,} bytes")
            try:
                for table, count in storage.get_db_stats().items():
                    print(f"{table}: {count}")
            except storage.StorageError as e:
                print(f"Stats unavailable: {e}")
            finally:
                storage.close_db()
        else:
            print("Status: Does not exist (will be created on first run)")
        return

    config = Config.from_env()
    setup_logging(config)
    logger.info("Starting timelog with database %s", storage.DB_PATH)
    app = TimelogApp(config)
    app.run()


if __name__ == "__main__":
    main()
