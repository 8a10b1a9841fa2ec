"""Runtime configuration and the colour palette used by the renderers."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class Palette:
    title: str = "bold color(214)"
    heading: str = "bold color(39)"
    date: str = "bold color(86)"
    label: str = "bold color(241)"
    value: str = "color(255)"
    muted: str = "color(240)"
    help: str = "italic color(241)"
    focused: str = "bold color(39)"
    selected: str = "bold color(229) on color(57)"
    today: str = "bold color(39)"
    spillover: str = "color(240)"
    total: str = "bold color(114)"
    error: str = "bold color(196)"
    warning: str = "bold color(214)"
    success: str = "bold color(114)"
    info: str = "color(39)"


@dataclass
class Config:
    log_path: Path = Path(__file__).parent / "data" / "timelog.log"
    log_level: str = "INFO"
    notification_seconds: float = 3.0
    palette: Palette = field(default_factory=Palette)

    @classmethod
    def from_env(cls) -> Config:
        """Build a config from TIMELOG_* environment variables."""
        config = cls()
        if log_path := os.environ.get("TIMELOG_LOG"):
            config.log_path = Path(log_path)
        if log_level := os.environ.get("TIMELOG_LOG_LEVEL"):
            config.log_level = log_level.upper()
        if seconds := os.environ.get("TIMELOG_NOTIFY_SECONDS"):
            try:
                config.notification_seconds = float(seconds)
            except ValueError:
                logger.warning("Ignoring invalid TIMELOG_NOTIFY_SECONDS=%r", seconds)
        return config
