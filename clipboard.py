"""Single-slot copy buffer for a day's hour entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from models import HourEntry


@dataclass
class Clipboard:
    entries: list[HourEntry] = field(default_factory=list)
    source_date: date | None = None

    def yank(self, d: date, entries: list[HourEntry]) -> int:
        """Copy a day's entries. An empty day leaves the clipboard untouched and returns 0."""
        if not entries:
            return 0
        self.entries = list(entries)
        self.source_date = d
        return len(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def clear(self) -> None:
        self.entries = []
        self.source_date = None

    def invalidate(self, d: date) -> bool:
        """Clear the clipboard if d is the day it was copied from."""
        if self.source_date is not None and self.source_date == d:
            self.clear()
            return True
        return False

    def entries_for(self, target: date) -> list[HourEntry]:
        """Build fresh entries for target from the copied ones."""
        return [entry.copy_to(target) for entry in self.entries]
