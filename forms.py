"""Focusable form elements and the form controller that cycles between them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from rich.text import Text

from config import Palette
from validators import FieldError, Validator


class TextField:
    """Single-line text input with optional validation."""

    def __init__(
        self,
        label: str,
        placeholder: str = "",
        *,
        value: str = "",
        char_limit: int = 64,
        required: bool = False,
        validator: Validator | None = None,
        help_text: str = "",
        read_only: bool = False,
    ):
        self.label = label
        self.placeholder = placeholder
        self.char_limit = char_limit
        self.required = required
        self.validator = validator
        self.help_text = help_text
        self.read_only = read_only
        self.active = False
        self.value = value[:char_limit]

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def handle_input(self, key: str) -> None:
        if not self.active or self.read_only:
            return
        if key == "backspace":
            self.value = self.value[:-1]
            return
        if key == "space":
            key = " "
        if len(key) == 1 and key.isprintable() and len(self.value) < self.char_limit:
            self.value += key

    def validate(self) -> FieldError | None:
        if self.required and not self.value.strip():
            return FieldError(self.label, f"{self.label} is required")
        if self.validator:
            return self.validator(self.value)
        return None

    def render(self, palette: Palette) -> Text:
        text = Text()
        text.append(f"{self.label}:\n", style=palette.label)
        marker = "▶ " if self.active else "  "
        text.append(marker, style=palette.focused)
        if self.value:
            text.append(self.value, style=palette.focused if self.active else palette.value)
        else:
            text.append(self.placeholder, style=palette.muted)
        if self.active and not self.read_only:
            text.append("▏", style=palette.focused)
        text.append("\n")
        if self.help_text:
            text.append(f"  {self.help_text}\n", style=palette.help)
        return text


class Checkbox:
    """Boolean toggle, flipped with the space key while focused."""

    TOGGLE_KEY = "space"

    def __init__(
        self,
        label: str,
        checked: bool = False,
        *,
        help_text: str = "",
        unchecked_help_text: str = "",
    ):
        self.label = label
        self.checked = checked
        self.help_text = help_text
        self.unchecked_help_text = unchecked_help_text
        self.active = False

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def toggle(self) -> None:
        self.checked = not self.checked

    def handle_input(self, key: str) -> None:
        if self.active and key == self.TOGGLE_KEY:
            self.toggle()

    @property
    def current_help(self) -> str:
        return self.help_text if self.checked else self.unchecked_help_text

    def render(self, palette: Palette) -> Text:
        text = Text()
        marker = "▶ " if self.active else "  "
        text.append(marker, style=palette.focused)
        text.append("[✓] " if self.checked else "[ ] ", style=palette.focused if self.active else palette.value)
        text.append(self.label, style=palette.focused if self.active else palette.value)
        if self.active:
            text.append("  (press Space to toggle)", style=palette.label)
        elif self.current_help:
            text.append(f"  ({self.current_help})", style=palette.help)
        text.append("\n")
        return text


@dataclass
class SelectOption:
    id: int
    display_name: str
    extra_info: str = ""


class SingleSelect:
    """A list of options with one selected entry."""

    def __init__(
        self,
        label: str,
        options: list[SelectOption],
        *,
        required: bool = False,
        required_message: str | None = None,
    ):
        self.label = label
        self.options = list(options)
        self.selected_index = 0 if self.options else -1
        self.required = required
        self.required_message = required_message or f"{label} is required"
        self.active = False

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    def select_next(self) -> None:
        if not self.options:
            return
        if self.selected_index < 0:
            self.selected_index = 0
        else:
            self.selected_index = (self.selected_index + 1) % len(self.options)

    def select_previous(self) -> None:
        if not self.options:
            return
        if self.selected_index < 0:
            self.selected_index = len(self.options) - 1
        else:
            self.selected_index = (self.selected_index - 1) % len(self.options)

    def select_id(self, option_id: int | None) -> None:
        """Select the option with the given id, or clear the selection."""
        for index, option in enumerate(self.options):
            if option.id == option_id:
                self.selected_index = index
                return
        self.selected_index = -1

    def handle_input(self, key: str) -> None:
        if not self.active:
            return
        if key == "up":
            self.select_previous()
        elif key == "down":
            self.select_next()

    @property
    def selected_option(self) -> SelectOption | None:
        if 0 <= self.selected_index < len(self.options):
            return self.options[self.selected_index]
        return None

    @property
    def selected_id(self) -> int | None:
        option = self.selected_option
        return option.id if option else None

    def validate(self) -> FieldError | None:
        if self.required and self.selected_option is None:
            return FieldError(self.label, self.required_message)
        return None

    def render(self, palette: Palette) -> Text:
        text = Text()
        text.append(f"{self.label}:\n", style=palette.label)
        if not self.options:
            text.append("  (no options available)\n", style=palette.help)
            return text
        for index, option in enumerate(self.options):
            display = option.display_name
            if option.extra_info:
                display = f"{display} ({option.extra_info})"
            if index == self.selected_index:
                prefix = "▶ " if self.active else "• "
                style = palette.focused if self.active else palette.value
            else:
                prefix = "  "
                style = palette.value
            text.append(prefix + display + "\n", style=style)
        return text


FormElement = Union[TextField, Checkbox, SingleSelect]


class Form:
    """Ordered focusable elements with a single focus index.

    Tab and shift+tab cycle focus with wrap-around; every other key goes to
    the focused element. validate() stops at the first invalid element and
    moves focus there.
    """

    NEXT_KEY = "tab"
    PREVIOUS_KEY = "shift+tab"

    def __init__(self, *elements: FormElement):
        self.elements: list[FormElement] = list(elements)
        self.focus_index = 0
        self.error_message = ""
        if self.elements:
            self.elements[0].activate()

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def focused(self) -> FormElement | None:
        if not self.elements:
            return None
        return self.elements[self.focus_index]

    def handle_input(self, key: str) -> None:
        if key == self.NEXT_KEY:
            self.focus_next()
        elif key == self.PREVIOUS_KEY:
            self.focus_previous()
        elif self.elements:
            self.elements[self.focus_index].handle_input(key)

    def focus_next(self) -> None:
        if self.elements:
            self.focus((self.focus_index + 1) % len(self.elements))

    def focus_previous(self) -> None:
        if self.elements:
            self.focus((self.focus_index - 1) % len(self.elements))

    def focus(self, index: int) -> None:
        if not 0 <= index < len(self.elements):
            return
        self.elements[self.focus_index].deactivate()
        self.focus_index = index
        self.elements[index].activate()

    def validate(self) -> FieldError | None:
        self.error_message = ""
        for index, element in enumerate(self.elements):
            validate = getattr(element, "validate", None)
            if validate is None:
                continue
            if error := validate():
                self.error_message = error.message
                self.focus(index)
                return error
        return None

    def get_field(self, index: int) -> TextField | None:
        element = self._element(index)
        return element if isinstance(element, TextField) else None

    def get_checkbox(self, index: int) -> Checkbox | None:
        element = self._element(index)
        return element if isinstance(element, Checkbox) else None

    def get_select(self, index: int) -> SingleSelect | None:
        element = self._element(index)
        return element if isinstance(element, SingleSelect) else None

    def value(self, index: int) -> str:
        field = self.get_field(index)
        return field.value if field else ""

    def _element(self, index: int) -> FormElement | None:
        if 0 <= index < len(self.elements):
            return self.elements[index]
        return None

    def render(self, palette: Palette) -> Text:
        text = Text()
        for element in self.elements:
            text.append_text(element.render(palette))
            text.append("\n")
        if self.error_message:
            text.append(f"⚠ {self.error_message}\n", style=palette.error)
        return text


class FieldForm(Form):
    """A form made only of text fields."""

    def __init__(self, *fields: TextField):
        for field in fields:
            if not isinstance(field, TextField):
                raise TypeError(f"FieldForm only accepts TextField elements, got {type(field).__name__}")
        super().__init__(*fields)

    @property
    def fields(self) -> list[TextField]:
        return self.elements  # type: ignore[return-value]

    def values(self) -> list[str]:
        return [field.value for field in self.fields]
