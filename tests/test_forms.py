"""Tests for forms.py - focusable elements and the form controller."""

from __future__ import annotations

import pytest
from rich.text import Text

from config import Palette
from forms import Checkbox, FieldForm, Form, SelectOption, SingleSelect, TextField
from validators import positive_float


def options(count: int) -> list[SelectOption]:
    return [SelectOption(i + 1, f"Option {i + 1}") for i in range(count)]


class TestTextField:
    """Tests for TextField."""

    def test_typing_when_active(self):
        field = TextField("Name")
        field.activate()
        for key in "Ac":
            field.handle_input(key)
        field.handle_input("space")
        field.handle_input("m")
        assert field.value == "Ac m"

    def test_backspace(self):
        field = TextField("Name", value="abc")
        field.activate()
        field.handle_input("backspace")
        assert field.value == "ab"

    def test_inactive_ignores_input(self):
        field = TextField("Name")
        field.handle_input("a")
        assert field.value == ""

    def test_char_limit(self):
        field = TextField("Hours", char_limit=3)
        field.activate()
        for key in "12345":
            field.handle_input(key)
        assert field.value == "123"

    def test_named_keys_are_not_typed(self):
        field = TextField("Name")
        field.activate()
        field.handle_input("up")
        field.handle_input("enter")
        assert field.value == ""

    def test_read_only(self):
        field = TextField("Signature", value="/tmp/sig.png", read_only=True)
        field.activate()
        field.handle_input("x")
        field.handle_input("backspace")
        assert field.value == "/tmp/sig.png"

    def test_activate_is_idempotent(self):
        field = TextField("Name")
        field.activate()
        field.activate()
        assert field.active

    def test_required_validation(self):
        assert TextField("Name", required=True).validate().message == "Name is required"
        assert TextField("Name", required=True, value="x").validate() is None

    def test_validator_runs_after_required(self):
        field = TextField("Hours", required=True, value="-1", validator=positive_float("Hours"))
        assert field.validate().message == "Hours must be a positive number"

    def test_render_returns_text(self):
        assert isinstance(TextField("Name", "placeholder").render(Palette()), Text)


class TestCheckbox:
    """Tests for Checkbox."""

    def test_space_toggles_when_active(self):
        checkbox = Checkbox("Is Work")
        checkbox.activate()
        checkbox.handle_input("space")
        assert checkbox.checked
        checkbox.handle_input("space")
        assert not checkbox.checked

    def test_other_keys_ignored(self):
        checkbox = Checkbox("Is Work")
        checkbox.activate()
        checkbox.handle_input("enter")
        checkbox.handle_input("x")
        assert not checkbox.checked

    def test_inactive_ignores_space(self):
        checkbox = Checkbox("Is Work")
        checkbox.handle_input("space")
        assert not checkbox.checked

    def test_help_depends_on_value(self):
        checkbox = Checkbox("Is Work", True, help_text="included", unchecked_help_text="excluded")
        assert checkbox.current_help == "included"
        checkbox.toggle()
        assert checkbox.current_help == "excluded"

    def test_focused_render_shows_toggle_hint(self):
        checkbox = Checkbox("Is Work")
        checkbox.activate()
        assert "(press Space to toggle)" in checkbox.render(Palette()).plain


class TestSingleSelect:
    """Tests for SingleSelect."""

    def test_default_index(self):
        assert SingleSelect("Project", []).selected_index == -1
        assert SingleSelect("Project", options(3)).selected_index == 0

    def test_next_wraps(self):
        select = SingleSelect("Project", options(3))
        for _ in range(3):
            select.select_next()
        assert select.selected_index == 0

    def test_previous_wraps(self):
        select = SingleSelect("Project", options(3))
        select.select_previous()
        assert select.selected_index == 2

    def test_from_unselected(self):
        select = SingleSelect("Project", options(3))
        select.selected_index = -1
        select.select_next()
        assert select.selected_index == 0
        select.selected_index = -1
        select.select_previous()
        assert select.selected_index == 2

    def test_arrow_keys(self):
        select = SingleSelect("Project", options(3))
        select.activate()
        select.handle_input("down")
        assert select.selected_id == 2
        select.handle_input("up")
        select.handle_input("up")
        assert select.selected_id == 3

    def test_empty_select_does_not_move(self):
        select = SingleSelect("Project", [])
        select.select_next()
        assert select.selected_index == -1
        assert select.selected_id is None

    def test_required_fails_out_of_range(self):
        select = SingleSelect("Project", [], required=True, required_message="Please select a project")
        assert select.validate().message == "Please select a project"

    def test_select_id(self):
        select = SingleSelect("Project", options(3))
        select.select_id(3)
        assert select.selected_index == 2
        select.select_id(99)
        assert select.selected_index == -1


class TestForm:
    """Tests for the Form controller."""

    def make_form(self) -> Form:
        return Form(TextField("A"), Checkbox("B"), SingleSelect("C", options(2)))

    def test_first_element_active(self):
        form = self.make_form()
        assert form.focus_index == 0
        assert [e.active for e in form.elements] == [True, False, False]

    def test_tab_cycles_with_wrap(self):
        form = self.make_form()
        for expected in (1, 2, 0):
            form.handle_input("tab")
            assert form.focus_index == expected

    def test_shift_tab_wraps_backwards(self):
        form = self.make_form()
        form.handle_input("shift+tab")
        assert form.focus_index == 2

    def test_only_focused_element_active(self):
        form = self.make_form()
        form.handle_input("tab")
        form.handle_input("tab")
        assert [e.active for e in form.elements] == [False, False, True]

    def test_keys_go_to_focused_element(self):
        form = self.make_form()
        form.handle_input("x")
        form.handle_input("tab")
        form.handle_input("space")
        assert form.value(0) == "x"
        assert form.get_checkbox(1).checked

    def test_validate_stops_at_first_failure_and_focuses_it(self):
        form = Form(
            TextField("A", value="ok", required=True),
            Checkbox("B"),
            TextField("C", required=True),
            TextField("D", required=True),
        )
        error = form.validate()
        assert error.message == "C is required"
        assert form.error_message == "C is required"
        assert form.focus_index == 2

    def test_successful_validate_clears_error(self):
        form = Form(TextField("A", required=True))
        form.validate()
        form.get_field(0).value = "filled"
        assert form.validate() is None
        assert form.error_message == ""

    def test_typed_getters(self):
        form = self.make_form()
        assert form.get_field(1) is None
        assert form.get_checkbox(1) is not None
        assert form.get_select(2) is not None
        assert form.get_select(7) is None

    def test_render_includes_error(self):
        form = Form(TextField("A", required=True))
        form.validate()
        assert "A is required" in form.render(Palette()).plain


class TestFieldForm:
    """Tests for FieldForm."""

    def test_rejects_non_text_elements(self):
        with pytest.raises(TypeError):
            FieldForm(TextField("A"), Checkbox("B"))  # type: ignore[arg-type]

    def test_focus_rules_match_form(self):
        form = FieldForm(TextField("A"), TextField("B"))
        form.handle_input("shift+tab")
        assert form.focus_index == 1
        form.handle_input("tab")
        assert form.focus_index == 0

    def test_values(self):
        form = FieldForm(TextField("A", value="x"), TextField("B", value="y"))
        assert form.values() == ["x", "y"]
