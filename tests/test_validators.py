"""Tests for validators.py - form field validators."""

from validators import (
    FieldError,
    alphanumeric,
    chain,
    email,
    length_range,
    max_length,
    min_length,
    numeric,
    optional,
    positive_float,
    positive_int,
    regex,
    required,
)


class TestRequired:
    """Tests for the required validator."""

    def test_blank_fails(self):
        """Empty and whitespace-only values are rejected."""
        assert required("Name")("") == FieldError("Name", "Name is required")
        assert required("Name")("   ") is not None

    def test_value_passes(self):
        assert required("Name")("Acme") is None


class TestPositiveInt:
    """Tests for the positive_int validator."""

    def test_valid(self):
        assert positive_int("ID")("42") is None
        assert positive_int("ID")(" 7 ") is None

    def test_not_a_number(self):
        error = positive_int("ID")("abc")
        assert error is not None
        assert error.message == "ID must be a number"

    def test_zero_and_negative(self):
        assert positive_int("ID")("0").message == "ID must be a positive number"
        assert positive_int("ID")("-3").message == "ID must be a positive number"

    def test_float_is_not_int(self):
        assert positive_int("ID")("1.5").message == "ID must be a number"

    def test_blank(self):
        assert positive_int("ID")("").message == "ID is required"


class TestPositiveFloat:
    """Tests for the positive_float validator."""

    def test_valid(self):
        assert positive_float("Hours")("7.5") is None
        assert positive_float("Hours")("8") is None

    def test_zero_rejected(self):
        assert positive_float("Hours")("0").message == "Hours must be a positive number"

    def test_non_finite_rejected(self):
        """nan and inf parse as floats but are not valid hours."""
        assert positive_float("Hours")("nan").message == "Hours must be a number"
        assert positive_float("Hours")("inf").message == "Hours must be a number"

    def test_garbage_rejected(self):
        assert positive_float("Hours")("8h").message == "Hours must be a number"


class TestLength:
    """Tests for min_length, max_length and length_range."""

    def test_min_length(self):
        assert min_length("Name", 2)("a").message == "Name must be at least 2 characters"
        assert min_length("Name", 2)("ab") is None

    def test_max_length(self):
        assert max_length("Name", 3)("abcd").message == "Name must not exceed 3 characters"
        assert max_length("Name", 3)("abc") is None

    def test_length_range(self):
        validate = length_range("Name", 2, 4)
        assert validate("a") is not None
        assert validate("abc") is None
        assert validate("abcde") is not None


class TestPatterns:
    """Tests for regex-based validators."""

    def test_regex_custom_message(self):
        validate = regex("Code", r"^[A-Z]{3}$", "Code must be three capitals")
        assert validate("abc").message == "Code must be three capitals"
        assert validate("ABC") is None

    def test_regex_default_message(self):
        assert regex("Code", r"^x$")("y").message == "Code has invalid format"

    def test_email(self):
        assert email("Email")("someone@example.com") is None
        assert email("Email")("someone@") is not None

    def test_numeric(self):
        assert numeric("PIN")("0123") is None
        assert numeric("PIN")("12a") is not None

    def test_alphanumeric(self):
        assert alphanumeric("Key")("abc123") is None
        assert alphanumeric("Key")("abc-123") is not None


class TestCombinators:
    """Tests for chain and optional."""

    def test_chain_returns_first_error(self):
        validate = chain(required("Name"), min_length("Name", 5))
        assert validate("").message == "Name is required"
        assert validate("abc").message == "Name must be at least 5 characters"
        assert validate("abcdef") is None

    def test_empty_chain_passes(self):
        assert chain()("anything") is None

    def test_optional_skips_blank(self):
        validate = optional(positive_int("ID"))
        assert validate("") is None
        assert validate("   ") is None
        assert validate("x") is not None
        assert validate("5") is None

    def test_field_error_str(self):
        assert str(FieldError("Hours", "Hours is required")) == "Hours is required"
