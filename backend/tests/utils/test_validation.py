# tests/utils/test_validation.py
import pytest

from smeta.errors import ValidationError
from smeta.models import CapaStatus, DocumentCategory
from smeta.utils.validation import parse_enum, require_text, sanitize_display_name


@pytest.mark.parametrize("value, expected", [
    (None, None),
    ("", None),
    ("   ", None),
    ("  Fire Drill Log ", "Fire Drill Log"),
    ("Policy (v2) & notes", "Policy (v2) & notes"),
])
def test_sanitize_display_name(value, expected):
    assert sanitize_display_name(value) == expected


@pytest.mark.parametrize("value", ["a/b", "a\\b", "<script>", "C:", 'quote"', "pipe|", "what?", "star*", "tab\tname"])
def test_sanitize_display_name_rejects_reserved_characters(value):
    with pytest.raises(ValidationError):
        sanitize_display_name(value)


def test_sanitize_display_name_length():
    assert sanitize_display_name("a" * 255) == "a" * 255

    with pytest.raises(ValidationError):
        sanitize_display_name("a" * 256)


def test_parse_enum():
    assert parse_enum(CapaStatus, "in-progress", "status") is CapaStatus.IN_PROGRESS
    assert parse_enum(DocumentCategory, None, "category", required=False) is None


def test_parse_enum_errors():
    with pytest.raises(ValidationError) as exc_info:
        parse_enum(CapaStatus, None, "status")
    assert exc_info.value.message == "Status is required"

    with pytest.raises(ValidationError) as exc_info:
        parse_enum(CapaStatus, "done", "status")
    assert exc_info.value.message == "Invalid status. Must be one of: open, in-progress, closed"


def test_require_text():
    assert require_text("  Title ", "title") == "Title"

    with pytest.raises(ValidationError):
        require_text(" ", "title")
