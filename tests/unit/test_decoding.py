"""Tests for bd output decoding and shape validation."""

import json

import pytest

from beads_mcp.decoding import ExpectedShape, decode_json_output, validate_shape
from beads_mcp.errors import BdCommandError


class TestDecodeJsonOutput:
    """Tests for decode_json_output()."""

    def test_empty_output_is_empty_object(self) -> None:
        """Empty stdout decodes to an empty object."""
        assert decode_json_output("") == {}

    def test_whitespace_only_output_is_empty_object(self) -> None:
        """Whitespace-only stdout is treated as empty."""
        assert decode_json_output("  \n\t\n") == {}

    def test_decodes_fixture_faithfully(self) -> None:
        """Well-formed JSON decodes to the same structure."""
        fixture = [
            {
                "id": "bd-1",
                "title": "Fix login",
                "status": "open",
                "priority": 0,
                "issue_type": "bug",
                "labels": ["auth"],
                "dependencies": [{"id": "bd-2", "dependency_type": "blocks"}],
            }
        ]

        assert decode_json_output(json.dumps(fixture) + "\n") == fixture

    def test_invalid_json_raises_with_raw_text(self) -> None:
        """Invalid JSON raises BdCommandError carrying the trimmed text."""
        with pytest.raises(BdCommandError, match="Failed to parse bd JSON output") as exc_info:
            decode_json_output("  Warning: database locked\n")

        assert exc_info.value.stderr == "Warning: database locked"


class TestValidateShapeArray:
    """Tests for validate_shape() with ExpectedShape.ARRAY."""

    def test_accepts_list(self) -> None:
        """A list passes through unchanged."""
        data = [{"id": "bd-1"}]
        assert validate_shape(data, ExpectedShape.ARRAY, operation="blocked", subject=None) == data

    def test_accepts_empty_list(self) -> None:
        """An empty list is a valid no-match result."""
        assert validate_shape([], ExpectedShape.ARRAY, operation="list", subject=None) == []

    def test_rejects_object(self) -> None:
        """An object is rejected, naming the operation and subject."""
        with pytest.raises(BdCommandError, match="^Invalid response for close bd-1$"):
            validate_shape({}, ExpectedShape.ARRAY, operation="close", subject="bd-1")


class TestValidateShapeObject:
    """Tests for validate_shape() with ExpectedShape.OBJECT."""

    def test_accepts_dict(self) -> None:
        """A dict passes through unchanged."""
        data = {"total_issues": 3}
        assert validate_shape(data, ExpectedShape.OBJECT, operation="stats", subject=None) == data

    def test_rejects_list(self) -> None:
        """A list is rejected."""
        with pytest.raises(BdCommandError, match="^Invalid response for stats$"):
            validate_shape([], ExpectedShape.OBJECT, operation="stats", subject=None)

    def test_rejects_scalar(self) -> None:
        """A scalar is rejected."""
        with pytest.raises(BdCommandError, match="Invalid response for create"):
            validate_shape("ok", ExpectedShape.OBJECT, operation="create", subject=None)


class TestValidateShapeArrayNonEmpty:
    """Tests for validate_shape() with ExpectedShape.ARRAY_NON_EMPTY."""

    def test_unwraps_first_element(self) -> None:
        """The first element of the list is returned."""
        data = [{"id": "bd-1"}, {"id": "bd-2"}]
        result = validate_shape(
            data, ExpectedShape.ARRAY_NON_EMPTY, operation="show", subject="bd-1"
        )
        assert result == {"id": "bd-1"}

    def test_accepts_bare_object(self) -> None:
        """A bare object is accepted as the single result."""
        result = validate_shape(
            {"id": "bd-1"}, ExpectedShape.ARRAY_NON_EMPTY, operation="update", subject="bd-1"
        )
        assert result == {"id": "bd-1"}

    def test_empty_list_is_not_found(self) -> None:
        """An empty list raises Issue not found with the id."""
        with pytest.raises(BdCommandError, match="^Issue not found: bd-404$"):
            validate_shape([], ExpectedShape.ARRAY_NON_EMPTY, operation="show", subject="bd-404")

    def test_list_of_non_objects_rejected(self) -> None:
        """A list whose first element is not an object is rejected."""
        with pytest.raises(BdCommandError, match="Invalid response for show bd-1"):
            validate_shape(
                ["bd-1"], ExpectedShape.ARRAY_NON_EMPTY, operation="show", subject="bd-1"
            )
