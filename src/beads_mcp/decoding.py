"""Decode bd output and check its top-level JSON shape."""

import json
from enum import Enum
from typing import Any

from beads_mcp.errors import BdCommandError


class ExpectedShape(Enum):
    """Top-level JSON shape an operation requires from bd.

    ARRAY: a list, possibly empty ("no matches").
    OBJECT: a single JSON object.
    ARRAY_NON_EMPTY: a single-item lookup. bd may answer with a one-element
        list or a bare object; an empty list means the item does not exist.
    """

    ARRAY = "array"
    OBJECT = "object"
    ARRAY_NON_EMPTY = "array_non_empty"


def decode_json_output(stdout: str) -> Any:
    """Parse bd --json output.

    Empty output decodes to an empty object. Unparseable output raises
    BdCommandError with the raw text attached as stderr for diagnosis.
    """
    trimmed = stdout.strip()
    if not trimmed:
        return {}

    try:
        return json.loads(trimmed)
    except json.JSONDecodeError as e:
        raise BdCommandError(f"Failed to parse bd JSON output: {e}", trimmed) from e


def validate_shape(
    data: Any,
    shape: ExpectedShape,
    *,
    operation: str,
    subject: str | None,
) -> Any:
    """Return `data` (unwrapped for ARRAY_NON_EMPTY) or raise BdCommandError.

    Args:
        data: Decoded JSON value
        shape: Shape the calling operation requires
        operation: bd subcommand name, used in error messages
        subject: Identifier the call was about (issue ID), if any
    """
    invalid_message = f"Invalid response for {operation}"
    if subject:
        invalid_message = f"{invalid_message} {subject}"

    if shape is ExpectedShape.ARRAY:
        if not isinstance(data, list):
            raise BdCommandError(invalid_message)
        return data

    if shape is ExpectedShape.ARRAY_NON_EMPTY and isinstance(data, list):
        if not data:
            raise BdCommandError(f"Issue not found: {subject}")
        data = data[0]

    if not isinstance(data, dict):
        raise BdCommandError(invalid_message)
    return data
