"""Validation and coercion of incoming operation parameters.

Everything downstream of `normalize` sees canonical values: stripped,
non-empty identifiers and a genuine list-of-lists value matrix. Some MCP
clients serialize nested arrays into a JSON string before sending them;
`parse_values` absorbs that here so no other layer has to.
"""

import json
import logging
import math
from typing import Any, Optional

from ..errors import (
    InvalidValuesEncodingError,
    InvalidValuesShapeError,
    MissingParameterError,
)
from .models import OperationKind, OperationRequest, ValueMatrix

logger = logging.getLogger(__name__)

SCALAR_TYPES = (str, int, float, bool)

# Wire parameter names required by each operation, in the order they are checked.
REQUIRED_PARAMETERS: dict[OperationKind, tuple[str, ...]] = {
    OperationKind.LIST_SPREADSHEETS: (),
    OperationKind.LIST_FOLDER: ("folderId",),
    OperationKind.DEBUG_FOLDER: ("folderId",),
    OperationKind.READ_SHEET: ("spreadsheetId", "range"),
    OperationKind.APPEND_SHEET: ("spreadsheetId", "range", "values"),
    OperationKind.UPDATE_SHEET: ("spreadsheetId", "range", "values"),
}


def _require_string(params: dict, name: str) -> str:
    value = params.get(name)
    if not isinstance(value, str) or not value.strip():
        raise MissingParameterError(name)
    return value.strip()


def _reject_constant(name: str):
    # json.loads accepts NaN, Infinity and -Infinity; strict JSON does not.
    raise InvalidValuesEncodingError(f"values is not valid JSON: {name} is not allowed")


def parse_values(raw: Any) -> ValueMatrix:
    """Coerce `raw` into a rectangular matrix of scalar cells."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw, parse_constant=_reject_constant)
        except json.JSONDecodeError as e:
            raise InvalidValuesEncodingError(f"values is not valid JSON: {e.msg}")
        logger.debug("Decoded values from a JSON-encoded string")

    if not isinstance(raw, list):
        raise InvalidValuesShapeError(
            f"values must be an array of rows, got {type(raw).__name__}"
        )

    width: Optional[int] = None
    for row_idx, row in enumerate(raw):
        if not isinstance(row, list):
            raise InvalidValuesShapeError(f"values[{row_idx}] must be an array of cells")
        for col_idx, cell in enumerate(row):
            if cell is not None and not isinstance(cell, SCALAR_TYPES):
                raise InvalidValuesShapeError(
                    f"values[{row_idx}][{col_idx}] must be a scalar, got {type(cell).__name__}"
                )
            if isinstance(cell, float) and not math.isfinite(cell):
                raise InvalidValuesEncodingError(
                    f"values[{row_idx}][{col_idx}] is {cell}, which JSON cannot encode"
                )
        if width is None:
            width = len(row)
        elif len(row) != width:
            raise InvalidValuesShapeError(
                f"values must be rectangular: row 0 has {width} cells, "
                f"row {row_idx} has {len(row)}"
            )

    return raw


def normalize(kind: OperationKind, raw_params: Optional[dict]) -> OperationRequest:
    """Validate raw parameters for `kind` and build an OperationRequest."""
    kind = OperationKind(kind)
    params = raw_params if isinstance(raw_params, dict) else {}

    fields: dict[str, Any] = {"kind": kind}
    for name in REQUIRED_PARAMETERS[kind]:
        if name == "spreadsheetId":
            fields["spreadsheet_id"] = _require_string(params, name)
        elif name == "range":
            fields["range_notation"] = _require_string(params, name)
        elif name == "folderId":
            fields["folder_id"] = _require_string(params, name)
        elif name == "values":
            if params.get("values") is None:
                raise MissingParameterError(name)
            fields["values"] = parse_values(params["values"])

    return OperationRequest(**fields)
