"""Reshape upstream responses into gateway response bodies."""

from typing import Any

from ..errors import GatewayError
from ..sheets.models import FileSummary

# Update-summary keys passed through when, and only when, upstream reports them.
UPDATE_SUMMARY_KEYS = (
    "spreadsheetId",
    "updatedRange",
    "updatedRows",
    "updatedColumns",
    "updatedCells",
)


def shape_files(files: list[dict]) -> list[dict]:
    """Keep id, name, modifiedTime and mimeType, in upstream order."""
    return [FileSummary.model_validate(f).to_wire() for f in files]


def shape_values(result: dict) -> list[list[Any]]:
    # Sheets omits "values" entirely for an empty range.
    return result.get("values", [])


def _pick_summary(source: dict) -> dict:
    return {key: source[key] for key in UPDATE_SUMMARY_KEYS if key in source}


def shape_append(result: dict) -> dict:
    summary = _pick_summary(result.get("updates", {}))
    if "tableRange" in result:
        summary["tableRange"] = result["tableRange"]
    return summary


def shape_update(result: dict) -> dict:
    return _pick_summary(result)


def success_body(payload: dict) -> dict:
    return {"success": True, **payload}


def error_body(error: GatewayError) -> dict:
    return {"success": False, "error": error.message}
