"""Models for gateway operations."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel


class OperationKind(str, Enum):
    """Operations exposed over HTTP and MCP."""

    LIST_SPREADSHEETS = "list-spreadsheets"
    LIST_FOLDER = "list-folder"
    READ_SHEET = "read-sheet"
    APPEND_SHEET = "append-sheet"
    UPDATE_SHEET = "update-sheet"
    DEBUG_FOLDER = "debug-folder"


# A rectangular list of rows; each cell is a str, int, float, bool or None.
ValueMatrix = list[list[Any]]


class OperationRequest(BaseModel):
    """A validated request, ready to be sent upstream."""

    kind: OperationKind
    spreadsheet_id: Optional[str] = None
    range_notation: Optional[str] = None
    values: Optional[ValueMatrix] = None
    folder_id: Optional[str] = None
