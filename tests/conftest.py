"""Pytest configuration and shared fixtures."""

import re
from pathlib import Path
from typing import Any, Optional
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from sheetsgate.api import create_app
from sheetsgate.config import Settings
from sheetsgate.ops import OperationDispatcher
from sheetsgate.sheets import CredentialProvider, WorkspaceClient


def column_name(index: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'."""
    quotient, remainder = divmod(index, 26)
    prefix = column_name(quotient - 1) if quotient else ""
    return prefix + chr(ord("A") + remainder)


def parse_range(range_notation: str) -> tuple[str, int, int, Optional[int], Optional[int]]:
    """Split 'Sheet1!A1:B2' into (sheet, row0, col0, row1, col1), 0-based."""
    sheet, _, cells = range_notation.rpartition("!")
    sheet = sheet.strip("'") or "Sheet1"
    start, _, end = cells.partition(":")

    def parse_cell(cell: str) -> tuple[int, int]:
        match = re.fullmatch(r"([A-Za-z]+)(\d+)", cell)
        if not match:
            raise ValueError(f"Invalid cell notation: {cell}")
        col = 0
        for letter in match.group(1).upper():
            col = col * 26 + ord(letter) - ord("A") + 1
        return int(match.group(2)) - 1, col - 1

    row0, col0 = parse_cell(start)
    if not end:
        return sheet, row0, col0, None, None
    row1, col1 = parse_cell(end)
    return sheet, row0, col0, row1, col1


class FakeWorkspaceClient:
    """In-memory stand-in for WorkspaceClient with Sheets-like response shapes."""

    def __init__(self, files: Optional[list[dict]] = None, folders: Optional[dict] = None):
        self.provider = Mock(spec=CredentialProvider)
        self.provider.is_configured.return_value = True
        self.files = files or []
        self.folders = folders or {}
        self.grids: dict[tuple[str, str], dict[tuple[int, int], Any]] = {}
        self.calls: list[tuple] = []

    def _grid(self, spreadsheet_id: str, sheet: str) -> dict:
        return self.grids.setdefault((spreadsheet_id, sheet), {})

    def _write(self, spreadsheet_id, sheet, row0, col0, values) -> dict:
        grid = self._grid(spreadsheet_id, sheet)
        for r, row in enumerate(values):
            for c, value in enumerate(row):
                grid[(row0 + r, col0 + c)] = value
        rows = len(values)
        cols = max((len(row) for row in values), default=0)
        end = f"{column_name(col0 + max(cols - 1, 0))}{row0 + max(rows, 1)}"
        return {
            "spreadsheetId": spreadsheet_id,
            "updatedRange": f"{sheet}!{column_name(col0)}{row0 + 1}:{end}",
            "updatedRows": rows,
            "updatedColumns": cols,
            "updatedCells": sum(len(row) for row in values),
        }

    def list_files(self, query=None, page_size=100, order_by=None, fields=None, all_drives=False):
        self.calls.append(("list_files", query, all_drives))
        return list(self.files)

    def list_spreadsheets(self, page_size, writer_email=""):
        self.calls.append(("list_spreadsheets", writer_email))
        return list(self.files)

    def list_folder(self, folder_id, page_size):
        self.calls.append(("list_folder", folder_id))
        return list(self.folders.get(folder_id, []))

    def get_values(self, spreadsheet_id, range_notation):
        self.calls.append(("get_values", spreadsheet_id, range_notation))
        sheet, row0, col0, row1, col1 = parse_range(range_notation)
        grid = self._grid(spreadsheet_id, sheet)
        if row1 is None:
            row1, col1 = row0, col0

        rows = []
        for r in range(row0, row1 + 1):
            row = [grid.get((r, c), "") for c in range(col0, col1 + 1)]
            while row and row[-1] == "":
                row.pop()
            rows.append(row)
        while rows and not rows[-1]:
            rows.pop()

        result = {"range": range_notation, "majorDimension": "ROWS"}
        if rows:
            result["values"] = rows
        return result

    def append_values(self, spreadsheet_id, range_notation, values):
        self.calls.append(("append_values", spreadsheet_id, range_notation, values))
        sheet, row0, col0, _, _ = parse_range(range_notation)
        grid = self._grid(spreadsheet_id, sheet)
        used = [r for (r, _c) in grid if r >= row0]
        next_row = max(used) + 1 if used else row0
        return {
            "spreadsheetId": spreadsheet_id,
            "updates": self._write(spreadsheet_id, sheet, next_row, col0, values),
        }

    def update_values(self, spreadsheet_id, range_notation, values):
        self.calls.append(("update_values", spreadsheet_id, range_notation, values))
        sheet, row0, col0, _, _ = parse_range(range_notation)
        return self._write(spreadsheet_id, sheet, row0, col0, values)


@pytest.fixture
def mock_settings(tmp_path: Path) -> Settings:
    """Create settings with test values."""
    key_file = tmp_path / "service-account.json"
    key_file.write_text('{"type": "service_account"}')

    return Settings(
        google_application_credentials=key_file,
        google_credentials_json=None,
        service_account_email="",
        host="127.0.0.1",
        port=3000,
        debug=False,
        cors_allow_origins=["*"],
        list_page_size=100,
        probe_page_size=1000,
    )


@pytest.fixture
def fake_client() -> FakeWorkspaceClient:
    """An empty in-memory workspace."""
    return FakeWorkspaceClient()


@pytest.fixture
def mock_workspace_client() -> Mock:
    """Create a mocked workspace client."""
    client = Mock(spec=WorkspaceClient)
    client.provider = Mock(spec=CredentialProvider)
    client.provider.is_configured.return_value = True
    client.list_spreadsheets.return_value = []
    client.list_folder.return_value = []
    client.list_files.return_value = []
    client.get_values.return_value = {"range": "Sheet1!A1:B2", "majorDimension": "ROWS"}
    return client


@pytest.fixture
def dispatcher(fake_client, mock_settings) -> OperationDispatcher:
    return OperationDispatcher(fake_client, mock_settings)


@pytest.fixture
def test_client(fake_client, mock_settings) -> TestClient:
    """Create a test client backed by the in-memory workspace."""
    app = create_app(settings=mock_settings, client=fake_client)
    return TestClient(app)
