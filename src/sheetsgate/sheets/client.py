"""Google Drive / Sheets API client."""

import logging
from typing import Any, Optional

import httplib2
from google.auth.exceptions import GoogleAuthError, RefreshError
from googleapiclient.errors import HttpError

from ..errors import ConfigurationError, UpstreamError
from .credentials import Capability, CredentialProvider

logger = logging.getLogger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
FILE_FIELDS = "files(id, name, modifiedTime, mimeType)"

USER_ENTERED = "USER_ENTERED"
INSERT_ROWS = "INSERT_ROWS"


def quote_query_literal(value: str) -> str:
    """Quote a string for use inside a Drive `q` expression."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def _upstream_message(error: Exception) -> str:
    if isinstance(error, HttpError):
        reason = getattr(error, "reason", None)
        if reason:
            return reason
    return str(error) or error.__class__.__name__


class WorkspaceClient:
    """One method per upstream call. Each call is issued exactly once."""

    def __init__(self, provider: CredentialProvider):
        self.provider = provider

    def _execute(self, description: str, request) -> dict:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            logger.warning(f"{description} failed with HTTP {status}: {_upstream_message(e)}")
            raise UpstreamError(_upstream_message(e), status=status)
        except RefreshError as e:
            # Google refused to mint a token for this key.
            logger.error(f"{description} failed: credential refresh rejected: {e}")
            raise ConfigurationError(f"Service account credential rejected: {e}")
        except (GoogleAuthError, httplib2.HttpLib2Error, OSError) as e:
            logger.error(f"{description} failed: {e}")
            raise UpstreamError(_upstream_message(e))

    def list_files(
        self,
        query: Optional[str] = None,
        page_size: int = 100,
        order_by: Optional[str] = None,
        fields: str = FILE_FIELDS,
        all_drives: bool = False,
    ) -> list[dict]:
        """Run a single files.list page and return the raw file entries."""
        drive = self.provider.acquire_handle(Capability.FILE_LISTING)

        params: dict[str, Any] = {"pageSize": page_size, "fields": fields}
        if query:
            params["q"] = query
        if order_by:
            params["orderBy"] = order_by
        if all_drives:
            params["supportsAllDrives"] = True
            params["includeItemsFromAllDrives"] = True

        logger.info(f"Listing files q={query!r} all_drives={all_drives}")
        result = self._execute("files.list", drive.files().list(**params))
        return result.get("files", [])

    def list_spreadsheets(self, page_size: int, writer_email: str = "") -> list[dict]:
        """List spreadsheets, most recently modified first."""
        query = f"mimeType='{SPREADSHEET_MIME_TYPE}' and trashed = false"
        if writer_email:
            query += f" and {quote_query_literal(writer_email)} in writers"
        return self.list_files(query, page_size=page_size, order_by="modifiedTime desc")

    def list_folder(self, folder_id: str, page_size: int) -> list[dict]:
        """List non-trashed files whose parents include the folder."""
        query = f"{quote_query_literal(folder_id)} in parents and trashed = false"
        return self.list_files(query, page_size=page_size)

    def get_values(self, spreadsheet_id: str, range_notation: str) -> dict:
        sheets = self.provider.acquire_handle(Capability.SPREADSHEET_VALUES)
        logger.info(f"Reading {range_notation} from {spreadsheet_id}")
        return self._execute(
            "values.get",
            sheets.spreadsheets()
            .values()
            .get(spreadsheetId=spreadsheet_id, range=range_notation),
        )

    def append_values(
        self, spreadsheet_id: str, range_notation: str, values: list[list[Any]]
    ) -> dict:
        sheets = self.provider.acquire_handle(Capability.SPREADSHEET_VALUES)
        logger.info(f"Appending {len(values)} row(s) to {range_notation} in {spreadsheet_id}")
        return self._execute(
            "values.append",
            sheets.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueInputOption=USER_ENTERED,
                insertDataOption=INSERT_ROWS,
                body={"values": values},
            ),
        )

    def update_values(
        self, spreadsheet_id: str, range_notation: str, values: list[list[Any]]
    ) -> dict:
        sheets = self.provider.acquire_handle(Capability.SPREADSHEET_VALUES)
        logger.info(f"Updating {range_notation} in {spreadsheet_id} with {len(values)} row(s)")
        return self._execute(
            "values.update",
            sheets.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=range_notation,
                valueInputOption=USER_ENTERED,
                body={"values": values},
            ),
        )
