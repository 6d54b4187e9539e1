"""Operation registry and dispatch."""

import asyncio
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import UnknownOperationError
from ..sheets import WorkspaceClient
from .diagnostics import FolderProber
from .models import OperationKind, OperationRequest
from .normalizer import normalize
from .shaper import shape_append, shape_files, shape_update, shape_values, success_body

logger = logging.getLogger(__name__)


class OperationParameter(BaseModel):
    """Definition of an operation parameter."""

    name: str
    type: Any
    description: str
    required: bool = True


class Operation(BaseModel):
    """An operation callable over HTTP or MCP."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kind: OperationKind
    description: str
    parameters: list[OperationParameter] = Field(default_factory=list)
    handler: Optional[Callable[[OperationRequest], dict]] = Field(default=None, exclude=True)

    @property
    def name(self) -> str:
        return self.kind.value

    def to_mcp_schema(self) -> dict:
        """Convert to MCP tool schema format."""
        properties = {}
        required = []

        for param in self.parameters:
            prop = {"description": param.description}
            if isinstance(param.type, list):
                prop["anyOf"] = [{"type": t} for t in param.type]
            else:
                prop["type"] = param.type
            properties[param.name] = prop
            if param.required:
                required.append(param.name)

        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {
                "type": "object",
                "properties": properties,
                "required": required,
            },
        }


SPREADSHEET_ID = OperationParameter(
    name="spreadsheetId",
    type="string",
    description="The ID of the Google Spreadsheet (from the URL)",
)
RANGE = OperationParameter(
    name="range",
    type="string",
    description="Target range in A1 notation (e.g., 'Sheet1!A1:B10')",
)
VALUES = OperationParameter(
    name="values",
    type=["array", "string"],
    description="Rows of cell values, e.g. [[\"a\", \"b\"]]. A JSON-encoded string is accepted.",
)
FOLDER_ID = OperationParameter(
    name="folderId",
    type="string",
    description="The ID of the Google Drive folder",
)


class OperationDispatcher:
    """Maps operation names to exactly one upstream call each."""

    def __init__(self, client: WorkspaceClient, settings):
        self.client = client
        self.settings = settings
        self.prober = FolderProber(
            client,
            list_page_size=settings.capped_page_size(settings.list_page_size),
            probe_page_size=settings.capped_page_size(settings.probe_page_size),
        )
        self._operations: dict[str, Operation] = {}
        self._register_defaults()

    def register(self, operation: Operation):
        """Register an operation."""
        self._operations[operation.name] = operation

    def get(self, name: str) -> Optional[Operation]:
        """Get an operation by name."""
        return self._operations.get(name)

    def list_operations(self) -> list[Operation]:
        """List all registered operations."""
        return list(self._operations.values())

    def to_mcp_tools(self) -> list[dict]:
        """Convert all operations to MCP tool schemas."""
        return [op.to_mcp_schema() for op in self._operations.values()]

    async def execute(self, name: str, params: Optional[dict] = None) -> dict:
        """Validate `params`, run the operation and return the response body.

        Validation happens before any upstream call. The upstream call runs
        on a worker thread so a slow Google API response only holds up the
        request that made it.
        """
        operation = self.get(name)
        if operation is None or operation.handler is None:
            raise UnknownOperationError(name)

        request = normalize(operation.kind, params)
        logger.info(f"Dispatching {operation.name}")
        payload = await asyncio.to_thread(operation.handler, request)
        return success_body(payload)

    @property
    def _list_page_size(self) -> int:
        return self.settings.capped_page_size(self.settings.list_page_size)

    def _list_spreadsheets(self, request: OperationRequest) -> dict:
        files = self.client.list_spreadsheets(
            page_size=self._list_page_size,
            writer_email=self.settings.service_account_email,
        )
        return {"fileCount": len(files), "files": shape_files(files)}

    def _list_folder(self, request: OperationRequest) -> dict:
        files = self.client.list_folder(request.folder_id, page_size=self._list_page_size)
        return {
            "folderId": request.folder_id,
            "fileCount": len(files),
            "files": shape_files(files),
        }

    def _read_sheet(self, request: OperationRequest) -> dict:
        result = self.client.get_values(request.spreadsheet_id, request.range_notation)
        payload = {"values": shape_values(result)}
        if "range" in result:
            payload["range"] = result["range"]
        return payload

    def _append_sheet(self, request: OperationRequest) -> dict:
        result = self.client.append_values(
            request.spreadsheet_id, request.range_notation, request.values
        )
        return {"updates": shape_append(result)}

    def _update_sheet(self, request: OperationRequest) -> dict:
        result = self.client.update_values(
            request.spreadsheet_id, request.range_notation, request.values
        )
        return {"updates": shape_update(result)}

    def _debug_folder(self, request: OperationRequest) -> dict:
        return self.prober.probe(request.folder_id).to_wire()

    def _register_defaults(self):
        self.register(
            Operation(
                kind=OperationKind.LIST_SPREADSHEETS,
                description="List spreadsheets shared with the service account, "
                "most recently modified first.",
                handler=self._list_spreadsheets,
            )
        )
        self.register(
            Operation(
                kind=OperationKind.LIST_FOLDER,
                description="List the non-trashed files in a Google Drive folder.",
                parameters=[FOLDER_ID],
                handler=self._list_folder,
            )
        )
        self.register(
            Operation(
                kind=OperationKind.READ_SHEET,
                description="Read the values in a range. An empty range returns [].",
                parameters=[SPREADSHEET_ID, RANGE],
                handler=self._read_sheet,
            )
        )
        self.register(
            Operation(
                kind=OperationKind.APPEND_SHEET,
                description="Append rows after the table found at the range. "
                "Values are interpreted as if typed by a user.",
                parameters=[SPREADSHEET_ID, RANGE, VALUES],
                handler=self._append_sheet,
            )
        )
        self.register(
            Operation(
                kind=OperationKind.UPDATE_SHEET,
                description="Overwrite the values in a range. "
                "Values are interpreted as if typed by a user.",
                parameters=[SPREADSHEET_ID, RANGE, VALUES],
                handler=self._update_sheet,
            )
        )
        self.register(
            Operation(
                kind=OperationKind.DEBUG_FOLDER,
                description="Troubleshoot an empty folder listing by running several "
                "alternative queries. Advisory only.",
                parameters=[FOLDER_ID],
                handler=self._debug_folder,
            )
        )
