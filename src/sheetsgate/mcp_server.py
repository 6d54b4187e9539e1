"""MCP server exposing the gateway operations over stdio.

Logs must go to stderr; stdout carries the MCP protocol.
"""

import logging
from typing import Any, Optional, Union

from mcp.server.fastmcp import FastMCP

from .errors import GatewayError
from .ops import OperationDispatcher, OperationKind
from .ops.shaper import error_body

logger = logging.getLogger(__name__)


async def call_operation(
    dispatcher: OperationDispatcher, name: str, params: Optional[dict] = None
) -> dict:
    """Run an operation and return its body, turning failures into error bodies."""
    try:
        return await dispatcher.execute(name, params)
    except GatewayError as e:
        logger.warning(f"{name} failed: {e.message}")
        return error_body(e)


def build_mcp_server(dispatcher: OperationDispatcher) -> FastMCP:
    """Register one MCP tool per gateway operation."""
    server = FastMCP("sheetsgate")

    def describe(kind: OperationKind) -> str:
        return dispatcher.get(kind.value).description

    @server.tool(
        name=OperationKind.LIST_SPREADSHEETS.value,
        description=describe(OperationKind.LIST_SPREADSHEETS),
    )
    async def list_spreadsheets() -> dict:
        return await call_operation(dispatcher, OperationKind.LIST_SPREADSHEETS.value)

    @server.tool(
        name=OperationKind.LIST_FOLDER.value,
        description=describe(OperationKind.LIST_FOLDER),
    )
    async def list_folder(folder_id: str) -> dict:
        return await call_operation(
            dispatcher, OperationKind.LIST_FOLDER.value, {"folderId": folder_id}
        )

    @server.tool(
        name=OperationKind.READ_SHEET.value,
        description=describe(OperationKind.READ_SHEET),
    )
    async def read_sheet(spreadsheet_id: str, range: str) -> dict:
        return await call_operation(
            dispatcher,
            OperationKind.READ_SHEET.value,
            {"spreadsheetId": spreadsheet_id, "range": range},
        )

    @server.tool(
        name=OperationKind.APPEND_SHEET.value,
        description=describe(OperationKind.APPEND_SHEET),
    )
    async def append_sheet(
        spreadsheet_id: str, range: str, values: Union[list[list[Any]], str]
    ) -> dict:
        return await call_operation(
            dispatcher,
            OperationKind.APPEND_SHEET.value,
            {"spreadsheetId": spreadsheet_id, "range": range, "values": values},
        )

    @server.tool(
        name=OperationKind.UPDATE_SHEET.value,
        description=describe(OperationKind.UPDATE_SHEET),
    )
    async def update_sheet(
        spreadsheet_id: str, range: str, values: Union[list[list[Any]], str]
    ) -> dict:
        return await call_operation(
            dispatcher,
            OperationKind.UPDATE_SHEET.value,
            {"spreadsheetId": spreadsheet_id, "range": range, "values": values},
        )

    @server.tool(
        name=OperationKind.DEBUG_FOLDER.value,
        description=describe(OperationKind.DEBUG_FOLDER),
    )
    async def debug_folder(folder_id: str) -> dict:
        return await call_operation(
            dispatcher, OperationKind.DEBUG_FOLDER.value, {"folderId": folder_id}
        )

    return server
