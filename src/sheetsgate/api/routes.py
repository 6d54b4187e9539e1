"""API routes for SheetsGate."""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request

from ..ops import OperationDispatcher, OperationKind

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> OperationDispatcher:
    """Get the dispatcher built by the app factory."""
    return request.app.state.dispatcher


async def read_params(request: Request) -> dict[str, Any]:
    """Parse the JSON body leniently.

    A missing, malformed or non-object body becomes `{}` so the normalizer
    reports the specific missing parameter instead of a generic 422.
    """
    body = await request.body()
    if not body:
        return {}
    try:
        params = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning(f"Ignoring malformed JSON body on {request.url.path}")
        return {}
    return params if isinstance(params, dict) else {}


# Spreadsheet endpoints


@router.get("/list-spreadsheets")
async def list_spreadsheets(dispatcher: OperationDispatcher = Depends(get_dispatcher)):
    """List spreadsheets shared with the service account."""
    return await dispatcher.execute(OperationKind.LIST_SPREADSHEETS.value)


@router.post("/read-sheet")
async def read_sheet(
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """Read the values in a range."""
    return await dispatcher.execute(OperationKind.READ_SHEET.value, params)


@router.post("/append-sheet")
async def append_sheet(
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """Append rows to a sheet."""
    return await dispatcher.execute(OperationKind.APPEND_SHEET.value, params)


@router.post("/update-sheet")
async def update_sheet(
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """Overwrite the values in a range. `values` may be a JSON-encoded string."""
    return await dispatcher.execute(OperationKind.UPDATE_SHEET.value, params)


# Drive folder endpoints


@router.get("/list-folder")
async def list_folder_get(
    folder_id: Optional[str] = Query(default=None, alias="folderId"),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """List the files in a folder."""
    return await dispatcher.execute(OperationKind.LIST_FOLDER.value, {"folderId": folder_id})


@router.post("/list-folder")
async def list_folder_post(
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """List the files in a folder."""
    return await dispatcher.execute(OperationKind.LIST_FOLDER.value, params)


@router.get("/debug-folder")
async def debug_folder_get(
    folder_id: Optional[str] = Query(default=None, alias="folderId"),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """
    Diagnose an empty folder listing.

    Runs the normal listing first. Only when it is empty, several
    alternative queries are issued and reported side by side, each labeled
    with its variant. The result is advisory.
    """
    return await dispatcher.execute(OperationKind.DEBUG_FOLDER.value, {"folderId": folder_id})


@router.post("/debug-folder")
async def debug_folder_post(
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """Diagnose an empty folder listing."""
    return await dispatcher.execute(OperationKind.DEBUG_FOLDER.value, params)


# MCP-style tool endpoints


@router.get("/mcp/tools")
async def list_tools(dispatcher: OperationDispatcher = Depends(get_dispatcher)):
    """List every operation as an MCP tool schema."""
    return {"tools": dispatcher.to_mcp_tools()}


@router.post("/mcp/tools/{name}")
async def call_tool(
    name: str,
    params: dict = Depends(read_params),
    dispatcher: OperationDispatcher = Depends(get_dispatcher),
):
    """Invoke an operation by name. The body is the tool's argument object."""
    return await dispatcher.execute(name, params)


# Health check


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint with diagnostics."""
    settings = request.app.state.settings
    dispatcher = get_dispatcher(request)

    # Gather non-secret diagnostics
    config = {
        "credentials_configured": dispatcher.client.provider.is_configured(),
        "service_account_email_set": bool(settings.service_account_email),
        "list_page_size": settings.capped_page_size(settings.list_page_size),
    }

    return {
        "status": "ok",
        "service": "sheetsgate",
        "config": config,
    }
