"""Tests for the MCP stdio server."""

import json

import pytest

from sheetsgate.mcp_server import build_mcp_server, call_operation


class TestCallOperation:
    @pytest.mark.asyncio
    async def test_success_body(self, dispatcher, fake_client):
        fake_client.update_values("S1", "Sheet1!A1", [["a"]])

        body = await call_operation(
            dispatcher, "read-sheet", {"spreadsheetId": "S1", "range": "Sheet1!A1"}
        )

        assert body["success"] is True
        assert body["values"] == [["a"]]

    @pytest.mark.asyncio
    async def test_errors_become_error_bodies(self, dispatcher, fake_client):
        body = await call_operation(dispatcher, "list-folder", {})

        assert body == {"success": False, "error": "Missing required parameter: folderId"}
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_unknown_operation(self, dispatcher):
        body = await call_operation(dispatcher, "drop-table")

        assert body == {"success": False, "error": "Unknown operation: drop-table"}


class TestBuildMcpServer:
    @pytest.mark.asyncio
    async def test_registers_one_tool_per_operation(self, dispatcher):
        server = build_mcp_server(dispatcher)

        tools = await server.list_tools()

        assert sorted(t.name for t in tools) == sorted(
            op.name for op in dispatcher.list_operations()
        )

    @pytest.mark.asyncio
    async def test_tool_arguments_are_snake_case(self, dispatcher):
        server = build_mcp_server(dispatcher)

        tools = {t.name: t for t in await server.list_tools()}

        update = tools["update-sheet"]
        assert set(update.inputSchema["properties"]) == {"spreadsheet_id", "range", "values"}
        assert update.description == dispatcher.get("update-sheet").description

    @pytest.mark.asyncio
    async def test_update_sheet_with_json_string_values(self, dispatcher, fake_client):
        server = build_mcp_server(dispatcher)

        result = await server.call_tool(
            "update-sheet",
            {"spreadsheet_id": "S1", "range": "Sheet1!A1", "values": '[["1","2"]]'},
        )

        content = result[0] if isinstance(result, tuple) else result
        body = json.loads(content[0].text)
        assert body["success"] is True
        assert body["updates"]["updatedRange"] == "Sheet1!A1:B1"
        assert fake_client.calls[-1] == ("update_values", "S1", "Sheet1!A1", [["1", "2"]])
