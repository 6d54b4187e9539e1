"""SheetsGate - a credential-scoped Google Sheets gateway for MCP clients."""

__version__ = "0.1.0"
