"""Command-line interface for SheetsGate."""

import argparse
import logging
import sys

import uvicorn

from .config import settings


def configure_logging(level: str):
    """Send logs to stderr; stdout is reserved for the MCP transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # googleapiclient logs every discovery build at INFO
    logging.getLogger("googleapiclient.discovery").setLevel(logging.WARNING)


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="SheetsGate - Google Sheets gateway for MCP clients"
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: from LOG_LEVEL)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the HTTP server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # MCP command
    subparsers.add_parser("mcp", help="Run the MCP server over stdio")

    # Auth command
    subparsers.add_parser("check-auth", help="Verify the service account key loads")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "mcp":
        run_mcp()
    elif args.command == "check-auth":
        run_check_auth()
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "sheetsgate.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
        log_level=settings.log_level.lower(),
    )


def run_mcp():
    """Run the MCP server on stdio."""
    from .mcp_server import build_mcp_server
    from .ops import OperationDispatcher
    from .sheets import CredentialProvider, WorkspaceClient

    client = WorkspaceClient(CredentialProvider.from_settings(settings))
    server = build_mcp_server(OperationDispatcher(client, settings))
    server.run(transport="stdio")


def run_check_auth():
    """Load the service account key and report which account it is."""
    from .errors import ConfigurationError
    from .sheets import CredentialProvider

    provider = CredentialProvider.from_settings(settings)
    try:
        email = provider.service_account_email
    except ConfigurationError as e:
        print(f"Authentication failed: {e.message}", file=sys.stderr)
        sys.exit(1)
    print(f"Service account key loaded for {email}")
    if settings.service_account_email and settings.service_account_email != email:
        print(
            f"Warning: SERVICE_ACCOUNT_EMAIL is {settings.service_account_email}, "
            f"but the key belongs to {email}",
            file=sys.stderr,
        )


if __name__ == "__main__":
    main()
