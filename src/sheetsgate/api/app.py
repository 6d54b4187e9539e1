"""FastAPI application factory."""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from ..config import Settings, settings as default_settings
from ..errors import GatewayError
from ..ops import OperationDispatcher
from ..ops.shaper import error_body
from ..sheets import CredentialProvider, WorkspaceClient
from .routes import router

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "Google Sheets MCP gateway is running"


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Render every GatewayError as {"success": false, "error": ...}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc))


def create_app(
    settings: Optional[Settings] = None,
    client: Optional[WorkspaceClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The credential provider, client and dispatcher are built once here and
    shared read-only by every request through `app.state`.
    """
    settings = settings or default_settings
    if client is None:
        client = WorkspaceClient(CredentialProvider.from_settings(settings))

    app = FastAPI(
        title="SheetsGate",
        description="Google Sheets gateway for MCP clients",
        version="0.1.0",
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.dispatcher = OperationDispatcher(client, settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GatewayError, gateway_error_handler)

    @app.get("/", response_class=PlainTextResponse)
    async def liveness():
        """Liveness probe."""
        return LIVENESS_MESSAGE

    app.include_router(router)

    return app
