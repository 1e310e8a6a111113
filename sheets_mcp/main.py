import logging
import sys

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Mount

from sheets_mcp.auth import get_credential_manager
from sheets_mcp.config import get_settings
from sheets_mcp.exceptions import (
    AuthenticationError,
    ConfigurationError,
    IntegrationError,
    InvalidSpreadsheetUrlError,
    RateLimitError,
)
from sheets_mcp.mcp_server import mcp
from sheets_mcp.models.common import StatusResponse
from sheets_mcp.routers.sheets import router as sheets_router
from sheets_mcp.tools.status import server_status

logger = logging.getLogger("sheets_mcp")


# --- Localhost-only middleware ---

class LocalhostOnlyMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        client_host = request.client.host if request.client else None
        if client_host not in ("127.0.0.1", "::1", "localhost"):
            return JSONResponse(
                status_code=403,
                content={"error_code": "forbidden", "message": "Localhost access only"},
            )
        return await call_next(request)


# --- FastAPI app ---

api = FastAPI(title="sheets-mcp", version="0.1.0")
api.include_router(sheets_router)


@api.get("/api/status")
def api_status() -> StatusResponse:
    return server_status()


# --- Exception handlers ---

@api.exception_handler(AuthenticationError)
async def auth_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"error_code": "auth_error", "message": str(exc)})


@api.exception_handler(IntegrationError)
async def integration_error_handler(request: Request, exc: IntegrationError):
    status = exc.status if exc.status == 404 else 500
    return JSONResponse(status_code=status, content={"error_code": "integration_error", "message": str(exc)})


@api.exception_handler(RateLimitError)
async def rate_limit_error_handler(request: Request, exc: RateLimitError):
    return JSONResponse(status_code=429, content={"error_code": "rate_limit", "message": str(exc)})


@api.exception_handler(InvalidSpreadsheetUrlError)
async def invalid_url_handler(request: Request, exc: InvalidSpreadsheetUrlError):
    return JSONResponse(status_code=400, content={"error_code": "invalid_spreadsheet", "message": str(exc)})


# --- Starlette root app ---

mcp_app = mcp.http_app(path="/", stateless_http=True)

app = Starlette(
    middleware=[Middleware(LocalhostOnlyMiddleware)],
    routes=[
        Mount("/mcp", app=mcp_app),
        Mount("/", app=api),
    ],
    lifespan=mcp_app.lifespan,
)


def configure_logging(level: str) -> None:
    # stdout carries the stdio transport
    logging.basicConfig(
        stream=sys.stderr,
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] [%(name)s] %(message)s",
    )


def run():
    settings = get_settings()
    configure_logging(settings.log_level)
    try:
        manager = get_credential_manager()
    except ConfigurationError as e:
        logger.error("Startup failed: %s", e)
        sys.exit(1)
    logger.info("Loaded service account %s (%s)", manager.service_account_email, ", ".join(manager.scopes))

    if settings.transport == "stdio":
        logger.info("Serving MCP over stdio")
        mcp.run()
        return
    uvicorn.run(
        "sheets_mcp.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
