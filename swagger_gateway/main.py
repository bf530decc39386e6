import logging

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from .config import get_settings
from .exceptions import GatewayError
from .schema import load_schema
from .schema.exceptions import EndpointNotFoundError, OperationNotFoundError
from .gateway.exceptions import InvalidRequestBodyError
from .gateway.router import router as gateway_router

settings = get_settings()

logger = structlog.get_logger("gateway")


def configure_logging(level: str) -> None:
    """Drop log events below the configured level."""
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        )
    )


configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Load the schema before serving any request
    app.state.schema = load_schema(settings.SCHEMA_PATH)

    # Initialize global HTTP client for connection pooling
    # timeouts=None removes global default timeout, allowing per-request timeouts
    app.state.http_client = httpx.AsyncClient(timeout=None)

    yield

    # Shutdown: Close HTTP client
    await app.state.http_client.aclose()

app = FastAPI(
    title=settings.APP_NAME,
    lifespan=lifespan,
    debug=settings.DEBUG
)

# Global exception handlers
@app.exception_handler(EndpointNotFoundError)
async def endpoint_not_found_handler(request: Request, exc: EndpointNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(OperationNotFoundError)
async def operation_not_found_handler(request: Request, exc: OperationNotFoundError):
    return JSONResponse(
        status_code=405,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(InvalidRequestBodyError)
async def invalid_request_body_handler(request: Request, exc: InvalidRequestBodyError):
    return JSONResponse(
        status_code=400,
        content={"error": exc.code, "message": exc.message}
    )

@app.exception_handler(GatewayError)
async def gateway_exception_handler(request: Request, exc: GatewayError):
    logger.error("internal_error", path=request.url.path, code=exc.code, message=exc.message)
    return JSONResponse(
        status_code=500,
        content={"error": exc.code, "message": "server error"}
    )

@app.get("/health")
async def health_check():
    return {"status": "ok", "app": settings.APP_NAME}

# Include routers
app.include_router(gateway_router)
