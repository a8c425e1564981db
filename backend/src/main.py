"""FastAPI application entry point."""

import logging
from uuid import uuid4

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.order_api.errors import (
    OrderAPIError,
    order_api_error_handler,
    unhandled_error_handler,
)
from src.order_api.observability import log_request_event, request_log_fields
from src.order_api.router_v1 import router as order_api_v1_router

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

settings = get_settings()

app = FastAPI(
    title="Ordre Change Order API",
    description="Order lifecycle API for currency exchange agents",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _is_order_api_request(path: str) -> bool:
    return path.startswith("/v1/")


@app.middleware("http")
async def order_api_observability_context_middleware(request: Request, call_next):
    """Attach request correlation identifiers and emit structured request logs."""
    if not _is_order_api_request(request.url.path):
        return await call_next(request)

    request.state.request_id = request.headers.get("X-Request-Id") or f"req-{uuid4()}"
    log_request_event(
        logger,
        level=logging.INFO,
        message="Order API request started.",
        request=request,
        component="api",
        operation="request_started",
        method=request.method,
    )

    response = await call_next(request)
    response.headers.setdefault("X-Request-Id", request.state.request_id)

    log_request_event(
        logger,
        level=logging.INFO,
        message="Order API request completed.",
        request=request,
        component="api",
        operation="request_completed",
        status_code=response.status_code,
        method=request.method,
    )
    return response


@app.middleware("http")
async def order_api_unhandled_error_middleware(request: Request, call_next):
    """Apply the fallback error envelope only to order API routes."""
    try:
        return await call_next(request)
    except Exception as exc:
        if _is_order_api_request(request.url.path):
            logger.exception(
                "Unhandled exception for order API request %s",
                request.url.path,
                extra=request_log_fields(
                    request=request,
                    component="api",
                    operation="request_failed_unhandled",
                ),
            )
            return await unhandled_error_handler(request, exc)
        raise


app.include_router(order_api_v1_router)

# Register order API error envelope handlers.
app.add_exception_handler(OrderAPIError, order_api_error_handler)


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "Ordre Change Order API", "status": "running"}


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
