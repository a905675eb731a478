"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from gift_exchange.api.admin import auth_router
from gift_exchange.api.admin import router as admin_router
from gift_exchange.api.kiosk import router as kiosk_router
from gift_exchange.app_logging import configure_logging
from gift_exchange.containers import AppContainer
from gift_exchange.domain.errors import ExchangeError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(kiosk_router)
    app.include_router(admin_router)
    app.include_router(auth_router)
    install_error_handlers(app, logger)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def install_error_handlers(app: FastAPI, logger: logging.Logger) -> None:
    """Map domain errors onto their HTTP status codes."""

    @app.exception_handler(ExchangeError)
    async def handle_exchange_error(
        request: Request, exc: ExchangeError
    ) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "error": exc.code},
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message, exc.retryable),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid request')}".strip(": ")
        return JSONResponse(
            status_code=400, content=_error_body("validation", message, False)
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        message = "Internal error"
        if request.app.state.container.settings.environment == "local":
            message = f"{message} (debug: {type(exc).__name__}: {exc})"
        return JSONResponse(
            status_code=500, content=_error_body("internal", message, False)
        )


def _error_body(code: str, message: str, retryable: bool) -> dict[str, object]:
    return {"error": code, "message": message, "retryable": retryable}
