"""
FastAPI application factory.

Kept separate from routes so the app instance can be imported cleanly
by uvicorn without triggering route registration side effects.
"""

from dotenv import load_dotenv
load_dotenv()  # Must run before load_settings() reads TRANSFERS_* variables

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.routes import router
from transfers.config import load_settings
from transfers.errors import StorageFault, TransferRegistryError
from transfers.observability import setup_logging
from transfers.service import TransferService

logger = logging.getLogger(__name__)


def create_app(service: Optional[TransferService] = None) -> FastAPI:
    """
    Build the API around a TransferService.

    Args:
        service: Service to expose; built from environment settings when omitted
    """
    if service is None:
        settings = load_settings()
        setup_logging(settings.log_level)
        service = TransferService.from_settings(settings)

    app = FastAPI(
        title="Football Transfer Registry",
        description="Players, completed transfers and transfer bids with a consistent transfer state",
        version="1.0.0",
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)
    app.include_router(router)
    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StorageFault)
    async def storage_fault_handler(request: Request, exc: StorageFault):
        # Storage faults are defects: log the traceback, keep details out of the response
        logger.error(
            "StorageFault on %s: %s", request.url.path, exc.message,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=exc.http_status,
            content={
                "error": {
                    "code": exc.code,
                    "message": "Storage failure; the operation was aborted",
                    "category": exc.category.value,
                    "severity": exc.severity.value,
                }
            },
        )

    @app.exception_handler(TransferRegistryError)
    async def registry_error_handler(request: Request, exc: TransferRegistryError):
        logger.info("%s on %s: %s", exc.code, request.url.path, exc.message)
        return JSONResponse(status_code=exc.http_status, content=exc.to_response())

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.warning("Validation error on %s: %s", request.url.path, exc.errors())
        fields = [".".join(str(p) for p in err["loc"]) for err in exc.errors()]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": {
                    "code": "INVALID_PAYLOAD",
                    "message": f"Malformed request: check {', '.join(fields)}",
                    "category": "validation",
                    "severity": "warning",
                }
            },
        )
