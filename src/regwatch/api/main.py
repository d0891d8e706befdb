import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from regwatch.config import settings
from regwatch.api.middleware import request_context

# Routers
from regwatch.api.routers import system, timeline

# Configure logging
logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))
logger = logging.getLogger("regwatch.api")

def create_app(log_requests: Optional[bool] = None) -> FastAPI:
    """
    Factory to build the FastAPI application serving the timeline feed
    to the presentation layer.
    """
    app = FastAPI(title="Regwatch API", version=settings.app.version)

    # Read-only JSON consumed by a static front end hosted elsewhere.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    if log_requests is None:
        log_requests = settings.logging.log_requests

    # Custom Middleware
    app.middleware("http")(request_context(log_requests=log_requests))

    app.include_router(system.router)
    app.include_router(timeline.router)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        from starlette.exceptions import HTTPException as StarletteHTTPException
        if isinstance(exc, StarletteHTTPException):
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

        rid = getattr(request.state, "request_id", None)
        logger.exception("Unhandled error", extra={"path": str(request.url), "request_id": rid})
        payload = {"error": "internal_error", "detail": "Unexpected server error"}
        if rid:
            payload["request_id"] = rid
        return JSONResponse(status_code=500, content=payload)

    return app

# Module-level app for uvicorn entrypoint
app = create_app()
