import time
import logging
from uuid import uuid4
from fastapi import Request

logger = logging.getLogger("regwatch.api")


def request_context(log_requests: bool = True):
    """
    Tags each request with an id (echoed in `x-request-id`) and, when enabled,
    logs one line per request. Timeline loads add whether fallback data was
    served, which routes record on `request.state.using_fallback`.
    """

    async def middleware(request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid4().hex
        request.state.request_id = rid
        start = time.perf_counter()
        response = None
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = rid
            return response
        finally:
            if log_requests:
                extra = {
                    "method": request.method,
                    "path": request.url.path,
                    "status": getattr(response, "status_code", "error"),
                    "duration_ms": round((time.perf_counter() - start) * 1000, 2),
                    "request_id": rid,
                }
                using_fallback = getattr(request.state, "using_fallback", None)
                if using_fallback is not None:
                    extra["using_fallback"] = using_fallback
                level = logging.WARNING if using_fallback else logging.INFO
                logger.log(level, "request", extra=extra)

    return middleware
