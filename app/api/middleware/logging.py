# 📄 File: app/api/middleware/logging.py
# 🧭 Purpose (Layman Explanation):
# Gives every request a tracking number and writes one line to the log for it saying what
# was asked for, how it ended and how long it took.
# 🧪 Purpose (Technical Summary):
# Request context middleware: reuses or generates X-Request-ID, binds it to the logging
# contextvar, stores it on request.state, echoes it on the response and logs method, path,
# status and duration. Health probes are logged at DEBUG.
# 🔗 Dependencies:
# Starlette BaseHTTPMiddleware, app.shared.utils.logging
# 🔄 Connected Modules / Calls From:
# app.main (middleware registration), app.main exception handlers (request_id)

import logging
import time

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.shared.utils.logging import request_id_var, set_request_context

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATH_PREFIXES = ("/health", "/api/v1/health")


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request id and access logging for every HTTP request.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "").strip()
        # Ignore absurd client supplied ids
        request_id = set_request_context(incoming if 0 < len(incoming) <= 128 else None)
        request.state.request_id = request_id

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.exception(
                f"{request.method} {request.url.path} failed after {duration_ms:.1f}ms"
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id

        level = logging.DEBUG if request.url.path.startswith(QUIET_PATH_PREFIXES) else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} -> {response.status_code} in {duration_ms:.1f}ms",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


def get_request_id(request: Request) -> str:
    """Request id of the current request, falling back to the logging context."""
    return getattr(request.state, "request_id", "") or request_id_var.get("")
