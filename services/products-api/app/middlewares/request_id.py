from __future__ import annotations

import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.core.logging import get_logger, request_id_var

logger = get_logger("app.access")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Correlation id + access log.

    Reuses an incoming X-Request-Id (or mints a UUID4), exposes it to the
    logging filter for the duration of the request, and logs one line per
    request with method, path, status and elapsed milliseconds. Unhandled
    errors become a generic 500 here, so they carry the id and the log line too.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid4())
        request.state.request_id = request_id
        token = request_id_var.set(request_id)

        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
        except Exception:
            # Errores no controlados: nunca filtramos detalles internos.
            logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
            response = JSONResponse(status_code=500, content={"error": "Internal server error"})
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            request_id_var.reset(token)

        response.headers["X-Request-Id"] = request_id
        logger.info(
            "%s %s %s %.1fms",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            extra={"request_id": request_id},
        )
        return response
