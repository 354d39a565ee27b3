from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("contract_radar.request")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line per dashboard request.

    - request id taken from x-request-id or generated, exposed on
      request.state and echoed back
    - 5xx (including the 502 used for contracts API failures) logged as warning
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex
        request.state.request_id = request_id
        start = time.perf_counter()
        response: Optional[Response] = None

        try:
            response = await call_next(request)
        finally:
            status = response.status_code if response is not None else 500
            logger.log(
                logging.WARNING if status >= 500 else logging.INFO,
                "request_id=%s method=%s path=%s query=%s status=%s duration_ms=%.2f",
                request_id,
                request.method,
                request.url.path,
                request.url.query or "-",
                status,
                (time.perf_counter() - start) * 1000.0,
            )

        response.headers["x-request-id"] = request_id
        return response
