"""Request logging middleware.

Assigns each request an id (request.state.request_id, echoed back in the
X-Request-ID header and the response envelope) and logs one line per request:

    INFO [POST] /api/v1/auctions/3f2a.../close → 200 (41ms) req_a1b2c3d4e5f6

Client errors log at WARNING, server errors at ERROR.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.qa_common.response import new_request_id

logger = logging.getLogger("qa.request")


def _level(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        response.headers["X-Request-ID"] = request_id
        logger.log(
            _level(response.status_code),
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response
