"""Unified API response envelope.

Every endpoint, success or error, returns:
{
    "code": 0,           // 0 = success, otherwise an AppError code (3xxx/4xxx/5xxx/9xxx)
    "message": "success",
    "data": { ... },     // payload; null on error, or a list of per-field problems
    "timestamp": "...",  // ISO-8601 UTC
    "request_id": "..."  // same id RequestLogMiddleware logged for this request
}
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field
from starlette.requests import Request


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str, data: Any = None) -> ApiResponse:
    return ApiResponse(code=code, message=message, data=data)


def with_request_id(resp: ApiResponse, request: Request) -> ApiResponse:
    """Stamp the middleware's request id onto `resp` when one was assigned."""
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


def respond(request: Request, data: Any) -> ApiResponse:
    return with_request_id(success_response(data), request)
