from __future__ import annotations

import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.context import set_request_id

REQUEST_ID_HEADER = "X-Request-Id"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        """
        Sets request_id into contextvars for the lifetime of the request.

        Uses the caller's X-Request-Id when present, otherwise a fresh uuid4.
        The id is echoed back on the response.
        """
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        try:
            set_request_id(request_id)
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            # always clear context
            set_request_id(None)
