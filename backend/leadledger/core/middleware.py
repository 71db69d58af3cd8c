import logging
import secrets

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

logger = logging.getLogger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or secrets.token_hex(16)
        response: Response = await call_next(request)
        response.headers["x-request-id"] = request_id
        logger.info("%s %s -> %s [%s]", request.method, request.url.path, response.status_code, request_id)
        return response
