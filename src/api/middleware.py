"""Per-request logging context."""

import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from src.core.logging import request_id_ctx, user_id_ctx

RequestResponseEndpoint = Callable[[Request], Awaitable[Response]]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag every request with an id and reset the user for logging.

    The id comes from X-Request-ID when the proxy sends one and is echoed
    back on the response. The user is filled in later by the identity
    dependency, so anonymous requests such as the health check log none.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request_id_ctx.set(request_id)
        user_id_ctx.set(None)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
