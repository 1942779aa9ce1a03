from app.core.logger import get_logger
from app.core.utils_logging import generate_request_id, query_context, log_extra
import time

logger = get_logger("http")

class RequestLoggingMiddleware:
    """
    ASGI middleware that logs incoming requests and responses,
    sets X-Request-ID header, and records duration.
    """

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        request_id = generate_request_id()
        scope["request_id"] = request_id

        method = scope.get("method", "")
        path = scope.get("path", "")
        ctx = query_context(scope)

        start = time.perf_counter()
        logger.info(
            "Incoming request",
            extra=log_extra(request_id, method=method, path=path, **ctx),
        )

        status_code_container = {"status": None}

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                status_code_container["status"] = message.get("status", 0)

                # headers are a list of (name, value) byte pairs
                headers = list(message.get("headers", [])) + [
                    (b"x-request-id", request_id.encode("utf-8"))
                ]
                message["headers"] = headers

            await send(message)

        await self.app(scope, receive, send_wrapper)

        duration = time.perf_counter() - start
        logger.info(
            "Request completed",
            extra=log_extra(
                request_id,
                method=method,
                path=path,
                status_code=status_code_container["status"],
                duration_ms=round(duration * 1000, 2),
                **ctx,
            ),
        )
