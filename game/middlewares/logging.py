import json
import logging
import time
import uuid
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("game_service")
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(message)s"))
logger.addHandler(handler)
logger.setLevel(logging.INFO)


def decode_body(body: bytes | None):
    if not body:
        return None
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        return str(body)
    try:
        return json.loads(text)
    except ValueError:
        return text


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request as a single JSON line and tags the response with X-Request-ID."""

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        request_body = decode_body(await request.body())

        response = await call_next(request)

        chunks = [chunk async for chunk in response.body_iterator]
        response_bytes = b"".join(chunks)

        async def replay():
            yield response_bytes

        response.body_iterator = replay()

        logger.info(
            json.dumps(
                {
                    "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": round((time.perf_counter() - started) * 1000, 2),
                    "request_body": request_body,
                    "response_body": decode_body(response_bytes),
                }
            )
        )

        response.headers["X-Request-ID"] = request_id
        return response
