from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request, Response

logger = logging.getLogger("portfolio.api.requests")

MAX_LOG_LINE = 80


def format_log_line(line: str, limit: int = MAX_LOG_LINE) -> str:
    if len(line) > limit:
        return line[: limit - 1] + "…"
    return line


def install_request_logging(app: FastAPI) -> None:
    """Log one line per ``/api`` request, with the JSON body when there is one."""

    @app.middleware("http")
    async def log_api_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        path = request.url.path
        if not path.startswith("/api"):
            return response

        duration_ms = int((time.perf_counter() - start) * 1000)
        line = f"{request.method} {path} {response.status_code} in {duration_ms}ms"
        if response.headers.get("content-type", "").startswith("application/json"):
            body = b"".join([chunk async for chunk in response.body_iterator])
            line += f" :: {body.decode('utf-8', errors='replace')}"
            response = Response(
                content=body,
                status_code=response.status_code,
                headers=dict(response.headers),
            )

        logger.info(format_log_line(line))
        return response
