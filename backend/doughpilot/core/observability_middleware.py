from __future__ import annotations

import json
import logging
from time import perf_counter
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from doughpilot.services.observability import observability_tracker

logger = logging.getLogger("doughpilot.request")


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        started = perf_counter()

        failure: Exception | None = None
        try:
            response = await call_next(request)
        except Exception as exc:
            failure = exc
            response = JSONResponse(
                status_code=500,
                content={"detail": "Internal server error", "request_id": request_id},
            )

        duration_ms = (perf_counter() - started) * 1000
        status_code = response.status_code
        observability_tracker.record(
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )

        payload = json.dumps(
            {
                "event": "request_error" if failure else "request_completed",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
            }
        )
        if failure is not None:
            logger.error(payload, exc_info=failure)
        elif status_code >= 500:
            logger.error(payload)
        elif status_code >= 400:
            logger.warning(payload)
        else:
            logger.info(payload)

        response.headers["X-Request-ID"] = request_id
        return response
