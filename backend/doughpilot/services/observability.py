from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from threading import Lock


@dataclass
class RouteStats:
    method: str
    path: str
    count: int = 0
    total_latency_ms: float = 0.0
    max_latency_ms: float = 0.0
    errors: int = 0

    def record(self, duration_ms: float, status_code: int) -> None:
        self.count += 1
        self.total_latency_ms += duration_ms
        self.max_latency_ms = max(self.max_latency_ms, duration_ms)
        if status_code >= 400:
            self.errors += 1

    @property
    def avg_latency_ms(self) -> float:
        if self.count == 0:
            return 0.0
        return self.total_latency_ms / self.count


class ObservabilityTracker:
    """Request latency per route plus counts of formulas the engine rejected."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._started_at = datetime.utcnow()
        self._total_requests = 0
        self._calculations = 0
        self._rejections: dict[str, int] = {}
        self._routes: dict[tuple[str, str], RouteStats] = {}

    def reset(self) -> None:
        with self._lock:
            self._started_at = datetime.utcnow()
            self._total_requests = 0
            self._calculations = 0
            self._rejections = {}
            self._routes = {}

    def record(self, *, method: str, path: str, status_code: int, duration_ms: float) -> None:
        key = (method, path)
        with self._lock:
            route = self._routes.get(key)
            if route is None:
                route = RouteStats(method=method, path=path)
                self._routes[key] = route
            route.record(duration_ms=duration_ms, status_code=status_code)
            self._total_requests += 1

    def record_calculation(self) -> None:
        with self._lock:
            self._calculations += 1

    def record_rejection(self, code: str) -> None:
        with self._lock:
            self._rejections[code] = self._rejections.get(code, 0) + 1

    def snapshot(self) -> dict[str, object]:
        with self._lock:
            now = datetime.utcnow()
            return {
                "generated_at": now,
                "uptime_seconds": int((now - self._started_at).total_seconds()),
                "total_requests": self._total_requests,
                "calculations": self._calculations,
                "rejections": dict(sorted(self._rejections.items())),
                "routes": [
                    {
                        "method": route.method,
                        "path": route.path,
                        "count": route.count,
                        "avg_latency_ms": round(route.avg_latency_ms, 2),
                        "max_latency_ms": round(route.max_latency_ms, 2),
                        "errors": route.errors,
                    }
                    for route in sorted(self._routes.values(), key=lambda item: (item.path, item.method))
                ],
            }


observability_tracker = ObservabilityTracker()
