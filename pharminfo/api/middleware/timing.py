"""
Request Timing Middleware
Rolling page-render latency statistics for /metrics.
"""

import logging
import time
from collections import Counter, deque
from threading import Lock
from typing import Callable, Dict, List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ...config.settings import get_settings

logger = logging.getLogger(__name__)


class LatencyTracker:
    """
    Rolling window of request latencies plus status-class counters.
    """

    def __init__(self, window_size: int = 1000):
        self.window_size = window_size
        self.latencies: deque = deque(maxlen=window_size)
        self.status_counts: Counter = Counter()
        self.lock = Lock()

    def record(self, latency_ms: float, status_code: int = 200) -> None:
        with self.lock:
            self.latencies.append(latency_ms)
            self.status_counts[f"{status_code // 100}xx"] += 1

    def reset(self) -> None:
        with self.lock:
            self.latencies.clear()
            self.status_counts.clear()

    def get_stats(self) -> Dict[str, float]:
        """
        Latency statistics over the window.

        Returns:
            Dict with count, p50, p95, p99, mean, min, max
        """
        with self.lock:
            values = sorted(self.latencies)

        if not values:
            return {"count": 0, "p50": 0.0, "p95": 0.0, "p99": 0.0, "mean": 0.0, "min": 0.0, "max": 0.0}

        return {
            "count": len(values),
            "p50": self._percentile(values, 50),
            "p95": self._percentile(values, 95),
            "p99": self._percentile(values, 99),
            "mean": sum(values) / len(values),
            "min": values[0],
            "max": values[-1],
        }

    def get_status_counts(self) -> Dict[str, int]:
        with self.lock:
            return dict(self.status_counts)

    @staticmethod
    def _percentile(sorted_values: List[float], percentile: int) -> float:
        index = int((percentile / 100.0) * len(sorted_values))
        return sorted_values[min(index, len(sorted_values) - 1)]


# Global latency tracker
_latency_tracker = LatencyTracker()


def get_latency_tracker() -> LatencyTracker:
    return _latency_tracker


class RequestTimingMiddleware(BaseHTTPMiddleware):
    """Records latency per request and flags slow renders."""

    def __init__(self, app, tracker: Optional[LatencyTracker] = None, slow_ms: Optional[int] = None):
        super().__init__(app)
        self.tracker = tracker or get_latency_tracker()
        self.slow_ms = slow_ms if slow_ms is not None else get_settings().slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        self.tracker.record(duration_ms, response.status_code)
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        if duration_ms > self.slow_ms:
            logger.warning(
                f"Slow request: {request.url.path} ({duration_ms:.0f}ms)",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                },
            )

        return response
