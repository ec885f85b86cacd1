"""
Health Check Endpoints
Liveness and latency metrics.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request, status

from ...config.settings import get_settings
from ..middleware.timing import get_latency_tracker

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check(request: Request) -> Dict[str, Any]:
    """
    Basic health check.

    Returns:
        Status plus the size of the loaded content snapshot
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        return {"status": "degraded", "reason": "content not loaded", "timestamp": _now()}

    return {
        "status": "healthy",
        "version": get_settings().version,
        "content": {
            "categories": len(store.categories),
            "products": len(store.products),
            "spokes": len(store.spoke_articles),
        },
        "timestamp": _now(),
    }


@router.get("/metrics", status_code=status.HTTP_200_OK)
async def get_metrics() -> Dict[str, Any]:
    """
    Request latency metrics.

    Returns:
        Latency percentiles and response status counts
    """
    tracker = get_latency_tracker()
    stats = tracker.get_stats()

    return {
        "requests": {
            "total": stats["count"],
            "by_status": tracker.get_status_counts(),
        },
        "latency": {
            "p50_ms": round(stats["p50"], 2),
            "p95_ms": round(stats["p95"], 2),
            "p99_ms": round(stats["p99"], 2),
            "mean_ms": round(stats["mean"], 2),
            "min_ms": round(stats["min"], 2),
            "max_ms": round(stats["max"], 2),
        },
        "timestamp": _now(),
    }
