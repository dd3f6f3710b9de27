"""Health check API endpoint for NextVOD"""

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from nextvod import __version__

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


@router.get("/", response_class=PlainTextResponse, include_in_schema=False)
async def root() -> str:
    """Liveness probe."""
    return "Hello World"


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """
    Health check with channel store status.

    Returns:
        dict: Overall status, version and store reachability
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        store_status = {"status": "unconfigured"}
    elif await store.ping():
        store_status = {"status": "ok", "backend": store.backend_name}
    else:
        store_status = {"status": "error", "backend": store.backend_name}

    return {
        "status": "healthy" if store_status["status"] == "ok" else "degraded",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store": store_status,
    }
