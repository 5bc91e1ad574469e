"""
Health check endpoint.
"""

import time
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Liveness check with basic configuration details."""
    settings = request.app.state.settings

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "environment": {
            "environment": settings.environment,
            "version": settings.version,
            "log_level": settings.log_level,
        },
        "services": {
            "store": settings.store_type,
            "accelo_domain": settings.accelo_domain,
        },
    }
