"""Health check endpoints."""

from fastapi import APIRouter

from buildvest import __version__
from buildvest.kernel.time import isoformat_z, utc_now

router = APIRouter()

# Track startup time
_startup_time = utc_now()


@router.get("/health")
async def health_check():
    """
    Basic health check endpoint.
    Returns 200 if the service is running. No authentication.
    """
    now = utc_now()
    return {
        "status": "ok",
        "service": "buildvest-api",
        "version": __version__,
        "timestamp": isoformat_z(now),
        "uptimeSeconds": (now - _startup_time).total_seconds(),
    }
