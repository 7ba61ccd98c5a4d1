"""Health check endpoint."""

from fastapi import APIRouter

from voxrelay.api.schemas import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Return the health status of the application."""
    from voxrelay import __version__

    return HealthResponse(status="healthy", version=__version__)
