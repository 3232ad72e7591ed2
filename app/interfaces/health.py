"""
Liveness probe.

Reports the running version and which storage backend the container
was wired with. Not rate limited and never authenticated.
"""

from fastapi import APIRouter, Depends

from app.interfaces.dependencies import Container, get_container
from app.interfaces.schemas import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse, summary="Health check")
def health_check(container: Container = Depends(get_container)) -> HealthResponse:
    storage = "memory" if container.engine is None else "postgresql"
    return HealthResponse(status="ok", version=container.settings.version, storage=storage)
