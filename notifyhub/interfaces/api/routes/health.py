from fastapi import APIRouter, Depends

from notifyhub.bootstrap import Container
from notifyhub.interfaces.api.dependencies import get_container
from notifyhub.interfaces.api.schemas import HealthResponse
from notifyhub.utils import now_utc

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(container: Container = Depends(get_container)) -> HealthResponse:
    now = now_utc()
    return HealthResponse(
        status="OK",
        timestamp=now,
        uptime=(now - container.started_at).total_seconds(),
        environment=container.settings.app_env,
        websocket_clients=container.manager.connection_count,
    )
