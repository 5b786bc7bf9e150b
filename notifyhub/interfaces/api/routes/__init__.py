from fastapi import FastAPI

from .comments import router as comments_router
from .health import router as health_router
from .notifications import router as notifications_router
from .settings import router as settings_router
from .websocket import notifications_websocket


def register_routes(app: FastAPI, ws_path: str = "/ws") -> None:
    """Register every API router and the websocket endpoint on ``app``."""

    app.include_router(health_router)
    app.include_router(notifications_router)
    app.include_router(comments_router)
    app.include_router(settings_router)
    app.add_api_websocket_route(ws_path, notifications_websocket, name="notifications_websocket")
