from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notifyhub import __version__
from notifyhub.bootstrap import build_container
from notifyhub.config import Settings, get_settings
from notifyhub.interfaces.api.errors import register_exception_handlers
from notifyhub.interfaces.api.routes import register_routes
from notifyhub.log_config import configure_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the notification service FastAPI application."""

    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load the JSON documents on startup and flush the notification list on shutdown."""

        configure_logging(settings.log_level)
        container = build_container(settings)
        await container.startup()
        app.state.container = container
        try:
            yield
        finally:
            await container.shutdown()
            app.state.container = None

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    # Browser clients served from the configured origins call the API directly.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, expose_stack=not settings.is_production)
    register_routes(app, ws_path=settings.ws_path)
    return app


app = create_app()
