"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vidlingo.api.dependencies import get_session_manager
from vidlingo.api.middleware import vidlingo_error_handler
from vidlingo.api.routes import languages, media, process, sessions
from vidlingo.models.errors import VidlingoError


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    if get_session_manager.cache_info().currsize:
        await get_session_manager().aclose()
        get_session_manager.cache_clear()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Vidlingo",
        description="Video speech translation and dubbing pipeline",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Error handlers
    app.add_exception_handler(VidlingoError, vidlingo_error_handler)

    # Routes
    app.include_router(languages.router)
    app.include_router(sessions.router)
    app.include_router(process.router)
    app.include_router(media.router)

    @app.get("/health")
    async def health():
        return {"status": "ok", "version": "0.1.0"}

    return app


app = create_app()
