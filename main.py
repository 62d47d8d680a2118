from fastapi import FastAPI
from contextlib import asynccontextmanager
from flashdeck.core.config import settings
from flashdeck.core.logging import setup_logging
from flashdeck.apis.deps import get_session_manager
from flashdeck.apis.sessions.main import router as sessions_router
from flashdeck.apis.words.main import router as words_router

import uvicorn
from fastapi.middleware.cors import CORSMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    manager = get_session_manager()
    manager.start()
    try:
        yield
    finally:
        await manager.stop()


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.app.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(words_router)
    app.include_router(sessions_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        print(f"An error occurred when starting the server: {e}.")
