"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transcoder.api.routes import router
from transcoder.config import CORS_ORIGINS, Settings, logger as config_logger
from transcoder.conversion.service import ConversionService

logging.getLogger("uvicorn").setLevel(logging.INFO)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # A service placed on app.state before startup is used as-is.
        if getattr(app.state, "conversion_service", None) is None:
            app.state.conversion_service = ConversionService(settings or Settings.from_env())
        config_logger.info("Transcoder API started")
        yield
        app.state.conversion_service.shutdown()
        app.state.conversion_service = None
        config_logger.info("Transcoder API shutting down")

    app = FastAPI(
        title="Transcoder API",
        description="Convert media files with ffmpeg, including two-pass palette GIFs.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    from transcoder.config import HOST, PORT
    uvicorn.run("transcoder.main:app", host=HOST, port=PORT, reload=True)
