"""
NextVOD Main Application

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI

from nextvod import __version__
from nextvod.config import NextVodConfig, get_config
from nextvod.playout import AdBreakPlanner, PlaylistAdvancer
from nextvod.store import create_store
from nextvod.streaming import StitchClient
from nextvod.utils.logging_setup import parse_size, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the channel store, stitch client and playlist advancer on
    startup and releases them on shutdown. Components already placed on
    ``app.state`` (tests) are left alone.
    """
    logger.info(f"Starting NextVOD v{__version__}")

    if getattr(app.state, "advancer", None) is not None:
        yield
        return

    config: NextVodConfig = app.state.config or get_config()
    logger.info(
        f"Configuration loaded: store={config.store.backend}, "
        f"stitcher={config.stitcher.base_url}"
    )

    store = await create_store(config.store)
    stitcher = StitchClient(config.stitcher)
    app.state.store = store
    app.state.stitcher = stitcher
    app.state.advancer = PlaylistAdvancer(
        store=store,
        planner=AdBreakPlanner(config.filler),
        stitcher=stitcher,
        max_attempts=config.playout.max_position_attempts,
    )
    logger.info("Playlist advancer ready")

    try:
        yield
    finally:
        logger.info("Shutting down NextVOD")
        await stitcher.close()
        await store.close()
        app.state.advancer = None


def create_app(config: Optional[NextVodConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Configuration to use; loaded at startup when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="NextVOD",
        description="Next-video decision service for FAST channels",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )
    app.state.config = config
    app.state.advancer = None
    app.state.store = None

    from nextvod.api import api_router
    app.include_router(api_router)

    return app


# Create the app instance
app = create_app()


def main() -> None:
    """
    Main entry point for running the server.

    Called when running `python -m nextvod` or via the `nextvod` script.
    """
    import uvicorn

    config = get_config()
    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=True,
        log_to_file=config.logging.to_file,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    logger.info(f"Server listening at http://{config.server.host}:{config.server.port}")

    uvicorn.run(
        "nextvod.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()
