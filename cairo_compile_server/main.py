"""FastAPI application for the Cairo compile server."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from . import __version__
from .config import settings
from .routes import compile_router, files_router, version_router
from .services.dispatcher import get_dispatcher

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    # Startup: make sure the storage roots exist
    dispatcher = get_dispatcher()
    config = dispatcher.settings
    for root in (config.project_root, config.sierra_root, config.casm_root):
        root.mkdir(parents=True, exist_ok=True)
    logger.info(
        "Cairo compile server started (toolchain=%s, mode=%s, projects=%s)",
        dispatcher.toolchain_dir,
        config.toolchain_mode.value,
        config.project_root.resolve(),
    )
    yield
    logger.info("Cairo compile server shutting down")


app = FastAPI(
    title="Cairo Compile Server",
    description="Compiles uploaded Cairo sources to Sierra and CASM and builds Scarb projects",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(files_router, tags=["files"])
app.include_router(compile_router, tags=["compile"])
app.include_router(version_router, tags=["compile"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run():
    """Entry point for cairo-compile-server command."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
