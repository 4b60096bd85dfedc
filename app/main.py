"""
Main FastAPI application
"""
from fastapi import FastAPI
from contextlib import asynccontextmanager

from app.config import settings
from app.api import dashboard
from app.core.snapshot import VRAMSnapshotService
from app.utils.logger import setup_logger

logger = setup_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager

    Run preflight checks and build the cluster client once on startup
    """
    logger.info("=" * 60)
    logger.info("Starting Ollama Model Viewer")
    logger.info("=" * 60)

    logger.info("Running environment preflight check...")
    from app.utils.preflight import run_preflight_check

    preflight_result = run_preflight_check()

    if preflight_result.is_fatal():
        logger.error("Preflight check failed!")
        logger.error(f"\n{preflight_result.get_summary()}")
        raise RuntimeError(
            "Server environment is not ready. "
            "Please fix the issues above before starting the server."
        )

    logger.info("Preflight check passed!")
    logger.info(f"Namespace: {settings.NAMESPACE} (selector '{settings.LABEL_SELECTOR}')")
    logger.info(f"Total vRAM: {settings.TOTAL_VRAM_GIB:.1f} GiB on {settings.NODE_TYPE}")

    app.state.snapshot_service = VRAMSnapshotService(preflight_result.cluster)

    logger.info("=" * 60)
    logger.info(f"Server ready on port {settings.PORT}")
    logger.info("=" * 60)

    yield

    logger.info("Shutting down Ollama Model Viewer")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

# Include routers
app.include_router(dashboard.router)


def run():
    """Console script entry point"""
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
