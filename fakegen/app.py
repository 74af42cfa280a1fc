"""
Markov text generation service
Main application entry point

The chain is loaded from CORPUS_PATH at startup and owned by a single
serialized worker; every request is queued to that worker.
"""

import random
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from fakegen.config import Settings, settings
from fakegen.services.chain import Chain
from fakegen.services.tokset import get_tokset_factory
from fakegen.services.worker import ChainWorker
from fakegen.utils.logger import configure_root, setup_logger

# Setup logging
logger = setup_logger(__name__)


def build_chain(cfg: Settings) -> Chain:
    """Create an empty chain configured from settings"""
    rng = random.Random(cfg.RANDOM_SEED) if cfg.RANDOM_SEED is not None else None
    return Chain(
        rng=rng,
        tokset_factory=get_tokset_factory(cfg.TOKSET_BACKEND),
        candidates=cfg.CANDIDATES,
        length_unit=cfg.LENGTH_UNIT,
    )


def load_chain(cfg: Settings) -> Chain:
    """Build a chain and ingest the configured corpus, if any"""
    chain = build_chain(cfg)
    if cfg.CORPUS_PATH:
        chain.ingest_file(cfg.CORPUS_PATH, encoding=cfg.CORPUS_ENCODING)
    else:
        logger.warning("[BOOT] CORPUS_PATH not set, starting with an empty chain")
    return chain


def create_app(app_settings: Optional[Settings] = None, chain: Optional[Chain] = None) -> FastAPI:
    """
    Create the FastAPI app.

    Args:
        app_settings: Settings to use (module settings if omitted)
        chain: Pre-built chain; when omitted one is loaded from CORPUS_PATH
    """
    cfg = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifecycle manager for chain loading and the worker task"""
        logger.info(f"[BOOT] Starting {cfg.SERVICE_NAME} v{cfg.SERVICE_VERSION}...")

        try:
            # A corpus that fails to load is a setup error: let startup fail
            app.state.chain = chain if chain is not None else load_chain(cfg)
            if cfg.DEBUG:
                logger.info(f"[BOOT] Chain sizes: {app.state.chain.describe_sizes()}")

            app.state.chain_worker = ChainWorker(
                app.state.chain,
                queue_size=cfg.WORKER_QUEUE_SIZE,
                debug=cfg.DEBUG,
            )
            app.state.chain_worker.start()
            logger.info("[BOOT] Service ready!")
        except Exception as e:
            logger.error(f"[ERR] Failed to initialize: {e}", exc_info=True)
            raise

        try:
            yield
        finally:
            logger.info("[SHUTDOWN] Stopping chain worker...")
            await app.state.chain_worker.stop()
            logger.info("[SHUTDOWN] Service stopped")

    app = FastAPI(
        title="fakegen",
        description="Markov chain text generation",
        version=cfg.SERVICE_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = cfg

    # Global exception handler
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"[ERR] Unhandled exception: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "ok": False,
                "error": {
                    "code": "FAKEGEN_ERROR",
                    "message": "Internal server error occurred",
                    "details": {"type": type(exc).__name__},
                },
            },
        )

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        worker = getattr(request.app.state, "chain_worker", None)
        running = worker is not None and worker.running
        data = {
            "status": "healthy" if running else "starting",
            "length_unit": cfg.LENGTH_UNIT,
            "tokset_backend": cfg.TOKSET_BACKEND,
        }
        if running:
            # queue depth only; index sizes go through the worker at /markov/stats
            data["queued"] = worker.queued
            data["processed"] = worker.processed
        return {"ok": True, "data": data}

    from fakegen.api.routers import markov_router

    app.include_router(markov_router.router)

    # after the router import, so its module logger picks up the level too
    configure_root(cfg.LOG_LEVEL)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fakegen.app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
