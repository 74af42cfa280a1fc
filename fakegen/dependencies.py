"""
FastAPI dependencies
"""
from fastapi import HTTPException, Request

from fakegen.config import Settings, settings
from fakegen.services.worker import ChainWorker


def get_settings(request: Request) -> Settings:
    """Get the settings the app was created with"""
    return getattr(request.app.state, "settings", settings)


def get_chain_worker(request: Request) -> ChainWorker:
    """Get the chain worker started by the app lifespan"""
    worker = getattr(request.app.state, "chain_worker", None)
    if worker is None or not worker.running:
        raise HTTPException(status_code=503, detail="chain worker not running")
    return worker
