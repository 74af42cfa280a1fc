from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from fakegen.config import Settings
from fakegen.dependencies import get_chain_worker, get_settings
from fakegen.services.worker import ChainWorker
from fakegen.utils.logger import setup_logger

logger = setup_logger(__name__)

router = APIRouter(tags=["markov"])


class GenerateRequest(BaseModel):
    seed: Optional[str] = Field(default=None, description="Seed word or phrase")
    target: Optional[int] = Field(default=None, ge=0, description="Target length")


class IngestRequest(BaseModel):
    lines: List[str]


class MarkovResponse(BaseModel):
    response: Optional[str] = None


def _normalize_seed(seed: Optional[str]) -> Optional[str]:
    if seed is None or not seed.strip():
        return None
    return seed


async def _respond(req: GenerateRequest, worker: ChainWorker, cfg: Settings) -> MarkovResponse:
    target = req.target if req.target is not None else cfg.DEFAULT_TARGET
    if cfg.DEBUG:
        logger.info(f"[Markov] Processing request: {req.model_dump()}")
    text = await worker.generate(_normalize_seed(req.seed), target)
    return MarkovResponse(response=text)


@router.post("/markov/generate")
async def generate(
    req: GenerateRequest,
    worker: ChainWorker = Depends(get_chain_worker),
    cfg: Settings = Depends(get_settings),
):
    """
    Generate text closest to the target length.

    - **seed**: optional word or phrase to grow the text around
    - **target**: target length (chars or words, per LENGTH_UNIT)

    A null response means no text could be generated for the seed.
    """
    resp = await _respond(req, worker, cfg)
    return {"ok": True, "data": resp.model_dump()}


@router.post("/markov/ingest")
async def ingest(req: IngestRequest, worker: ChainWorker = Depends(get_chain_worker)):
    if not req.lines:
        raise HTTPException(status_code=400, detail="lines is empty")
    ingested = await worker.ingest(req.lines)
    sizes = await worker.sizes()
    logger.info(f"[Markov] Ingested {ingested} lines")
    return {"ok": True, "data": {"ingested": ingested, "sizes": sizes.to_dict()}}


@router.get("/markov/stats")
async def stats(worker: ChainWorker = Depends(get_chain_worker)):
    sizes = await worker.sizes()
    return {"ok": True, "data": sizes.to_dict()}


@router.post("/", response_model=MarkovResponse)
async def legacy_generate(
    req: GenerateRequest,
    worker: ChainWorker = Depends(get_chain_worker),
    cfg: Settings = Depends(get_settings),
):
    """Legacy endpoint: POST / {"seed": "...", "target": 20} -> {"response": ...}"""
    return await _respond(req, worker, cfg)
