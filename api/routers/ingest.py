from __future__ import annotations

import json
import logging
from typing import Optional

import numpy as np
from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from analytics.aggregator import IngestProgress, IngestionError, aggregate, iter_aggregate
from analytics.classifier import classify
from api.config import get_regions, get_settings
from api.schemas import ClassifiedFile, IngestRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _rng(seed: Optional[int]) -> np.random.Generator:
    if seed is None:
        seed = get_settings().random_seed
    return np.random.default_rng(seed)


# ────────────────────────────────────────────────────────────────────────────────
# Classification
# ────────────────────────────────────────────────────────────────────────────────
@router.post("/classify", tags=["Ingestion"])
def classify_batch(request: IngestRequest):
    """Processing queue: category per file, in upload order"""
    files = [
        ClassifiedFile(name=f.name, size_bytes=f.size_bytes, category=classify(f.name))
        for f in request.files
    ]
    return {"success": True, "files": [f.model_dump(mode="json") for f in files]}


@router.get("/regions", tags=["Ingestion"])
def list_regions():
    """Reference table used for regional and geo breakdowns"""
    try:
        regions = get_regions()
    except (OSError, ValueError) as e:
        raise HTTPException(status_code=500, detail=f"Failed to load regions: {str(e)}")
    return {"success": True, "regions": [r.to_dict() for r in regions]}


# ────────────────────────────────────────────────────────────────────────────────
# Aggregation
# ────────────────────────────────────────────────────────────────────────────────
@router.post("/ingest", tags=["Ingestion"])
def ingest(request: IngestRequest):
    """Aggregate a batch of file descriptors into one summary"""
    descriptors = [f.to_descriptor() for f in request.files]
    try:
        summary = aggregate(
            descriptors,
            regions=get_regions(),
            rng=_rng(request.seed),
            on_progress=lambda p: logger.debug("Ingest progress %.0f%%", p * 100),
        )
    except (IngestionError, OSError, ValueError) as e:
        raise HTTPException(status_code=500, detail=f"Ingestion failed: {str(e)}")

    return {"success": True, "files": len(descriptors), "summary": summary.to_dict()}


@router.post("/ingest/stream", tags=["Ingestion"])
def ingest_stream(request: IngestRequest):
    """
    Same as /ingest, as newline-delimited JSON: one progress event per file
    followed by the summary event. A failure mid-run ends the stream with an
    error event and no summary.
    """
    descriptors = [f.to_descriptor() for f in request.files]
    try:
        run = iter_aggregate(descriptors, regions=get_regions(), rng=_rng(request.seed))
    except (OSError, ValueError) as e:
        raise HTTPException(status_code=500, detail=f"Ingestion failed: {str(e)}")

    def events():
        try:
            for item in run:
                if isinstance(item, IngestProgress):
                    event = {
                        "event": "progress",
                        "file": item.file.name,
                        "category": item.category.value,
                        "progress": item.fraction,
                    }
                else:
                    event = {"event": "summary", "summary": item.to_dict()}
                yield json.dumps(event) + "\n"
        except IngestionError as e:
            yield json.dumps({"event": "error", "detail": f"Ingestion failed: {str(e)}"}) + "\n"

    return StreamingResponse(events(), media_type="application/x-ndjson")
