"""
FastAPI backend for the Stratos registry dashboard
Classifies uploaded file descriptors and builds synthetic aggregate summaries
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import get_regions, get_settings
from api.routers import ingest as ingest_router
from api.routers import insights as insights_router

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Stratos Dashboard API", version="1.0.0")
app.include_router(ingest_router.router)
app.include_router(insights_router.router)

# CORS - Allow Streamlit to talk to FastAPI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify your Streamlit URL
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ────────────────────────────────────────────────────────────────────────────────
# Health Check
# ────────────────────────────────────────────────────────────────────────────────


@app.get("/")
def root():
    """Health check endpoint"""
    return {"status": "ok", "message": "Stratos Dashboard API is running"}


@app.get("/health")
def health():
    """Detailed health check"""
    try:
        regions = get_regions()
        return {
            "status": "healthy",
            "regions_count": len(regions),
            "insights": "configured" if get_settings().openai_api_key else "fallback",
        }
    except (OSError, ValueError) as e:
        logger.error("Health check failed: %s", e)
        return JSONResponse(
            status_code=503, content={"status": "unhealthy", "error": str(e)}
        )


# ────────────────────────────────────────────────────────────────────────────────
# Run the server
# ────────────────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)
