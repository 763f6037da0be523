from fastapi import APIRouter

from analytics.insights import generate_insight
from api.config import get_insight_client
from api.schemas import InsightRequest, InsightResponse

router = APIRouter()


@router.post("/insights", response_model=InsightResponse, tags=["Insights"])
def create_insight(request: InsightRequest):
    """
    Trend summary for an ingestion run.

    Never fails: without a configured credential, or when the upstream
    call errors, the fallback text is returned with `fallback=true`.
    """
    result = generate_insight(request.model_dump(), client=get_insight_client())
    return InsightResponse(text=result.text, fallback=result.fallback)
