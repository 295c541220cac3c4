import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from finmodel.api import deps
from finmodel.core.config import settings
from finmodel.core.exceptions import StorageFailed, ValidationFailed
from finmodel.db.adapter import DbAdapter
from finmodel.health_scoring import HealthScoreResult, coerce_metrics, compute_health_score

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/health-score", response_model=HealthScoreResult)
async def score_metrics(payload: Any = Body(...)) -> HealthScoreResult:
    """Score a caller-supplied metric series (oldest month first)"""
    if not isinstance(payload, list):
        raise ValidationFailed("Expected array of financial metrics", field="metrics")
    if len(payload) > settings.HEALTH_SCORE_MAX_METRICS:
        raise ValidationFailed(
            f"Too many metrics (max {settings.HEALTH_SCORE_MAX_METRICS})",
            field="metrics",
        )
    return compute_health_score(coerce_metrics(payload))


@router.get("/health-score", response_model=HealthScoreResult)
async def score_stored_metrics(db: DbAdapter = Depends(deps.get_database)) -> HealthScoreResult:
    try:
        rows = await db.all(
            "SELECT month, revenue, expenses, cash_on_hand, category FROM financial_data ORDER BY month ASC"
        )
    except Exception as e:
        logger.exception(f"GET /health-score failed: {e}")
        raise StorageFailed("Failed to load financials") from e
    return compute_health_score(coerce_metrics(rows))
