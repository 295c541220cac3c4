import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from finmodel.api import deps
from finmodel.core.exceptions import StorageFailed
from finmodel.db.adapter import DbAdapter
from finmodel.events import EventBroadcaster
from finmodel.schemas import DecisionCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/decisions")
async def list_decisions(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    try:
        return await db.all("SELECT * FROM decisions ORDER BY timestamp DESC, id DESC")
    except Exception as e:
        logger.exception(f"GET /decisions failed: {e}")
        raise StorageFailed("Failed to load decisions") from e


@router.post("/decisions", status_code=status.HTTP_201_CREATED)
async def create_decision(
    payload: DecisionCreate,
    db: DbAdapter = Depends(deps.get_database),
    events: EventBroadcaster = Depends(deps.get_broadcaster),
) -> Dict[str, int]:
    """Record a decision and tell every open dashboard to refresh"""
    try:
        result = await db.run(
            "INSERT INTO decisions (decision_text, context, expected_outcome) VALUES ($1, $2, $3) RETURNING id",
            [payload.decision_text, payload.context, payload.expected_outcome],
        )
    except Exception as e:
        logger.exception(f"POST /decisions failed: {e}")
        raise StorageFailed("Failed to save decision") from e

    new_id = result["lastInsertRowid"]
    events.broadcast("refresh", {"resource": "decisions", "id": new_id})
    return {"id": new_id}
