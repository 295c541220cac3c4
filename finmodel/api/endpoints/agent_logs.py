import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from finmodel.api import deps
from finmodel.core.exceptions import StorageFailed
from finmodel.db.adapter import DbAdapter
from finmodel.events import EventBroadcaster
from finmodel.schemas import AgentLogCreate

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_LOG_LIMIT = 50


@router.get("/agent-logs")
async def list_agent_logs(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    """Most recent agent activity, newest first"""
    try:
        return await db.all(
            "SELECT * FROM agent_logs ORDER BY timestamp DESC, id DESC LIMIT $1",
            [RECENT_LOG_LIMIT],
        )
    except Exception as e:
        logger.exception(f"GET /agent-logs failed: {e}")
        raise StorageFailed("Failed to load agent logs") from e


@router.post("/agent-logs", status_code=status.HTTP_201_CREATED)
async def create_agent_log(
    payload: AgentLogCreate,
    db: DbAdapter = Depends(deps.get_database),
    events: EventBroadcaster = Depends(deps.get_broadcaster),
) -> Dict[str, int]:
    try:
        result = await db.run(
            "INSERT INTO agent_logs (agent_name, action, recommendation, impact_score) "
            "VALUES ($1, $2, $3, $4) RETURNING id",
            [payload.agent_name, payload.action, payload.recommendation, payload.impact_score],
        )
    except Exception as e:
        logger.exception(f"POST /agent-logs failed: {e}")
        raise StorageFailed("Failed to save agent log") from e

    new_id = result["lastInsertRowid"]
    events.broadcast("refresh", {"resource": "agent_logs", "id": new_id})
    return {"id": new_id}
