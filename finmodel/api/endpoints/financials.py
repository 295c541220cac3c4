import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status

from finmodel.api import deps
from finmodel.core.exceptions import StorageFailed
from finmodel.db.adapter import DbAdapter
from finmodel.events import EventBroadcaster
from finmodel.schemas import FinancialDataCreate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/financials")
async def list_financials(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    """Monthly metrics, oldest month first"""
    try:
        return await db.all("SELECT * FROM financial_data ORDER BY month ASC")
    except Exception as e:
        logger.exception(f"GET /financials failed: {e}")
        raise StorageFailed("Failed to load financials") from e


@router.post("/financials", status_code=status.HTTP_201_CREATED)
async def create_financial_month(
    payload: FinancialDataCreate,
    db: DbAdapter = Depends(deps.get_database),
    events: EventBroadcaster = Depends(deps.get_broadcaster),
) -> Dict[str, int]:
    try:
        result = await db.run(
            "INSERT INTO financial_data (month, revenue, expenses, cash_on_hand, category) "
            "VALUES ($1, $2, $3, $4, $5) RETURNING id",
            [payload.month, payload.revenue, payload.expenses, payload.cash_on_hand, payload.category],
        )
    except Exception as e:
        logger.exception(f"POST /financials failed: {e}")
        raise StorageFailed("Failed to save financial data") from e

    new_id = result["lastInsertRowid"]
    events.broadcast("refresh", {"resource": "financials", "id": new_id})
    return {"id": new_id}
