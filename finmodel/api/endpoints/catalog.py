import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from finmodel.api import deps
from finmodel.core.exceptions import StorageFailed
from finmodel.db.adapter import DbAdapter

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load(db: DbAdapter, sql: str, what: str) -> List[Dict[str, Any]]:
    try:
        return await db.all(sql)
    except Exception as e:
        logger.exception(f"Loading {what} failed: {e}")
        raise StorageFailed(f"Failed to load {what}") from e


@router.get("/models")
async def list_models(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    return await _load(db, "SELECT * FROM models ORDER BY updated_at DESC, id DESC", "models")


@router.get("/agents")
async def list_agents(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    return await _load(db, "SELECT * FROM agents ORDER BY name ASC", "agents")


@router.get("/integrations")
async def list_integrations(db: DbAdapter = Depends(deps.get_database)) -> List[Dict[str, Any]]:
    return await _load(db, "SELECT * FROM integrations ORDER BY provider ASC", "integrations")
