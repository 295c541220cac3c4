from fastapi import APIRouter

from finmodel.api.endpoints import agent_logs
from finmodel.api.endpoints import catalog
from finmodel.api.endpoints import decisions
from finmodel.api.endpoints import events
from finmodel.api.endpoints import financials
from finmodel.api.endpoints import health_score

api_router = APIRouter()

api_router.include_router(financials.router, tags=["financials"])
api_router.include_router(decisions.router, tags=["decisions"])
api_router.include_router(agent_logs.router, tags=["agent-logs"])
api_router.include_router(catalog.router, tags=["catalog"])
api_router.include_router(health_score.router, tags=["health-score"])
api_router.include_router(events.router, tags=["events"])
