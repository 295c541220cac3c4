from typing import Optional
from pydantic import BaseModel, Field


class AgentLogCreate(BaseModel):
    agent_name: str = Field(..., min_length=1)
    action: str = Field(..., min_length=1)
    recommendation: Optional[str] = None
    impact_score: Optional[float] = None
