from typing import Optional
from pydantic import BaseModel, Field


class DecisionCreate(BaseModel):
    decision_text: str = Field(..., min_length=1)
    context: Optional[str] = None
    expected_outcome: Optional[str] = None
