from typing import Optional
from pydantic import BaseModel, Field


class FinancialDataCreate(BaseModel):
    month: str = Field(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$")
    revenue: float = Field(0, ge=0)
    expenses: float = Field(0, ge=0)
    cash_on_hand: float = 0
    category: Optional[str] = None
