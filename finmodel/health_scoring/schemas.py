from typing import List, Literal, Optional
from pydantic import BaseModel


class FinancialMetric(BaseModel):
    month: str = ""
    revenue: float = 0.0
    expenses: float = 0.0
    cash_on_hand: float = 0.0
    category: Optional[str] = None


class HealthScoreBreakdown(BaseModel):
    label: str
    score: int
    weight: int
    description: str


class HealthScoreResult(BaseModel):
    score: int
    grade: Literal["A", "B", "C", "D", "F"]
    trend: Literal["up", "stable", "down"]
    breakdown: List[HealthScoreBreakdown]
    summary: str
