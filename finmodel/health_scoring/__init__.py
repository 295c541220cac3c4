"""Financial health scoring package.

This module contains:
- Pydantic schemas for metrics and score results
- A small, deterministic engine that turns a monthly metric series into a
  composite score, grade, trend and per-factor breakdown
"""

from .engine import coerce_metrics, compute_health_score
from .schemas import FinancialMetric, HealthScoreBreakdown, HealthScoreResult
