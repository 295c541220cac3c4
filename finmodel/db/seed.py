"""Demo data for a fresh database. Each table is filled only while it is empty."""

import json
import logging

from finmodel.core.security import get_password_hash
from .adapter import DbAdapter

logger = logging.getLogger(__name__)

OPENING_CASH = 500000

SEED_MONTHS = [
    ("2025-03", 9800, 40500),
    ("2025-04", 11200, 41200),
    ("2025-05", 12500, 42000),
    ("2025-06", 14800, 42800),
    ("2025-07", 16200, 43200),
    ("2025-08", 18200, 43500),
    ("2025-09", 21500, 44800),
    ("2025-10", 24800, 45500),
    ("2025-11", 26800, 46200),
    ("2025-12", 30200, 44100),
    ("2026-01", 31800, 45500),
    ("2026-02", 33500, 46800),
]

SEED_AGENTS = [
    ("Financial analyst", "analyst", "active"),
    ("CFO agent", "cfo", "active"),
    ("Forecasting agent", "forecasting", "idle"),
]

DEMO_USER_EMAIL = "demo@finmodel.ai"
DEMO_USER_PASSWORD = "demo123"

SEED_DECISIONS = [
    ("Increase marketing spend by 15% in Q1", "Strong pipeline, need brand awareness", "Higher lead volume"),
    ("Hire two additional engineers", "Product backlog growing", "Faster feature delivery"),
    ("Negotiate extended payment terms with key supplier", "Cash flow optimization", "Improved runway"),
    ("Launch paid tier for SMB segment", "Product-market fit validated", "Recurring revenue growth"),
    ("Consolidate cloud providers to reduce spend", "Current spend 40% above benchmark", "15-20% infra cost reduction"),
    ("Open second sales region (EMEA)", "Demand from EU prospects", "New pipeline within 2 quarters"),
]

SEED_AGENT_LOGS = [
    ("Financial analyst", "Reviewed monthly P&L", "Consider reducing discretionary spend in Q2", 0.7),
    ("CFO agent", "Cash flow forecast updated", "Maintain 6-month runway buffer", 0.9),
    ("Forecasting agent", "Revenue model recalibrated", "Revise Q3 targets upward by 8%", 0.6),
    ("Financial analyst", "Variance analysis (actual vs budget)", "Investigate 12% overspend in marketing", 0.8),
    ("CFO agent", "Runway projection", "Extend runway by delaying non-critical hires", 0.75),
    ("Forecasting agent", "Churn model updated", "Focus retention on accounts 18-24 months old", 0.65),
]

SEED_MODELS = [
    ("Revenue forecast v1", "1", {"horizon_months": 12, "method": "linear"}),
    ("Expense model", "1", {"categories": ["payroll", "ops", "marketing"]}),
    ("Churn prediction", "1", {"lookback_months": 6, "threshold": 0.4}),
    ("CAC payback", "1", {"cohort_window": 12}),
]

SEED_INTEGRATIONS = [
    ("QuickBooks", "accounting", "disconnected"),
    ("Stripe", "payments", "disconnected"),
    ("Xero", "accounting", "disconnected"),
]


async def _is_empty(db: DbAdapter, table: str) -> bool:
    row = await db.get(f"SELECT COUNT(*) AS count FROM {table}")
    return int(row["count"]) == 0


async def seed(db: DbAdapter) -> None:
    if await _is_empty(db, "financial_data"):
        cash = OPENING_CASH
        for month, revenue, expenses in SEED_MONTHS:
            cash = cash + revenue - expenses
            await db.run(
                "INSERT INTO financial_data (month, revenue, expenses, cash_on_hand, category) "
                "VALUES ($1, $2, $3, $4, $5) RETURNING id",
                [month, revenue, expenses, cash, "operating"],
            )
        logger.info(f"Seeded {len(SEED_MONTHS)} months of financial data")

    if await _is_empty(db, "agents"):
        for name, agent_type, status in SEED_AGENTS:
            await db.run(
                "INSERT INTO agents (name, type, status) VALUES ($1, $2, $3) RETURNING id",
                [name, agent_type, status],
            )

    if await _is_empty(db, "users"):
        await db.run(
            "INSERT INTO users (email, password_hash) VALUES ($1, $2) RETURNING id",
            [DEMO_USER_EMAIL, get_password_hash(DEMO_USER_PASSWORD)],
        )

    if await _is_empty(db, "decisions"):
        for decision_text, context, expected_outcome in SEED_DECISIONS:
            await db.run(
                "INSERT INTO decisions (decision_text, context, expected_outcome, status) "
                "VALUES ($1, $2, $3, $4) RETURNING id",
                [decision_text, context, expected_outcome, "pending"],
            )

    if await _is_empty(db, "agent_logs"):
        for agent_name, action, recommendation, impact_score in SEED_AGENT_LOGS:
            await db.run(
                "INSERT INTO agent_logs (agent_name, action, recommendation, impact_score) "
                "VALUES ($1, $2, $3, $4) RETURNING id",
                [agent_name, action, recommendation, impact_score],
            )

    if await _is_empty(db, "models"):
        for name, version, config in SEED_MODELS:
            await db.run(
                "INSERT INTO models (name, version, config) VALUES ($1, $2, $3) RETURNING id",
                [name, version, json.dumps(config)],
            )

    if await _is_empty(db, "integrations"):
        for provider, integration_type, status in SEED_INTEGRATIONS:
            await db.run(
                "INSERT INTO integrations (provider, type, status) VALUES ($1, $2, $3) RETURNING id",
                [provider, integration_type, status],
            )

    logger.info("Seed complete")
