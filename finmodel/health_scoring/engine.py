"""Financial Health Score: composite 0-100 score from runway, revenue, burn and cash.

Every sub-score is a breakpoint ladder: an ordered table of
``(threshold, score)`` pairs checked top-down with ``>=``, the first match
wins. A score entry is either a constant or a function of the measured value.
The ladders are step functions on purpose and must not be smoothed.

The engine is pure and never raises; callers coerce bad input beforehand
(see ``coerce_metrics``).
"""

import math
from typing import Any, Callable, Iterable, List, Sequence, Tuple, Union

from .schemas import FinancialMetric, HealthScoreBreakdown, HealthScoreResult

Score = Union[int, Callable[[float], int]]
Ladder = Sequence[Tuple[float, Score]]

NO_DATA_SUMMARY = "No financial data available to compute health score."

# Months of runway assumed when the latest month is profitable or break-even
PROFITABLE_RUNWAY_MONTHS = 24

WEIGHTS = {"runway": 30, "revenue": 25, "burn": 25, "cash": 20}
_FACTORS = {name: weight / 100 for name, weight in WEIGHTS.items()}


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity (so -2.5 -> -2), unlike Python's banker's round()."""
    return int(math.floor(value + 0.5))


RUNWAY_LADDER: Ladder = (
    (18, 100),
    (12, 85),
    (9, 70),
    (6, 55),
    (4, 40),
    (2, 25),
)

REVENUE_MOMENTUM_LADDER: Ladder = (
    (15, 100),
    (10, 90),
    (5, 80),
    (0, lambda g: 50 + round_half_up(g * 6)),
    (-10, lambda g: 40 + round_half_up(g + 10)),
    (-20, lambda g: 25 + round_half_up((g + 20) / 2)),
)

CASH_TREND_LADDER: Ladder = (
    (5, 100),
    (0, lambda c: 70 + round_half_up(c * 6)),
    (-10, lambda c: 60 + round_half_up(c + 10)),
    (-25, lambda c: 40 + round_half_up((c + 25) / 1.5)),
)

GRADE_BANDS = (
    (80, "A"),
    (65, "B"),
    (50, "C"),
    (35, "D"),
)

SUMMARY_BANDS = (
    (80, "Strong financial health. Runway and momentum support growth."),
    (65, "Good financial position. Monitor burn and runway trends."),
    (50, "Moderate health. Consider optimizing burn or accelerating revenue."),
    (35, "Needs attention. Focus on runway extension or revenue growth."),
)
CRITICAL_SUMMARY = "Critical. Prioritize cash preservation and revenue."


def climb(value: float, ladder: Ladder, fallback: Callable[[float], int]) -> int:
    for threshold, score in ladder:
        if value >= threshold:
            return score(value) if callable(score) else score
    return fallback(value)


def _band(value: float, bands, default):
    for threshold, label in bands:
        if value >= threshold:
            return label
    return default


def _mean(values: Iterable[float]) -> float:
    values = list(values)
    return sum(values) / len(values)


def months_of_runway(latest: FinancialMetric) -> float:
    burn = latest.expenses - latest.revenue
    if burn <= 0:
        return PROFITABLE_RUNWAY_MONTHS
    return latest.cash_on_hand / burn


def runway_score(months_runway: float) -> int:
    return climb(months_runway, RUNWAY_LADDER, lambda m: max(5, round_half_up(m * 10)))


def revenue_momentum_score(data: Sequence[FinancialMetric]) -> int:
    """Mean revenue of the last 3 months against the 3 months before them."""
    if len(data) < 3:
        return 60
    recent = data[-3:]
    previous = data[-6:-3]
    if len(previous) < 3:
        return 70
    prev_avg = _mean(d.revenue for d in previous)
    if prev_avg <= 0:
        return 70
    recent_avg = _mean(d.revenue for d in recent)
    growth = (recent_avg - prev_avg) / prev_avg * 100
    return climb(growth, REVENUE_MOMENTUM_LADDER, lambda g: max(10, 25 + round_half_up(g)))


def burn_sustainability_score(data: Sequence[FinancialMetric]) -> int:
    latest = data[-1]
    burn = latest.expenses - latest.revenue
    if burn <= 0:
        return 100
    if latest.expenses == 0:
        # only reachable with negative revenue: nothing is covered
        return 0
    return min(100, round_half_up(latest.revenue / latest.expenses * 100))


def cash_trend_score(data: Sequence[FinancialMetric]) -> int:
    """Latest cash against the value three months earlier."""
    if len(data) < 4:
        return 70
    last = data[-1].cash_on_hand
    three_ago = data[-4].cash_on_hand
    if three_ago <= 0:
        return 70
    change = (last - three_ago) / three_ago * 100
    return climb(change, CASH_TREND_LADDER, lambda c: max(15, 40 + round_half_up(c)))


def cash_trend_direction(data: Sequence[FinancialMetric]) -> str:
    if len(data) < 6:
        return "stable"
    recent_avg = _mean(d.cash_on_hand for d in data[-3:])
    prev_avg = _mean(d.cash_on_hand for d in data[-6:-3])
    pct = (recent_avg - prev_avg) / prev_avg * 100 if prev_avg > 0 else 0
    if pct > 2:
        return "up"
    if pct < -2:
        return "down"
    return "stable"


def grade_for(score: int) -> str:
    return _band(score, GRADE_BANDS, "F")


def summary_for(score: int) -> str:
    return _band(score, SUMMARY_BANDS, CRITICAL_SUMMARY)


def _describe(value: float, strong: float, fair: float, labels: Tuple[str, str, str]) -> str:
    if value >= strong:
        return labels[0]
    if value >= fair:
        return labels[1]
    return labels[2]


def compute_health_score(data: Sequence[FinancialMetric]) -> HealthScoreResult:
    """Score metrics ordered by month ascending. Deterministic for identical input."""
    if not data:
        return HealthScoreResult(score=0, grade="F", trend="stable", breakdown=[], summary=NO_DATA_SUMMARY)

    months_runway = months_of_runway(data[-1])
    runway = runway_score(months_runway)
    revenue = revenue_momentum_score(data)
    burn = burn_sustainability_score(data)
    cash = cash_trend_score(data)

    composite = round_half_up(
        runway * _FACTORS["runway"]
        + revenue * _FACTORS["revenue"]
        + burn * _FACTORS["burn"]
        + cash * _FACTORS["cash"]
    )
    score = min(100, max(0, composite))

    breakdown = [
        HealthScoreBreakdown(
            label="Runway",
            score=runway,
            weight=WEIGHTS["runway"],
            description=_describe(
                months_runway, 12, 6, ("Strong runway", "Adequate runway", "Runway needs attention")
            ),
        ),
        HealthScoreBreakdown(
            label="Revenue momentum",
            score=revenue,
            weight=WEIGHTS["revenue"],
            description=_describe(
                revenue, 70, 50, ("Revenue trending up", "Stable revenue", "Revenue under pressure")
            ),
        ),
        HealthScoreBreakdown(
            label="Burn sustainability",
            score=burn,
            weight=WEIGHTS["burn"],
            description=_describe(
                burn, 80, 50, ("Path to profitability visible", "Moderate burn", "High burn relative to revenue")
            ),
        ),
        HealthScoreBreakdown(
            label="Cash trend",
            score=cash,
            weight=WEIGHTS["cash"],
            description=_describe(cash, 80, 50, ("Cash position improving", "Stable cash", "Cash declining")),
        ),
    ]

    return HealthScoreResult(
        score=score,
        grade=grade_for(score),
        trend=cash_trend_direction(data),
        breakdown=breakdown,
        summary=summary_for(score),
    )


def _to_number(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def coerce_metrics(items: Iterable[Any]) -> List[FinancialMetric]:
    """Turn loosely-typed JSON objects into metrics; bad fields become "" or 0."""
    metrics = []
    for item in items:
        if not isinstance(item, dict):
            item = {}
        month = item.get("month")
        category = item.get("category")
        metrics.append(
            FinancialMetric(
                month=month if isinstance(month, str) else "",
                revenue=_to_number(item.get("revenue")),
                expenses=_to_number(item.get("expenses")),
                cash_on_hand=_to_number(item.get("cash_on_hand")),
                category=category if isinstance(category, str) else None,
            )
        )
    return metrics
