import random

import pytest

from finmodel.health_scoring import FinancialMetric, coerce_metrics, compute_health_score
from finmodel.health_scoring.engine import (
    NO_DATA_SUMMARY,
    burn_sustainability_score,
    cash_trend_score,
    grade_for,
    revenue_momentum_score,
    round_half_up,
    runway_score,
    summary_for,
)


def months(revenues=None, expenses=None, cash=None, count=None):
    count = count or len(revenues or expenses or cash)
    revenues = revenues or [10000] * count
    expenses = expenses or [10000] * count
    cash = cash or [100000] * count
    return [
        FinancialMetric(
            month=f"2025-{i + 1:02d}",
            revenue=revenues[i],
            expenses=expenses[i],
            cash_on_hand=cash[i],
        )
        for i in range(count)
    ]


def test_empty_input_returns_no_data_result():
    result = compute_health_score([])
    assert result.model_dump() == {
        "score": 0,
        "grade": "F",
        "trend": "stable",
        "breakdown": [],
        "summary": NO_DATA_SUMMARY,
    }


def test_single_burning_month_scores_52_grade_c():
    data = [FinancialMetric(month="2025-01", revenue=10000, expenses=40000, cash_on_hand=200000)]
    result = compute_health_score(data)

    assert [b.score for b in result.breakdown] == [55, 60, 25, 70]
    assert result.score == 52
    assert result.grade == "C"
    assert result.trend == "stable"
    assert result.summary == "Moderate health. Consider optimizing burn or accelerating revenue."


def test_six_months_of_runway_hits_the_six_month_breakpoint():
    data = [FinancialMetric(month="2025-01", revenue=10000, expenses=40000, cash_on_hand=6 * 30000)]
    runway = compute_health_score(data).breakdown[0]
    assert runway.label == "Runway"
    assert runway.score == 55
    assert runway.description == "Adequate runway"


def test_profitable_month_scores_full_burn_and_runway():
    data = [FinancialMetric(month="2025-01", revenue=50000, expenses=40000, cash_on_hand=10000)]
    result = compute_health_score(data)
    runway, _, burn, _ = result.breakdown
    assert burn.score == 100
    assert burn.description == "Path to profitability visible"
    assert runway.score == 100
    assert runway.description == "Strong runway"


def test_break_even_month_counts_as_profitable():
    data = [FinancialMetric(month="2025-01", revenue=40000, expenses=40000, cash_on_hand=0)]
    assert compute_health_score(data).breakdown[2].score == 100


@pytest.mark.parametrize(
    "months_runway,expected",
    [
        (24, 100),
        (18, 100),
        (17.99, 85),
        (12, 85),
        (9, 70),
        (8.99, 55),
        (6, 55),
        (5.99, 40),
        (4, 40),
        (2, 25),
        (1.99, 20),
        (1.25, 13),
        (0.3, 5),
        (-3, 5),
    ],
)
def test_runway_ladder(months_runway, expected):
    assert runway_score(months_runway) == expected


@pytest.mark.parametrize(
    "recent,expected",
    [
        (120, 100),
        (110, 90),
        (105, 80),
        (102, 62),
        (100, 50),
        (95, 45),
        (85, 28),
        (50, 10),
    ],
)
def test_revenue_momentum_ladder(recent, expected):
    data = months(revenues=[100] * 3 + [recent] * 3)
    assert revenue_momentum_score(data) == expected


def test_revenue_momentum_defaults():
    assert revenue_momentum_score(months(count=2)) == 60
    assert revenue_momentum_score(months(count=3)) == 70
    assert revenue_momentum_score(months(count=5)) == 70
    assert revenue_momentum_score(months(revenues=[0, 0, 0, 100, 100, 100])) == 70


def test_burn_sustainability_is_revenue_coverage():
    assert burn_sustainability_score(months(revenues=[30000], expenses=[40000])) == 75
    assert burn_sustainability_score(months(revenues=[0], expenses=[40000])) == 0
    assert burn_sustainability_score(months(revenues=[45000], expenses=[40000])) == 100


def test_burn_sustainability_with_negative_amounts():
    # revenue below expenses below zero: coverage ratio 3.0, capped at 100
    assert burn_sustainability_score(months(revenues=[-3], expenses=[-1])) == 100
    assert burn_sustainability_score(months(revenues=[-500], expenses=[0])) == 0


@pytest.mark.parametrize(
    "latest,expected",
    [
        (110000, 100),
        (105000, 100),
        (102000, 82),
        (100000, 70),
        (95000, 65),
        (80000, 43),
        (50000, 15),
    ],
)
def test_cash_trend_ladder(latest, expected):
    data = months(cash=[100000, 100000, 100000, latest])
    assert cash_trend_score(data) == expected


def test_cash_trend_defaults():
    assert cash_trend_score(months(count=3)) == 70
    assert cash_trend_score(months(cash=[0, 10, 20, 30])) == 70


def test_trend_needs_six_months():
    rising = months(cash=[10000, 50000, 100000, 200000, 400000])
    assert compute_health_score(rising).trend == "stable"


def test_trend_up_and_down():
    up = months(cash=[100000] * 3 + [200000] * 3)
    down = months(cash=[200000] * 3 + [100000] * 3)
    flat = months(cash=[100000] * 3 + [101000] * 3)
    assert compute_health_score(up).trend == "up"
    assert compute_health_score(down).trend == "down"
    assert compute_health_score(flat).trend == "stable"


def test_trend_with_non_positive_prior_cash_is_stable():
    data = months(cash=[-5000] * 3 + [100000] * 3)
    assert compute_health_score(data).trend == "stable"


@pytest.mark.parametrize(
    "score,grade",
    [(100, "A"), (80, "A"), (79, "B"), (65, "B"), (64, "C"), (50, "C"), (49, "D"), (35, "D"), (34, "F"), (0, "F")],
)
def test_grade_bands(score, grade):
    assert grade_for(score) == grade


def test_summary_bands_differ_from_critical():
    assert summary_for(80).startswith("Strong financial health")
    assert summary_for(65).startswith("Good financial position")
    assert summary_for(34) == "Critical. Prioritize cash preservation and revenue."


def test_round_half_up_matches_dashboard_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(-2.5) == -2
    assert round_half_up(51.75) == 52
    assert round_half_up(12.4999) == 12


def test_score_bounds_and_breakdown_shape_over_random_series():
    rng = random.Random(20250101)
    for _ in range(300):
        count = rng.randint(1, 24)
        data = [
            FinancialMetric(
                month=f"{2020 + i // 12}-{i % 12 + 1:02d}",
                revenue=rng.uniform(0, 80000),
                expenses=rng.uniform(0, 80000),
                cash_on_hand=rng.uniform(-100000, 900000),
            )
            for i in range(count)
        ]
        result = compute_health_score(data)
        assert 0 <= result.score <= 100
        assert result.grade == grade_for(result.score)
        assert len(result.breakdown) == 4
        assert sum(b.weight for b in result.breakdown) == 100
        assert [b.label for b in result.breakdown] == [
            "Runway",
            "Revenue momentum",
            "Burn sustainability",
            "Cash trend",
        ]


def test_identical_input_gives_identical_output():
    data = months(
        revenues=[9800, 11200, 12500, 14800, 16200, 18200, 21500],
        expenses=[40500, 41200, 42000, 42800, 43200, 43500, 44800],
        cash=[469300, 439300, 409800, 381800, 354800, 329500, 306200],
    )
    assert compute_health_score(data) == compute_health_score(list(data))
    assert compute_health_score(data).model_dump_json() == compute_health_score(data).model_dump_json()


def test_coerce_metrics_defaults_bad_fields():
    metrics = coerce_metrics(
        [
            {"month": 202501, "revenue": "1200.5", "expenses": None, "cash_on_hand": float("nan")},
            "junk",
            {"month": "2025-02", "revenue": True, "expenses": "abc", "cash_on_hand": -50, "category": "ops"},
        ]
    )
    assert metrics[0].model_dump() == {
        "month": "",
        "revenue": 1200.5,
        "expenses": 0.0,
        "cash_on_hand": 0.0,
        "category": None,
    }
    assert metrics[1] == FinancialMetric()
    assert metrics[2].month == "2025-02"
    assert metrics[2].revenue == 0.0
    assert metrics[2].expenses == 0.0
    assert metrics[2].cash_on_hand == -50.0
    assert metrics[2].category == "ops"


def test_engine_does_not_raise_on_zeroed_input():
    result = compute_health_score(coerce_metrics([{}, {}, {}, {}, {}, {}]))
    assert 0 <= result.score <= 100
