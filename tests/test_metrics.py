"""
지표 계산 테스트

compute_metrics / compute_metrics_frame / validate_units 동작을 검증합니다.
"""
from __future__ import annotations

import math

import numpy as np
import pandas as pd
import pytest

from retail_planning.domain.exceptions import ValidationError
from retail_planning.domain.models import WeekMetric
from retail_planning.planning.metrics import (
    compute_metrics,
    compute_metrics_frame,
    gm_percentage_array,
    validate_units,
)


# ============================================================
# compute_metrics
# ============================================================

def test_compute_metrics_basic():
    """10개 × $5, 원가 $3 → 매출 50, GM 20, GM% 40"""
    result = compute_metrics(10, 5, 3)

    assert result.units == 10
    assert result.sales_dollars == pytest.approx(50)
    assert result.gm_dollars == pytest.approx(20)
    assert result.gm_percentage == pytest.approx(40)


def test_compute_metrics_zero_units():
    """판매 수량 0 → 모든 지표 0"""
    assert compute_metrics(0, 5, 3) == WeekMetric.zero()


def test_compute_metrics_zero_price_guards_division():
    """매출 0이면 GM%는 0 (0으로 나누지 않음)"""
    result = compute_metrics(10, 0, 3)

    assert result.sales_dollars == 0
    assert result.gm_dollars == pytest.approx(-30)
    assert result.gm_percentage == 0


def test_compute_metrics_negative_sales_percentage_is_zero():
    """음수 매출 (음수 가격)이면 GM%는 0"""
    result = compute_metrics(4, -2, 1)

    assert result.sales_dollars == pytest.approx(-8)
    assert result.gm_dollars == pytest.approx(-12)
    assert result.gm_percentage == 0


@pytest.mark.parametrize(
    "units,price,cost",
    [(1, 19.99, 12.5), (37, 4.99, 2.25), (250, 3.99, 4.5), (0.5, 100, 0)],
)
def test_compute_metrics_gm_identity(units, price, cost):
    """gm_dollars = sales_dollars - units * cost 항등식"""
    result = compute_metrics(units, price, cost)

    assert result.sales_dollars == pytest.approx(units * price)
    assert result.gm_dollars == pytest.approx(result.sales_dollars - units * cost)
    if result.sales_dollars > 0:
        expected = result.gm_dollars / result.sales_dollars * 100
        assert result.gm_percentage == pytest.approx(expected)


# ============================================================
# compute_metrics_frame
# ============================================================

def test_compute_metrics_frame_matches_scalar():
    """벡터화 계산 결과가 스칼라 계산과 일치"""
    frame = pd.DataFrame(
        {
            "units": [10, 0, 20, 4],
            "price": [5, 5, 10, 0],
            "cost": [3, 3, 4, 1],
        }
    )

    result = compute_metrics_frame(frame)

    for row in result.itertuples():
        expected = compute_metrics(row.units, row.price, row.cost)
        assert row.sales_dollars == pytest.approx(expected.sales_dollars)
        assert row.gm_dollars == pytest.approx(expected.gm_dollars)
        assert row.gm_percentage == pytest.approx(expected.gm_percentage)


def test_compute_metrics_frame_does_not_mutate_input():
    """입력 DataFrame은 변경하지 않음"""
    frame = pd.DataFrame({"units": [1], "price": [2], "cost": [1]})

    compute_metrics_frame(frame)

    assert list(frame.columns) == ["units", "price", "cost"]


def test_gm_percentage_array_zero_sales():
    """매출 0 이하 위치는 0"""
    pct = gm_percentage_array(np.array([20.0, 5.0, -3.0]), np.array([50.0, 0.0, -1.0]))

    assert pct.tolist() == pytest.approx([40.0, 0.0, 0.0])


# ============================================================
# validate_units
# ============================================================

@pytest.mark.parametrize("value", [0, 1, 2.5, np.float64(3), np.int64(7)])
def test_validate_units_accepts(value):
    """0 이상 유한한 숫자 허용"""
    assert validate_units(value) == float(value)


@pytest.mark.parametrize(
    "value", [-1, -0.01, math.nan, math.inf, -math.inf, "5", None, True]
)
def test_validate_units_rejects(value):
    """음수, NaN/inf, 숫자가 아닌 값, bool 거부"""
    with pytest.raises(ValidationError):
        validate_units(value)
