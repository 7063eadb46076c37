"""Financial metric derivation for planned sales units."""

from __future__ import annotations

import math
from numbers import Real

import numpy as np
import pandas as pd

from ..domain.exceptions import ValidationError
from ..domain.models import WeekMetric


def compute_metrics(units: float, price: float, cost: float) -> WeekMetric:
    """판매 수량과 가격/원가로부터 금액 지표를 계산합니다.

    - sales_dollars = units * price
    - gm_dollars = sales_dollars - units * cost
    - gm_percentage = gm_dollars / sales_dollars * 100 (sales_dollars > 0일 때만)

    sales_dollars가 0 이하이면 gm_percentage는 0으로 정의합니다.
    비즈니스 규칙(가격이 음수인지 등)은 검증하지 않습니다.

    Examples:
        >>> compute_metrics(10, 5, 3)
        WeekMetric(units=10.0, sales_dollars=50.0, gm_dollars=20.0, gm_percentage=40.0)
    """
    units = float(units)
    sales = units * float(price)
    gm = sales - units * float(cost)
    pct = gm / sales * 100.0 if sales > 0 else 0.0
    return WeekMetric(units=units, sales_dollars=sales, gm_dollars=gm, gm_percentage=pct)


def gm_percentage_array(gm: np.ndarray, sales: np.ndarray) -> np.ndarray:
    """gm / sales * 100 (sales > 0인 위치만, 나머지는 0)."""
    gm = np.asarray(gm, dtype=float)
    sales = np.asarray(sales, dtype=float)
    pct = np.zeros_like(sales)
    np.divide(gm, sales, out=pct, where=sales > 0)
    return pct * 100.0


def compute_metrics_frame(
    frame: pd.DataFrame,
    *,
    units_col: str = "units",
    price_col: str = "price",
    cost_col: str = "cost",
) -> pd.DataFrame:
    """compute_metrics의 벡터화 버전.

    sales_dollars, gm_dollars, gm_percentage 컬럼을 추가한 사본을 반환합니다.
    """
    out = frame.copy()
    units = out[units_col].astype(float).to_numpy()
    sales = units * out[price_col].astype(float).to_numpy()
    gm = sales - units * out[cost_col].astype(float).to_numpy()

    out["sales_dollars"] = sales
    out["gm_dollars"] = gm
    out["gm_percentage"] = gm_percentage_array(gm, sales)
    return out


def validate_units(units: object) -> float:
    """판매 수량이 0 이상 유한한 실수인지 확인하고 float으로 반환합니다.

    Raises:
        ValidationError: 숫자가 아니거나, 음수이거나, NaN/inf인 경우
    """
    if isinstance(units, bool) or not isinstance(units, (Real, np.number)):
        raise ValidationError(f"판매 수량은 숫자여야 합니다: {units!r}")
    value = float(units)
    if not math.isfinite(value):
        raise ValidationError(f"판매 수량이 유한한 값이 아닙니다: {units!r}")
    if value < 0:
        raise ValidationError(f"판매 수량은 0 이상이어야 합니다: {units!r}")
    return value
