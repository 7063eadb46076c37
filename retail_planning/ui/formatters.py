"""그리드 셀 포맷팅 유틸리티 모듈.

금액, 비율, 수량 표시 문자열과 재고 차이 색상을 제공합니다.
행 변환 결과는 숫자 그대로 두고, 표시 직전에만 이 함수들을 적용합니다.
"""

from __future__ import annotations

import pandas as pd

from ..core.config import CONFIG


def _is_missing(value: object) -> bool:
    return value is None or (isinstance(value, float) and pd.isna(value))


def format_currency(value: float | int | None, *, decimals: int | None = None) -> str:
    """금액을 "$1,234.50" 형식으로 포맷팅합니다.

    Args:
        value: 금액
        decimals: 소수점 자리수 (기본값: CONFIG.ui.money_decimals)

    Returns:
        포맷팅된 문자열 또는 "-"
    """
    if _is_missing(value):
        return "-"
    digits = CONFIG.ui.money_decimals if decimals is None else decimals
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return "-"
    sign = "-" if amount < 0 else ""
    return f"{sign}{CONFIG.ui.currency_symbol}{abs(amount):,.{digits}f}"


def format_percent(value: float | int | None, *, decimals: int | None = None) -> str:
    """비율을 "40.00%" 형식으로 포맷팅합니다."""
    if _is_missing(value):
        return "-"
    digits = CONFIG.ui.percent_decimals if decimals is None else decimals
    try:
        return f"{float(value):.{digits}f}%"
    except (TypeError, ValueError):
        return "-"


def format_units(value: float | int | None) -> str:
    """수량을 천 단위 구분 기호가 있는 정수 문자열로 포맷팅합니다."""
    if _is_missing(value):
        return "-"
    try:
        return f"{int(round(float(value))):,}"
    except (TypeError, ValueError):
        return "-"


def difference_color(value: float | int | None) -> str:
    """재고 차이 값에 맞는 글자색을 반환합니다 (음수: 부족)."""
    if _is_missing(value):
        return CONFIG.ui.neutral_color
    if value < 0:
        return CONFIG.ui.shortage_color
    if value > 0:
        return CONFIG.ui.surplus_color
    return CONFIG.ui.neutral_color


def style_difference(frame: pd.DataFrame, column: str = "difference"):
    """difference 컬럼에 색상을 입힌 pandas Styler를 반환합니다."""
    return frame.style.map(
        lambda v: f"color: {difference_color(v)}", subset=[column]
    )
