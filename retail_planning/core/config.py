"""Configuration and constants for the retail planning grid.

주차 축, 행 변환, 화면 표시 관련 전역 설정을 제공합니다.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date


def _default_year() -> int:
    # PLANNING_YEAR 환경변수가 있으면 우선 사용
    raw = os.getenv("PLANNING_YEAR", "").strip()
    if raw.isdigit():
        return int(raw)
    return date.today().year


# ============================================================
# 플래닝 설정
# ============================================================

@dataclass(frozen=True)
class PlanningConfig:
    """주차 축 및 행 변환 관련 설정"""

    # 계획 대상 연도 (ISO week-year)
    default_year: int = field(default_factory=_default_year)

    # 월 그룹 라벨 형식 (strftime)
    month_label_format: str = "%B %Y"

    # 주차 범위 라벨의 월 표기 형식 (strftime, 일자는 별도로 붙임)
    week_label_month_format: str = "%b"

    # long 형태 행 변환 기본값 (False: 기록된 셀만, True: 모든 주차)
    dense_long_rows: bool = False


@dataclass(frozen=True)
class UIConfig:
    """UI 표시 관련 설정"""

    # 통화 기호
    currency_symbol: str = "$"

    # 소수점 자리수
    money_decimals: int = 2
    percent_decimals: int = 2

    # 재고 차이 색상 (음수: 부족, 양수: 여유)
    shortage_color: str = "#d62728"
    surplus_color: str = "#2ca02c"
    neutral_color: str = "#7f7f7f"

    # 그리드 기본 높이 (픽셀)
    grid_height: int = 600


@dataclass(frozen=True)
class DashboardConfig:
    """대시보드 전역 설정"""

    planning: PlanningConfig = field(default_factory=PlanningConfig)
    ui: UIConfig = field(default_factory=UIConfig)


# ============================================================
# 전역 설정 인스턴스
# ============================================================

# 전역 설정 객체 (불변)
CONFIG = DashboardConfig()
