"""Week axis builders for the planning grid.

ISO 주차 기준으로 연간 주차 목록을 만들고, 주 시작일이 속한 달력 월로
주차들을 묶어 그리드 상단의 월 그룹 컬럼을 구성합니다.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, List, Optional, Tuple

import pandas as pd

from ..core.config import CONFIG
from ..domain.exceptions import ValidationError
from ..domain.models import MonthGroup, WeekColumn

WEEK_ID_PATTERN = re.compile(r"^(\d{4})-W(\d{2})$")


def weeks_in_iso_year(year: int) -> int:
    """ISO week-year의 주차 수 (52 또는 53).

    12월 28일은 항상 그 해의 마지막 ISO 주차에 속합니다.
    """
    return date(int(year), 12, 28).isocalendar()[1]


def format_week_id(iso_year: int, iso_week: int) -> str:
    return f"{int(iso_year)}-W{int(iso_week):02d}"


def parse_week_id(week_id: str) -> Tuple[int, int]:
    """ "2024-W05" 형식의 주차 ID를 (iso_year, iso_week)로 분해합니다.

    Raises:
        ValidationError: 형식이 맞지 않거나 해당 연도에 없는 주차인 경우
    """
    match = WEEK_ID_PATTERN.match(str(week_id).strip())
    if match is None:
        raise ValidationError(f"주차 ID 형식이 올바르지 않습니다: {week_id!r}")
    iso_year, iso_week = int(match.group(1)), int(match.group(2))
    if not 1 <= iso_week <= weeks_in_iso_year(iso_year):
        raise ValidationError(f"{iso_year}년에는 {iso_week}주차가 없습니다: {week_id!r}")
    return iso_year, iso_week


def week_column(week_id: str) -> WeekColumn:
    """주차 ID로부터 WeekColumn을 생성합니다 (월요일 시작)."""
    iso_year, iso_week = parse_week_id(week_id)
    start = pd.Timestamp(date.fromisocalendar(iso_year, iso_week, 1))
    return WeekColumn(week_id=format_week_id(iso_year, iso_week), start_date=start)


def generate_weeks(year: int) -> List[WeekColumn]:
    """ISO week-year 한 해의 주차 목록을 시간 순으로 생성합니다.

    연도에 따라 52주 또는 53주가 반환됩니다. 1주차의 시작일은 전년도
    12월일 수 있습니다 (예: 2025-W01은 2024-12-30 시작).

    Args:
        year: ISO week-year

    Returns:
        WeekColumn 리스트 (week_id "YYYY-Www", start_date는 월요일)

    Examples:
        >>> weeks = generate_weeks(2020)
        >>> len(weeks), weeks[0].week_id, weeks[-1].week_id
        (53, '2020-W01', '2020-W53')
    """
    year = int(year)
    first_monday = pd.Timestamp(date.fromisocalendar(year, 1, 1))
    count = weeks_in_iso_year(year)
    starts = pd.date_range(first_monday, periods=count, freq="7D")
    return [
        WeekColumn(week_id=format_week_id(year, i + 1), start_date=start)
        for i, start in enumerate(starts)
    ]


def group_by_month(
    weeks: Iterable[WeekColumn],
    label_format: Optional[str] = None,
) -> List[MonthGroup]:
    """주차들을 주 시작일의 달력 월 기준으로 묶습니다.

    규칙:
    1. 각 주차는 시작일(월요일)이 속한 월에 배정됩니다.
       월 경계에 걸친 주차도 시작일 기준이므로 분할되지 않습니다.
    2. 같은 월에 속한 연속 주차는 하나의 그룹으로 병합됩니다.
    3. 입력 순서를 유지하므로, 시간 순 입력이면 그룹도 시간 순입니다.

    Args:
        weeks: WeekColumn 목록 (보통 generate_weeks 결과)
        label_format: 월 라벨 strftime 형식 (기본값: CONFIG.planning.month_label_format)

    Returns:
        MonthGroup 리스트
    """
    fmt = label_format or CONFIG.planning.month_label_format

    groups: List[MonthGroup] = []
    current: List[WeekColumn] = []
    current_key: Optional[Tuple[int, int]] = None

    for week in weeks:
        key = (week.start_date.year, week.start_date.month)
        if current and key != current_key:
            groups.append(_make_group(current, fmt))
            current = []
        current.append(week)
        current_key = key

    if current:
        groups.append(_make_group(current, fmt))
    return groups


def _make_group(weeks: List[WeekColumn], fmt: str) -> MonthGroup:
    anchor = weeks[0].start_date
    return MonthGroup(
        label=anchor.strftime(fmt),
        year=anchor.year,
        month=anchor.month,
        weeks=tuple(weeks),
    )


def week_range_label(week: WeekColumn, month_format: Optional[str] = None) -> str:
    """그리드 헤더용 주차 범위 라벨 ("Jan 1 - Jan 7")."""
    fmt = month_format or CONFIG.planning.week_label_month_format
    start, end = week.start_date, week.end_date
    return f"{start.strftime(fmt)} {start.day} - {end.strftime(fmt)} {end.day}"
