"""
주차 축 테스트

ISO 주차 생성, 월 그룹핑, 주차 ID 해석을 검증합니다.
"""
from __future__ import annotations

import pandas as pd
import pytest

from retail_planning.domain.exceptions import ValidationError
from retail_planning.planning.time_axis import (
    generate_weeks,
    group_by_month,
    parse_week_id,
    week_column,
    week_range_label,
    weeks_in_iso_year,
)


# ============================================================
# 주차 생성
# ============================================================

@pytest.mark.parametrize(
    "year,expected",
    [(2015, 53), (2020, 53), (2021, 52), (2024, 52), (2025, 52), (2026, 53)],
)
def test_weeks_in_iso_year(year, expected):
    """ISO 연도별 52/53주 경계"""
    assert weeks_in_iso_year(year) == expected
    assert len(generate_weeks(year)) == expected


def test_generate_weeks_2024_chronological():
    """2024년 주차는 시간 순으로 7일 간격"""
    weeks = generate_weeks(2024)

    assert weeks[0].week_id == "2024-W01"
    assert weeks[0].start_date == pd.Timestamp("2024-01-01")
    assert weeks[-1].week_id == "2024-W52"
    assert weeks[-1].start_date == pd.Timestamp("2024-12-23")

    starts = [w.start_date for w in weeks]
    assert all(b - a == pd.Timedelta(days=7) for a, b in zip(starts, starts[1:]))
    assert all(w.start_date.dayofweek == 0 for w in weeks)


def test_generate_weeks_first_week_starts_previous_year():
    """2025-W01은 2024-12-30(월) 시작"""
    weeks = generate_weeks(2025)

    assert weeks[0].start_date == pd.Timestamp("2024-12-30")
    assert weeks[0].end_date == pd.Timestamp("2025-01-05")


def test_generate_weeks_53rd_week():
    """53주 연도의 마지막 주차"""
    weeks = generate_weeks(2020)

    assert weeks[-1].week_id == "2020-W53"
    assert weeks[-1].start_date == pd.Timestamp("2020-12-28")
    assert weeks[-1].iso_year == 2020
    assert weeks[-1].iso_week == 53


# ============================================================
# 월 그룹핑
# ============================================================

def test_group_by_month_partitions_every_week_once():
    """모든 주차가 정확히 한 그룹에 속하고 순서 유지"""
    weeks = generate_weeks(2024)
    groups = group_by_month(weeks)

    flattened = [w for g in groups for w in g.weeks]
    assert flattened == weeks

    keys = [(g.year, g.month) for g in groups]
    assert keys == sorted(keys)
    assert len(set(keys)) == len(keys)


def test_group_by_month_2024_sizes():
    """2024년 월별 주차 수 (주 시작일 기준)"""
    groups = group_by_month(generate_weeks(2024))

    assert [g.month for g in groups] == list(range(1, 13))
    assert [len(g.weeks) for g in groups] == [5, 4, 4, 5, 4, 4, 5, 4, 5, 4, 4, 4]
    assert groups[0].label == "January 2024"


def test_group_by_month_boundary_week_uses_start_date():
    """월 경계에 걸친 주차는 시작일의 월에 배정 (분할 없음)"""
    groups = group_by_month(generate_weeks(2024))

    january = groups[0]
    # 2024-W05: 1/29 ~ 2/4
    assert january.week_ids[-1] == "2024-W05"
    assert "2024-W05" not in groups[1].week_ids


def test_group_by_month_leading_december_group():
    """2025-W01은 2024년 12월 그룹으로 분리"""
    groups = group_by_month(generate_weeks(2025))

    assert (groups[0].year, groups[0].month) == (2024, 12)
    assert groups[0].week_ids == ("2025-W01",)
    assert (groups[1].year, groups[1].month) == (2025, 1)


def test_group_by_month_custom_label_and_empty():
    """라벨 형식 지정 및 빈 입력"""
    groups = group_by_month(generate_weeks(2024)[:2], label_format="%b")

    assert [g.label for g in groups] == ["Jan"]
    assert group_by_month([]) == []


# ============================================================
# 주차 ID / 라벨
# ============================================================

def test_parse_week_id_valid():
    """주차 ID 해석"""
    assert parse_week_id("2024-W05") == (2024, 5)
    assert parse_week_id("2020-W53") == (2020, 53)


@pytest.mark.parametrize("week_id", ["2024-W53", "2024-W00", "2024-5", "W05", ""])
def test_parse_week_id_invalid(week_id):
    """형식 오류 또는 없는 주차"""
    with pytest.raises(ValidationError):
        parse_week_id(week_id)


def test_week_column_and_label():
    """주차 ID → WeekColumn, 헤더 라벨"""
    week = week_column("2024-W05")

    assert week.start_date == pd.Timestamp("2024-01-29")
    assert week_range_label(week) == "Jan 29 - Feb 4"
    assert week_range_label(generate_weeks(2024)[0]) == "Jan 1 - Jan 7"
