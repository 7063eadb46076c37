"""
로스터/계획 요약 지표 테스트
"""
from __future__ import annotations

import pytest

from retail_planning.analytics.roster import (
    planning_summary,
    sku_category_metrics,
    store_metrics,
)
from retail_planning.domain.roster import Roster
from retail_planning.planning.engine import PlanningEngine


def test_store_metrics_sample_roster(roster):
    """매장별 취급 SKU 수와 재고 금액"""
    metrics = store_metrics(roster).set_index("store_id")

    assert metrics.loc["1", "total_skus"] == 2
    assert metrics.loc["1", "total_value"] == pytest.approx(19.99 * 100 + 14.99 * 150)
    assert metrics.loc["2", "total_value"] == pytest.approx(5.99 * 50 + 4.99 * 200)
    assert metrics.loc["3", "total_skus"] == 1
    assert list(metrics.index) == ["1", "2", "3"]


def test_store_metrics_store_without_skus():
    """SKU가 없는 매장은 0"""
    roster = Roster.from_records([{"id": "9", "name": "Empty"}], [])

    metrics = store_metrics(roster)

    assert metrics["total_skus"].tolist() == [0]
    assert metrics["total_value"].tolist() == [0.0]


def test_sku_category_metrics(roster):
    """카테고리별 SKU 수와 평균 판매가 (최초 등장 순)"""
    metrics = sku_category_metrics(roster)

    assert metrics["category"].tolist() == ["Beverages", "Bakery", "Confectionery", "Dairy"]
    beverages = metrics.iloc[0]
    assert beverages["count"] == 2
    assert beverages["average_price"] == pytest.approx((19.99 + 14.99) / 2)


def test_sku_category_metrics_empty():
    """SKU가 없으면 빈 결과"""
    assert sku_category_metrics(Roster()).empty


def test_planning_summary(roster):
    """매장별 계획 합계와 재고 부족 SKU 수"""
    engine = PlanningEngine(roster, year=2024)
    engine.set_units("1", "1", "2024-W01", 10)
    engine.set_units("2", "3", "2024-W01", 80)

    summary = planning_summary(engine.wide_rows()).set_index("store_id")

    assert summary.loc["1", "total_units"] == 10
    assert summary.loc["1", "total_sales"] == pytest.approx(199.9)
    # difference < 0: Premium Coffee(10 - 100), Organic Tea(0 - 150)
    assert summary.loc["1", "shortage_skus"] == 2
    # Fresh Bread(80 - 50)는 양수, Chocolate Bar(0 - 200)만 음수
    assert summary.loc["2", "shortage_skus"] == 1
    assert summary.loc["3", "gm_percentage"] == 0


def test_planning_summary_empty():
    """빈 행이면 빈 요약"""
    engine = PlanningEngine(Roster(), year=2024)

    assert planning_summary(engine.wide_rows()).empty
