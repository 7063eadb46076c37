"""로스터 및 계획 요약 지표 계산 함수들."""

from __future__ import annotations

import pandas as pd

from ..domain.roster import Roster
from ..planning.metrics import gm_percentage_array


def store_metrics(roster: Roster) -> pd.DataFrame:
    """매장별 취급 SKU 수와 재고 금액을 계산합니다.

    Args:
        roster: 매장/SKU 로스터

    Returns:
        store_id, store, total_skus, total_value 컬럼의 DataFrame (매장 order 순)
        - total_value: 해당 매장 SKU의 price * quantity 합계
    """
    records = []
    for store in roster.sorted_stores():
        store_skus = [sku for sku in roster.skus if sku.store_id == store.id]
        records.append(
            {
                "store_id": store.id,
                "store": store.name,
                "total_skus": len(store_skus),
                "total_value": float(sum(sku.price * sku.quantity for sku in store_skus)),
            }
        )
    return pd.DataFrame(records, columns=["store_id", "store", "total_skus", "total_value"])


def sku_category_metrics(roster: Roster) -> pd.DataFrame:
    """카테고리별 SKU 수와 평균 판매가를 계산합니다.

    Returns:
        category, count, average_price 컬럼의 DataFrame (카테고리 최초 등장 순)
    """
    columns = ["category", "count", "average_price"]
    if not roster.skus:
        return pd.DataFrame(columns=columns)

    frame = pd.DataFrame(
        {
            "category": [sku.category for sku in roster.skus],
            "price": [float(sku.price) for sku in roster.skus],
        }
    )
    out = (
        frame.groupby("category", sort=False)["price"]
        .agg(count="count", average_price="mean")
        .reset_index()
    )
    return out[columns]


def planning_summary(wide_rows: pd.DataFrame) -> pd.DataFrame:
    """wide 행으로부터 매장별 계획 합계를 계산합니다.

    Args:
        wide_rows: materialize_wide_rows 결과

    Returns:
        store_id, store, total_units, total_sales, total_gm, gm_percentage,
        shortage_skus 컬럼의 DataFrame (입력 행 순서 기준 매장 순)
        - shortage_skus: difference < 0 인 SKU 수
    """
    columns = [
        "store_id",
        "store",
        "total_units",
        "total_sales",
        "total_gm",
        "gm_percentage",
        "shortage_skus",
    ]
    if wide_rows.empty:
        return pd.DataFrame(columns=columns)

    grouped = (
        wide_rows.assign(_shortage=(wide_rows["difference"] < 0).astype(int))
        .groupby(["store_id", "store"], sort=False)
        .agg(
            total_units=("total_units", "sum"),
            total_sales=("total_sales", "sum"),
            total_gm=("total_gm", "sum"),
            shortage_skus=("_shortage", "sum"),
        )
        .reset_index()
    )
    grouped["gm_percentage"] = gm_percentage_array(
        grouped["total_gm"].to_numpy(), grouped["total_sales"].to_numpy()
    )
    return grouped[columns]
