"""
플래닝 그리드 행 변환

플래닝 데이터 저장소와 매장/SKU 로스터를 표 형태의 행(DataFrame)으로
평탄화합니다. 두 가지 형태를 제공합니다:
- wide: (매장, SKU) 한 쌍이 한 행, 주차마다 units/sales/gm 컬럼 세트
- long: (매장, SKU, 주차) 하나가 한 행

행에는 숫자/문자열 값만 담기며, 포맷팅이나 색상 같은 표시 로직은
ui 계층에서 처리합니다.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.config import CONFIG
from ..domain.models import SKU, Store, WeekColumn
from .metrics import compute_metrics_frame, gm_percentage_array
from .store import PlanningDataStore
from .time_axis import WEEK_ID_PATTERN, generate_weeks, group_by_month, week_range_label

logger = logging.getLogger(__name__)


PAIR_COLUMNS = [
    "store_id",
    "store",
    "store_order",
    "sku_id",
    "sku",
    "category",
    "price",
    "cost",
    "current_stock",
]

STOCK_COLUMNS = ["current_stock", "required_stock", "difference"]

LONG_COLUMNS = [
    "store_id",
    "store",
    "store_order",
    "sku_id",
    "sku",
    "category",
    "price",
    "cost",
    "week_id",
    "week_start",
    "units",
    "sales_dollars",
    "gm_dollars",
    "gm_percentage",
    *STOCK_COLUMNS,
]


def week_metric_columns(week_id: str) -> Tuple[str, str, str]:
    """wide 행에서 주차 하나에 해당하는 (units, sales, gm) 컬럼명."""
    return f"units_{week_id}", f"sales_{week_id}", f"gm_{week_id}"


def _is_week_metric_column(column: str) -> bool:
    prefix, _, suffix = column.partition("_")
    return prefix in ("units", "sales", "gm") and bool(WEEK_ID_PATTERN.match(suffix))


def _resolve_weeks(
    weeks: Optional[Sequence[WeekColumn]], year: Optional[int]
) -> List[WeekColumn]:
    if weeks is not None:
        return list(weeks)
    return generate_weeks(year if year is not None else CONFIG.planning.default_year)


def _pairs_frame(stores: Sequence[Store], skus: Sequence[SKU]) -> pd.DataFrame:
    """정렬된 (매장, SKU) 쌍 목록.

    매장은 order 오름차순, 매장 내 SKU는 name 오름차순이며 둘 다 안정 정렬입니다.
    """
    records = []
    for store in sorted(stores, key=lambda s: s.order):
        for sku in sorted(skus, key=lambda k: k.name):
            records.append(
                {
                    "store_id": store.id,
                    "store": store.name,
                    "store_order": store.order,
                    "sku_id": sku.id,
                    "sku": sku.name,
                    "category": sku.category,
                    "price": float(sku.price),
                    "cost": float(sku.cost),
                    # 해당 매장에서 취급하지 않는 SKU는 현재 재고 0
                    "current_stock": int(sku.quantity) if sku.stocked_at(store.id) else 0,
                }
            )
    frame = pd.DataFrame(records, columns=PAIR_COLUMNS)
    frame["_pair_rank"] = np.arange(len(frame))
    return frame


def _weeks_frame(weeks: Sequence[WeekColumn]) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "week_id": [w.week_id for w in weeks],
            "week_start": pd.to_datetime([w.start_date for w in weeks]),
            "_week_rank": np.arange(len(weeks)),
        }
    )


def _units_frame(planning: PlanningDataStore, week_ids: Sequence[str]) -> pd.DataFrame:
    """주차 축에 포함된 기록 셀만 (store_id, sku_id, week_id, units)로 추출."""
    axis = set(week_ids)
    records = [
        (key.store_id, key.sku_id, key.week_id, units)
        for key, units in planning.iter_units()
        if key.week_id in axis
    ]
    frame = pd.DataFrame(records, columns=["store_id", "sku_id", "week_id", "units"])
    frame["units"] = frame["units"].astype(float)
    return frame


def _long_frame(
    stores: Sequence[Store],
    skus: Sequence[SKU],
    planning: PlanningDataStore,
    weeks: Sequence[WeekColumn],
    *,
    dense: bool,
) -> pd.DataFrame:
    pairs = _pairs_frame(stores, skus)
    week_frame = _weeks_frame(weeks)
    units = _units_frame(planning, week_frame["week_id"].tolist())

    if dense:
        # 모든 (매장, SKU) × 주차 조합, 기록이 없으면 units 0
        grid = pairs.merge(week_frame, how="cross")
        grid = grid.merge(units, on=["store_id", "sku_id", "week_id"], how="left")
        grid["units"] = grid["units"].fillna(0.0)
    else:
        # 0이 아닌 기록 셀만 (units 0은 기본 지표와 같음)
        units = units[units["units"] > 0]
        grid = pairs.merge(units, on=["store_id", "sku_id"], how="inner")
        grid = grid.merge(week_frame, on="week_id", how="inner")

    grid = grid.sort_values(["_pair_rank", "_week_rank"], kind="stable")
    grid = compute_metrics_frame(grid)
    grid["required_stock"] = grid["units"]
    grid["difference"] = grid["required_stock"] - grid["current_stock"]
    return grid.reset_index(drop=True)


def materialize_long_rows(
    stores: Sequence[Store],
    skus: Sequence[SKU],
    planning: PlanningDataStore,
    *,
    weeks: Optional[Sequence[WeekColumn]] = None,
    year: Optional[int] = None,
    dense: Optional[bool] = None,
) -> pd.DataFrame:
    """(매장, SKU, 주차) 단위 long 형태 행을 생성합니다.

    Args:
        stores: 매장 목록
        skus: SKU 목록
        planning: 플래닝 데이터 저장소 (읽기 전용으로 사용)
        weeks: 주차 축 (None이면 year로 생성)
        year: weeks가 없을 때 사용할 ISO 연도 (기본값: CONFIG.planning.default_year)
        dense: True면 모든 주차에 대해 행 생성, False면 units가 0보다 큰 기록 셀만
            (기본값: CONFIG.planning.dense_long_rows)

    Returns:
        LONG_COLUMNS 스키마의 DataFrame
        - 정렬: 매장 order → SKU name → 주차 순
        - sales/gm 지표는 SKU의 현재 price/cost로 계산
        - required_stock: 해당 주차 계획 수량
        - difference = required_stock - current_stock
    """
    axis = _resolve_weeks(weeks, year)
    use_dense = CONFIG.planning.dense_long_rows if dense is None else bool(dense)

    grid = _long_frame(stores, skus, planning, axis, dense=use_dense)
    logger.debug(f"Materialized {len(grid)} long rows (dense={use_dense})")
    return grid[LONG_COLUMNS]


def materialize_wide_rows(
    stores: Sequence[Store],
    skus: Sequence[SKU],
    planning: PlanningDataStore,
    *,
    weeks: Optional[Sequence[WeekColumn]] = None,
    year: Optional[int] = None,
) -> pd.DataFrame:
    """(매장, SKU) 단위 wide 형태 행을 생성합니다.

    행 수는 항상 len(stores) * len(skus)이며, 주차마다
    units_{week_id}, sales_{week_id}, gm_{week_id} 컬럼이 순서대로 붙습니다.

    Returns:
        DataFrame
        - 정렬: 매장 order 오름차순 → SKU name 오름차순
        - 합계 컬럼: total_units, total_sales, total_gm, gm_percentage
        - 재고 컬럼: current_stock, required_stock(=total_units), difference
    """
    axis = _resolve_weeks(weeks, year)
    pairs = _pairs_frame(stores, skus)
    n_pairs, n_weeks = len(pairs), len(axis)

    if n_pairs and n_weeks:
        # dense long 행은 (쌍, 주차) 순으로 정렬되어 있으므로 그대로 재배열
        grid = _long_frame(stores, skus, planning, axis, dense=True)
        assert len(grid) == n_pairs * n_weeks
        units = grid["units"].to_numpy().reshape(n_pairs, n_weeks)
        sales = grid["sales_dollars"].to_numpy().reshape(n_pairs, n_weeks)
        gm = grid["gm_dollars"].to_numpy().reshape(n_pairs, n_weeks)
    else:
        units = sales = gm = np.zeros((n_pairs, n_weeks))

    week_data: Dict[str, np.ndarray] = {}
    for j, week in enumerate(axis):
        units_col, sales_col, gm_col = week_metric_columns(week.week_id)
        week_data[units_col] = units[:, j]
        week_data[sales_col] = sales[:, j]
        week_data[gm_col] = gm[:, j]

    total_units = units.sum(axis=1)
    total_sales = sales.sum(axis=1)
    total_gm = gm.sum(axis=1)

    out = pd.concat(
        [
            pairs.drop(columns=["_pair_rank"]).reset_index(drop=True),
            pd.DataFrame(week_data, index=pairs.index).reset_index(drop=True),
        ],
        axis=1,
    )
    out["total_units"] = total_units
    out["total_sales"] = total_sales
    out["total_gm"] = total_gm
    out["gm_percentage"] = gm_percentage_array(total_gm, total_sales)
    out["required_stock"] = total_units
    out["difference"] = out["required_stock"] - out["current_stock"]

    logger.debug(f"Materialized {n_pairs} wide rows over {n_weeks} weeks")
    return out


def wide_column_groups(
    weeks: Sequence[WeekColumn],
    label_format: Optional[str] = None,
) -> List[dict]:
    """wide 행의 주차 컬럼을 월 → 주차 → 지표 컬럼 계층으로 묶습니다.

    그리드 위젯의 컬럼 그룹 정의에 그대로 쓸 수 있는 구조입니다.

    Returns:
        [{"label": "January 2024", "weeks": [
            {"week_id": "2024-W01", "label": "Jan 1 - Jan 7",
             "columns": ["units_2024-W01", "sales_2024-W01", "gm_2024-W01"]}, ...]}, ...]
    """
    groups = []
    for month in group_by_month(weeks, label_format):
        groups.append(
            {
                "label": month.label,
                "weeks": [
                    {
                        "week_id": week.week_id,
                        "label": week_range_label(week),
                        "columns": list(week_metric_columns(week.week_id)),
                    }
                    for week in month.weeks
                ],
            }
        )
    return groups


def filter_rows(
    rows: pd.DataFrame,
    *,
    store: Optional[str] = None,
    category: Optional[str] = None,
    week: Optional[str] = None,
) -> pd.DataFrame:
    """그리드 필터 (매장, 카테고리, 주차).

    - store: 매장 ID 또는 매장명
    - category: SKU 카테고리
    - week: long 행은 해당 주차 행만, wide 행은 해당 주차 컬럼만 남김
    """
    out = rows
    if store:
        out = out[(out["store_id"] == store) | (out["store"] == store)]
    if category:
        out = out[out["category"] == category]
    if week:
        if "week_id" in out.columns:
            out = out[out["week_id"] == week]
        else:
            week_cols = set(week_metric_columns(week))
            keep = [
                col
                for col in out.columns
                if col in week_cols or not _is_week_metric_column(col)
            ]
            out = out[keep]
    return out.reset_index(drop=True)
