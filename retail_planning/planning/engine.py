"""
플래닝 엔진

로스터(매장/SKU)와 플래닝 데이터 저장소를 하나로 묶어 표시/서비스 계층에
노출하는 진입점입니다. 모듈 전역 상태 없이 인스턴스 단위로 소유되므로
테스트나 세션마다 독립적인 엔진을 만들 수 있습니다.

로스터 관리 계층의 변경 알림은 다음과 같이 변환됩니다:
- on_price_or_cost_changed → recompute_for_price_change
- on_roster_reset → clear
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional

import pandas as pd

from ..core.config import CONFIG
from ..domain.models import MetricKey, MonthGroup, UnitPatch, WeekColumn, WeekMetric
from ..domain.roster import Roster
from .store import PatchLike, PlanningDataStore
from .rows import materialize_long_rows, materialize_wide_rows
from .time_axis import generate_weeks, group_by_month

logger = logging.getLogger(__name__)


class PlanningEngine:
    """로스터 기반 플래닝 엔진.

    Attributes:
        roster: 현재 로스터 (변경 시 새 인스턴스로 교체)
        store: 플래닝 데이터 저장소
        year: 주차 축 기준 ISO 연도
    """

    def __init__(
        self,
        roster: Optional[Roster] = None,
        store: Optional[PlanningDataStore] = None,
        *,
        year: Optional[int] = None,
    ) -> None:
        self.roster = roster if roster is not None else Roster()
        self.store = store if store is not None else PlanningDataStore()
        self.year = int(year) if year is not None else CONFIG.planning.default_year

    # ------------------------------------------------------------------
    # 주차 축
    # ------------------------------------------------------------------
    def weeks(self, year: Optional[int] = None) -> List[WeekColumn]:
        return generate_weeks(self.year if year is None else year)

    def month_groups(self, year: Optional[int] = None) -> List[MonthGroup]:
        return group_by_month(self.weeks(year))

    # ------------------------------------------------------------------
    # 셀 조회/변경
    # ------------------------------------------------------------------
    def get(self, store_id: str, sku_id: str, week_id: str) -> WeekMetric:
        return self.store.get(store_id, sku_id, week_id)

    def set_units(
        self, store_id: str, sku_id: str, week_id: str, units: float
    ) -> WeekMetric:
        """로스터의 현재 price/cost로 셀 하나를 갱신합니다.

        Raises:
            NotFoundError: 매장 또는 SKU가 로스터에 없는 경우 (상태 변경 없음)
            ValidationError: units가 올바르지 않은 경우 (상태 변경 없음)
        """
        self.roster.get_store(store_id)
        price, cost = self.roster.price_cost(sku_id)
        return self.store.set_units(store_id, sku_id, week_id, units, price, cost)

    def bulk_apply(self, patches: Iterable[PatchLike]) -> Mapping[MetricKey, WeekMetric]:
        """로스터 price/cost 기준 일괄 적용 (all-or-nothing).

        Raises:
            NotFoundError: 로스터에 없는 매장/SKU를 가리키는 패치 (상태 변경 없음)
            ValidationError: ID 누락 또는 잘못된 units (상태 변경 없음)
        """
        batch = [
            raw if isinstance(raw, UnitPatch) else UnitPatch.from_record(raw)
            for raw in patches
        ]
        for patch in batch:
            # ID 누락은 저장소 검증에서 index와 함께 보고
            if "store_id" not in patch.missing_fields():
                self.roster.get_store(patch.store_id)
        return self.store.bulk_apply(batch, self.roster.price_cost)

    # ------------------------------------------------------------------
    # 로스터 변경 알림
    # ------------------------------------------------------------------
    def on_price_or_cost_changed(
        self, sku_id: str, new_price: float, new_cost: float
    ) -> int:
        """SKU 가격/원가 변경을 로스터와 저장된 모든 셀에 반영합니다.

        Returns:
            재계산된 셀 수

        Raises:
            NotFoundError: SKU가 로스터에 없는 경우 (상태 변경 없음)
        """
        sku = self.roster.get_sku(sku_id)
        self.roster = self.roster.with_sku(sku.with_pricing(new_price, new_cost))
        touched = self.store.recompute_for_price_change(sku.id, new_price, new_cost)
        logger.info(
            f"Pricing updated for sku {sku.id}: price={new_price}, cost={new_cost}, "
            f"{touched} cells recomputed"
        )
        return touched

    def on_roster_reset(self, roster: Optional[Roster] = None) -> None:
        """로스터 초기화: 계획 데이터를 모두 비우고, 새 로스터가 있으면 교체합니다."""
        self.store.clear()
        if roster is not None:
            self.roster = roster
        logger.info("Roster reset, planning data cleared")

    def replace_roster(self, roster: Roster) -> None:
        """매장 순서 변경 등으로 로스터만 교체합니다. 계획 수량은 유지됩니다.

        가격/원가가 바뀐 SKU는 가격 전파를 함께 수행합니다.
        """
        for sku in roster.skus:
            previous = self.roster.find_sku(sku.id)
            if previous is not None and (previous.price, previous.cost) != (sku.price, sku.cost):
                self.store.recompute_for_price_change(sku.id, sku.price, sku.cost)
        self.roster = roster
        logger.debug(
            f"Roster replaced: {len(roster.stores)} stores, {len(roster.skus)} skus"
        )

    # ------------------------------------------------------------------
    # 행 변환
    # ------------------------------------------------------------------
    def wide_rows(self, year: Optional[int] = None) -> pd.DataFrame:
        return materialize_wide_rows(
            self.roster.stores, self.roster.skus, self.store, weeks=self.weeks(year)
        )

    def long_rows(
        self, year: Optional[int] = None, *, dense: Optional[bool] = None
    ) -> pd.DataFrame:
        return materialize_long_rows(
            self.roster.stores,
            self.roster.skus,
            self.store,
            weeks=self.weeks(year),
            dense=dense,
        )
