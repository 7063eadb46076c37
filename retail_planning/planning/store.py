"""
플래닝 데이터 저장소

모든 주차별 계획 지표의 단일 원천(single source of truth)입니다.
(store_id, sku_id, week_id) 복합 키 하나로 된 평면(flat) 딕셔너리에
판매 수량(units)과 그 셀의 금액 지표를 계산할 때 쓰는 price / cost만 저장하고,
금액 지표는 읽을 때마다 compute_metrics로 다시 계산합니다.

따라서 어떤 시점에 조회하더라도 파생 값이 오래된(stale) 상태일 수 없습니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import (
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Sequence,
    Tuple,
    Union,
)

from ..domain.exceptions import NotFoundError, ValidationError
from ..domain.models import MetricKey, UnitPatch, WeekMetric
from .metrics import compute_metrics, validate_units

logger = logging.getLogger(__name__)

PriceCost = Tuple[float, float]
PriceCostLookup = Union[Callable[[str], PriceCost], Mapping[str, PriceCost]]
PatchLike = Union[UnitPatch, Mapping[str, object]]


@dataclass(frozen=True)
class _Cell:
    """저장 단위: 입력 값(units)과 파생 계산에 쓰는 price / cost."""

    units: float
    price: float
    cost: float

    def metric(self) -> WeekMetric:
        return compute_metrics(self.units, self.price, self.cost)


def price_cost_resolver(lookup: PriceCostLookup) -> Callable[[str], PriceCost]:
    """dict 또는 함수 형태의 price/cost 조회를 함수 하나로 통일합니다."""

    if isinstance(lookup, Mapping):

        def resolve(sku_id: str) -> PriceCost:
            try:
                return lookup[sku_id]
            except KeyError:
                raise NotFoundError("SKU", sku_id) from None

        return resolve
    return lookup


class PlanningDataStore:
    """매장→SKU→주차 계획 지표 저장소.

    단일 작성자(single writer)를 가정하며 내부 잠금은 없습니다. 모든 연산은
    동기적으로 끝까지 실행되고, 실패한 연산은 상태를 바꾸지 않습니다.

    Examples:
        >>> store = PlanningDataStore()
        >>> store.set_units("1", "10", "2024-W01", 20, price=10, cost=4)
        WeekMetric(units=20.0, sales_dollars=200.0, gm_dollars=120.0, gm_percentage=60.0)
        >>> store.get("1", "10", "2024-W02")
        WeekMetric(units=0.0, sales_dollars=0.0, gm_dollars=0.0, gm_percentage=0.0)
    """

    def __init__(self) -> None:
        self._cells: Dict[MetricKey, _Cell] = {}

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def get(self, store_id: str, sku_id: str, week_id: str) -> WeekMetric:
        """저장된 지표를 반환합니다. 기록이 없으면 0 지표를 반환합니다."""
        cell = self._cells.get(MetricKey(str(store_id), str(sku_id), str(week_id)))
        if cell is None:
            return WeekMetric.zero()
        return cell.metric()

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, key: object) -> bool:
        return key in self._cells

    def keys(self) -> List[MetricKey]:
        return list(self._cells.keys())

    def entries(self) -> Iterator[Tuple[MetricKey, WeekMetric]]:
        for key, cell in self._cells.items():
            yield key, cell.metric()

    def iter_units(self) -> Iterator[Tuple[MetricKey, float]]:
        """(key, units) 순회. 금액 지표를 계산하지 않는 가벼운 조회입니다."""
        for key, cell in self._cells.items():
            yield key, cell.units

    def snapshot(self) -> Mapping[MetricKey, WeekMetric]:
        """현재 상태의 읽기 전용 사본 (파생 지표 포함)."""
        return MappingProxyType({key: cell.metric() for key, cell in self._cells.items()})

    def units_for(self, store_id: str, sku_id: str) -> Dict[str, float]:
        """매장/SKU 한 쌍의 week_id → units 매핑."""
        store_id, sku_id = str(store_id), str(sku_id)
        return {
            key.week_id: cell.units
            for key, cell in self._cells.items()
            if key.store_id == store_id and key.sku_id == sku_id
        }

    def stores_for_sku(self, sku_id: str) -> List[str]:
        """해당 SKU 기록이 있는 매장 ID 목록 (최초 기록 순)."""
        sku_id = str(sku_id)
        seen: Dict[str, None] = {}
        for key in self._cells:
            if key.sku_id == sku_id:
                seen.setdefault(key.store_id, None)
        return list(seen)

    # ------------------------------------------------------------------
    # 변경
    # ------------------------------------------------------------------
    def set_units(
        self,
        store_id: str,
        sku_id: str,
        week_id: str,
        units: float,
        price: float,
        cost: float,
    ) -> WeekMetric:
        """셀 하나의 판매 수량을 저장하고 파생 지표를 반환합니다.

        Raises:
            ValidationError: units가 음수이거나 유한하지 않은 경우 (상태 변경 없음)
        """
        key = MetricKey(str(store_id), str(sku_id), str(week_id))
        try:
            value = validate_units(units)
        except ValidationError as exc:
            logger.warning(f"Rejected units for {tuple(key)}: {units!r}")
            raise ValidationError(str(exc), key=tuple(key)) from exc

        cell = _Cell(units=value, price=float(price), cost=float(cost))
        self._cells[key] = cell
        logger.debug(f"Set units {tuple(key)} = {value}")
        return cell.metric()

    def bulk_apply(
        self,
        patches: Iterable[PatchLike],
        price_cost_lookup: PriceCostLookup,
    ) -> Mapping[MetricKey, WeekMetric]:
        """여러 셀의 판매 수량을 한 번에 적용합니다 (all-or-nothing).

        처리 규칙:
        1. 입력 순서대로 적용하며 키 기준 정렬은 하지 않습니다.
        2. 같은 키를 여러 번 지정하면 마지막 값이 남습니다 (last-write-wins).
        3. 모든 패치를 먼저 검증하고, 하나라도 실패하면 아무 것도 반영하지 않습니다.

        Args:
            patches: UnitPatch 또는 {storeId, skuId, weekId, units} 레코드 목록
            price_cost_lookup: sku_id → (price, cost) 함수 또는 매핑

        Returns:
            적용 후 전체 상태의 읽기 전용 사본

        Raises:
            ValidationError: 매장/SKU/주차 ID 누락 또는 잘못된 units (index, key 포함)
            NotFoundError: price/cost를 찾을 수 없는 SKU
        """
        resolve = price_cost_resolver(price_cost_lookup)
        pricing: Dict[str, PriceCost] = {}
        staged: Dict[MetricKey, _Cell] = {}

        # ========================================
        # 1단계: 검증 및 스테이징 (상태 변경 없음)
        # ========================================
        for index, raw in enumerate(patches):
            patch = raw if isinstance(raw, UnitPatch) else UnitPatch.from_record(raw)
            key = patch.key
            missing = patch.missing_fields()
            if missing:
                logger.warning(f"Bulk apply rejected at index {index}: missing {missing}")
                raise ValidationError(
                    f"{index}번째 패치에 필수 값이 없습니다: {', '.join(missing)}",
                    index=index,
                    key=tuple(key),
                )
            try:
                value = validate_units(patch.units)
            except ValidationError as exc:
                logger.warning(f"Bulk apply rejected at index {index} {tuple(key)}: {exc}")
                raise ValidationError(
                    f"{index}번째 패치 {tuple(key)}: {exc}",
                    index=index,
                    key=tuple(key),
                ) from exc

            if key.sku_id not in pricing:
                price, cost = resolve(key.sku_id)
                pricing[key.sku_id] = (float(price), float(cost))
            price, cost = pricing[key.sku_id]

            staged[key] = _Cell(units=value, price=price, cost=cost)

        # ========================================
        # 2단계: 커밋
        # ========================================
        self._cells.update(staged)
        logger.debug(f"Bulk applied {len(staged)} cells")
        return self.snapshot()

    def recompute_for_price_change(
        self, sku_id: str, new_price: float, new_cost: float
    ) -> int:
        """SKU 가격/원가 변경을 모든 매장의 해당 SKU 셀에 전파합니다.

        units는 그대로 두고 price / cost만 교체하므로, 이후 조회되는 금액
        지표는 새 가격 기준으로 계산됩니다.

        Returns:
            갱신된 셀 수
        """
        sku_id = str(sku_id)
        price, cost = float(new_price), float(new_cost)
        touched = 0
        for key, cell in self._cells.items():
            if key.sku_id == sku_id:
                self._cells[key] = _Cell(units=cell.units, price=price, cost=cost)
                touched += 1

        logger.debug(
            f"Price cascade for sku {sku_id}: {touched} cells "
            f"across {len(self.stores_for_sku(sku_id))} stores"
        )
        return touched

    def clear(self) -> None:
        """모든 기록을 비웁니다 (로스터 초기화 시 사용)."""
        self._cells.clear()
        logger.debug("Planning data cleared")

    def _restore(self, cells: Sequence[Tuple[MetricKey, float, float, float]]) -> None:
        """(key, units, price, cost) 목록으로 셀을 채웁니다. 로더 전용."""
        for key, units, price, cost in cells:
            self._cells[key] = _Cell(units=units, price=price, cost=cost)
