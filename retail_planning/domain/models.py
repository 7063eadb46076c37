"""
도메인 모델: 플래닝 그리드의 핵심 데이터 구조

매장(Store), SKU, 주차별 지표(WeekMetric)와 주차 축(WeekColumn, MonthGroup)을
정의합니다. 모든 모델은 불변(frozen) 데이터클래스로 구현되어 엔진과 표시 계층
사이에서 안전하게 전달됩니다.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, NamedTuple, Tuple

import pandas as pd


def _pick(record: Mapping[str, Any], *names: str, default: Any = None) -> Any:
    """레코드에서 후보 키 중 처음 존재하는 값을 반환합니다."""

    for name in names:
        if name in record and record[name] is not None:
            return record[name]
    return default


@dataclass(frozen=True)
class Store:
    """
    매장 정보.

    로스터 관리 계층이 소유하며, 엔진 입장에서는 행 정렬에 쓰이는
    order 외에는 변경되지 않습니다.

    Attributes:
        id: 매장 ID
        name: 매장명
        order: 표시 순위 (오름차순 정렬)
        status: "active" | "inactive"
    """

    id: str
    name: str
    order: int = 0
    status: str = "active"

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Store":
        """
        dict 레코드로부터 매장을 생성합니다.

        로스터 API의 camelCase 키와 snake_case 키를 모두 허용합니다.

        Raises:
            KeyError: id 값이 없을 경우
        """
        ident = _pick(record, "id", "store_id", "storeId")
        if ident is None:
            raise KeyError("store record must include an id")
        return cls(
            id=str(ident),
            name=str(_pick(record, "name", "store", default=ident)),
            order=int(_pick(record, "order", default=0)),
            status=str(_pick(record, "status", default="active")),
        )


@dataclass(frozen=True)
class SKU:
    """
    SKU (판매 단위 상품) 정보.

    price / cost는 금액 지표 계산의 기준 값입니다. 엔진은 금액 필드를
    캐시하지 않고 항상 현재 price / cost와 저장된 units로부터 다시 계산합니다.

    Attributes:
        id: SKU ID
        name: 상품명 (매장 내 행 정렬 기준)
        category: 카테고리
        price: 판매가
        cost: 원가
        store_id: 취급 매장 ID (빈 문자열이면 전 매장 공통)
        quantity: 현재 재고 수량
        status: "active" | "inactive"
    """

    id: str
    name: str
    category: str = ""
    price: float = 0.0
    cost: float = 0.0
    store_id: str = ""
    quantity: int = 0
    status: str = "active"

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "SKU":
        """
        dict 레코드로부터 SKU를 생성합니다.

        Raises:
            KeyError: id 값이 없을 경우
        """
        ident = _pick(record, "id", "sku_id", "skuId")
        if ident is None:
            raise KeyError("sku record must include an id")
        return cls(
            id=str(ident),
            name=str(_pick(record, "name", "sku", default=ident)),
            category=str(_pick(record, "category", default="")),
            price=float(_pick(record, "price", default=0.0)),
            cost=float(_pick(record, "cost", default=0.0)),
            store_id=str(_pick(record, "store_id", "storeId", default="")),
            quantity=int(_pick(record, "quantity", default=0)),
            status=str(_pick(record, "status", default="active")),
        )

    def with_pricing(self, price: float, cost: float) -> "SKU":
        """price / cost만 바꾼 사본을 반환합니다."""
        return replace(self, price=float(price), cost=float(cost))

    def stocked_at(self, store_id: str) -> bool:
        """해당 매장에서 취급하는 SKU인지 여부."""
        return not self.store_id or self.store_id == store_id


@dataclass(frozen=True)
class WeekMetric:
    """
    매장/SKU/주차 하나의 계획 지표.

    units만 입력 값이고 나머지는 읽을 때마다 계산되는 파생 값입니다.
    항상 다음 관계를 만족합니다:
    - sales_dollars = units * price
    - gm_dollars = sales_dollars - units * cost
    - gm_percentage = gm_dollars / sales_dollars * 100 (sales_dollars > 0), 아니면 0
    """

    units: float
    sales_dollars: float
    gm_dollars: float
    gm_percentage: float

    @classmethod
    def zero(cls) -> "WeekMetric":
        """기록이 없는 키에 대한 기본 지표."""
        return cls(units=0.0, sales_dollars=0.0, gm_dollars=0.0, gm_percentage=0.0)

    def to_dict(self) -> dict:
        return {
            "units": self.units,
            "sales_dollars": self.sales_dollars,
            "gm_dollars": self.gm_dollars,
            "gm_percentage": self.gm_percentage,
        }


class MetricKey(NamedTuple):
    """플래닝 데이터의 단일 복합 키."""

    store_id: str
    sku_id: str
    week_id: str


@dataclass(frozen=True)
class UnitPatch:
    """일괄 적용용 판매 수량 변경 한 건."""

    store_id: str
    sku_id: str
    week_id: str
    units: Any

    @property
    def key(self) -> MetricKey:
        return MetricKey(str(self.store_id), str(self.sku_id), str(self.week_id))

    def missing_fields(self) -> Tuple[str, ...]:
        """비어 있는 ID 필드 이름 (store_id, sku_id, week_id 중)."""
        values = {
            "store_id": self.store_id,
            "sku_id": self.sku_id,
            "week_id": self.week_id,
        }
        return tuple(
            name for name, value in values.items() if value is None or not str(value).strip()
        )

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UnitPatch":
        return cls(
            store_id=str(_pick(record, "store_id", "storeId", default="")),
            sku_id=str(_pick(record, "sku_id", "skuId", default="")),
            week_id=str(_pick(record, "week_id", "weekId", default="")),
            units=_pick(record, "units"),
        )


@dataclass(frozen=True)
class WeekColumn:
    """
    주차 축의 한 칸.

    Attributes:
        week_id: ISO 주차 ID ("2024-W01")
        start_date: 주 시작일 (월요일)
    """

    week_id: str
    start_date: pd.Timestamp

    @property
    def end_date(self) -> pd.Timestamp:
        return self.start_date + pd.Timedelta(days=6)

    @property
    def iso_year(self) -> int:
        return int(self.week_id.split("-W")[0])

    @property
    def iso_week(self) -> int:
        return int(self.week_id.split("-W")[1])


@dataclass(frozen=True)
class MonthGroup:
    """
    같은 달에 시작하는 연속된 주차 묶음 (그리드 상단 컬럼 그룹).

    Attributes:
        label: 표시용 라벨 (예: "January 2024")
        year: 달력 연도
        month: 달력 월 (1-12)
        weeks: 이 그룹에 속한 주차들 (시간 순)
    """

    label: str
    year: int
    month: int
    weeks: Tuple[WeekColumn, ...]

    @property
    def week_ids(self) -> Tuple[str, ...]:
        return tuple(week.week_id for week in self.weeks)
