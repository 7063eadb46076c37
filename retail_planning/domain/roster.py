"""
매장/SKU 로스터

로스터 관리 계층(CRUD 폼, 저장소)이 넘겨주는 매장 목록과 SKU 목록을
엔진이 사용하는 불변 뷰로 감쌉니다. 엔진은 로스터를 직접 수정하지 않고,
변경이 생기면 새 Roster 인스턴스로 교체합니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

import pandas as pd

from .exceptions import NotFoundError
from .models import SKU, Store

logger = logging.getLogger(__name__)


STORE_COLUMN_ALIASES = {
    "storeId": "id",
    "store_id": "id",
    "매장ID": "id",
    "매장명": "name",
    "순서": "order",
}

SKU_COLUMN_ALIASES = {
    "skuId": "id",
    "sku_id": "id",
    "storeId": "store_id",
    "상품명": "name",
    "카테고리": "category",
    "판매가": "price",
    "원가": "cost",
    "재고": "quantity",
}


@dataclass(frozen=True)
class Roster:
    """
    매장과 SKU 목록의 불변 스냅샷.

    Attributes:
        stores: 매장 목록 (입력 순서 유지)
        skus: SKU 목록 (입력 순서 유지)
    """

    stores: Tuple[Store, ...] = ()
    skus: Tuple[SKU, ...] = ()
    _store_index: Dict[str, Store] = field(init=False, repr=False, compare=False)
    _sku_index: Dict[str, SKU] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "stores", tuple(self.stores))
        object.__setattr__(self, "skus", tuple(self.skus))
        object.__setattr__(self, "_store_index", {s.id: s for s in self.stores})
        object.__setattr__(self, "_sku_index", {s.id: s for s in self.skus})

    @classmethod
    def from_records(
        cls, stores: Iterable[dict], skus: Iterable[dict]
    ) -> "Roster":
        return cls(
            stores=tuple(Store.from_record(r) for r in stores),
            skus=tuple(SKU.from_record(r) for r in skus),
        )

    @classmethod
    def from_frames(cls, stores: pd.DataFrame, skus: pd.DataFrame) -> "Roster":
        """
        로스터 관리 계층이 내보낸 DataFrame으로부터 로스터를 생성합니다.

        다양한 원본 컬럼명을 표준 스키마로 변환하고, id가 없는 행은 버립니다.

        Args:
            stores: 매장 DataFrame (id, name, order 컬럼 또는 그 별칭)
            skus: SKU DataFrame (id, name, category, price, cost, store_id, quantity)

        Returns:
            정규화된 Roster
        """
        store_df = stores.rename(columns=STORE_COLUMN_ALIASES).copy()
        sku_df = skus.rename(columns=SKU_COLUMN_ALIASES).copy()

        # ========================================
        # 필수 컬럼 정리
        # ========================================
        store_df = store_df.dropna(subset=["id"]) if "id" in store_df else store_df.iloc[0:0]
        sku_df = sku_df.dropna(subset=["id"]) if "id" in sku_df else sku_df.iloc[0:0]

        if "order" in store_df.columns:
            store_df["order"] = (
                pd.to_numeric(store_df["order"], errors="coerce").fillna(0).astype(int)
            )
        for col in ("price", "cost"):
            if col in sku_df.columns:
                sku_df[col] = pd.to_numeric(sku_df[col], errors="coerce").fillna(0.0)
        if "quantity" in sku_df.columns:
            sku_df["quantity"] = (
                pd.to_numeric(sku_df["quantity"], errors="coerce").fillna(0).astype(int)
            )

        store_records = store_df.astype(object).where(store_df.notna(), None).to_dict("records")
        sku_records = sku_df.astype(object).where(sku_df.notna(), None).to_dict("records")
        roster = cls.from_records(store_records, sku_records)
        logger.debug(
            f"Roster loaded from frames: {len(roster.stores)} stores, {len(roster.skus)} skus"
        )
        return roster

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def get_store(self, store_id: str) -> Store:
        store = self._store_index.get(str(store_id))
        if store is None:
            raise NotFoundError("매장", str(store_id))
        return store

    def get_sku(self, sku_id: str) -> SKU:
        sku = self._sku_index.get(str(sku_id))
        if sku is None:
            raise NotFoundError("SKU", str(sku_id))
        return sku

    def find_sku(self, sku_id: str) -> Optional[SKU]:
        return self._sku_index.get(str(sku_id))

    def has_store(self, store_id: str) -> bool:
        return str(store_id) in self._store_index

    def price_cost(self, sku_id: str) -> Tuple[float, float]:
        """SKU의 현재 (price, cost)를 반환합니다. 없으면 NotFoundError."""
        sku = self.get_sku(sku_id)
        return sku.price, sku.cost

    def sorted_stores(self) -> list:
        """order 오름차순 (동순위는 입력 순서 유지)."""
        return sorted(self.stores, key=lambda s: s.order)

    def sorted_skus(self) -> list:
        """name 오름차순 (동명은 입력 순서 유지)."""
        return sorted(self.skus, key=lambda s: s.name)

    # ------------------------------------------------------------------
    # 변경 (새 인스턴스 반환)
    # ------------------------------------------------------------------
    def with_sku(self, sku: SKU) -> "Roster":
        """SKU 하나를 교체한 새 로스터를 반환합니다."""
        if sku.id not in self._sku_index:
            raise NotFoundError("SKU", sku.id)
        skus = tuple(sku if s.id == sku.id else s for s in self.skus)
        return Roster(stores=self.stores, skus=skus)

    def with_store(self, store: Store) -> "Roster":
        """매장 하나를 교체한 새 로스터를 반환합니다."""
        if store.id not in self._store_index:
            raise NotFoundError("매장", store.id)
        stores = tuple(store if s.id == store.id else s for s in self.stores)
        return Roster(stores=stores, skus=self.skus)
