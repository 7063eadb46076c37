"""데모용 샘플 로스터 (매장 3곳, SKU 5개)."""

from __future__ import annotations

from typing import List, Optional

from ..domain.models import UnitPatch, WeekColumn
from ..domain.roster import Roster

SAMPLE_STORES = [
    {"id": "1", "name": "Main Street Store", "order": 0, "status": "active"},
    {"id": "2", "name": "Express Hub", "order": 1, "status": "active"},
    {"id": "3", "name": "Distribution Center", "order": 2, "status": "active"},
]

SAMPLE_SKUS = [
    {
        "id": "1",
        "name": "Premium Coffee",
        "category": "Beverages",
        "price": 19.99,
        "cost": 12.50,
        "storeId": "1",
        "quantity": 100,
    },
    {
        "id": "2",
        "name": "Organic Tea",
        "category": "Beverages",
        "price": 14.99,
        "cost": 8.75,
        "storeId": "1",
        "quantity": 150,
    },
    {
        "id": "3",
        "name": "Fresh Bread",
        "category": "Bakery",
        "price": 5.99,
        "cost": 2.50,
        "storeId": "2",
        "quantity": 50,
    },
    {
        "id": "4",
        "name": "Chocolate Bar",
        "category": "Confectionery",
        "price": 4.99,
        "cost": 2.25,
        "storeId": "2",
        "quantity": 200,
    },
    {
        "id": "5",
        "name": "Fresh Milk",
        "category": "Dairy",
        "price": 3.99,
        "cost": 2.00,
        "storeId": "3",
        "quantity": 75,
    },
]


def sample_roster() -> Roster:
    return Roster.from_records(SAMPLE_STORES, SAMPLE_SKUS)


def sample_patches(
    weeks: List[WeekColumn], *, roster: Optional[Roster] = None, base_units: int = 10
) -> List[UnitPatch]:
    """각 SKU의 취급 매장에 대해 처음 몇 주의 계획 수량 예시를 만듭니다.

    난수 대신 SKU 순번과 주차 순번으로 값을 정해 항상 같은 결과를 냅니다.
    """
    roster = roster or sample_roster()
    patches = []
    for sku_rank, sku in enumerate(roster.skus):
        if not sku.store_id:
            continue
        for week_rank, week in enumerate(weeks[:4]):
            patches.append(
                UnitPatch(
                    store_id=sku.store_id,
                    sku_id=sku.id,
                    week_id=week.week_id,
                    units=base_units + 5 * sku_rank + week_rank,
                )
            )
    return patches
