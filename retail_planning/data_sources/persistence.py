"""
계획 데이터 직렬화

플래닝 데이터는 {storeId, skuId, weekId, units} 평면 레코드 목록으로만
저장합니다. 금액 지표는 저장하지 않고 로드할 때 현재 price/cost로 다시
계산하므로, 재시작 후에도 파생 값이 항상 일관됩니다.

로드 중 형식이 맞지 않는 레코드는 전체 로드를 중단하지 않고 버리며,
버린 레코드는 LoadResult.dropped에 IntegrityError로 기록합니다.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

import pandas as pd

from ..domain.exceptions import DomainError, IntegrityError, ValidationError
from ..domain.models import MetricKey
from ..planning.metrics import validate_units
from ..planning.store import PlanningDataStore, PriceCostLookup, price_cost_resolver
from ..planning.time_axis import parse_week_id

logger = logging.getLogger(__name__)

RECORD_FIELDS = ("storeId", "skuId", "weekId", "units")


@dataclass
class LoadResult:
    """
    로드 결과.

    Attributes:
        store: 복원된 플래닝 데이터 저장소
        loaded: 반영된 레코드 수
        dropped: 버려진 레코드별 IntegrityError (index, record 포함)
    """

    store: PlanningDataStore
    loaded: int = 0
    dropped: List[IntegrityError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.dropped

    @property
    def dropped_indices(self) -> List[int]:
        return [err.index for err in self.dropped if err.index is not None]


def dump_records(store: PlanningDataStore) -> List[Dict[str, Any]]:
    """저장소를 평면 레코드 목록으로 변환합니다 (키 순 정렬)."""
    records = [
        {"storeId": key.store_id, "skuId": key.sku_id, "weekId": key.week_id, "units": units}
        for key, units in sorted(store.iter_units(), key=lambda item: item[0])
    ]
    logger.debug(f"Dumped {len(records)} planning records")
    return records


def _parse_record(index: int, record: Any) -> Tuple[MetricKey, float]:
    """레코드 하나를 (키, units)로 해석합니다. 실패 시 IntegrityError."""
    if not isinstance(record, Mapping):
        raise IntegrityError(
            f"{index}번째 레코드가 객체 형식이 아닙니다: {record!r}", index=index
        )

    missing = [name for name in RECORD_FIELDS if record.get(name) in (None, "")]
    if missing:
        raise IntegrityError(
            f"{index}번째 레코드에 필수 필드가 없습니다: {', '.join(missing)}",
            index=index,
            record=record,
        )

    # 문자열 숫자("7")는 허용 (손으로 편집한 JSON), 나머지 규칙은 set_units와 동일
    raw_units = record["units"]
    try:
        if isinstance(raw_units, str):
            raw_units = float(raw_units.strip())
        units = validate_units(raw_units)
    except (ValueError, ValidationError) as exc:
        raise IntegrityError(
            f"{index}번째 레코드의 units가 올바르지 않습니다: {record['units']!r}",
            index=index,
            record=record,
        ) from exc

    try:
        parse_week_id(record["weekId"])
    except ValidationError as exc:
        raise IntegrityError(
            f"{index}번째 레코드의 weekId가 올바르지 않습니다: {exc}",
            index=index,
            record=record,
        ) from exc

    key = MetricKey(str(record["storeId"]), str(record["skuId"]), str(record["weekId"]))
    return key, units


def load_records(
    records: Iterable[Any],
    price_cost_lookup: PriceCostLookup,
) -> LoadResult:
    """
    평면 레코드 목록으로부터 플래닝 데이터 저장소를 복원합니다.

    각 레코드는 독립적으로 해석됩니다:
    1. 필수 필드 누락, 잘못된 units (set_units와 같은 규칙), 잘못된 weekId → 해당 레코드만 버림
    2. price/cost를 찾을 수 없는 SKU (로스터에서 삭제됨) → 해당 레코드만 버림
    3. 같은 키가 반복되면 나중 레코드가 남음

    Args:
        records: {storeId, skuId, weekId, units} 레코드 목록
        price_cost_lookup: sku_id → (price, cost) 함수 또는 매핑

    Returns:
        LoadResult (store, loaded, dropped)
    """
    resolve = price_cost_resolver(price_cost_lookup)
    result = LoadResult(store=PlanningDataStore())
    cells: Dict[MetricKey, Tuple[MetricKey, float, float, float]] = {}

    for index, record in enumerate(records):
        try:
            key, units = _parse_record(index, record)
            price, cost = resolve(key.sku_id)
        except IntegrityError as err:
            result.dropped.append(err)
            logger.warning(f"Dropped planning record: {err}")
            continue
        except DomainError as err:
            dropped = IntegrityError(
                f"{index}번째 레코드를 복원할 수 없습니다: {err}",
                index=index,
                record=record,
            )
            result.dropped.append(dropped)
            logger.warning(f"Dropped planning record: {dropped}")
            continue
        cells[key] = (key, units, float(price), float(cost))

    result.store._restore(list(cells.values()))
    result.loaded = len(cells)
    logger.info(
        f"Loaded {result.loaded} planning cells, dropped {len(result.dropped)} records"
    )
    return result


# ============================================================
# DataFrame / 파일 변환
# ============================================================

def records_to_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(list(records), columns=list(RECORD_FIELDS))


def frame_to_records(frame: pd.DataFrame) -> List[Dict[str, Any]]:
    """DataFrame을 레코드 목록으로 변환합니다. 결측값은 None으로 바뀝니다."""
    if frame.empty:
        return []
    clean = frame.astype(object).where(frame.notna(), None)
    return clean.to_dict("records")


def write_records_json(path: Union[str, Path], records: Iterable[Mapping[str, Any]]) -> None:
    Path(path).write_text(
        json.dumps(list(records), ensure_ascii=False, indent=2), encoding="utf-8"
    )


def read_records_json(path: Union[str, Path]) -> List[Any]:
    """JSON 파일에서 레코드 목록을 읽습니다.

    Raises:
        IntegrityError: 파일이 JSON 배열이 아닌 경우
    """
    payload = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(payload, list):
        raise IntegrityError(f"계획 데이터 파일은 JSON 배열이어야 합니다: {path}")
    return payload


def write_records_csv(path: Union[str, Path], records: Iterable[Mapping[str, Any]]) -> None:
    records_to_frame(records).to_csv(path, index=False)


def read_records_csv(path: Union[str, Path]) -> List[Dict[str, Any]]:
    # ID 컬럼은 문자열로 유지 ("01"이 1로 바뀌지 않도록)
    frame = pd.read_csv(
        path, dtype={"storeId": str, "skuId": str, "weekId": str}, keep_default_na=True
    )
    return frame_to_records(frame)
