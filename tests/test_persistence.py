"""
계획 데이터 직렬화 테스트

레코드 덤프/로드, 손상 레코드 처리, JSON/CSV 파일 변환을 검증합니다.
"""
from __future__ import annotations

import json

import pytest

from retail_planning.data_sources.persistence import (
    dump_records,
    load_records,
    read_records_csv,
    read_records_json,
    write_records_csv,
    write_records_json,
)
from retail_planning.domain.exceptions import IntegrityError
from retail_planning.planning.engine import PlanningEngine
from retail_planning.planning.metrics import compute_metrics


@pytest.fixture
def engine(roster):
    engine = PlanningEngine(roster, year=2024)
    engine.set_units("2", "3", "2024-W02", 12)
    engine.set_units("1", "1", "2024-W01", 20)
    engine.set_units("1", "1", "2024-W02", 2.5)
    return engine


# ============================================================
# 덤프 / 로드
# ============================================================

def test_dump_records_flat_and_sorted(engine):
    """units만 저장, 키 순 정렬"""
    records = dump_records(engine.store)

    assert records == [
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": 20.0},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W02", "units": 2.5},
        {"storeId": "2", "skuId": "3", "weekId": "2024-W02", "units": 12.0},
    ]


def test_load_records_rebuilds_metrics_from_current_pricing(engine):
    """로드 시 금액 지표는 현재 가격으로 재계산"""
    records = dump_records(engine.store)
    lookup = {"1": (30.0, 10.0), "3": (5.99, 2.50)}

    result = load_records(records, lookup)

    assert result.ok
    assert result.loaded == 3
    assert result.store.get("1", "1", "2024-W01") == compute_metrics(20, 30, 10)
    assert result.store.get("2", "3", "2024-W02") == compute_metrics(12, 5.99, 2.50)


def test_load_records_drops_malformed_records(roster):
    """손상된 레코드는 버리고 나머지는 로드"""
    records = [
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": 5},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W02"},
        "not a record",
        {"storeId": "1", "skuId": "1", "weekId": "2024-W03", "units": "many"},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W04", "units": -3},
        {"storeId": "1", "skuId": "404", "weekId": "2024-W05", "units": 1},
        {"storeId": "2", "skuId": "3", "weekId": "2024-W01", "units": "7"},
    ]

    result = load_records(records, roster.price_cost)

    assert not result.ok
    assert result.loaded == 2
    assert result.dropped_indices == [1, 2, 3, 4, 5]
    assert all(isinstance(err, IntegrityError) for err in result.dropped)
    assert result.store.get("2", "3", "2024-W01").units == 7


@pytest.mark.parametrize(
    "record",
    [
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": True},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": "nan"},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": " -2 "},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W60", "units": 1},
        {"storeId": "1", "skuId": "1", "weekId": "bad", "units": 1},
    ],
)
def test_load_records_applies_cell_input_rules(roster, record):
    """로드도 셀 입력과 같은 units/주차 규칙 (bool, NaN, 음수, 잘못된 주차 거부)"""
    records = [record, {"storeId": "1", "skuId": "2", "weekId": "2024-W01", "units": "7"}]

    result = load_records(records, roster.price_cost)

    assert result.dropped_indices == [0]
    assert isinstance(result.dropped[0], IntegrityError)
    assert result.loaded == 1
    assert result.store.get("1", "1", "2024-W01").units == 0
    assert result.store.get("1", "2", "2024-W01").units == 7


def test_load_records_duplicate_key_last_wins(roster):
    """같은 키가 반복되면 나중 레코드"""
    records = [
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": 5},
        {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": 8},
    ]

    result = load_records(records, roster.price_cost)

    assert result.loaded == 1
    assert result.store.get("1", "1", "2024-W01").units == 8


def test_loaded_store_attaches_to_engine(engine, roster):
    """로드한 저장소로 엔진을 다시 구성"""
    result = load_records(dump_records(engine.store), roster.price_cost)
    restored = PlanningEngine(roster, result.store, year=2024)

    assert restored.wide_rows().equals(engine.wide_rows())


# ============================================================
# 파일 변환
# ============================================================

def test_json_file_round_trip(engine, roster, tmp_path):
    """JSON 파일 저장 후 다시 로드"""
    path = tmp_path / "plan.json"
    write_records_json(path, dump_records(engine.store))

    records = read_records_json(path)
    result = load_records(records, roster.price_cost)

    assert records == dump_records(engine.store)
    assert result.loaded == 3


def test_read_records_json_requires_array(tmp_path):
    """JSON 최상위가 배열이 아니면 IntegrityError"""
    path = tmp_path / "plan.json"
    path.write_text(json.dumps({"storeId": "1"}), encoding="utf-8")

    with pytest.raises(IntegrityError):
        read_records_json(path)


def test_csv_file_keeps_string_ids(roster, tmp_path):
    """CSV 로드 시 ID 컬럼은 문자열 유지"""
    path = tmp_path / "plan.csv"
    write_records_csv(
        path,
        [
            {"storeId": "1", "skuId": "1", "weekId": "2024-W01", "units": 3},
            {"storeId": "01", "skuId": "1", "weekId": "2024-W01", "units": 4},
        ],
    )

    records = read_records_csv(path)
    result = load_records(records, roster.price_cost)

    assert [r["storeId"] for r in records] == ["1", "01"]
    assert result.loaded == 2
    assert result.store.get("01", "1", "2024-W01").units == 4


def test_csv_missing_units_dropped(roster, tmp_path):
    """CSV의 빈 units 셀은 해당 레코드만 버림"""
    path = tmp_path / "plan.csv"
    path.write_text(
        "storeId,skuId,weekId,units\n1,1,2024-W01,3\n1,1,2024-W02,\n",
        encoding="utf-8",
    )

    result = load_records(read_records_csv(path), roster.price_cost)

    assert result.loaded == 1
    assert result.dropped_indices == [1]
