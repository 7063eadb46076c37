import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def pytest_configure(config):
    """pytest 초기화 시점에 실행되어 테스트 수집 전에 환경을 준비합니다.

    이 훅은 테스트 모듈이 import되기 전에 실행되므로,
    config.py가 로드될 때 PLANNING_YEAR가 이미 설정되어 있습니다.
    """
    # 기본 계획 연도를 고정하여 실행 날짜와 무관하게 결과가 같도록 함
    os.environ.setdefault("PLANNING_YEAR", "2024")


@pytest.fixture
def roster():
    """테스트용 샘플 로스터 (매장 3곳, SKU 5개)"""
    from retail_planning.data_sources.sample import sample_roster

    return sample_roster()


@pytest.fixture
def planning_store():
    """빈 플래닝 데이터 저장소"""
    from retail_planning.planning.store import PlanningDataStore

    return PlanningDataStore()
