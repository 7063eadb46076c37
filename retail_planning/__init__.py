"""
Retail Planning 패키지

매장/SKU 로스터와 주차별 판매 계획을 관리하는 플래닝 그리드 엔진입니다.
주요 구성:
- planning: 지표 계산, 주차 축, 플래닝 데이터 저장소, 행 변환
- domain: 로스터 모델과 도메인 예외
- data_sources: 계획 데이터 직렬화 및 샘플 로스터
- ui: Streamlit 표시 계층 헬퍼
"""

from __future__ import annotations

__version__ = "1.0.0"
