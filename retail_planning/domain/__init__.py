"""
도메인 계층 퍼블릭 API

도메인 계층의 주요 클래스를 재수출하여 일관된 퍼블릭 API를 제공합니다.
"""
from __future__ import annotations

from .exceptions import DomainError, IntegrityError, NotFoundError, ValidationError
from .models import (
    SKU,
    MetricKey,
    MonthGroup,
    Store,
    UnitPatch,
    WeekColumn,
    WeekMetric,
)
from .roster import Roster

__all__ = [
    # 예외
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "IntegrityError",
    # 모델
    "Store",
    "SKU",
    "WeekMetric",
    "MetricKey",
    "UnitPatch",
    "WeekColumn",
    "MonthGroup",
    # 로스터
    "Roster",
]
