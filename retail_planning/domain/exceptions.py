"""
도메인 계층 예외 정의

플래닝 엔진에서 발생할 수 있는 모든 예외를 정의합니다.
UI 계층은 이 예외들을 잡아서 사용자 친화적인 에러 메시지로 변환합니다.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple


class DomainError(Exception):
    """
    도메인 계층의 기본 예외 클래스.

    모든 도메인 예외는 이 클래스를 상속합니다.
    """

    pass


class ValidationError(DomainError):
    """
    입력 값 검증 실패 시 발생하는 예외.

    음수이거나 유한하지 않은 판매 수량 등 계획 데이터가 규칙을 만족하지
    않을 때 발생합니다. 일괄 적용에서는 실패한 패치의 위치(index)와
    대상 키(key)를 함께 전달하여 호출자가 수정 후 재시도할 수 있게 합니다.

    Attributes:
        index: 일괄 적용 배치 내 패치 위치 (단건 호출이면 None)
        key: 문제가 된 (store_id, sku_id, week_id) 키
    """

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        key: Optional[Tuple[str, str, str]] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.key = key


class NotFoundError(DomainError):
    """
    현재 로스터에 없는 매장/SKU를 참조할 때 발생하는 예외.

    치명적이지 않으며, 상태 변경 없이 호출자에게 전달됩니다.
    """

    def __init__(self, kind: str, ident: str) -> None:
        super().__init__(f"{kind} '{ident}'을(를) 로스터에서 찾을 수 없습니다.")
        self.kind = kind
        self.ident = ident


class IntegrityError(DomainError):
    """
    저장된 계획 데이터가 기대한 레코드 형태로 해석되지 않을 때 발생하는 예외.

    로드 과정에서는 전체 로드를 중단하지 않고 해당 레코드만 버린 뒤
    LoadResult.dropped에 기록합니다.
    """

    def __init__(
        self,
        message: str,
        *,
        index: Optional[int] = None,
        record: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.index = index
        self.record = record
