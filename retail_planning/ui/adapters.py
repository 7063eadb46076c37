"""
도메인 예외 → UI 에러 메시지 어댑터

플래닝 엔진에서 발생하는 예외를 잡아서 Streamlit 사용자 친화적인
에러 메시지로 변환합니다. 엔진은 Streamlit에 의존하지 않습니다.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator

import streamlit as st

from retail_planning.domain.exceptions import (
    IntegrityError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


@contextmanager
def handle_domain_errors() -> Generator[None, None, None]:
    """
    도메인 예외를 잡아서 Streamlit 에러 메시지로 변환하는 컨텍스트 매니저.

    Examples:
        >>> with handle_domain_errors():
        ...     engine.bulk_apply(patches)

    Notes:
        - ValidationError: 입력 값 오류 (배치 위치 포함), 아무 것도 반영되지 않음
        - NotFoundError: 로스터에 없는 매장/SKU
        - IntegrityError: 저장된 계획 데이터 손상
    """
    try:
        yield

    except ValidationError as e:
        # 검증 실패: 배치 위치가 있으면 함께 표시
        where = f" (행 {e.index + 1})" if e.index is not None else ""
        st.error(f"❌ 입력 값 오류{where}: {str(e)}")

    except NotFoundError as e:
        # 로스터 불일치: 노란색 경고 메시지
        st.warning(f"⚠️ {str(e)}")

    except IntegrityError as e:
        st.error(f"❌ 계획 데이터 손상: {str(e)}")

    except Exception as e:
        # 예상치 못한 예외: 상세 정보와 함께 표시
        logger.exception("Unexpected error in planning page")
        st.error(f"❌ 예상치 못한 오류가 발생했습니다: {type(e).__name__}: {str(e)}")
        st.exception(e)
