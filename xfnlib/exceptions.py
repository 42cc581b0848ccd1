"""
xfnlib/exceptions.py - 통합 예외 계층 구조

패키지 전체에서 사용되는 예외 베이스 클래스를 정의합니다.
모든 예외는 원인 예외(cause)와 식별 컨텍스트(details)를 함께 보관합니다.

예외 계층 구조:
    XfnError (베이스)
    ├── AuthError (인증 관련) - xfnlib.auth.types에서 정의
    │   ├── ConfigNotFound
    │   ├── InvalidProviderConfig
    │   │   └── UnsupportedCredentialSource
    │   ├── SecretNotFound / MissingSecretKey
    │   ├── MalformedCredentialFile / MissingDefaultSection
    │   ├── AssumeRoleFailed
    │   ├── ConfigAssemblyFailed
    │   └── ClusterAccessError
    └── CompositeError (리소스 변환) - xfnlib.composite에서 정의
        ├── MissingMetadata
        ├── InvalidMetadata
        └── InvalidSpec

Usage:
    from xfnlib.exceptions import XfnError

    try:
        cfg, services = resolve_config("us-east-1", "default")
    except XfnError as e:
        logger.error("리졸브 실패: %s", e.to_dict())
"""

from __future__ import annotations

from typing import Any

# =============================================================================
# 베이스 예외
# =============================================================================


class XfnError(Exception):
    """xfnlib 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보 (레코드 이름, 시크릿 위치, 역할 ARN 등)
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def get_error_code(error: BaseException) -> str | None:
    """AWS API 오류 코드 추출

    botocore ClientError의 응답에서 오류 코드를 꺼냅니다.

    Args:
        error: 확인할 예외

    Returns:
        오류 코드 (예: "AccessDenied") 또는 None
    """
    response = getattr(error, "response", None)
    if not isinstance(response, dict):
        return None
    return response.get("Error", {}).get("Code") or None


def is_access_denied(error: BaseException) -> bool:
    """액세스 거부 오류인지 확인

    Args:
        error: 확인할 예외

    Returns:
        액세스 거부 오류이면 True
    """
    return get_error_code(error) in (
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
    )
