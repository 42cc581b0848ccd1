# xfnlib/composite/errors.py
"""컴포지트 리소스 변환 에러"""

from __future__ import annotations

from xfnlib.exceptions import XfnError


class CompositeError(XfnError):
    """리소스 변환 관련 기본 에러 클래스"""


class MissingMetadata(CompositeError):
    """객체에 metadata가 없음"""

    def __init__(self, message: str = "object does not contain metadata", cause: Exception | None = None):
        super().__init__(message, cause)


class InvalidMetadata(CompositeError):
    """metadata가 비어있거나 객체가 아님"""

    def __init__(self, message: str = "invalid or empty metadata object", cause: Exception | None = None):
        super().__init__(message, cause)


class InvalidSpec(CompositeError):
    """spec이 비어있거나 객체가 아님"""

    def __init__(self, message: str = "invalid or empty object spec", cause: Exception | None = None):
        super().__init__(message, cause)
