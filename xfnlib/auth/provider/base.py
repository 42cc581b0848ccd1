# xfnlib/auth/provider/base.py
"""
STS 기반 Provider 공통 구현

BaseSTSProvider는 AssumeRole 계열 Provider의 공통 로직을 제공합니다:
- STS 응답을 Credentials로 변환
- botocore 예외를 AssumeRoleFailed로 래핑
- 역할 세션 이름 생성

생성 시점에는 네트워크 호출을 하지 않고, fetch() 시점에만 STS를 호출합니다.
"""

from __future__ import annotations

import logging
import time
from abc import abstractmethod
from datetime import datetime, timezone
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ..types import AssumeRoleFailed, CredentialProvider, Credentials

logger = logging.getLogger(__name__)


def generate_session_name(prefix: str = "xfnlib-session") -> str:
    """역할 세션 이름 생성 (예: xfnlib-session-1700000000)"""
    return f"{prefix}-{int(time.time())}"


def _parse_expiration(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str):
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValueError(f"unexpected Expiration value: {value!r}")


def credentials_from_response(response: dict[str, Any]) -> Credentials:
    """STS AssumeRole* 응답을 Credentials로 변환

    Args:
        response: assume_role / assume_role_with_web_identity 응답

    Returns:
        만료 시간을 가진 Credentials

    Raises:
        KeyError / ValueError: 응답 형식이 잘못된 경우
    """
    creds = response["Credentials"]
    return Credentials(
        access_key_id=creds["AccessKeyId"],
        secret_access_key=creds["SecretAccessKey"],
        session_token=creds.get("SessionToken", ""),
        expires_at=_parse_expiration(creds["Expiration"]),
    )


class BaseSTSProvider(CredentialProvider):
    """STS 역할 위임 Provider 기본 클래스

    하위 클래스는 _call_sts()만 구현하면 됩니다.

    Attributes:
        role_arn: 위임 대상 역할 ARN
        role_session_name: 역할 세션 이름
    """

    def __init__(
        self,
        client: Any,
        role_arn: str,
        role_session_name: str | None = None,
        duration_seconds: int | None = None,
    ):
        """BaseSTSProvider 초기화

        Args:
            client: boto3 STS client
            role_arn: 위임 대상 역할 ARN
            role_session_name: 역할 세션 이름 (None이면 자동 생성)
            duration_seconds: 자격증명 유효 시간 (None이면 STS 기본값)
        """
        self._client = client
        self.role_arn = role_arn
        self.role_session_name = role_session_name or generate_session_name()
        self.duration_seconds = duration_seconds

    @property
    def client(self) -> Any:
        return self._client

    def _base_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "RoleArn": self.role_arn,
            "RoleSessionName": self.role_session_name,
        }
        if self.duration_seconds:
            kwargs["DurationSeconds"] = self.duration_seconds
        return kwargs

    @abstractmethod
    def _call_sts(self) -> dict[str, Any]:
        """STS API 호출 (하위 클래스 구현)"""
        pass

    def fetch(self) -> Credentials:
        """STS를 호출하여 임시 자격증명 발급

        Raises:
            AssumeRoleFailed: STS 호출 또는 응답 변환 실패
        """
        logger.debug("역할 위임 요청: %s (%s)", self.role_arn, self.name())
        try:
            response = self._call_sts()
        except (ClientError, BotoCoreError) as e:
            raise AssumeRoleFailed(self.role_arn, cause=e) from e

        try:
            return credentials_from_response(response)
        except (KeyError, TypeError, ValueError) as e:
            raise AssumeRoleFailed(self.role_arn, "unexpected STS response for role", cause=e) from e
