# xfnlib/auth/cache/cache.py
"""
자격증명 캐시 구현

- CacheEntry: 만료 시간을 가진 제네릭 캐시 항목
- CachedCredentialsProvider: 단일 진입(single-flight) 갱신 자격증명 캐시

설계 원칙:
- 리졸브 호출마다 새 캐시를 생성 (호출 간 공유 없음)
- 만료 버퍼 이내로 들어오면 다음 사용 시점에 재발급
- 동시 호출자는 하나의 갱신을 기다렸다가 결과를 공유
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Generic, TypeVar

from ..types import CredentialProvider, Credentials

logger = logging.getLogger(__name__)

# =============================================================================
# Generic Cache Entry
# =============================================================================

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """캐시 항목을 나타내는 제네릭 데이터 클래스

    Attributes:
        value: 캐시된 값
        created_at: 생성 시간 (UTC)
        expires_at: 만료 시간 (UTC, None이면 만료되지 않음)
    """

    value: T
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    expires_at: datetime | None = None

    def is_expired(self, buffer_seconds: int = 60) -> bool:
        """캐시 항목이 만료되었는지 확인

        Args:
            buffer_seconds: 만료 전 버퍼 시간 (초) - 기본 1분

        Returns:
            True if 만료됨, False otherwise
        """
        if self.expires_at is None:
            return False

        buffer = timedelta(seconds=buffer_seconds)
        return datetime.now(timezone.utc) >= (self.expires_at - buffer)

    def remaining_seconds(self) -> int | None:
        """남은 시간을 초 단위로 반환

        Returns:
            남은 초 또는 None (만료되지 않는 경우)
        """
        if self.expires_at is None:
            return None

        remaining = self.expires_at - datetime.now(timezone.utc)
        return max(0, int(remaining.total_seconds()))


# =============================================================================
# Single-flight Credentials Cache
# =============================================================================


class CachedCredentialsProvider(CredentialProvider):
    """단일 진입 갱신을 보장하는 자격증명 캐시 데코레이터

    감싼 Provider의 fetch()는 캐시가 비었거나 만료 버퍼에 들어왔을 때만 호출됩니다.
    갱신 중인 동안 다른 스레드는 잠금에서 대기하다가 같은 결과를 받습니다.
    생성 시점에는 네트워크 호출을 하지 않습니다.

    Thread-safe 구현.

    Example:
        provider = CachedCredentialsProvider(AssumeRoleProvider(sts, role_arn))
        creds = provider.fetch()  # 첫 사용 시 AssumeRole 호출
        creds = provider.fetch()  # 캐시 반환
    """

    def __init__(self, provider: CredentialProvider, expiry_window_seconds: int = 900):
        """CachedCredentialsProvider 초기화

        Args:
            provider: 실제 자격증명을 가져올 Provider
            expiry_window_seconds: 만료 전 갱신 버퍼 (초) - 기본 15분
        """
        self._provider = provider
        self._expiry_window = expiry_window_seconds
        self._entry: CacheEntry[Credentials] | None = None
        self._lock = threading.Lock()
        self._refresh_count = 0

    @property
    def provider(self) -> CredentialProvider:
        """감싼 Provider"""
        return self._provider

    @property
    def refresh_count(self) -> int:
        """감싼 Provider의 fetch() 호출 횟수"""
        return self._refresh_count

    @property
    def can_expire(self) -> bool:
        return self._provider.can_expire

    def name(self) -> str:
        return f"cached:{self._provider.name()}"

    def fetch(self) -> Credentials:
        """캐시된 자격증명 반환 (필요 시 갱신)

        Raises:
            AuthError: 감싼 Provider의 갱신이 실패한 경우 (캐시는 그대로 유지)
        """
        with self._lock:
            entry = self._entry
            if entry is not None and not entry.is_expired(self._expiry_window):
                return entry.value

            logger.debug("자격증명 갱신: %s", self._provider.name())
            credentials = self._provider.fetch()
            self._refresh_count += 1
            self._entry = CacheEntry(value=credentials, expires_at=credentials.expires_at)

            if credentials.is_expired(self._expiry_window):
                logger.warning(
                    "새로 받은 자격증명의 유효 시간이 갱신 버퍼(%d초)보다 짧습니다: %s",
                    self._expiry_window,
                    self._provider.name(),
                )
            return credentials

    def invalidate(self) -> None:
        """캐시 무효화 (다음 fetch()에서 재발급)"""
        with self._lock:
            self._entry = None

    def remaining_seconds(self) -> int | None:
        """캐시된 자격증명의 남은 시간 (캐시가 비었거나 만료 시간이 없으면 None)"""
        with self._lock:
            return self._entry.remaining_seconds() if self._entry else None
