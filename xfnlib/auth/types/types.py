# xfnlib/auth/types/types.py
"""
xfnlib/auth/types/types.py - AWS 인증 모듈의 핵심 타입 정의

이 모듈은 ProviderConfig 리졸브 과정 전체에서 사용되는 기본 타입들을 정의합니다.

포함 항목:
    - CredentialSource: 자격증명 소스 열거형 (Secret, WebIdentity, Upbound)
    - ProviderConfiguration 및 하위 레코드 (EndpointOverride, CredentialSpec 변형, RoleChainEntry)
    - Credentials: access key / secret key / session token 묶음
    - CredentialProvider: 모든 자격증명 Provider가 구현해야 하는 추상 기본 클래스 (ABC)
    - ConfigStore / SecretStore: 클러스터 저장소 접근 Protocol
    - 에러 클래스: AuthError 및 하위 에러
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Protocol, TypeAlias, runtime_checkable

from xfnlib.exceptions import XfnError, get_error_code


# =============================================================================
# Credential Source Enum
# =============================================================================


class CredentialSource(Enum):
    """ProviderConfig의 credentials.source 값

    - Secret: 클러스터 Secret에 저장된 INI 형식 자격증명
    - WebIdentity: 서비스 어카운트 토큰 기반 연합 인증 (IRSA)
    - Upbound: 스키마상 인식하지만 지원하지 않는 소스
    """

    SECRET = "Secret"
    WEB_IDENTITY = "WebIdentity"
    UPBOUND = "Upbound"

    def __str__(self) -> str:
        return self.value


# 엔드포인트 URL 타입
URL_TYPE_DYNAMIC = "dynamic"
URL_TYPE_STATIC = "static"


# =============================================================================
# Provider Configuration
# =============================================================================


@dataclass(frozen=True)
class EndpointURL:
    """엔드포인트 URL 선택

    Attributes:
        type: "dynamic" 또는 "static" (그 외 값은 무시됨)
        dynamic: dynamic 타입일 때 사용할 URL
        static: static 타입일 때 사용할 URL
    """

    type: str = ""
    dynamic: str = ""
    static: str = ""

    def effective_url(self) -> str | None:
        """타입에 맞는 URL 반환 (비어있거나 알 수 없는 타입이면 None)"""
        if self.type == URL_TYPE_DYNAMIC:
            return self.dynamic or None
        if self.type == URL_TYPE_STATIC:
            return self.static or None
        return None


@dataclass(frozen=True)
class EndpointOverride:
    """서비스별 엔드포인트 재정의

    Attributes:
        services: 재정의를 적용할 서비스 식별자 목록 (예: "s3", "sts")
        hostname_immutable: True면 SDK가 호스트명을 변경하지 않음 (S3 path-style)
        url: URL 선택 (None이면 재정의 없음)
    """

    services: tuple[str, ...] = ()
    hostname_immutable: bool = False
    url: EndpointURL | None = None


@dataclass(frozen=True)
class SecretReference:
    """자격증명이 저장된 Secret 위치"""

    name: str
    namespace: str
    key: str


@dataclass(frozen=True)
class SecretCredentialSpec:
    """source=Secret: Secret에 저장된 INI 자격증명 사용"""

    source: ClassVar[CredentialSource] = CredentialSource.SECRET

    secret_ref: SecretReference


@dataclass(frozen=True)
class WebIdentityCredentialSpec:
    """source=WebIdentity: 연합 토큰으로 역할 위임

    Attributes:
        role_arn: AssumeRoleWithWebIdentity 대상 역할 ARN
    """

    source: ClassVar[CredentialSource] = CredentialSource.WEB_IDENTITY

    role_arn: str = ""


@dataclass(frozen=True)
class UpboundCredentialSpec:
    """source=Upbound: 인식하지만 지원하지 않음"""

    source: ClassVar[CredentialSource] = CredentialSource.UPBOUND


CredentialSpec: TypeAlias = SecretCredentialSpec | WebIdentityCredentialSpec | UpboundCredentialSpec


@dataclass(frozen=True)
class RoleChainEntry:
    """assumeRoleChain의 단일 항목"""

    role_arn: str


@dataclass(frozen=True)
class ValidationFlags:
    """ProviderConfig의 검증 생략 플래그

    리졸브 로직에는 영향을 주지 않고 ClientConfiguration으로 그대로 전달됩니다.
    """

    s3_use_path_style: bool = False
    skip_credentials_validation: bool = False
    skip_region_validation: bool = False
    skip_requesting_account_id: bool = False
    skip_metadata_api_check: bool = False


@dataclass(frozen=True)
class ProviderConfiguration:
    """디코딩된 ProviderConfig spec

    Attributes:
        credentials: 자격증명 소스 (정확히 하나)
        endpoint: 엔드포인트 재정의 (옵션)
        assume_role_chain: 역할 체인 (첫 번째 항목만 사용)
        flags: 검증 생략 플래그
    """

    credentials: CredentialSpec
    endpoint: EndpointOverride | None = None
    assume_role_chain: tuple[RoleChainEntry, ...] = ()
    flags: ValidationFlags = field(default_factory=ValidationFlags)

    @property
    def source(self) -> CredentialSource:
        """자격증명 소스"""
        return self.credentials.source


# =============================================================================
# Credentials
# =============================================================================


@dataclass(frozen=True)
class Credentials:
    """AWS 자격증명 묶음

    Attributes:
        access_key_id: 액세스 키 ID
        secret_access_key: 시크릿 액세스 키
        session_token: 세션 토큰 (없으면 빈 문자열)
        expires_at: 만료 시간 (UTC, None이면 만료되지 않음)
    """

    access_key_id: str
    secret_access_key: str
    session_token: str = ""
    expires_at: datetime | None = None

    @property
    def can_expire(self) -> bool:
        return self.expires_at is not None

    def is_expired(self, buffer_seconds: int = 0) -> bool:
        """만료 여부 확인

        Args:
            buffer_seconds: 만료 전 버퍼 시간 (초)
        """
        if self.expires_at is None:
            return False
        remaining = (self.expires_at - datetime.now(timezone.utc)).total_seconds()
        return remaining <= buffer_seconds

    def to_botocore_metadata(self) -> dict[str, str]:
        """botocore RefreshableCredentials 메타데이터 형식으로 변환"""
        metadata = {
            "access_key": self.access_key_id,
            "secret_key": self.secret_access_key,
            "token": self.session_token,
        }
        if self.expires_at is not None:
            metadata["expiry_time"] = self.expires_at.isoformat()
        return metadata

    def __repr__(self) -> str:
        # 시크릿 값은 출력하지 않음
        return f"Credentials(access_key_id={self.access_key_id!r}, expires_at={self.expires_at!r})"


# =============================================================================
# Provider Interface (Abstract Base Class)
# =============================================================================


class CredentialProvider(ABC):
    """모든 자격증명 Provider가 구현해야 하는 추상 기본 클래스

    fetch()는 호출될 때마다 자격증명을 새로 가져옵니다.
    캐시와 만료 전 갱신은 CachedCredentialsProvider가 담당합니다.

    Example:
        class MyProvider(CredentialProvider):
            def name(self) -> str:
                return "my-provider"

            def fetch(self) -> Credentials:
                return Credentials("AKIA...", "secret")
    """

    @abstractmethod
    def name(self) -> str:
        """Provider 이름(식별자)을 반환합니다."""
        pass

    @abstractmethod
    def fetch(self) -> Credentials:
        """자격증명을 가져옵니다.

        Raises:
            AuthError: 자격증명을 가져올 수 없는 경우
        """
        pass

    @property
    def can_expire(self) -> bool:
        """fetch() 결과가 만료 시간을 가지는지 여부

        네트워크 호출 없이 판단할 수 있어야 합니다. 기본값은 True입니다.
        """
        return True


# =============================================================================
# Collaborator Protocols
# =============================================================================


@runtime_checkable
class ConfigStore(Protocol):
    """이름으로 설정 레코드를 조회하는 저장소"""

    def get(self, kind: str, name: str) -> dict[str, Any]:
        """레코드의 spec 매핑 반환

        Raises:
            ConfigNotFound: 레코드가 없는 경우
        """
        ...


@runtime_checkable
class SecretStore(Protocol):
    """이름/네임스페이스로 Secret을 조회하는 저장소"""

    def get(self, name: str, namespace: str) -> dict[str, bytes]:
        """Secret 데이터 반환 ({key: bytes})

        Raises:
            SecretNotFound: Secret이 없는 경우
        """
        ...


# =============================================================================
# Error Classes
# =============================================================================


class AuthError(XfnError):
    """인증 관련 기본 에러 클래스

    모든 리졸브 에러의 부모 클래스입니다.
    원인 예외(cause)를 체이닝하여 디버깅을 용이하게 합니다.
    """


class ConfigNotFound(AuthError):
    """ProviderConfig 레코드를 찾을 수 없을 때 발생하는 에러

    Attributes:
        name: 찾을 수 없는 레코드 이름
    """

    def __init__(self, name: str, cause: Exception | None = None):
        super().__init__(f"failed to load providerconfig {name}", cause, {"name": name})
        self.name = name


class InvalidProviderConfig(AuthError):
    """레코드가 ProviderConfiguration으로 디코딩되지 않을 때 발생하는 에러

    Attributes:
        field: 문제가 된 필드 경로 (옵션)
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause, {"field": field} if field else None)
        self.field = field


class UnsupportedCredentialSource(InvalidProviderConfig):
    """지원하지 않는 credentials.source 값

    Upbound 또는 알 수 없는 값이면 발생합니다.
    네트워크 호출 없이 즉시 발생하는 유일한 에러입니다.

    Attributes:
        source: 문제가 된 source 값 (누락이면 None)
    """

    def __init__(self, source: str | None):
        if source == CredentialSource.UPBOUND.value:
            message = "upbound credentials not supported"
        elif source:
            message = f"unsupported credentials source {source!r}"
        else:
            message = "credentials source is not set"
        super().__init__(message, field="credentials.source")
        self.source = source
        self.details["source"] = source


class SecretNotFound(AuthError):
    """자격증명 Secret을 찾을 수 없을 때 발생하는 에러"""

    def __init__(self, name: str, namespace: str, cause: Exception | None = None):
        super().__init__(
            f"failed to load secret {name} in namespace {namespace}",
            cause,
            {"secret": name, "namespace": namespace},
        )
        self.name = name
        self.namespace = namespace


class MissingSecretKey(AuthError):
    """Secret에 요청한 키가 없을 때 발생하는 에러"""

    def __init__(self, key: str, name: str, namespace: str):
        super().__init__(
            f"failed to load key {key} in secret {name} in namespace {namespace}",
            details={"key": key, "secret": name, "namespace": namespace},
        )
        self.key = key
        self.name = name
        self.namespace = namespace


class MalformedCredentialFile(AuthError):
    """자격증명 데이터가 INI 형식이 아닐 때 발생하는 에러"""

    def __init__(self, message: str = "credentials are not valid INI", cause: Exception | None = None):
        super().__init__(message, cause)


class MissingDefaultSection(AuthError):
    """INI 자격증명에 [default] 섹션이 없을 때 발생하는 에러"""

    def __init__(self, section: str = "default"):
        super().__init__(f"section {section!r} does not exist", details={"section": section})
        self.section = section


class AssumeRoleFailed(AuthError):
    """STS 역할 위임 실패

    자격증명을 처음 사용할 때(지연) 발생합니다.

    Attributes:
        role_arn: 위임 대상 역할 ARN
        error_code: STS 오류 코드 (예: "AccessDenied")
    """

    def __init__(self, role_arn: str, message: str = "failed to assume role", cause: Exception | None = None):
        super().__init__(f"{message} {role_arn!r}", cause, {"role_arn": role_arn})
        self.role_arn = role_arn
        self.error_code = get_error_code(cause) if cause else None
        if self.error_code:
            self.details["error_code"] = self.error_code


class ConfigAssemblyFailed(AuthError):
    """최종 SDK 설정 로드 실패"""

    def __init__(self, region: str | None, cause: Exception | None = None):
        super().__init__(
            f"failed to load aws config for region {region!r}",
            cause,
            {"region": region},
        )
        self.region = region


class ClusterAccessError(AuthError):
    """클러스터 API 접근 실패 (not found 이외)

    클라이언트 생성 실패, 권한 부족, 전송 오류 등에서 발생합니다.
    """
