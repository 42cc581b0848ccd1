# xfnlib/auth/resolver.py
"""
xfnlib/auth/resolver.py - 자격증명 전략 리졸버

credentials.source 값에 따라 자격증명 Provider를 선택하고 생성합니다.

| source      | 동작                                                            |
|-------------|-----------------------------------------------------------------|
| Secret      | Secret의 INI 자격증명 -> 정적 Provider (역할 체인 무시)          |
| WebIdentity | 체인 있음: 기본 자격증명 STS로 chain[0] AssumeRole              |
|             | 체인 없음: 토큰 파일로 webIdentity.roleArn AssumeRoleWithWebIdentity |
| Upbound     | UnsupportedCredentialSource (네트워크 호출 없음)                  |

STS 호출은 생성 시점이 아닌 자격증명 첫 사용 시점에 일어납니다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from .cache import CachedCredentialsProvider
from .config import EngineSettings
from .endpoint import EndpointOptions
from .provider import (
    AssumeRoleProvider,
    StaticCredentialsProvider,
    WebIdentityRoleProvider,
    load_credentials_from_secret,
)
from .types import (
    ConfigAssemblyFailed,
    CredentialProvider,
    CredentialSource,
    InvalidProviderConfig,
    ProviderConfiguration,
    SecretCredentialSpec,
    SecretStore,
    UnsupportedCredentialSource,
    WebIdentityCredentialSpec,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """자격증명 리졸브 결과

    Attributes:
        provider: 캐시된 자격증명 Provider
        source: 사용된 자격증명 소스
        role_arn: 위임 대상 역할 ARN (Secret이면 None)
        ignored_role_arns: 사용되지 않은 체인 항목 (chain[1:])
    """

    provider: CredentialProvider
    source: CredentialSource
    role_arn: str | None = None
    ignored_role_arns: tuple[str, ...] = ()


class CredentialResolver:
    """credentials.source 기반 자격증명 Provider 선택기

    Example:
        resolver = CredentialResolver(secret_store, EngineSettings.from_env())
        resolution = resolver.resolve(config, "us-east-1", endpoint_options)
        creds = resolution.provider.fetch()
    """

    def __init__(self, secret_store: SecretStore, settings: EngineSettings | None = None):
        """CredentialResolver 초기화

        Args:
            secret_store: Secret 저장소 (source=Secret에서 사용)
            settings: 엔진 설정 (None이면 기본값)
        """
        self._secret_store = secret_store
        self._settings = settings or EngineSettings()

    def resolve(
        self,
        config: ProviderConfiguration,
        region: str | None = None,
        endpoint: EndpointOptions | None = None,
    ) -> Resolution:
        """자격증명 Provider 생성

        Args:
            config: 디코딩된 ProviderConfiguration
            region: AWS 리전 (None이면 SDK 기본 리전 탐색)
            endpoint: 엔드포인트 옵션 (역할 체인 STS client에 적용)

        Returns:
            Resolution

        Raises:
            UnsupportedCredentialSource: Upbound 또는 알 수 없는 소스
            SecretNotFound / MissingSecretKey / MalformedCredentialFile / MissingDefaultSection
            InvalidProviderConfig: WebIdentity에 필요한 역할 ARN이 없는 경우
            ConfigAssemblyFailed: 기본 SDK 설정(STS client) 로드 실패
        """
        credentials = config.credentials

        if isinstance(credentials, SecretCredentialSpec):
            return self._resolve_secret(credentials)

        if isinstance(credentials, WebIdentityCredentialSpec):
            logger.info("WebIdentity 자격증명 사용")
            if config.assume_role_chain:
                return self._resolve_role_chain(config, region, endpoint or EndpointOptions())
            return self._resolve_web_identity(credentials, region)

        raise UnsupportedCredentialSource(credentials.source.value)

    # =========================================================================
    # 전략별 구현
    # =========================================================================

    def _resolve_secret(self, spec: SecretCredentialSpec) -> Resolution:
        ref = spec.secret_ref
        logger.info("Secret 자격증명 사용: %s/%s", ref.namespace, ref.name)
        credentials = load_credentials_from_secret(self._secret_store, ref)
        provider = StaticCredentialsProvider(credentials, name=f"secret:{ref.namespace}/{ref.name}")
        return Resolution(provider=provider, source=CredentialSource.SECRET)

    def _resolve_role_chain(
        self,
        config: ProviderConfiguration,
        region: str | None,
        endpoint: EndpointOptions,
    ) -> Resolution:
        chain = config.assume_role_chain
        role_arn = chain[0].role_arn
        ignored = tuple(entry.role_arn for entry in chain[1:])
        if ignored:
            # 단일 홉만 지원: 나머지 역할은 위임하지 않음
            logger.warning(
                "assumeRoleChain의 첫 번째 역할만 사용합니다. 무시된 역할: %s",
                ", ".join(ignored),
            )

        endpoint_url = endpoint.resolver("sts", region).url if endpoint.resolver else None
        sts = self.sts_client(region, endpoint_url)

        logger.info("역할 위임: %s", role_arn)
        provider = AssumeRoleProvider(sts, role_arn)
        return Resolution(
            provider=self._cached(provider),
            source=CredentialSource.WEB_IDENTITY,
            role_arn=role_arn,
            ignored_role_arns=ignored,
        )

    def _resolve_web_identity(self, spec: WebIdentityCredentialSpec, region: str | None) -> Resolution:
        if not spec.role_arn:
            raise InvalidProviderConfig(
                "credentials.webIdentity.roleArn is required when assumeRoleChain is empty",
                field="credentials.webIdentity.roleArn",
            )

        token_file = self._settings.web_identity_token_file
        logger.info("WebIdentity 역할 위임: %s (token=%s)", spec.role_arn, token_file)

        sts = self.sts_client(region)
        provider = WebIdentityRoleProvider(
            sts,
            spec.role_arn,
            token_file,
            role_session_name=self._settings.role_session_name,
        )
        return Resolution(
            provider=self._cached(provider),
            source=CredentialSource.WEB_IDENTITY,
            role_arn=spec.role_arn,
        )

    # =========================================================================
    # 헬퍼
    # =========================================================================

    def _cached(self, provider: CredentialProvider) -> CachedCredentialsProvider:
        return CachedCredentialsProvider(provider, self._settings.expiry_window_seconds)

    def sts_client(self, region: str | None, endpoint_url: str | None = None) -> Any:
        """기본 자격증명 체인을 사용하는 STS client 생성

        Raises:
            ConfigAssemblyFailed: 기본 SDK 설정 로드 실패
        """
        kwargs: dict[str, Any] = {}
        if endpoint_url:
            kwargs["endpoint_url"] = endpoint_url
        timeout = self._settings.request_timeout
        if timeout is not None:
            kwargs["config"] = Config(connect_timeout=timeout, read_timeout=timeout)

        try:
            session = boto3.Session(region_name=region)
            return session.client("sts", **kwargs)
        except BotoCoreError as e:
            raise ConfigAssemblyFailed(region, cause=e) from e
