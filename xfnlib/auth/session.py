# xfnlib/auth/session.py
"""
xfnlib/auth/session.py - AWS 클라이언트 설정 조립 및 리졸브 진입점

ProviderConfig 레코드를 읽어 리전, 엔드포인트 재정의, 자격증명 Provider를
하나의 불변 ClientConfiguration으로 조립합니다.

데이터 흐름:
    ConfigStore -> decode -> build_endpoint_options -> CredentialResolver -> assemble_client_config

이 모듈을 사용하는 함수의 서비스 어카운트에는 다음 권한이 필요합니다:

    rules:
    - apiGroups:
      - aws.upbound.io
      resources:
      - providerconfigs
      verbs:
      - get
    - apiGroups:
      - ""
      resources:
      - secrets
      verbs:
      - get

Usage:
    from xfnlib.auth import resolve_config

    cfg, services = resolve_config("us-east-1", "default")
    s3 = cfg.client("s3")
    s3_url = services.get("s3")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import boto3
import botocore.session
from botocore.config import Config
from botocore.credentials import CredentialProvider as BotocoreCredentialProvider
from botocore.credentials import Credentials as BotocoreCredentials
from botocore.credentials import DeferredRefreshableCredentials
from botocore.exceptions import BotoCoreError
from botocore.utils import validate_region_name

from .cache import CachedCredentialsProvider
from .config import EngineSettings, decode, get_assume_role_arn
from .endpoint import EndpointOptions, EndpointResolver, build_endpoint_options
from .provider import AssumeRoleProvider
from .resolver import CredentialResolver, Resolution
from .types import (
    AuthError,
    ConfigAssemblyFailed,
    ConfigStore,
    CredentialProvider,
    Credentials,
    CredentialSource,
    SecretStore,
    ValidationFlags,
)

logger = logging.getLogger(__name__)

PROVIDER_CONFIG_KIND = "ProviderConfig"

# 공유 botocore Session에 등록되는 자격증명 방식 이름
CREDENTIAL_METHOD = "xfnlib-provider-config"


# =============================================================================
# botocore 연결
# =============================================================================


class ResolvedCredentialSource(BotocoreCredentialProvider):
    """리졸브된 Provider를 botocore 자격증명 체인에 연결

    만료되는 Provider는 DeferredRefreshableCredentials로 감싸
    첫 사용 시점에 fetch()하고, 만료 전에 botocore가 다시 fetch()를 호출합니다.
    """

    METHOD = CREDENTIAL_METHOD
    CANONICAL_NAME = "XfnProviderConfig"

    def __init__(self, provider: CredentialProvider):
        super().__init__()
        self._provider = provider

    def _refresh(self) -> dict[str, str]:
        return self._provider.fetch().to_botocore_metadata()

    def load(self) -> BotocoreCredentials:
        if not self._provider.can_expire:
            creds = self._provider.fetch()
            return BotocoreCredentials(
                creds.access_key_id,
                creds.secret_access_key,
                creds.session_token or None,
                method=self.METHOD,
            )
        return DeferredRefreshableCredentials(refresh_using=self._refresh, method=self.METHOD)


# =============================================================================
# Client Configuration
# =============================================================================


@dataclass(frozen=True)
class ClientConfiguration:
    """조립된 AWS 클라이언트 설정 (불변)

    Attributes:
        region: AWS 리전 (None이면 SDK 기본 리전)
        credentials: 캐시된 자격증명 Provider
        endpoint_resolver: 엔드포인트 리졸버 (재정의가 없으면 None)
        flags: ProviderConfig의 검증 생략 플래그
        source: 사용된 자격증명 소스
        ignored_role_arns: 무시된 역할 체인 항목
    """

    region: str | None
    credentials: CredentialProvider
    endpoint_resolver: EndpointResolver | None = None
    flags: ValidationFlags = field(default_factory=ValidationFlags)
    source: CredentialSource | None = None
    ignored_role_arns: tuple[str, ...] = ()
    boto3_session: boto3.Session | None = field(default=None, repr=False, compare=False)

    @property
    def chain_truncated(self) -> bool:
        """역할 체인 일부가 무시되었는지 여부"""
        return bool(self.ignored_role_arns)

    def get_credentials(self) -> Credentials:
        """현재 자격증명 반환 (필요 시 갱신)"""
        return self.credentials.fetch()

    def session(self) -> boto3.Session:
        """자격증명이 연결된 boto3 Session 반환"""
        if self.boto3_session is None:
            raise ConfigAssemblyFailed(self.region)
        return self.boto3_session

    def client(self, service_name: str, **kwargs: Any) -> Any:
        """엔드포인트 재정의가 적용된 boto3 client 생성

        Args:
            service_name: AWS 서비스 이름 (s3, ec2 등)
            **kwargs: session.client()에 전달할 추가 인자 (endpoint_url이 있으면 우선)

        Returns:
            boto3 client
        """
        region = kwargs.pop("region_name", None) or self.region
        path_style = self.flags.s3_use_path_style

        if self.endpoint_resolver is not None and "endpoint_url" not in kwargs:
            endpoint = self.endpoint_resolver(service_name, region)
            kwargs["endpoint_url"] = endpoint.url
            path_style = path_style or endpoint.hostname_immutable

        if service_name == "s3" and path_style:
            config = Config(s3={"addressing_style": "path"})
            if "config" in kwargs:
                config = config.merge(kwargs.pop("config"))
            kwargs["config"] = config

        return self.session().client(service_name, region_name=region, **kwargs)


def assemble_client_config(
    region: str | None,
    endpoint: EndpointOptions,
    resolution: Resolution,
    flags: ValidationFlags | None = None,
) -> ClientConfiguration:
    """리전, 엔드포인트 옵션, 자격증명을 ClientConfiguration으로 조립

    Args:
        region: AWS 리전 (None이면 환경 변수/인스턴스 메타데이터에서 탐색)
        endpoint: 엔드포인트 옵션
        resolution: 자격증명 리졸브 결과
        flags: 검증 생략 플래그

    Returns:
        ClientConfiguration

    Raises:
        ConfigAssemblyFailed: SDK 설정 로드 실패 (잘못된 리전, 프로파일 오류 등)
    """
    try:
        if region is not None:
            validate_region_name(region)

        core_session = botocore.session.get_session()
        resolver = core_session.get_component("credential_provider")
        resolver.insert_before("env", ResolvedCredentialSource(resolution.provider))
        session = boto3.Session(botocore_session=core_session, region_name=region)
    except BotoCoreError as e:
        raise ConfigAssemblyFailed(region, cause=e) from e

    return ClientConfiguration(
        region=session.region_name,
        credentials=resolution.provider,
        endpoint_resolver=endpoint.resolver,
        flags=flags or ValidationFlags(),
        source=resolution.source,
        ignored_role_arns=resolution.ignored_role_arns,
        boto3_session=session,
    )


# =============================================================================
# 리졸브 엔진
# =============================================================================


class ProviderConfigResolver:
    """ProviderConfig 리졸브 엔진

    호출마다 레코드와 Secret을 다시 읽고 새 자격증명 캐시를 생성합니다.
    호출 간에 공유하는 상태는 없습니다.

    Example:
        engine = ProviderConfigResolver(config_store, secret_store, EngineSettings.from_env())
        cfg, services = engine.resolve("us-east-1", "default")
    """

    def __init__(
        self,
        config_store: ConfigStore,
        secret_store: SecretStore,
        settings: EngineSettings | None = None,
    ):
        self._config_store = config_store
        self._settings = settings or EngineSettings()
        self._credentials = CredentialResolver(secret_store, self._settings)

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    def resolve(self, region: str | None, provider_config_ref: str) -> tuple[ClientConfiguration, dict[str, str]]:
        """ProviderConfig를 ClientConfiguration과 서비스 URL 맵으로 리졸브

        Args:
            region: AWS 리전 (None 가능)
            provider_config_ref: ProviderConfig 이름

        Returns:
            (ClientConfiguration, {service: static_url})

        Raises:
            AuthError: 리졸브 실패 (details에 provider_config 포함)
        """
        try:
            raw = self._config_store.get(PROVIDER_CONFIG_KIND, provider_config_ref)
            config = decode(raw)

            endpoint = build_endpoint_options(config.endpoint)
            resolution = self._credentials.resolve(config, region, endpoint)
            client_config = assemble_client_config(region, endpoint, resolution, config.flags)
        except AuthError as e:
            e.details.setdefault("provider_config", provider_config_ref)
            raise

        logger.debug(
            "ProviderConfig 리졸브 완료: %s (source=%s, region=%s)",
            provider_config_ref,
            resolution.source,
            client_config.region,
        )
        return client_config, dict(endpoint.services)

    def assume_role_config(self, region: str | None, provider_config_ref: str) -> ClientConfiguration:
        """assumeRoleChain의 첫 번째 역할만 위임한 ClientConfiguration 반환

        credentials 설정과 관계없이 기본 자격증명 체인으로 chain[0]을 위임합니다.

        Raises:
            InvalidProviderConfig: assumeRoleChain이 비어있는 경우
            ConfigAssemblyFailed: SDK 설정 로드 실패
        """
        try:
            raw = self._config_store.get(PROVIDER_CONFIG_KIND, provider_config_ref)
            role_arn = get_assume_role_arn(raw)

            sts = self._credentials.sts_client(region)
            provider = CachedCredentialsProvider(
                AssumeRoleProvider(sts, role_arn),
                self._settings.expiry_window_seconds,
            )
            resolution = Resolution(provider=provider, source=CredentialSource.WEB_IDENTITY, role_arn=role_arn)
            return assemble_client_config(region, EndpointOptions(), resolution)
        except AuthError as e:
            e.details.setdefault("provider_config", provider_config_ref)
            raise


# =============================================================================
# 모듈 레벨 편의 함수
# =============================================================================


def _default_engine(api_client, settings: EngineSettings) -> ProviderConfigResolver:
    from xfnlib.kubernetes import KubernetesConfigStore, KubernetesSecretStore

    return ProviderConfigResolver(
        KubernetesConfigStore(api_client, request_timeout=settings.request_timeout),
        KubernetesSecretStore(api_client, request_timeout=settings.request_timeout),
        settings,
    )


def resolve_config(
    region: str | None,
    provider_config_ref: str,
    settings: EngineSettings | None = None,
) -> tuple[ClientConfiguration, dict[str, str]]:
    """클러스터의 ProviderConfig로 AWS 설정 생성

    클러스터 API client는 리졸브가 끝나면 닫힙니다.

    Args:
        region: AWS 리전 (None 가능)
        provider_config_ref: ProviderConfig 이름
        settings: 엔진 설정 (None이면 환경 변수에서 생성)

    Returns:
        (ClientConfiguration, {service: static_url})
    """
    from xfnlib.kubernetes import kubernetes_client

    settings = settings or EngineSettings.from_env()
    with kubernetes_client() as api_client:
        return _default_engine(api_client, settings).resolve(region, provider_config_ref)


def assume_role_config(
    region: str | None,
    provider_config_ref: str,
    settings: EngineSettings | None = None,
) -> ClientConfiguration:
    """클러스터의 ProviderConfig assumeRoleChain으로 AWS 설정 생성

    서비스 어카운트에 eks.amazonaws.com/role-arn 어노테이션이 필요합니다.
    """
    from xfnlib.kubernetes import kubernetes_client

    settings = settings or EngineSettings.from_env()
    with kubernetes_client() as api_client:
        return _default_engine(api_client, settings).assume_role_config(region, provider_config_ref)
