# xfnlib/auth/config/loader.py
"""
ProviderConfig 레코드 디코더 및 엔진 설정

클러스터에서 읽은 느슨한 타입의 spec 매핑을 ProviderConfiguration으로 변환합니다.
알 수 없는 credentials.source는 사용 시점이 아닌 디코딩 시점에 거부합니다.

레코드 형식 (aws.upbound.io/v1beta1 ProviderConfig spec):
    credentials:
      source: Secret | WebIdentity | Upbound
      secretRef: {name, namespace, key}
      webIdentity: {roleArn}
    endpoint:
      services: [s3, ...]
      hostnameImmutable: true
      url: {type: static | dynamic, static: ..., dynamic: ...}
    assumeRoleChain:
      - roleARN: arn:aws:iam::111111111111:role/A
    s3_use_path_style: false
    skip_credentials_validation: false
    ...
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any

from ..types import (
    CredentialSource,
    CredentialSpec,
    EndpointOverride,
    EndpointURL,
    InvalidProviderConfig,
    ProviderConfiguration,
    RoleChainEntry,
    SecretCredentialSpec,
    SecretReference,
    UnsupportedCredentialSource,
    UpboundCredentialSpec,
    ValidationFlags,
    WebIdentityCredentialSpec,
)

logger = logging.getLogger(__name__)

# 환경 변수 / 기본값
WEB_IDENTITY_TOKEN_FILE_ENV = "AWS_WEB_IDENTITY_TOKEN_FILE"
DEFAULT_WEB_IDENTITY_TOKEN_FILE = "/var/run/secrets/eks.amazonaws.com/serviceaccount/token"
DEFAULT_ROLE_SESSION_NAME = "crossplane-provider-aws"
DEFAULT_EXPIRY_WINDOW_SECONDS = 900  # botocore advisory refresh 시점(15분)과 맞춤

# 자격증명 소스가 아닌 레거시 인라인 키
_INLINE_CREDENTIAL_KEYS = ("accessKeyID", "secretAccessKey", "sessionToken")


# =============================================================================
# Engine Settings
# =============================================================================


@dataclass(frozen=True)
class EngineSettings:
    """리졸브 엔진 설정

    환경 변수는 엔진 생성 시점에 한 번만 읽고, 이후에는 값으로 전달합니다.

    Attributes:
        web_identity_token_file: 연합 토큰 파일 경로
        role_session_name: WebIdentity 역할 세션 이름
        expiry_window_seconds: 만료 전 갱신 버퍼 (초)
        request_timeout: 클러스터 조회 및 STS 호출 타임아웃 (초, None이면 라이브러리 기본값)
    """

    web_identity_token_file: str = DEFAULT_WEB_IDENTITY_TOKEN_FILE
    role_session_name: str = DEFAULT_ROLE_SESSION_NAME
    expiry_window_seconds: int = DEFAULT_EXPIRY_WINDOW_SECONDS
    request_timeout: float | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: Any) -> EngineSettings:
        """환경 변수에서 설정 생성

        Args:
            environ: 환경 변수 매핑 (기본: os.environ)
            **overrides: 나머지 필드 값

        Returns:
            EngineSettings
        """
        env = os.environ if environ is None else environ
        token_file = env.get(WEB_IDENTITY_TOKEN_FILE_ENV) or DEFAULT_WEB_IDENTITY_TOKEN_FILE
        return cls(web_identity_token_file=token_file, **overrides)


# =============================================================================
# 디코딩 헬퍼
# =============================================================================


def _mapping(value: Any, path: str) -> Mapping[str, Any] | None:
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise InvalidProviderConfig(f"{path} must be an object, got {type(value).__name__}", field=path)
    return value


def _required_mapping(value: Any, path: str) -> Mapping[str, Any]:
    data = _mapping(value, path)
    if data is None:
        raise InvalidProviderConfig(f"{path} is required", field=path)
    return data


def _string(data: Mapping[str, Any], key: str, path: str, required: bool = False) -> str:
    value = data.get(key)
    if value is None or value == "":
        if required:
            raise InvalidProviderConfig(f"{path}.{key} is required", field=f"{path}.{key}")
        return ""
    if not isinstance(value, str):
        raise InvalidProviderConfig(
            f"{path}.{key} must be a string, got {type(value).__name__}", field=f"{path}.{key}"
        )
    return value


def _bool(data: Mapping[str, Any], key: str, path: str) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise InvalidProviderConfig(
            f"{path}{key} must be a boolean, got {type(value).__name__}", field=f"{path}{key}"
        )
    return value


def _decode_credentials(value: Any) -> CredentialSpec:
    data = _required_mapping(value, "credentials")

    source = data.get("source")
    if not isinstance(source, str) or not source:
        raise UnsupportedCredentialSource(None if source is None or source == "" else repr(source))

    try:
        kind = CredentialSource(source)
    except ValueError:
        raise UnsupportedCredentialSource(source) from None

    inline_keys = [k for k in _INLINE_CREDENTIAL_KEYS if data.get(k)]
    if inline_keys:
        logger.warning("credentials의 인라인 키는 무시됩니다: %s", ", ".join(inline_keys))

    if kind is CredentialSource.SECRET:
        ref = _required_mapping(data.get("secretRef"), "credentials.secretRef")
        path = "credentials.secretRef"
        return SecretCredentialSpec(
            secret_ref=SecretReference(
                name=_string(ref, "name", path, required=True),
                namespace=_string(ref, "namespace", path, required=True),
                key=_string(ref, "key", path, required=True),
            )
        )

    if kind is CredentialSource.WEB_IDENTITY:
        web_identity = _mapping(data.get("webIdentity"), "credentials.webIdentity") or {}
        return WebIdentityCredentialSpec(
            role_arn=_string(web_identity, "roleArn", "credentials.webIdentity"),
        )

    return UpboundCredentialSpec()


def _decode_endpoint(value: Any) -> EndpointOverride | None:
    data = _mapping(value, "endpoint")
    if data is None:
        return None

    services = data.get("services") or []
    if not isinstance(services, list) or not all(isinstance(s, str) for s in services):
        raise InvalidProviderConfig("endpoint.services must be a list of strings", field="endpoint.services")

    url = None
    url_data = _mapping(data.get("url"), "endpoint.url")
    if url_data is not None:
        url = EndpointURL(
            type=_string(url_data, "type", "endpoint.url"),
            dynamic=_string(url_data, "dynamic", "endpoint.url"),
            static=_string(url_data, "static", "endpoint.url"),
        )

    return EndpointOverride(
        services=tuple(services),
        hostname_immutable=_bool(data, "hostnameImmutable", "endpoint."),
        url=url,
    )


def _decode_chain(value: Any) -> tuple[RoleChainEntry, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        raise InvalidProviderConfig("assumeRoleChain must be a list", field="assumeRoleChain")

    chain = []
    for i, item in enumerate(value):
        path = f"assumeRoleChain[{i}]"
        entry = _required_mapping(item, path)
        chain.append(RoleChainEntry(role_arn=_string(entry, "roleARN", path, required=True)))
    return tuple(chain)


# =============================================================================
# 공개 함수
# =============================================================================


def decode(raw: Any) -> ProviderConfiguration:
    """ProviderConfig spec 매핑을 ProviderConfiguration으로 변환

    Args:
        raw: 클러스터에서 읽은 spec (dict)

    Returns:
        ProviderConfiguration

    Raises:
        UnsupportedCredentialSource: source가 없거나 알 수 없는 값인 경우
        InvalidProviderConfig: 그 외 형식 오류
    """
    data = _required_mapping(raw, "spec")

    flags = ValidationFlags(**{f.name: _bool(data, f.name, "") for f in fields(ValidationFlags)})

    return ProviderConfiguration(
        credentials=_decode_credentials(data.get("credentials")),
        endpoint=_decode_endpoint(data.get("endpoint")),
        assume_role_chain=_decode_chain(data.get("assumeRoleChain")),
        flags=flags,
    )


def get_assume_role_arn(raw: Any) -> str:
    """assumeRoleChain의 첫 번째 역할 ARN 반환

    체인만 필요한 경우(assume_role_config)를 위해 credentials 검증 없이
    assumeRoleChain 필드만 디코딩합니다.

    Raises:
        InvalidProviderConfig: 체인이 비어있거나 형식이 잘못된 경우
    """
    data = _required_mapping(raw, "spec")

    chain = _decode_chain(data.get("assumeRoleChain"))
    if not chain:
        raise InvalidProviderConfig("assumeRoleChain is empty", field="assumeRoleChain")
    return chain[0].role_arn
