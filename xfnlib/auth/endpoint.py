# xfnlib/auth/endpoint.py
"""
xfnlib/auth/endpoint.py - 엔드포인트 재정의 빌더

ProviderConfig의 endpoint 설정을 SDK 로드 옵션(엔드포인트 리졸버)과
서비스별 URL 맵으로 변환합니다.

동작:
- url.type == "dynamic" + url.dynamic 값 있음: 모든 서비스/리전 요청에 해당 URL 반환
- url.type == "static" + url.static 값 있음: 위와 동일 + services 목록을 URL 맵에 등록
- 그 외 (알 수 없는 타입, 빈 URL): 재정의 없음 (에러 아님)

Example:
    options = build_endpoint_options(config.endpoint)
    if options.resolver:
        endpoint = options.resolver("s3", "us-east-1")
        client = session.client("s3", endpoint_url=endpoint.url)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .types import URL_TYPE_STATIC, EndpointOverride

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    """리졸브된 서비스 엔드포인트

    Attributes:
        url: 요청을 보낼 URL
        hostname_immutable: True면 SDK가 호스트명을 변경하지 않음
    """

    url: str
    hostname_immutable: bool = False


@dataclass(frozen=True)
class EndpointResolver:
    """모든 서비스/리전 요청에 고정 엔드포인트를 반환하는 리졸버"""

    url: str
    hostname_immutable: bool = False

    def __call__(self, service: str, region: str | None = None) -> Endpoint:
        return Endpoint(url=self.url, hostname_immutable=self.hostname_immutable)


@dataclass(frozen=True)
class EndpointOptions:
    """엔드포인트 재정의 결과

    Attributes:
        resolver: SDK 엔드포인트 리졸버 (재정의가 없으면 None)
        services: 정적 재정의가 적용된 서비스 -> URL 맵 (호출자 조회용)
    """

    resolver: EndpointResolver | None = None
    services: dict[str, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.resolver is None


def build_endpoint_options(override: EndpointOverride | None) -> EndpointOptions:
    """엔드포인트 재정의를 SDK 로드 옵션으로 변환

    같은 입력에 대해 항상 같은 URL/hostname_immutable 쌍을 반환하는 리졸버를 만듭니다.

    Args:
        override: ProviderConfig의 endpoint (None 가능)

    Returns:
        EndpointOptions (재정의가 없으면 빈 옵션)
    """
    if override is None or override.url is None:
        return EndpointOptions()

    url = override.url.effective_url()
    if url is None:
        logger.debug("엔드포인트 재정의 무시: type=%r", override.url.type)
        return EndpointOptions()

    logger.info("엔드포인트 설정: %s (type=%s, services=%s)", url, override.url.type, list(override.services))
    resolver = EndpointResolver(url=url, hostname_immutable=override.hostname_immutable)

    services: dict[str, str] = {}
    if override.url.type == URL_TYPE_STATIC:
        services = {service: url for service in override.services}

    return EndpointOptions(resolver=resolver, services=services)
