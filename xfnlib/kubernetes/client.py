# xfnlib/kubernetes/client.py
"""
Kubernetes API 기반 클러스터 저장소

함수는 기본적으로 클러스터 권한이 없으므로, 필요한 최소 권한만 부여해야 합니다.
- providerconfigs (aws.upbound.io): get
- secrets: get

구성 요소:
- kubernetes_client(): 독립된 ApiClient 생성 (in-cluster 우선, kubeconfig 폴백)
- KubernetesConfigStore: 클러스터 범위 ProviderConfig의 spec 조회
- KubernetesSecretStore: 네임스페이스 Secret 데이터 조회 (base64 디코딩)
"""

from __future__ import annotations

import base64
import binascii
import logging
from typing import Any

from kubernetes import client as k8s_client
from kubernetes.client.rest import ApiException
from kubernetes.config import ConfigException, load_incluster_config, new_client_from_config

from xfnlib.auth.types import ClusterAccessError, ConfigNotFound, SecretNotFound

logger = logging.getLogger(__name__)

PROVIDER_CONFIG_GROUP = "aws.upbound.io"
PROVIDER_CONFIG_VERSION = "v1beta1"

_NOT_FOUND = 404


def kubernetes_client(context: str | None = None) -> k8s_client.ApiClient:
    """클러스터 API 클라이언트 생성

    전역 SDK 설정을 변경하지 않도록 호출마다 독립된 ApiClient를 반환합니다.
    Pod 안에서는 서비스 어카운트 설정을, 그 외에는 kubeconfig를 사용합니다.

    Args:
        context: kubeconfig 컨텍스트 (None이면 현재 컨텍스트)

    Returns:
        kubernetes ApiClient

    Raises:
        ClusterAccessError: 클러스터 설정을 찾을 수 없는 경우
    """
    if context is None:
        configuration = k8s_client.Configuration()
        try:
            load_incluster_config(client_configuration=configuration)
            logger.debug("in-cluster 설정 사용")
            return k8s_client.ApiClient(configuration)
        except ConfigException:
            logger.debug("in-cluster 설정 없음, kubeconfig 사용")

    try:
        return new_client_from_config(context=context)
    except (ConfigException, OSError) as e:
        raise ClusterAccessError("cannot get cluster config", cause=e) from e


def _timeout_kwargs(request_timeout: float | None) -> dict[str, Any]:
    return {"_request_timeout": request_timeout} if request_timeout is not None else {}


class KubernetesConfigStore:
    """클러스터 범위 커스텀 리소스에서 설정 레코드를 읽는 ConfigStore

    kind는 소문자 복수형으로 변환하여 리소스 이름으로 사용합니다
    (ProviderConfig -> providerconfigs).
    """

    def __init__(
        self,
        api_client: k8s_client.ApiClient,
        group: str = PROVIDER_CONFIG_GROUP,
        version: str = PROVIDER_CONFIG_VERSION,
        request_timeout: float | None = None,
    ):
        self._api = k8s_client.CustomObjectsApi(api_client)
        self.group = group
        self.version = version
        self.request_timeout = request_timeout

    def get(self, kind: str, name: str) -> dict[str, Any]:
        """레코드의 spec 반환

        Raises:
            ConfigNotFound: 레코드가 없는 경우
            ClusterAccessError: 그 외 API 오류
        """
        plural = f"{kind.lower()}s"
        try:
            obj = self._api.get_cluster_custom_object(
                group=self.group,
                version=self.version,
                plural=plural,
                name=name,
                **_timeout_kwargs(self.request_timeout),
            )
        except ApiException as e:
            if e.status == _NOT_FOUND:
                raise ConfigNotFound(name, cause=e) from e
            raise ClusterAccessError(f"failed to get {plural} {name}", cause=e, details={"status": e.status}) from e

        logger.debug("%s/%s %s 조회 완료", self.group, plural, name)
        return obj.get("spec") or {}


class KubernetesSecretStore:
    """네임스페이스 Secret을 읽는 SecretStore"""

    def __init__(self, api_client: k8s_client.ApiClient, request_timeout: float | None = None):
        self._api = k8s_client.CoreV1Api(api_client)
        self.request_timeout = request_timeout

    def get(self, name: str, namespace: str) -> dict[str, bytes]:
        """Secret 데이터를 키별 bytes로 반환

        Raises:
            SecretNotFound: Secret이 없는 경우
            ClusterAccessError: 그 외 API 오류 또는 잘못된 base64 데이터
        """
        try:
            secret = self._api.read_namespaced_secret(
                name=name,
                namespace=namespace,
                **_timeout_kwargs(self.request_timeout),
            )
        except ApiException as e:
            if e.status == _NOT_FOUND:
                raise SecretNotFound(name, namespace, cause=e) from e
            raise ClusterAccessError(
                f"failed to get secret {name} in namespace {namespace}",
                cause=e,
                details={"status": e.status},
            ) from e

        data = secret.data or {}
        try:
            return {key: base64.b64decode(value) for key, value in data.items()}
        except (binascii.Error, TypeError) as e:
            raise ClusterAccessError(f"secret {name} in namespace {namespace} has invalid data", cause=e) from e
