# xfnlib/composite/functions.py
"""
컴포지트 리소스 변환 헬퍼

- to(): 임의 객체를 JSON 왕복으로 순수 dict/list 데이터로 변환
- to_unstructured(): metadata/spec을 가진 객체를 apiVersion/kind가 붙은 매니페스트로 변환
- to_kubernetes_object(): 매니페스트를 provider-kubernetes Object로 감싸기

Example:
    bucket = to_unstructured("s3.aws.upbound.io/v1beta1", "Bucket", {
        "metadata": {"name": "my-bucket"},
        "spec": {"forProvider": {"region": "us-east-1"}},
    })
    wrapped = to_kubernetes_object(bucket, "default")
"""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from typing import Any

from .errors import CompositeError, InvalidMetadata, InvalidSpec, MissingMetadata

KUBERNETES_OBJECT_API_VERSION = "kubernetes.crossplane.io/v1alpha1"
KUBERNETES_OBJECT_KIND = "Object"


def _json_default(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def to(resource: Any) -> Any:
    """객체를 JSON 직렬화 후 다시 파싱하여 순수 데이터로 변환

    dataclass와 to_dict()를 가진 객체(kubernetes 모델 등)도 지원합니다.

    Raises:
        CompositeError: JSON으로 직렬화할 수 없는 경우
    """
    try:
        return json.loads(json.dumps(resource, default=_json_default))
    except (TypeError, ValueError) as e:
        raise CompositeError("unable to convert object", cause=e) from e


def _non_empty_mapping(value: Any) -> bool:
    return isinstance(value, Mapping) and len(value) > 0


def to_unstructured(api_version: str, kind: str, resource: Any) -> dict[str, Any]:
    """metadata, spec (옵션: status)을 가진 객체를 매니페스트로 변환

    Args:
        api_version: 리소스 apiVersion
        kind: 리소스 kind
        resource: metadata/spec을 가진 객체

    Returns:
        {"apiVersion", "kind", "metadata", "spec"[, "status"]}

    Raises:
        InvalidMetadata: metadata가 비어있는 경우
        InvalidSpec: spec이 비어있는 경우
    """
    data = to(resource)
    if not isinstance(data, Mapping):
        raise InvalidMetadata()

    metadata = data.get("metadata")
    if not _non_empty_mapping(metadata):
        raise InvalidMetadata()

    spec = data.get("spec")
    if not _non_empty_mapping(spec):
        raise InvalidSpec()

    manifest: dict[str, Any] = {
        "apiVersion": api_version,
        "kind": kind,
        "metadata": metadata,
        "spec": spec,
    }
    status = data.get("status")
    if _non_empty_mapping(status):
        manifest["status"] = status
    return manifest


def to_kubernetes_object(resource: Any, provider_config_ref: str) -> dict[str, Any]:
    """리소스를 provider-kubernetes Object로 감싸기

    Object의 이름, 라벨, 연결 Secret 위치는 원본 리소스 metadata에서 가져옵니다.

    Args:
        resource: metadata를 가진 매니페스트
        provider_config_ref: provider-kubernetes ProviderConfig 이름

    Returns:
        kubernetes.crossplane.io/v1alpha1 Object 매니페스트

    Raises:
        MissingMetadata: metadata 필드가 없는 경우
        InvalidMetadata: metadata가 객체가 아닌 경우
    """
    data = to(resource)
    if not isinstance(data, Mapping) or "metadata" not in data:
        raise MissingMetadata("unable to create kubernetes object. object missing metadata")

    metadata = data["metadata"]
    if not isinstance(metadata, Mapping):
        raise InvalidMetadata(f"unable to create kubernetes object : {metadata!r}")

    name = metadata.get("name", "")
    return {
        "apiVersion": KUBERNETES_OBJECT_API_VERSION,
        "kind": KUBERNETES_OBJECT_KIND,
        "metadata": {
            "name": name,
            "labels": dict(metadata.get("labels") or {}),
        },
        "spec": {
            "forProvider": {
                "manifest": data,
            },
            "writeConnectionSecretToRef": {
                "name": name,
                "namespace": metadata.get("namespace", ""),
            },
            "providerConfigRef": {
                "name": provider_config_ref,
            },
        },
    }
