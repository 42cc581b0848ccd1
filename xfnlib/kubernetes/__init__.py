"""
클러스터 저장소 모듈

ProviderConfig 레코드와 자격증명 Secret을 Kubernetes API로 조회합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "kubernetes_client",
    "KubernetesConfigStore",
    "KubernetesSecretStore",
    "PROVIDER_CONFIG_GROUP",
    "PROVIDER_CONFIG_VERSION",
]

_IMPORT_MAPPING = {name: (".client", name) for name in __all__}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
