"""
컴포지트 리소스 변환 모듈

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Functions
    "to",
    "to_unstructured",
    "to_kubernetes_object",
    "KUBERNETES_OBJECT_API_VERSION",
    "KUBERNETES_OBJECT_KIND",
    # Errors
    "CompositeError",
    "MissingMetadata",
    "InvalidMetadata",
    "InvalidSpec",
]

_IMPORT_MAPPING = {
    "to": (".functions", "to"),
    "to_unstructured": (".functions", "to_unstructured"),
    "to_kubernetes_object": (".functions", "to_kubernetes_object"),
    "KUBERNETES_OBJECT_API_VERSION": (".functions", "KUBERNETES_OBJECT_API_VERSION"),
    "KUBERNETES_OBJECT_KIND": (".functions", "KUBERNETES_OBJECT_KIND"),
    "CompositeError": (".errors", "CompositeError"),
    "MissingMetadata": (".errors", "MissingMetadata"),
    "InvalidMetadata": (".errors", "InvalidMetadata"),
    "InvalidSpec": (".errors", "InvalidSpec"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
