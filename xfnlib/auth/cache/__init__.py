# xfnlib/auth/cache/__init__.py
"""
자격증명 캐시 관리 모듈

이 모듈은 임시 자격증명을 메모리에 캐시하여 불필요한 STS 호출을 줄입니다.

캐시 전략:
- CachedCredentialsProvider: 메모리 기반, 만료 15분 전 갱신, 단일 진입 갱신
- 리졸브 호출 간 공유하지 않음 (호출마다 새 인스턴스)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    "CacheEntry",
    "CachedCredentialsProvider",
]

_IMPORT_MAPPING = {
    "CacheEntry": (".cache", "CacheEntry"),
    "CachedCredentialsProvider": (".cache", "CachedCredentialsProvider"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
