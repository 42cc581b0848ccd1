# xfnlib/auth/config/__init__.py
"""
ProviderConfig 디코딩 및 엔진 설정 모듈

이 모듈은 클러스터에서 읽은 ProviderConfig spec을 타입이 있는
ProviderConfiguration으로 변환하고, 환경 변수 기반 엔진 설정을 제공합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Data classes
    "EngineSettings",
    # Functions
    "decode",
    "get_assume_role_arn",
    # Constants
    "DEFAULT_ROLE_SESSION_NAME",
    "DEFAULT_WEB_IDENTITY_TOKEN_FILE",
    "WEB_IDENTITY_TOKEN_FILE_ENV",
]

_IMPORT_MAPPING = {name: (".loader", name) for name in __all__}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
