# xfnlib/auth/types/__init__.py
"""
AWS 인증 모듈의 공통 타입 및 인터페이스 정의

이 모듈은 ProviderConfig 데이터 모델, Provider 인터페이스와 에러 타입을 정의합니다.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Enums / Constants
    "CredentialSource",
    "URL_TYPE_DYNAMIC",
    "URL_TYPE_STATIC",
    # Interfaces
    "CredentialProvider",
    "ConfigStore",
    "SecretStore",
    # Data classes
    "Credentials",
    "CredentialSpec",
    "EndpointOverride",
    "EndpointURL",
    "ProviderConfiguration",
    "RoleChainEntry",
    "SecretCredentialSpec",
    "SecretReference",
    "UpboundCredentialSpec",
    "ValidationFlags",
    "WebIdentityCredentialSpec",
    # Errors
    "AuthError",
    "AssumeRoleFailed",
    "ClusterAccessError",
    "ConfigAssemblyFailed",
    "ConfigNotFound",
    "InvalidProviderConfig",
    "MalformedCredentialFile",
    "MissingDefaultSection",
    "MissingSecretKey",
    "SecretNotFound",
    "UnsupportedCredentialSource",
]

_IMPORT_MAPPING = {name: (".types", name) for name in __all__}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
