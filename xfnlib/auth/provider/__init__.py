# xfnlib/auth/provider/__init__.py
"""
자격증명 Provider 구현 모듈

이 모듈은 자격증명 소스별 Provider 클래스들을 제공합니다.

Provider 목록:
- StaticCredentialsProvider: Secret의 INI 자격증명 (만료 없음)
- AssumeRoleProvider: sts:AssumeRole (역할 체인 첫 홉)
- WebIdentityRoleProvider: sts:AssumeRoleWithWebIdentity (서비스 어카운트 토큰)

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
"""

__all__ = [
    # Base
    "BaseSTSProvider",
    "credentials_from_response",
    # Static
    "StaticCredentialsProvider",
    "load_credentials_from_secret",
    "parse_credentials_file",
    # STS
    "AssumeRoleProvider",
    "WebIdentityRoleProvider",
]

_IMPORT_MAPPING = {
    "BaseSTSProvider": (".base", "BaseSTSProvider"),
    "credentials_from_response": (".base", "credentials_from_response"),
    "StaticCredentialsProvider": (".static", "StaticCredentialsProvider"),
    "load_credentials_from_secret": (".static", "load_credentials_from_secret"),
    "parse_credentials_file": (".static", "parse_credentials_file"),
    "AssumeRoleProvider": (".assume_role", "AssumeRoleProvider"),
    "WebIdentityRoleProvider": (".web_identity", "WebIdentityRoleProvider"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
