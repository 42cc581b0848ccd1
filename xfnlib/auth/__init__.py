"""
AWS ProviderConfig 인증 모듈 (xfnlib/auth)

클러스터에 저장된 ProviderConfig 레코드를 인증된 AWS 클라이언트 설정과
서비스별 엔드포인트 URL 맵으로 리졸브합니다.

지원하는 자격증명 소스:
- Secret: 클러스터 Secret에 저장된 INI 자격증명 (정적)
- WebIdentity: 역할 체인 첫 홉 AssumeRole 또는 토큰 파일 기반 AssumeRoleWithWebIdentity
- Upbound: 인식하지만 지원하지 않음 (UnsupportedCredentialSource)

사용 예시:
    from xfnlib.auth import resolve_config, assume_role_config

    # 클러스터 ProviderConfig로 설정 생성
    cfg, services = resolve_config("us-east-1", "default")
    s3 = cfg.client("s3")

    # 저장소를 직접 주입하는 경우
    from xfnlib.auth import ProviderConfigResolver, EngineSettings

    engine = ProviderConfigResolver(config_store, secret_store, EngineSettings.from_env())
    cfg, services = engine.resolve("us-east-1", "default")

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    실제 사용 시점에만 하위 모듈이 로드되어 함수 콜드 스타트 시간을 줄입니다.
"""

__all__ = [
    # Types
    "CredentialSource",
    "EndpointURL",
    "EndpointOverride",
    "SecretReference",
    "SecretCredentialSpec",
    "WebIdentityCredentialSpec",
    "UpboundCredentialSpec",
    "RoleChainEntry",
    "ValidationFlags",
    "ProviderConfiguration",
    "Credentials",
    "CredentialProvider",
    "ConfigStore",
    "SecretStore",
    # Errors
    "AuthError",
    "ConfigNotFound",
    "InvalidProviderConfig",
    "UnsupportedCredentialSource",
    "SecretNotFound",
    "MissingSecretKey",
    "MalformedCredentialFile",
    "MissingDefaultSection",
    "AssumeRoleFailed",
    "ConfigAssemblyFailed",
    "ClusterAccessError",
    # Config
    "EngineSettings",
    "decode",
    "get_assume_role_arn",
    # Cache
    "CacheEntry",
    "CachedCredentialsProvider",
    # Providers
    "StaticCredentialsProvider",
    "AssumeRoleProvider",
    "WebIdentityRoleProvider",
    "parse_credentials_file",
    "load_credentials_from_secret",
    # Endpoint
    "Endpoint",
    "EndpointResolver",
    "EndpointOptions",
    "build_endpoint_options",
    # Resolver
    "CredentialResolver",
    "Resolution",
    # Session
    "ClientConfiguration",
    "ProviderConfigResolver",
    "assemble_client_config",
    "resolve_config",
    "assume_role_config",
]

# Lazy import 매핑 테이블
_IMPORT_MAPPING = {
    # Types
    "CredentialSource": (".types", "CredentialSource"),
    "EndpointURL": (".types", "EndpointURL"),
    "EndpointOverride": (".types", "EndpointOverride"),
    "SecretReference": (".types", "SecretReference"),
    "SecretCredentialSpec": (".types", "SecretCredentialSpec"),
    "WebIdentityCredentialSpec": (".types", "WebIdentityCredentialSpec"),
    "UpboundCredentialSpec": (".types", "UpboundCredentialSpec"),
    "RoleChainEntry": (".types", "RoleChainEntry"),
    "ValidationFlags": (".types", "ValidationFlags"),
    "ProviderConfiguration": (".types", "ProviderConfiguration"),
    "Credentials": (".types", "Credentials"),
    "CredentialProvider": (".types", "CredentialProvider"),
    "ConfigStore": (".types", "ConfigStore"),
    "SecretStore": (".types", "SecretStore"),
    # Errors
    "AuthError": (".types", "AuthError"),
    "ConfigNotFound": (".types", "ConfigNotFound"),
    "InvalidProviderConfig": (".types", "InvalidProviderConfig"),
    "UnsupportedCredentialSource": (".types", "UnsupportedCredentialSource"),
    "SecretNotFound": (".types", "SecretNotFound"),
    "MissingSecretKey": (".types", "MissingSecretKey"),
    "MalformedCredentialFile": (".types", "MalformedCredentialFile"),
    "MissingDefaultSection": (".types", "MissingDefaultSection"),
    "AssumeRoleFailed": (".types", "AssumeRoleFailed"),
    "ConfigAssemblyFailed": (".types", "ConfigAssemblyFailed"),
    "ClusterAccessError": (".types", "ClusterAccessError"),
    # Config
    "EngineSettings": (".config", "EngineSettings"),
    "decode": (".config", "decode"),
    "get_assume_role_arn": (".config", "get_assume_role_arn"),
    # Cache
    "CacheEntry": (".cache", "CacheEntry"),
    "CachedCredentialsProvider": (".cache", "CachedCredentialsProvider"),
    # Providers
    "StaticCredentialsProvider": (".provider", "StaticCredentialsProvider"),
    "AssumeRoleProvider": (".provider", "AssumeRoleProvider"),
    "WebIdentityRoleProvider": (".provider", "WebIdentityRoleProvider"),
    "parse_credentials_file": (".provider", "parse_credentials_file"),
    "load_credentials_from_secret": (".provider", "load_credentials_from_secret"),
    # Endpoint
    "Endpoint": (".endpoint", "Endpoint"),
    "EndpointResolver": (".endpoint", "EndpointResolver"),
    "EndpointOptions": (".endpoint", "EndpointOptions"),
    "build_endpoint_options": (".endpoint", "build_endpoint_options"),
    # Resolver
    "CredentialResolver": (".resolver", "CredentialResolver"),
    "Resolution": (".resolver", "Resolution"),
    # Session
    "ClientConfiguration": (".session", "ClientConfiguration"),
    "ProviderConfigResolver": (".session", "ProviderConfigResolver"),
    "assemble_client_config": (".session", "assemble_client_config"),
    "resolve_config": (".session", "resolve_config"),
    "assume_role_config": (".session", "assume_role_config"),
}


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드

    함수 콜드 스타트 시간 단축을 위해 무거운 의존성(boto3 등)을
    실제 필요한 시점에만 로드합니다.
    """
    if name in _IMPORT_MAPPING:
        module_name, attr_name = _IMPORT_MAPPING[name]
        import importlib

        module = importlib.import_module(module_name, __name__)
        return getattr(module, attr_name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
