# tests/auth/test_auth_config_loader.py
"""
xfnlib/auth/config/loader.py 단위 테스트

ProviderConfig 디코딩, 역할 체인 추출, 엔진 설정 테스트.
"""

import logging

import pytest

from xfnlib.auth.config import (
    DEFAULT_ROLE_SESSION_NAME,
    DEFAULT_WEB_IDENTITY_TOKEN_FILE,
    EngineSettings,
    decode,
    get_assume_role_arn,
)
from xfnlib.auth.types import (
    CredentialSource,
    InvalidProviderConfig,
    SecretCredentialSpec,
    SecretReference,
    UnsupportedCredentialSource,
    UpboundCredentialSpec,
    WebIdentityCredentialSpec,
)


def secret_spec(**extra):
    spec = {
        "credentials": {
            "source": "Secret",
            "secretRef": {"name": "aws-secret", "namespace": "crossplane-system", "key": "creds"},
        }
    }
    spec.update(extra)
    return spec


# =============================================================================
# decode 테스트
# =============================================================================


class TestDecodeCredentials:
    """credentials 디코딩 테스트"""

    def test_secret(self):
        config = decode(secret_spec())

        assert isinstance(config.credentials, SecretCredentialSpec)
        assert config.credentials.secret_ref == SecretReference("aws-secret", "crossplane-system", "creds")
        assert config.endpoint is None
        assert config.assume_role_chain == ()

    def test_secret_missing_ref_field(self):
        raw = {"credentials": {"source": "Secret", "secretRef": {"name": "aws-secret", "key": "creds"}}}

        with pytest.raises(InvalidProviderConfig) as exc_info:
            decode(raw)

        assert exc_info.value.field == "credentials.secretRef.namespace"

    def test_secret_without_ref(self):
        with pytest.raises(InvalidProviderConfig):
            decode({"credentials": {"source": "Secret"}})

    def test_web_identity(self):
        raw = {"credentials": {"source": "WebIdentity", "webIdentity": {"roleArn": "arn:aws:iam::1:role/W"}}}

        config = decode(raw)

        assert config.credentials == WebIdentityCredentialSpec(role_arn="arn:aws:iam::1:role/W")
        assert config.source is CredentialSource.WEB_IDENTITY

    def test_web_identity_without_role_arn(self):
        """역할 체인이 있으면 roleArn은 필요 없으므로 디코딩 단계에서는 허용"""
        config = decode({"credentials": {"source": "WebIdentity"}})
        assert config.credentials.role_arn == ""

    def test_upbound_decodes(self):
        """Upbound는 인식하되 리졸브 단계에서 거부"""
        config = decode({"credentials": {"source": "Upbound"}})
        assert isinstance(config.credentials, UpboundCredentialSpec)

    def test_unknown_source(self):
        with pytest.raises(UnsupportedCredentialSource) as exc_info:
            decode({"credentials": {"source": "InjectedIdentity"}})

        assert exc_info.value.source == "InjectedIdentity"

    def test_missing_source(self):
        with pytest.raises(UnsupportedCredentialSource):
            decode({"credentials": {}})

    def test_non_string_source_named_in_message(self):
        """문자열이 아닌 source 값은 메시지에 값이 드러남"""
        with pytest.raises(UnsupportedCredentialSource) as exc_info:
            decode({"credentials": {"source": 123}})

        assert "123" in str(exc_info.value)
        assert "not set" not in str(exc_info.value)
        assert exc_info.value.source == "123"

    def test_missing_credentials(self):
        with pytest.raises(InvalidProviderConfig) as exc_info:
            decode({})

        assert exc_info.value.field == "credentials"

    def test_not_a_mapping(self):
        with pytest.raises(InvalidProviderConfig):
            decode(["credentials"])

    def test_inline_keys_ignored_with_warning(self, caplog):
        raw = secret_spec()
        raw["credentials"]["accessKeyID"] = "AKIA"

        with caplog.at_level(logging.WARNING):
            config = decode(raw)

        assert isinstance(config.credentials, SecretCredentialSpec)
        assert "accessKeyID" in caplog.text


class TestDecodeEndpoint:
    """endpoint 디코딩 테스트"""

    def test_full_endpoint(self):
        raw = secret_spec(
            endpoint={
                "services": ["s3", "sts"],
                "hostnameImmutable": True,
                "url": {"type": "static", "static": "http://localstack:4566"},
            }
        )

        endpoint = decode(raw).endpoint

        assert endpoint.services == ("s3", "sts")
        assert endpoint.hostname_immutable is True
        assert endpoint.url.effective_url() == "http://localstack:4566"

    def test_endpoint_without_url(self):
        endpoint = decode(secret_spec(endpoint={"services": ["s3"]})).endpoint
        assert endpoint.url is None

    def test_services_must_be_strings(self):
        with pytest.raises(InvalidProviderConfig) as exc_info:
            decode(secret_spec(endpoint={"services": ["s3", 1]}))

        assert exc_info.value.field == "endpoint.services"

    def test_hostname_immutable_must_be_bool(self):
        with pytest.raises(InvalidProviderConfig) as exc_info:
            decode(secret_spec(endpoint={"hostnameImmutable": "yes"}))

        assert exc_info.value.field == "endpoint.hostnameImmutable"


class TestDecodeChainAndFlags:
    """assumeRoleChain 및 플래그 디코딩 테스트"""

    def test_chain_order_preserved(self):
        raw = secret_spec(
            assumeRoleChain=[{"roleARN": "arn:aws:iam::1:role/A"}, {"roleARN": "arn:aws:iam::2:role/B"}]
        )

        chain = decode(raw).assume_role_chain

        assert [entry.role_arn for entry in chain] == ["arn:aws:iam::1:role/A", "arn:aws:iam::2:role/B"]

    def test_chain_entry_requires_role_arn(self):
        with pytest.raises(InvalidProviderConfig) as exc_info:
            decode(secret_spec(assumeRoleChain=[{"roleArn": "wrong-case"}]))

        assert exc_info.value.field == "assumeRoleChain[0].roleARN"

    def test_flags(self):
        config = decode(secret_spec(s3_use_path_style=True, skip_region_validation=True))

        assert config.flags.s3_use_path_style is True
        assert config.flags.skip_region_validation is True
        assert config.flags.skip_credentials_validation is False


# =============================================================================
# get_assume_role_arn 테스트
# =============================================================================


class TestGetAssumeRoleArn:
    """get_assume_role_arn 테스트"""

    def test_first_entry(self):
        raw = {"assumeRoleChain": [{"roleARN": "arn:aws:iam::1:role/A"}, {"roleARN": "arn:aws:iam::2:role/B"}]}
        assert get_assume_role_arn(raw) == "arn:aws:iam::1:role/A"

    def test_ignores_credentials(self):
        """credentials가 없어도 체인만 읽음"""
        assert get_assume_role_arn({"assumeRoleChain": [{"roleARN": "arn:aws:iam::1:role/A"}]})

    def test_empty_chain(self):
        with pytest.raises(InvalidProviderConfig, match="assumeRoleChain is empty"):
            get_assume_role_arn(secret_spec())


# =============================================================================
# EngineSettings 테스트
# =============================================================================


class TestEngineSettings:
    """EngineSettings 테스트"""

    def test_defaults(self):
        settings = EngineSettings()
        assert settings.web_identity_token_file == DEFAULT_WEB_IDENTITY_TOKEN_FILE
        assert settings.role_session_name == DEFAULT_ROLE_SESSION_NAME == "crossplane-provider-aws"
        assert settings.expiry_window_seconds == 900
        assert settings.request_timeout is None

    def test_from_env(self):
        settings = EngineSettings.from_env({"AWS_WEB_IDENTITY_TOKEN_FILE": "/tmp/token"})
        assert settings.web_identity_token_file == "/tmp/token"

    def test_from_env_empty_value_uses_default(self):
        settings = EngineSettings.from_env({"AWS_WEB_IDENTITY_TOKEN_FILE": ""})
        assert settings.web_identity_token_file == DEFAULT_WEB_IDENTITY_TOKEN_FILE

    def test_from_env_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("AWS_WEB_IDENTITY_TOKEN_FILE", "/var/token")
        assert EngineSettings.from_env().web_identity_token_file == "/var/token"

    def test_from_env_overrides(self):
        settings = EngineSettings.from_env({}, request_timeout=5.0, expiry_window_seconds=600)
        assert settings.request_timeout == 5.0
        assert settings.expiry_window_seconds == 600
