# tests/auth/test_auth_resolver.py
"""
xfnlib/auth/resolver.py 단위 테스트

credentials.source별 Provider 선택 로직 테스트.
STS client 생성(boto3.Session)은 모킹합니다.
"""

import logging
from unittest.mock import patch

import pytest
from botocore.exceptions import NoRegionError

from xfnlib.auth.cache import CachedCredentialsProvider
from xfnlib.auth.config import EngineSettings
from xfnlib.auth.endpoint import EndpointOptions, EndpointResolver
from xfnlib.auth.provider import AssumeRoleProvider, StaticCredentialsProvider, WebIdentityRoleProvider
from xfnlib.auth.resolver import CredentialResolver
from xfnlib.auth.types import (
    ConfigAssemblyFailed,
    CredentialSource,
    InvalidProviderConfig,
    ProviderConfiguration,
    RoleChainEntry,
    SecretCredentialSpec,
    SecretReference,
    UnsupportedCredentialSource,
    UpboundCredentialSpec,
    WebIdentityCredentialSpec,
)

ROLE_A = "arn:aws:iam::111111111111:role/A"
ROLE_B = "arn:aws:iam::222222222222:role/B"
ROLE_W = "arn:aws:iam::333333333333:role/W"

SECRET_CONFIG = ProviderConfiguration(
    credentials=SecretCredentialSpec(SecretReference("aws-secret", "crossplane-system", "creds")),
    assume_role_chain=(RoleChainEntry(ROLE_A),),
)


@pytest.fixture
def mock_session(mock_sts_client):
    """STS client를 반환하는 boto3.Session 모킹"""
    with patch("xfnlib.auth.resolver.boto3.Session") as session_class:
        session_class.return_value.client.return_value = mock_sts_client
        yield session_class


class TestSecretSource:
    """source=Secret 테스트"""

    def test_static_provider(self, secret_store, credentials_ini, mock_session):
        secret_store.secrets[("crossplane-system", "aws-secret")] = {"creds": credentials_ini}

        resolution = CredentialResolver(secret_store).resolve(SECRET_CONFIG, "us-east-1")

        assert isinstance(resolution.provider, StaticCredentialsProvider)
        assert resolution.provider.fetch().access_key_id == "AKIAEXAMPLE"
        assert resolution.source is CredentialSource.SECRET
        assert resolution.role_arn is None

    def test_chain_ignored(self, secret_store, credentials_ini, mock_session):
        """Secret이면 역할 체인이 있어도 STS를 호출하지 않음"""
        secret_store.secrets[("crossplane-system", "aws-secret")] = {"creds": credentials_ini}

        CredentialResolver(secret_store).resolve(SECRET_CONFIG, "us-east-1")

        mock_session.assert_not_called()


class TestWebIdentityWithChain:
    """source=WebIdentity + assumeRoleChain 테스트"""

    def config(self, *roles):
        return ProviderConfiguration(
            credentials=WebIdentityCredentialSpec(),
            assume_role_chain=tuple(RoleChainEntry(r) for r in roles),
        )

    def test_first_hop(self, secret_store, mock_session, mock_sts_client):
        resolution = CredentialResolver(secret_store).resolve(self.config(ROLE_A), "us-east-1")

        assert isinstance(resolution.provider, CachedCredentialsProvider)
        assert isinstance(resolution.provider.provider, AssumeRoleProvider)
        assert resolution.role_arn == ROLE_A
        assert resolution.ignored_role_arns == ()
        mock_session.assert_called_once_with(region_name="us-east-1")
        mock_sts_client.assume_role.assert_not_called()

        creds = resolution.provider.fetch()

        assert creds.access_key_id == "ASIAEXAMPLE"
        assert mock_sts_client.assume_role.call_args.kwargs["RoleArn"] == ROLE_A
        assert secret_store.calls == []

    def test_only_first_entry_used(self, secret_store, mock_session, mock_sts_client, caplog):
        with caplog.at_level(logging.WARNING):
            resolution = CredentialResolver(secret_store).resolve(self.config(ROLE_A, ROLE_B), "us-east-1")

        resolution.provider.fetch()

        assert resolution.ignored_role_arns == (ROLE_B,)
        assert ROLE_B in caplog.text
        assert mock_sts_client.assume_role.call_count == 1
        assert mock_sts_client.assume_role.call_args.kwargs["RoleArn"] == ROLE_A

    def test_sts_endpoint_override(self, secret_store, mock_session):
        endpoint = EndpointOptions(resolver=EndpointResolver("http://localstack:4566"))

        CredentialResolver(secret_store).resolve(self.config(ROLE_A), "us-east-1", endpoint)

        kwargs = mock_session.return_value.client.call_args.kwargs
        assert kwargs["endpoint_url"] == "http://localstack:4566"

    def test_request_timeout(self, secret_store, mock_session):
        settings = EngineSettings(request_timeout=3.0)

        CredentialResolver(secret_store, settings).resolve(self.config(ROLE_A), "us-east-1")

        config = mock_session.return_value.client.call_args.kwargs["config"]
        assert config.connect_timeout == 3.0
        assert config.read_timeout == 3.0

    def test_sdk_load_failure(self, secret_store, mock_session):
        mock_session.return_value.client.side_effect = NoRegionError()

        with pytest.raises(ConfigAssemblyFailed):
            CredentialResolver(secret_store).resolve(self.config(ROLE_A), None)


class TestWebIdentityWithoutChain:
    """source=WebIdentity, 체인 없음 테스트"""

    def test_token_file_provider(self, secret_store, mock_session, mock_sts_client, token_file):
        settings = EngineSettings(web_identity_token_file=str(token_file))
        config = ProviderConfiguration(credentials=WebIdentityCredentialSpec(role_arn=ROLE_W))

        resolution = CredentialResolver(secret_store, settings).resolve(config, "us-east-1")

        inner = resolution.provider.provider
        assert isinstance(inner, WebIdentityRoleProvider)
        assert str(inner.token_file) == str(token_file)
        assert inner.role_session_name == "crossplane-provider-aws"
        assert resolution.role_arn == ROLE_W
        mock_sts_client.assume_role_with_web_identity.assert_not_called()

        assert resolution.provider.fetch().access_key_id == "ASIAWEBIDENTITY"

    def test_role_arn_required(self, secret_store, mock_session):
        config = ProviderConfiguration(credentials=WebIdentityCredentialSpec())

        with pytest.raises(InvalidProviderConfig) as exc_info:
            CredentialResolver(secret_store).resolve(config, "us-east-1")

        assert exc_info.value.field == "credentials.webIdentity.roleArn"
        mock_session.assert_not_called()


class TestUpboundSource:
    """source=Upbound 테스트"""

    def test_rejected_without_network(self, secret_store, mock_session):
        config = ProviderConfiguration(credentials=UpboundCredentialSpec(), assume_role_chain=(RoleChainEntry(ROLE_A),))

        with pytest.raises(UnsupportedCredentialSource, match="upbound credentials not supported"):
            CredentialResolver(secret_store).resolve(config, "us-east-1")

        mock_session.assert_not_called()
        assert secret_store.calls == []
