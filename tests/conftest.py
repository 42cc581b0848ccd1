"""
tests/conftest.py - pytest 공통 픽스처

클러스터 저장소 대역(fake), STS 모킹, 테스트 헬퍼를 제공합니다.

Usage:
    def test_something(config_store, secret_store, mock_sts_client):
        # config_store: 메모리 기반 ConfigStore
        # secret_store: 메모리 기반 SecretStore
        # mock_sts_client: assume_role* 응답이 설정된 STS client 모킹
        pass
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Tuple
from unittest.mock import MagicMock

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from xfnlib.auth.types import ConfigNotFound, SecretNotFound  # noqa: E402

# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정

    기본 자격증명 체인이 실제 계정에 닿지 않도록 더미 값을 설정합니다.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_WEB_IDENTITY_TOKEN_FILE", raising=False)
    monkeypatch.delenv("AWS_ROLE_ARN", raising=False)

    yield


# =============================================================================
# 클러스터 저장소 대역
# =============================================================================


class FakeConfigStore:
    """메모리 기반 ConfigStore"""

    def __init__(self, records: Dict[str, Dict[str, Any]] | None = None):
        self.records = dict(records or {})
        self.calls: List[Tuple[str, str]] = []

    def get(self, kind: str, name: str) -> Dict[str, Any]:
        self.calls.append((kind, name))
        if name not in self.records:
            raise ConfigNotFound(name)
        return self.records[name]


class FakeSecretStore:
    """메모리 기반 SecretStore"""

    def __init__(self, secrets: Dict[Tuple[str, str], Dict[str, bytes]] | None = None):
        self.secrets = dict(secrets or {})
        self.calls: List[Tuple[str, str]] = []

    def get(self, name: str, namespace: str) -> Dict[str, bytes]:
        self.calls.append((name, namespace))
        if (namespace, name) not in self.secrets:
            raise SecretNotFound(name, namespace)
        return self.secrets[(namespace, name)]


@pytest.fixture
def config_store():
    """빈 ConfigStore (records에 직접 추가)"""
    return FakeConfigStore()


@pytest.fixture
def secret_store():
    """빈 SecretStore (secrets에 직접 추가)"""
    return FakeSecretStore()


# =============================================================================
# 샘플 데이터
# =============================================================================

CREDENTIALS_INI = b"[default]\naws_access_key_id = AKIAEXAMPLE\naws_secret_access_key = s3cr3t\n"


def sts_response(
    access_key_id: str = "ASIAEXAMPLE",
    expires_in: timedelta = timedelta(hours=1),
) -> Dict[str, Any]:
    """STS AssumeRole* 응답 생성"""
    return {
        "Credentials": {
            "AccessKeyId": access_key_id,
            "SecretAccessKey": "temp-secret",
            "SessionToken": "temp-token",
            "Expiration": datetime.now(timezone.utc) + expires_in,
        },
        "AssumedRoleUser": {
            "AssumedRoleId": "AROAEXAMPLE:session",
            "Arn": "arn:aws:sts::111111111111:assumed-role/A/session",
        },
    }


@pytest.fixture
def make_sts_response():
    """STS 응답 생성 함수"""
    return sts_response


@pytest.fixture
def credentials_ini():
    """[default] 섹션을 가진 INI 자격증명"""
    return CREDENTIALS_INI


@pytest.fixture
def mock_sts_client():
    """STS 클라이언트 모킹"""
    mock_client = MagicMock()
    mock_client.assume_role.return_value = sts_response()
    mock_client.assume_role_with_web_identity.return_value = sts_response("ASIAWEBIDENTITY")
    mock_client.get_caller_identity.return_value = {
        "Account": "111111111111",
        "Arn": "arn:aws:sts::111111111111:assumed-role/A/session",
        "UserId": "AROAEXAMPLE:session",
    }
    return mock_client


@pytest.fixture
def token_file(tmp_path):
    """연합 토큰 파일"""
    path = tmp_path / "token"
    path.write_text("eyJhbGciOi.test-token\n", encoding="utf-8")
    return path


# =============================================================================
# moto 통합 (선택적)
# =============================================================================

try:
    import moto

    @pytest.fixture
    def moto_sts():
        """moto를 사용한 STS 모킹"""
        with moto.mock_aws():
            import boto3

            yield boto3.client("sts", region_name="us-east-1")

except ImportError:
    # moto가 설치되지 않은 경우 더미 픽스처
    @pytest.fixture
    def moto_sts():
        pytest.skip("moto not installed")
