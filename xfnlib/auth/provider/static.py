# xfnlib/auth/provider/static.py
"""
정적 자격증명 Provider

Secret에 저장된 INI 형식 자격증명을 파싱하여 만료되지 않는 자격증명으로 제공합니다.

INI 형식 (AWS CLI credentials 파일과 동일):
    [default]
    aws_access_key_id = AKIA...
    aws_secret_access_key = ...
    aws_session_token = ...       # 옵션
"""

from __future__ import annotations

import configparser
import logging

from ..types import (
    CredentialProvider,
    Credentials,
    MalformedCredentialFile,
    MissingDefaultSection,
    MissingSecretKey,
    SecretReference,
    SecretStore,
)

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "default"

# INI 키 -> Credentials 필드
_CREDENTIAL_KEYS = {
    "aws_access_key_id": "access_key_id",
    "aws_secret_access_key": "secret_access_key",
    "aws_session_token": "session_token",
}


def parse_credentials_file(data: bytes | str, section: str = DEFAULT_SECTION) -> Credentials:
    """INI 자격증명 파싱

    없는 키는 에러가 아닌 빈 문자열로 채웁니다.
    키 이름은 대소문자를 구분하며, 같은 섹션이나 키가 반복되면 뒤의 값이 앞의 값을 덮어씁니다.

    Args:
        data: INI 형식 원본 데이터
        section: 읽을 섹션 이름 (기본: default)

    Returns:
        만료 시간이 없는 Credentials

    Raises:
        MalformedCredentialFile: INI로 파싱할 수 없는 경우
        MissingDefaultSection: 섹션이 없는 경우
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise MalformedCredentialFile("credentials are not valid UTF-8", cause=e) from e
    else:
        text = data

    # 중복 섹션은 병합하고 중복 키는 마지막 값 사용, 키 대소문자 구분
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str
    try:
        parser.read_string(text)
    except configparser.MissingSectionHeaderError:
        # 섹션 헤더가 없는 INI는 [default] 섹션이 없는 것으로 취급
        raise MissingDefaultSection(section) from None
    except configparser.Error as e:
        raise MalformedCredentialFile(cause=e) from e

    if not parser.has_section(section):
        raise MissingDefaultSection(section)

    values = {field: parser.get(section, key, fallback="") for key, field in _CREDENTIAL_KEYS.items()}
    return Credentials(**values)


def load_credentials_from_secret(store: SecretStore, ref: SecretReference) -> Credentials:
    """Secret에서 INI 자격증명을 읽어 파싱

    Args:
        store: Secret 저장소
        ref: Secret 위치 (name, namespace, key)

    Returns:
        Credentials

    Raises:
        SecretNotFound: Secret이 없는 경우
        MissingSecretKey: Secret에 key가 없는 경우
        MalformedCredentialFile / MissingDefaultSection: 파싱 실패
    """
    data = store.get(ref.name, ref.namespace)

    if ref.key not in data:
        raise MissingSecretKey(ref.key, ref.name, ref.namespace)

    credentials = parse_credentials_file(data[ref.key])
    logger.debug("Secret %s/%s에서 자격증명 로드 완료", ref.namespace, ref.name)
    return credentials


class StaticCredentialsProvider(CredentialProvider):
    """만료되지 않는 정적 자격증명 Provider

    네트워크 호출 없이 항상 같은 자격증명을 반환합니다.
    """

    def __init__(self, credentials: Credentials, name: str = "static"):
        self._credentials = credentials
        self._name = name

    @classmethod
    def from_values(
        cls,
        access_key_id: str,
        secret_access_key: str,
        session_token: str = "",
    ) -> StaticCredentialsProvider:
        """키 값으로 생성"""
        return cls(Credentials(access_key_id, secret_access_key, session_token))

    @property
    def can_expire(self) -> bool:
        return False

    def name(self) -> str:
        return self._name

    def fetch(self) -> Credentials:
        return self._credentials
