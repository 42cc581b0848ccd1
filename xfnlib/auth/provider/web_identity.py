# xfnlib/auth/provider/web_identity.py
"""
WebIdentity Provider

서비스 어카운트 토큰 파일을 읽어 sts:AssumeRoleWithWebIdentity로 역할을 위임받습니다.
토큰 파일은 갱신될 수 있으므로 fetch()마다 다시 읽습니다.

서비스 어카운트에 다음 어노테이션이 필요합니다:
    annotations:
      eks.amazonaws.com/role-arn: YOUR_ROLE_ARN
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..types import AssumeRoleFailed
from .base import BaseSTSProvider

logger = logging.getLogger(__name__)


class WebIdentityRoleProvider(BaseSTSProvider):
    """sts:AssumeRoleWithWebIdentity 기반 Provider

    Attributes:
        token_file: 연합 토큰 파일 경로
    """

    def __init__(
        self,
        client: Any,
        role_arn: str,
        token_file: str | Path,
        role_session_name: str | None = None,
        duration_seconds: int | None = None,
    ):
        super().__init__(client, role_arn, role_session_name, duration_seconds)
        self.token_file = Path(token_file)

    def name(self) -> str:
        return f"web-identity:{self.role_arn}"

    def _read_token(self) -> str:
        logger.debug("연합 토큰 파일 읽기: %s", self.token_file)
        try:
            token = self.token_file.read_text(encoding="utf-8").strip()
        except OSError as e:
            raise AssumeRoleFailed(
                self.role_arn,
                f"failed to read web identity token file {self.token_file} for role",
                cause=e,
            ) from e
        if not token:
            raise AssumeRoleFailed(self.role_arn, f"web identity token file {self.token_file} is empty for role")
        return token

    def _call_sts(self) -> dict[str, Any]:
        # 토큰 파일을 읽을 수 없으면 AssumeRoleFailed가 그대로 전파됨
        return self._client.assume_role_with_web_identity(
            WebIdentityToken=self._read_token(),
            **self._base_kwargs(),
        )
