# xfnlib/auth/provider/assume_role.py
"""
AssumeRole Provider

기본 자격증명을 가진 STS client로 대상 역할을 위임받습니다.
역할 체인의 첫 번째 홉을 표현하며, CachedCredentialsProvider로 감싸 사용합니다.
"""

from __future__ import annotations

from typing import Any

from .base import BaseSTSProvider


class AssumeRoleProvider(BaseSTSProvider):
    """sts:AssumeRole 기반 Provider

    Example:
        sts = session.client("sts")
        provider = CachedCredentialsProvider(AssumeRoleProvider(sts, "arn:aws:iam::111111111111:role/A"))
    """

    def name(self) -> str:
        return f"assume-role:{self.role_arn}"

    def _call_sts(self) -> dict[str, Any]:
        return self._client.assume_role(**self._base_kwargs())
