# xfnlib/__init__.py
"""
xfnlib - Crossplane 컴포지션 함수용 AWS 헬퍼 라이브러리

컴포지션 함수가 클러스터의 ProviderConfig로 AWS에 접근하고
컴포지트 리소스를 조립하는 데 필요한 기능을 묶은 최상위 패키지입니다.

아키텍처:
    xfnlib/
    ├── auth/           # ProviderConfig 리졸브 (자격증명, 엔드포인트, 설정 조립)
    ├── kubernetes/     # 클러스터 저장소 (ProviderConfig, Secret)
    ├── composite/      # 컴포지트 리소스 변환 헬퍼
    └── exceptions.py   # 통합 예외 계층

Usage:
    from xfnlib.auth import resolve_config

    cfg, services = resolve_config("us-east-1", "default")
    ec2 = cfg.client("ec2")

    # 예외 처리
    from xfnlib.exceptions import XfnError, is_access_denied
    try:
        result = ec2.describe_vpcs()
    except Exception as e:
        if is_access_denied(e):
            ...
"""

__version__ = "0.1.0"
