# tests/auth/test_auth_endpoint.py
"""
xfnlib/auth/endpoint.py 단위 테스트
"""

from xfnlib.auth.endpoint import Endpoint, EndpointOptions, EndpointResolver, build_endpoint_options
from xfnlib.auth.types import EndpointOverride, EndpointURL

LOCALSTACK = "http://localstack:4566"


class TestBuildEndpointOptions:
    """build_endpoint_options 테스트"""

    def test_no_override(self):
        options = build_endpoint_options(None)
        assert options.is_empty
        assert options.services == {}

    def test_override_without_url(self):
        assert build_endpoint_options(EndpointOverride(services=("s3",))).is_empty

    def test_static_url(self):
        override = EndpointOverride(
            services=("s3", "sts"),
            hostname_immutable=True,
            url=EndpointURL(type="static", static=LOCALSTACK),
        )

        options = build_endpoint_options(override)

        assert options.services == {"s3": LOCALSTACK, "sts": LOCALSTACK}
        assert options.resolver("ec2", "eu-west-1") == Endpoint(url=LOCALSTACK, hostname_immutable=True)

    def test_dynamic_url(self):
        """dynamic은 리졸버만 설정하고 서비스 맵은 비어있음"""
        override = EndpointOverride(services=("s3",), url=EndpointURL(type="dynamic", dynamic=LOCALSTACK))

        options = build_endpoint_options(override)

        assert options.services == {}
        assert options.resolver("s3").url == LOCALSTACK
        assert options.resolver("s3").hostname_immutable is False

    def test_empty_static_url(self):
        override = EndpointOverride(services=("s3",), url=EndpointURL(type="static"))
        assert build_endpoint_options(override) == EndpointOptions()

    def test_unknown_type(self):
        override = EndpointOverride(services=("s3",), url=EndpointURL(type="regional", static=LOCALSTACK))
        assert build_endpoint_options(override).is_empty


class TestEndpointResolver:
    """EndpointResolver 테스트"""

    def test_same_result_for_every_service_and_region(self):
        resolver = EndpointResolver(url=LOCALSTACK)

        results = {resolver(service, region) for service in ("s3", "sts", "ec2") for region in (None, "us-east-1")}

        assert results == {Endpoint(url=LOCALSTACK, hostname_immutable=False)}
