from __future__ import annotations

from urllib.parse import urlparse

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from awstoolbox.auth.endpoints import proxy_url, sts_endpoint_url

hosts = st.from_regex(
    r"(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,}", fullmatch=True
)
# Strategy: absolute http/https URLs with host
abs_urls = st.builds(
    lambda scheme, host: f"{scheme}://{host}",
    scheme=st.sampled_from(["http", "https"]),
    host=hosts,
)


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(hosts)
def test_sts_endpoint_url__bare_host_gets_https(host: str) -> None:
    """Bare host names become https URLs for that host."""
    url = sts_endpoint_url(host)
    parsed = urlparse(url)
    assert parsed.scheme == "https"
    assert parsed.hostname == host


@settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(abs_urls)
def test_sts_endpoint_url__absolute_urls_kept(url: str) -> None:
    assert sts_endpoint_url(url) == url
    assert sts_endpoint_url(url + "/") == url


def test_sts_endpoint_url__keeps_port() -> None:
    assert sts_endpoint_url("localhost:4566") == "https://localhost:4566"


@pytest.mark.parametrize("bad", ["://", "https://", "http:///only-path", ""])
def test_sts_endpoint_url__invalid_inputs_raise(bad: str) -> None:
    """Endpoints without a host must raise ValueError."""
    with pytest.raises(ValueError, match="must name a host"):
        sts_endpoint_url(bad)


def test_proxy_url() -> None:
    assert proxy_url("proxy.company.com", 8080) == "http://proxy.company.com:8080"
