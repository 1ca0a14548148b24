from typing import Final
from urllib.parse import urlparse

DEFAULT_STS_SCHEME: Final[str] = "https"


def sts_endpoint_url(endpoint: str) -> str:
    """Return an absolute URL for a configured STS endpoint.

    Endpoints are commonly configured as a bare host name
    (e.g. "sts.eu-west-1.amazonaws.com"); those get an https scheme.

    Args:
        endpoint: Host name or absolute URL of the STS endpoint.

    Returns:
        The "<scheme>://<host>[:port]" form of the endpoint, keeping any path.

    Raises:
        ValueError: If no host can be found in ``endpoint``.
    """
    candidate = endpoint if "://" in endpoint else f"{DEFAULT_STS_SCHEME}://{endpoint}"
    parsed = urlparse(candidate)
    if not parsed.scheme or not parsed.hostname:
        raise ValueError(f"STS endpoint must name a host: {endpoint!r}")
    return candidate.rstrip("/")


def proxy_url(host: str, port: int) -> str:
    return f"http://{host}:{port}"
