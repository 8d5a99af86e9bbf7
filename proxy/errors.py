"""Failures the gateway can hit while serving a request."""


class ProxyError(Exception):
    """Base for every error raised by the proxy."""


class UpstreamAuthError(ProxyError):
    """The OAuth token endpoint refused to issue an access token."""


class UpstreamAPIError(ProxyError):
    """The Spotify Web API answered with a non-success status."""

    def __init__(self, status: int):
        super().__init__(f"Spotify API error: {status}")
        self.status = status


class NetworkError(ProxyError):
    """The request never got an HTTP answer (DNS, connect, timeout)."""


class NotFoundError(ProxyError):
    """Unknown gateway route."""

    def __init__(self, message: str = "Not found"):
        super().__init__(message)
