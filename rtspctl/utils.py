"""Utilities: logging, URL parsing, validation helpers.

parse_rtsp_url returns a ServerLocator:
    (scheme, host, port, path, query)

A URL without a scheme is taken to be rtsp://, a URL without a port gets the
scheme's default port.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

from .exceptions import RTSPValidationError

logger = logging.getLogger("rtspctl")
logger.addHandler(logging.NullHandler())

_TOKEN_RE = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+\-.]*://")

DEFAULT_PORTS = {"rtsp": 554, "rtspu": 554, "rtsps": 322}


def validate_token(name: str, value: str) -> None:
    """Validate small token-like strings (header names or methods)."""
    if not isinstance(value, str):
        raise RTSPValidationError(f"{name} must be str")
    if not _TOKEN_RE.match(value):
        raise RTSPValidationError(f"Invalid {name}: {value!r}")


@dataclass(frozen=True)
class ServerLocator:
    host: str
    port: int = 554
    path: str = "/"
    scheme: str = "rtsp"
    query: str = ""

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        url = f"{self.scheme}://{host}:{self.port}{self.path}"
        if self.query:
            url += f"?{self.query}"
        return url


def parse_rtsp_url(url: str) -> ServerLocator:
    """Parse an RTSP/RTSPS URL.

    Returns:
        ServerLocator
    Raises:
        RTSPValidationError on a non-string, a foreign scheme or a missing host.
    """
    if not isinstance(url, str):
        raise RTSPValidationError("url must be a string")
    url = url.strip()
    if not _SCHEME_RE.match(url):
        url = "rtsp://" + url
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS:
        raise RTSPValidationError(f"Invalid RTSP scheme: {parsed.scheme!r}")

    # hostname strips credentials, port and IPv6 brackets
    host = parsed.hostname
    if not host:
        raise RTSPValidationError(f"Missing host in URL: {url!r}")

    try:
        port = parsed.port or DEFAULT_PORTS[scheme]
    except ValueError as exc:
        raise RTSPValidationError(f"Invalid port in URL: {url!r}") from exc

    path = parsed.path or "/"

    return ServerLocator(host=host, port=int(port), path=path, scheme=scheme, query=parsed.query)
