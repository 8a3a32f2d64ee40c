"""RTSP request construction and serialisation."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Optional, Tuple, Union

from .exceptions import RTSPValidationError
from .utils import validate_token

RTSP_VERSION = '1.0'
EOL = '\r\n'

HeaderPairs = List[Tuple[str, str]]
HeadersLike = Union[Mapping[str, object], Iterable[Tuple[str, object]], None]


def header_pairs(headers: HeadersLike) -> HeaderPairs:
    """Normalise a dict or an iterable of pairs into ordered (name, value) pairs."""
    if not headers:
        return []
    items = headers.items() if isinstance(headers, Mapping) else headers
    pairs: HeaderPairs = []
    try:
        for item in items:
            name, value = item
            pairs.append((str(name), str(value)))
    except (TypeError, ValueError) as exc:
        raise RTSPValidationError(f"Malformed headers: {headers!r}") from exc
    return pairs


class RTSPRequest:
    """A single request: method, request URI, ordered headers and body.

    Headers are kept in insertion order and duplicates are sent as given.
    """

    def __init__(self, method: str, uri: str, version: str = RTSP_VERSION):
        validate_token('method', method)
        self.method = method
        self.uri = uri
        self.version = version
        self.headers: HeaderPairs = []
        self.body = ''

    @classmethod
    def build(cls, method: str, uri: str) -> "RTSPRequest":
        return cls(method.upper(), str(uri))

    def with_headers(self, headers: HeadersLike) -> "RTSPRequest":
        """Replace the header list."""
        self.headers = []
        return self.add_headers(headers)

    def add_headers(self, headers: HeadersLike) -> "RTSPRequest":
        for name, value in header_pairs(headers):
            validate_token('header-name', name)
            if '\r' in value or '\n' in value:
                raise RTSPValidationError(f"Line break in value of header {name!r}")
            self.headers.append((name, value))
        return self

    def set_body(self, body: Optional[object]) -> "RTSPRequest":
        """None clears the body; anything else is sent as ``str(body)``."""
        self.body = '' if body is None else str(body)
        return self

    def to_text(self) -> str:
        lines = [f"{self.method} {self.uri} RTSP/{self.version}"]
        lines.extend(f"{k}: {v}" for k, v in self.headers)
        if self.body and not any(k.lower() == 'content-length' for k, _ in self.headers):
            lines.append(f"Content-Length: {len(self.body.encode())}")
        return EOL.join(lines) + EOL + EOL + self.body

    def serialize(self) -> bytes:
        return self.to_text().encode()

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"<RTSPRequest {self.method} {self.uri}>"
