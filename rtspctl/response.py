"""RTSP response decoding and the per-call result type."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from .exceptions import RTSPError, RTSPProtocolError
from .sdp import SDPParseError, SessionDescription, parse_sdp
from .utils import logger as log

_STATUS_RE = re.compile(r"RTSP/[12]\.[01]\s+([0-9]{3})\s*(.*)$")
_SDP_TYPES = ('application/sdp',)
_BLANK_LINE_RE = re.compile(r"\r?\n\r?\n")


@dataclass
class RTSPResponse:
    status_code: int
    reason: str
    headers: Dict[str, str]
    body: Union[str, SessionDescription] = ''
    raw: Optional[str] = None

    @classmethod
    def parse(cls, data: Union[bytes, str]) -> "RTSPResponse":
        raw = data.decode(errors='replace') if isinstance(data, bytes) else data
        text = raw.lstrip()
        if not text:
            raise RTSPProtocolError('Empty response')
        # only the header block is line-ending normalised; the body is kept verbatim
        sep = _BLANK_LINE_RE.search(text)
        if sep:
            header_part, body = text[:sep.start()], text[sep.end():]
        else:
            header_part, body = text, ''
        lines = header_part.replace('\r\n', '\n').split('\n')
        m = _STATUS_RE.match(lines[0].strip())
        if not m:
            raise RTSPProtocolError(f'Invalid status line: {lines[0]!r}')
        headers: Dict[str, str] = {}
        for line in lines[1:]:
            if not line.strip():
                continue
            if ':' not in line:
                raise RTSPProtocolError(f'Malformed header line: {line!r}')
            k, v = line.split(':', 1)
            headers[k.strip()] = v.strip()
        resp = cls(int(m.group(1)), m.group(2).strip(), headers, '', raw)
        resp.body = resp._decode_body(body)
        return resp

    def _decode_body(self, body: str) -> Union[str, SessionDescription]:
        length = self.header('Content-Length')
        if length and length.isdigit():
            encoded = body.encode()
            if len(encoded) > int(length):
                body = encoded[:int(length)].decode(errors='ignore')
        content_type = (self.content_type or '').split(';')[0].strip().lower()
        if body and content_type in _SDP_TYPES:
            try:
                return parse_sdp(body)
            except SDPParseError as exc:
                # a truncated read can cut the SDP mid-line; keep the text
                log.warning('Could not parse SDP body, keeping it raw: %s', exc)
        return body

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lname = name.lower()
        for k, v in self.headers.items():
            if k.lower() == lname:
                return v
        return default

    @property
    def cseq(self) -> Optional[int]:
        value = self.header('CSeq')
        if value is None or not value.strip().isdigit():
            return None
        return int(value)

    @property
    def session(self) -> Optional[str]:
        """Session identifier with parameters such as ``;timeout=60`` dropped."""
        value = self.header('Session')
        if not value:
            return None
        return value.split(';')[0].strip() or None

    @property
    def transport(self) -> Optional[str]:
        return self.header('Transport')

    @property
    def content_base(self) -> Optional[str]:
        return self.header('Content-Base')

    @property
    def content_location(self) -> Optional[str]:
        return self.header('Content-Location')

    @property
    def content_type(self) -> Optional[str]:
        return self.header('Content-Type')

    @property
    def connection(self) -> Optional[str]:
        return self.header('Connection')

    @property
    def public(self) -> Optional[str]:
        return self.header('Public')

    def __str__(self) -> str:
        return self.raw if self.raw is not None else f"RTSP/1.0 {self.status_code} {self.reason}"


@dataclass
class RTSPResult:
    """Outcome of one RTSPSession call.

    ``response`` is whatever the server sent back, or None when the exchange
    itself failed. ``error`` is set whenever the call did not succeed.
    """
    method: str
    response: Optional[RTSPResponse] = None
    error: Optional[RTSPError] = field(default=None)

    @property
    def ok(self) -> bool:
        return self.error is None and self.response is not None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response else None

    def raise_for_error(self) -> RTSPResponse:
        if self.error is not None:
            raise self.error
        return self.response
