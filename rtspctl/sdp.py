"""Minimal SDP parser suitable for RTSP DESCRIBE results.

Attributes keep their order and may repeat, both at session level and inside
each media section, since control URLs are looked up by position.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from .exceptions import RTSPProtocolError

class SDPParseError(RTSPProtocolError):
    pass

class Attribute(NamedTuple):
    name: str
    value: str

    def __str__(self) -> str:
        return f"a={self.name}:{self.value}" if self.value else f"a={self.name}"

@dataclass
class MediaSection:
    type: str
    port: int
    proto: str
    fmt: List[str]
    attributes: List[Attribute] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)

    def find(self, name: str) -> List[str]:
        return [a.value for a in self.attributes if a.name == name]

@dataclass
class SessionDescription:
    version: str = '0'
    origin: str = ''
    session_name: str = ''
    connection: Optional[str] = None
    timing: str = '0 0'
    attributes: List[Attribute] = field(default_factory=list)
    media_sections: List[MediaSection] = field(default_factory=list)
    lines: List[str] = field(default_factory=list)

    def find(self, name: str) -> List[str]:
        """Values of every session-level attribute called ``name``, in order."""
        return [a.value for a in self.attributes if a.name == name]

    def __str__(self) -> str:
        out = [f"v={self.version}", f"o={self.origin}", f"s={self.session_name}"]
        if self.connection:
            out.append(f"c={self.connection}")
        out.append(f"t={self.timing}")
        out.extend(self.lines)
        out.extend(str(a) for a in self.attributes)
        for m in self.media_sections:
            out.append(f"m={m.type} {m.port} {m.proto} {' '.join(m.fmt)}")
            out.extend(m.lines)
            out.extend(str(a) for a in m.attributes)
        return '\r\n'.join(out) + '\r\n'

def _attribute(value: str) -> Attribute:
    if ':' in value:
        k, v = value.split(':', 1)
        return Attribute(k, v)
    return Attribute(value, '')

def parse_sdp(sdp_text: str) -> SessionDescription:
    desc = SessionDescription()
    current_media: Optional[MediaSection] = None
    for raw in sdp_text.splitlines():
        line = raw.strip()
        if not line or '=' not in line:
            continue
        prefix, value = line[0], line[2:]
        if prefix == 'm':
            parts = value.split()
            if len(parts) < 4:
                raise SDPParseError(f'Malformed media line: {line!r}')
            try:
                port = int(parts[1].split('/')[0])
            except ValueError as exc:
                raise SDPParseError(f'Invalid media port: {line!r}') from exc
            current_media = MediaSection(type=parts[0], port=port, proto=parts[2], fmt=parts[3:])
            desc.media_sections.append(current_media)
        elif prefix == 'a':
            target = desc if current_media is None else current_media
            target.attributes.append(_attribute(value))
        elif current_media is not None:
            current_media.lines.append(line)
        elif prefix == 'v':
            desc.version = value
        elif prefix == 'o':
            desc.origin = value
        elif prefix == 's':
            desc.session_name = value
        elif prefix == 'c':
            desc.connection = value
        elif prefix == 't':
            desc.timing = value
        else:
            desc.lines.append(line)
    return desc
