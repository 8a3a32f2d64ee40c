"""Transport header (RFC 2326 section 12.39) as returned by SETUP."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

from .exceptions import RTSPProtocolError

DEFAULT_NETWORK_TYPE = 'multicast'
RESERVED_KEYS = ('protocol', 'profile', 'network_type')


@dataclass
class TransportDescriptor:
    protocol: str
    profile: Optional[str]
    network_type: str = DEFAULT_NETWORK_TYPE
    lower_transport: Optional[str] = None
    extras: Dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.as_dict().get(key, default)

    def as_dict(self) -> Dict[str, Optional[str]]:
        out: Dict[str, Optional[str]] = dict(self.extras)
        out.update(protocol=self.protocol, profile=self.profile, network_type=self.network_type)
        return out


def parse_transport(field_string: Optional[str]) -> TransportDescriptor:
    """Parse ``RTP/AVP[/TCP];unicast;client_port=8000-8001;...``.

    The network type is the second field when that field is a bare token;
    when it is missing, empty or a ``key=value`` parameter it defaults to
    multicast.
    """
    if not field_string or not field_string.strip():
        raise RTSPProtocolError('Missing Transport header in SETUP response')
    fields = [f.strip() for f in field_string.split(';')]
    specifier = fields.pop(0).split('/')
    protocol = specifier[0]
    profile = specifier[1] if len(specifier) > 1 else None
    lower_transport = specifier[2] if len(specifier) > 2 else None

    network_type = DEFAULT_NETWORK_TYPE
    if fields and fields[0] and '=' not in fields[0]:
        network_type = fields.pop(0).lower()

    extras: Dict[str, str] = {}
    for item in fields:
        if not item:
            continue
        key, _, value = item.partition('=')
        key = key.strip()
        if key in RESERVED_KEYS:
            continue
        extras[key] = value.strip()

    return TransportDescriptor(protocol=protocol, profile=profile, network_type=network_type,
                               lower_transport=lower_transport, extras=extras)
