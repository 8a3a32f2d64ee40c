"""rtspctl - RTSP control-channel client

Public API:
  - RTSPSession: one RTSP control session (OPTIONS ... RECORD)
  - RTSPResult / RTSPResponse: what each call returns
  - SessionState: INIT / READY / PLAYING / RECORDING
  - parse_rtsp_url, parse_transport, parse_sdp: utility parsers
  - configure: process-wide logging configuration
"""

from .config import LogConfig, configure, get_config
from .descriptor import TransportDescriptor, parse_transport
from .message import RTSPRequest
from .response import RTSPResponse, RTSPResult
from .sdp import SessionDescription, SDPParseError, parse_sdp
from .session import RTSPSession
from .state import SessionState
from .utils import ServerLocator, parse_rtsp_url
from .exceptions import *

__all__ = [
    "RTSPSession",
    "RTSPRequest",
    "RTSPResponse",
    "RTSPResult",
    "SessionState",
    "ServerLocator",
    "TransportDescriptor",
    "SessionDescription",
    "LogConfig",
    "configure",
    "get_config",
    "parse_rtsp_url",
    "parse_transport",
    "parse_sdp",
    # exceptions
    "RTSPError", "RTSPValidationError", "RTSPTransportError", "RTSPTimeoutError",
    "RTSPProtocolError", "RTSPSequenceMismatchError", "RTSPSessionMismatchError",
    "RTSPSessionError", "SDPParseError",
]
