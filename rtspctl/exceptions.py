"""RTSP-specific exception hierarchy."""

from typing import Optional


class RTSPError(Exception):
    """Base RTSP exception."""
    pass

class RTSPValidationError(RTSPError):
    """Raised when input validation fails."""
    pass

class RTSPTransportError(RTSPError):
    """Transport-level errors (socket/connect/send/receive)."""
    pass

class RTSPTimeoutError(RTSPTransportError):
    """The request/response exchange did not finish before its deadline."""
    pass

class RTSPProtocolError(RTSPError):
    """Raised on 4xx/5xx or unknown status codes and on framing errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, reason: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

class RTSPSequenceMismatchError(RTSPError):
    """The server answered with a CSeq other than the one just sent."""
    pass

class RTSPSessionMismatchError(RTSPError):
    """The server answered for a session other than ours."""
    pass

class RTSPSessionError(RTSPError):
    """The operation needs session state that has not been established yet."""
    pass
