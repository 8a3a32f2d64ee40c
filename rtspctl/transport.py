"""Control-channel transport: one TCP connection, blocking send-then-receive.

A receive is a single ``recv`` call capped at ``max_bytes``. Nothing is
reassembled across reads, so a response larger than the cap (3000 bytes by
default) comes back truncated; raise ``max_bytes`` for servers that send large
SDP bodies.
"""

from __future__ import annotations

import socket
import time
from typing import Optional

from .exceptions import RTSPTimeoutError, RTSPTransportError
from .utils import logger

MAX_BYTES_TO_RECEIVE = 3000


class TCPTransport:
    def __init__(self, host: str, port: int, timeout: float = 30.0,
                 sock: Optional[socket.socket] = None,
                 max_bytes: int = MAX_BYTES_TO_RECEIVE):
        self.host = host
        self.port = int(port)
        self.timeout = float(timeout)
        self.max_bytes = int(max_bytes)
        self._sock: Optional[socket.socket] = sock

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def connect(self) -> None:
        try:
            self._sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
            logger.debug("TCPTransport connected to %s:%d", self.host, self.port)
        except socket.timeout as exc:
            raise RTSPTimeoutError(f"Connecting to {self.host}:{self.port} timed out") from exc
        except OSError as exc:
            raise RTSPTransportError(str(exc)) from exc

    def _remaining(self, deadline: Optional[float]) -> Optional[float]:
        if deadline is None:
            return self.timeout
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise RTSPTimeoutError("Deadline expired")
        return remaining

    def send(self, data: bytes, deadline: Optional[float] = None) -> None:
        if not self._sock:
            raise RTSPTransportError("Not connected")
        try:
            self._sock.settimeout(self._remaining(deadline))
            self._sock.sendall(data)
        except socket.timeout as exc:
            raise RTSPTimeoutError("Timed out while sending request") from exc
        except OSError as exc:
            raise RTSPTransportError(f"Send failed: {exc}") from exc

    def receive(self, max_bytes: Optional[int] = None, deadline: Optional[float] = None) -> bytes:
        if not self._sock:
            raise RTSPTransportError("Not connected")
        try:
            self._sock.settimeout(self._remaining(deadline))
            data = self._sock.recv(max_bytes or self.max_bytes)
        except socket.timeout as exc:
            raise RTSPTimeoutError("Timed out waiting for response") from exc
        except OSError as exc:
            raise RTSPTransportError(f"Receive failed: {exc}") from exc
        if not data:
            raise RTSPTransportError("Connection closed by server")
        return data

    def exchange(self, data: bytes, timeout: Optional[float] = None) -> bytes:
        """Send one request and read one response under a single deadline."""
        deadline = time.monotonic() + (self.timeout if timeout is None else float(timeout))
        self.send(data, deadline)
        return self.receive(deadline=deadline)

    def close(self) -> None:
        try:
            if self._sock:
                self._sock.close()
        finally:
            self._sock = None
