"""RTSPSession: the client side of one RTSP control session.

One RTSPSession owns one TCP connection and keeps the CSeq counter, the
session identifier, the session state and whatever SETUP and DESCRIBE
returned. Every control method goes through ``request()``:

    build -> send/receive -> check CSeq -> classify status -> update state

Failures of type RTSPError never leave a call; they are logged and returned
in the RTSPResult next to whatever response was received. Use
``result.ok`` or ``result.raise_for_error()`` to tell success from failure.

A session is not thread-safe and sends one request at a time.
"""

from __future__ import annotations

import logging
import socket
from typing import Callable, List, Mapping, Optional, Set, TypeVar

from .config import LogConfig, get_config
from .descriptor import TransportDescriptor, parse_transport
from .exceptions import (RTSPError, RTSPProtocolError, RTSPSequenceMismatchError,
                         RTSPSessionError, RTSPSessionMismatchError)
from .message import HeadersLike, HeaderPairs, RTSPRequest, header_pairs
from .response import RTSPResponse, RTSPResult
from .sdp import SessionDescription
from .state import SessionState, next_state
from .transport import MAX_BYTES_TO_RECEIVE, TCPTransport
from .utils import ServerLocator, parse_rtsp_url

DEFAULT_TIMEOUT = 30.0
CLOSED_CONNECTION = ('close', 'closed')

T = TypeVar('T')


def _with_defaults(defaults: Mapping[str, str], headers: HeadersLike) -> HeaderPairs:
    """Caller headers, preceded by each default the caller did not set."""
    pairs = header_pairs(headers)
    given = {k.lower() for k, _ in pairs}
    return [(k, v) for k, v in defaults.items() if k.lower() not in given] + pairs


def _join(base: str, control: str) -> str:
    if '://' in control:
        return control
    return f"{base}{control}"


class RTSPSession:
    """Represents an RTSP session (client)."""

    def __init__(self,
                 url: str,
                 timeout: float = DEFAULT_TIMEOUT,
                 sock: Optional[socket.socket] = None,
                 log_config: Optional[LogConfig] = None,
                 user_agent: Optional[str] = 'rtspctl/0.1',
                 max_bytes: int = MAX_BYTES_TO_RECEIVE):
        self._server_uri = parse_rtsp_url(url)
        self.timeout = float(timeout)
        self.user_agent = user_agent
        self.log_config = log_config or get_config()

        self.cseq = 1
        self.session_id: Optional[str] = None
        self.session_state = SessionState.INIT
        self.supported_methods: Set[str] = set()

        self._session_description: Optional[SessionDescription] = None
        self._content_base: Optional[str] = None
        self._aggregate_control_track: Optional[str] = None
        self._media_control_tracks: List[str] = []
        self._transport: Optional[TransportDescriptor] = None

        self.transport_impl = TCPTransport(self._server_uri.host, self._server_uri.port,
                                           timeout=self.timeout, sock=sock, max_bytes=max_bytes)

    def __repr__(self) -> str:
        return (f"<RTSPSession {self._server_uri} cseq={self.cseq} "
                f"session={self.session_id!r} state={self.session_state.name}>")

    # server locator
    @property
    def server_url(self) -> ServerLocator:
        return self._server_uri

    @server_url.setter
    def server_url(self, new_url: str) -> None:
        """Talk to a different URL on the same connection from now on."""
        self._server_uri = parse_rtsp_url(new_url)

    # connection management
    def connect(self) -> None:
        if not self.transport_impl.connected:
            self.transport_impl.connect()
            self.log_config.log('Connected to %s:%d', self._server_uri.host, self._server_uri.port,
                                level=logging.INFO)

    def close(self) -> None:
        self.transport_impl.close()

    def __enter__(self) -> "RTSPSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # state derived from SETUP / DESCRIBE
    @property
    def transport(self) -> TransportDescriptor:
        if self._transport is None:
            raise RTSPSessionError('No transport negotiated yet.  Run SETUP first.')
        return self._transport

    def _require_description(self) -> SessionDescription:
        if self._session_description is None:
            raise RTSPSessionError('No session description retrieved yet.  Run DESCRIBE first.')
        return self._session_description

    @property
    def session_description(self) -> SessionDescription:
        return self._require_description()

    @property
    def content_base(self) -> str:
        self._require_description()
        return self._content_base

    @property
    def aggregate_control_track(self) -> str:
        """Content base plus the session-level control attribute, ``*`` removed."""
        self._require_description()
        return self._aggregate_control_track

    @property
    def media_control_tracks(self) -> List[str]:
        """Content base plus each media-level control attribute, in SDP order."""
        self._require_description()
        return list(self._media_control_tracks)

    # validators
    def compare_sequence_number(self, server_cseq: Optional[int]) -> None:
        if self.cseq != server_cseq:
            raise RTSPSequenceMismatchError(
                f"Sequence number mismatch.  Client: {self.cseq}, Server: {server_cseq}")

    def compare_session_number(self, server_session: Optional[str]) -> None:
        if self.session_id != server_session:
            raise RTSPSessionMismatchError(
                f"Session number mismatch.  Client: {self.session_id}, Server: {server_session}")

    def ensure_session(self, operation: Callable[..., T], *args, **kwargs) -> T:
        """Run ``operation`` only once SETUP has produced a session identifier."""
        if not self.session_id:
            raise RTSPSessionError('Session number not retrieved from server yet.  Run SETUP first.')
        return operation(*args, **kwargs)

    # request pipeline
    def _standard_headers(self) -> HeaderPairs:
        headers = [('CSeq', str(self.cseq))]
        if self.session_id:
            headers.append(('Session', self.session_id))
        if self.user_agent:
            headers.append(('User-Agent', self.user_agent))
        return headers

    def send_message(self, message: RTSPRequest) -> RTSPResponse:
        """Send one request and decode the reply; no state is touched."""
        self.connect()
        self.log_config.log('Sending %s to %s', message.method, message.uri)
        self.log_config.log_lines(message.to_text().splitlines())
        data = self.transport_impl.exchange(message.serialize(), self.timeout)
        self.log_config.log('Received response:')
        self.log_config.log_lines(data.decode(errors='replace').splitlines())
        return RTSPResponse.parse(data)

    def _reset_state(self) -> None:
        self.session_state = SessionState.INIT
        self.session_id = None
        self.log_config.log('Server closed the connection; session state reset.', level=logging.INFO)

    def _classify(self, method: str, response: RTSPResponse,
                  on_success: Optional[Callable[[RTSPResponse], None]]) -> None:
        self.compare_sequence_number(response.cseq)
        code, reason = response.status_code, response.reason
        if 200 <= code < 300:
            if on_success:
                on_success(response)
            new_state = next_state(self.session_state, method)
            if new_state is not self.session_state:
                self.log_config.log('State %s -> %s', self.session_state.name, new_state.name)
                self.session_state = new_state
            self.cseq += 1
        elif 400 <= code < 600:
            if (response.connection or '').strip().lower() in CLOSED_CONNECTION:
                self._reset_state()
            raise RTSPProtocolError(f"{code}: {reason}", code, reason)
        else:
            raise RTSPProtocolError(f"Unknown response code: {code}", code, reason)

    def request(self, method: str, uri: Optional[str] = None, headers: HeadersLike = None,
                body: Optional[object] = None,
                on_success: Optional[Callable[[RTSPResponse], None]] = None,
                defaults: Optional[Mapping[str, str]] = None) -> RTSPResult:
        """Run one request/response exchange and apply ``on_success`` on 2xx.

        ``defaults`` are sent ahead of ``headers`` unless the caller sets the
        same header.
        """
        result = RTSPResult(method.upper())
        try:
            message = RTSPRequest.build(method, uri or str(self._server_uri))
            message.with_headers(self._standard_headers())
            message.add_headers(_with_defaults(defaults or {}, headers))
            message.set_body(body)
            result.response = self.send_message(message)
            self._classify(message.method, result.response, on_success)
        except RTSPError as exc:
            result.error = exc
            self.log_config.log('Got exception: %s', exc, level=logging.WARNING, exc_info=True)
        return result

    # completions
    def _on_options(self, response: RTSPResponse) -> None:
        methods = (response.public or '').split(',')
        self.supported_methods = {m.strip().upper() for m in methods if m.strip()}

    def _on_describe(self, response: RTSPResponse) -> None:
        description = response.body
        if not isinstance(description, SessionDescription):
            raise RTSPProtocolError('DESCRIBE response carried no session description')
        base = response.content_base or response.content_location
        if not base:
            base = str(self._server_uri)
            if not base.endswith('/'):
                base += '/'
        controls = description.find('control')
        aggregate = _join(base, controls[0].replace('*', '')) if controls else base
        media = [_join(base, value)
                 for section in description.media_sections
                 for value in section.find('control')]

        self._session_description = description
        self._content_base = base
        self._aggregate_control_track = aggregate
        self._media_control_tracks = media

    def _on_setup(self, response: RTSPResponse) -> None:
        session_id = response.session
        if not session_id:
            raise RTSPProtocolError('SETUP response carried no Session header')
        descriptor = parse_transport(response.transport)
        self.session_id = session_id
        self._transport = descriptor

    def _on_teardown(self, response: RTSPResponse) -> None:
        self.session_id = None

    # one method per RTSP request
    def options(self, headers: HeadersLike = None) -> RTSPResult:
        return self.request('OPTIONS', headers=headers, on_success=self._on_options)

    def describe(self, headers: HeadersLike = None) -> RTSPResult:
        return self.request('DESCRIBE', headers=headers, on_success=self._on_describe,
                            defaults={'Accept': 'application/sdp'})

    def announce(self, request_url: str, description, headers: HeadersLike = None) -> RTSPResult:
        return self.request('ANNOUNCE', request_url, headers, description,
                            defaults={'Content-Type': 'application/sdp'})

    def setup(self, track: Optional[str] = None, transport: Optional[str] = None,
              headers: HeadersLike = None) -> RTSPResult:
        return self.request('SETUP', track, headers, on_success=self._on_setup,
                            defaults={'Transport': transport} if transport else None)

    def play(self, track: Optional[str] = None, headers: HeadersLike = None) -> RTSPResult:
        return self.request('PLAY', track, headers)

    def pause(self, track: Optional[str] = None, headers: HeadersLike = None) -> RTSPResult:
        return self.request('PAUSE', track, headers)

    def teardown(self, track: Optional[str] = None, headers: HeadersLike = None) -> RTSPResult:
        return self.request('TEARDOWN', track, headers, on_success=self._on_teardown)

    def get_parameter(self, track: Optional[str] = None, body: str = '',
                      headers: HeadersLike = None) -> RTSPResult:
        return self.request('GET_PARAMETER', track, headers, body)

    def set_parameter(self, track: Optional[str] = None, parameters: str = '',
                      headers: HeadersLike = None) -> RTSPResult:
        return self.request('SET_PARAMETER', track, headers, parameters)

    def record(self, track: Optional[str] = None, headers: HeadersLike = None) -> RTSPResult:
        return self.request('RECORD', track, headers)
