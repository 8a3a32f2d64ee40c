"""Client session state machine (RFC 2326 appendix A.1).

  INIT --SETUP--> READY --PLAY--> PLAYING --PAUSE--> READY
                        --RECORD--> RECORDING --PAUSE--> READY
  any --TEARDOWN--> INIT

Transitions are looked up once per successful (2xx) response. A (state,
method) pair missing from the table leaves the state unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple


class SessionState(Enum):
    INIT = "init"
    READY = "ready"
    PLAYING = "playing"
    RECORDING = "recording"


TRANSITIONS: Dict[Tuple[SessionState, str], SessionState] = {
    (SessionState.INIT, 'SETUP'): SessionState.READY,
}

for _state in SessionState:
    TRANSITIONS[(_state, 'PLAY')] = SessionState.PLAYING
    TRANSITIONS[(_state, 'RECORD')] = SessionState.RECORDING
    TRANSITIONS[(_state, 'TEARDOWN')] = SessionState.INIT
del _state

TRANSITIONS[(SessionState.PLAYING, 'PAUSE')] = SessionState.READY
TRANSITIONS[(SessionState.RECORDING, 'PAUSE')] = SessionState.READY


def next_state(current: SessionState, method: str) -> SessionState:
    return TRANSITIONS.get((current, method.upper()), current)
