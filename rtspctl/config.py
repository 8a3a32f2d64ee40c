"""Process-wide logging configuration for RTSP sessions.

The configuration is a plain value. Set it once at start-up with
``configure()``; every RTSPSession created afterwards captures the current
value, or takes one explicitly through its ``log_config`` argument::

    import logging, rtspctl
    logging.basicConfig(level=logging.DEBUG)
    rtspctl.configure(enabled=True)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional


@dataclass(frozen=True)
class LogConfig:
    enabled: bool = True
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("rtspctl.session"))
    level: int = logging.DEBUG

    def log(self, msg: str, *args, level: Optional[int] = None, **kwargs) -> None:
        if self.enabled:
            self.logger.log(self.level if level is None else level, msg, *args, **kwargs)

    def log_lines(self, lines: Iterable[str]) -> None:
        """Emit a wire message one line at a time."""
        if not self.enabled:
            return
        for line in lines:
            self.logger.log(self.level, "%s", line.rstrip("\r\n"))


_current = LogConfig()


def configure(enabled: Optional[bool] = None,
              logger: Optional[logging.Logger] = None,
              level: Optional[int] = None) -> LogConfig:
    """Replace the process-wide LogConfig; omitted fields keep their value."""
    global _current
    changes = {}
    if enabled is not None:
        changes['enabled'] = enabled
    if logger is not None:
        changes['logger'] = logger
    if level is not None:
        changes['level'] = level
    _current = replace(_current, **changes)
    return _current


def get_config() -> LogConfig:
    return _current
