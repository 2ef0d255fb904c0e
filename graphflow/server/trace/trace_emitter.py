"""
TraceEmitter: fans evaluator trace events out to registered listeners
(Socket.IO broadcast, loggers, tests).

Pass an emitter as ``tracer=`` to GraphEvaluator; every event dict is stamped
with a millisecond ``ts`` before it is handed to listeners.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List

from ...core.Interface import ITracer

logger = logging.getLogger(__name__)

TraceListener = Callable[[Dict[str, Any]], None]


class TraceEmitter(ITracer):
    def __init__(self) -> None:
        self._listeners: List[TraceListener] = []

    def on_trace(self, callback: TraceListener) -> None:
        """Register a callback that receives every emitted trace event."""
        self._listeners.append(callback)

    def off_trace(self, callback: TraceListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def fire(self, payload: Dict[str, Any]) -> None:
        if "ts" not in payload:
            payload["ts"] = _now_ms()
        for cb in list(self._listeners):
            try:
                cb(payload)
            except Exception:
                # a broken listener must not abort the evaluation it observes
                logger.exception("Trace listener failed on %s", payload.get("type"))


def _now_ms() -> int:
    return int(time.time() * 1000)
