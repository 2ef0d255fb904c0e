"""
Socket.IO layer that streams evaluation trace events to connected editors.

`create_socket_app(fastapi_app, tracer)` returns the composite ASGI
application to pass to uvicorn. Every event the tracer fires is emitted to all
clients as a "trace" message.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Union

import socketio

from .trace_emitter import TraceEmitter

logger = logging.getLogger(__name__)


def create_sio(cors_origins: Union[str, List[str]] = "*") -> socketio.AsyncServer:
    sio = socketio.AsyncServer(
        async_mode="asgi",
        cors_allowed_origins=cors_origins,
        logger=False,
        engineio_logger=False,
    )

    @sio.event
    async def connect(sid: str, environ: dict) -> None:
        logger.debug("Trace client connected: %s", sid)

    @sio.event
    async def disconnect(sid: str) -> None:
        logger.debug("Trace client disconnected: %s", sid)

    return sio


def bridge_tracer(sio: socketio.AsyncServer, tracer: TraceEmitter) -> None:
    """
    TraceEmitter.fire() is synchronous; schedule the async emit on the
    running loop. Outside a loop (CLI runs) events are dropped.
    """
    def _on_trace(event: Dict[str, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        loop.create_task(sio.emit("trace", event))

    tracer.on_trace(_on_trace)


def create_socket_app(fastapi_app: Any, tracer: TraceEmitter,
                      cors_origins: Union[str, List[str]] = "*") -> socketio.ASGIApp:
    """Wrap *fastapi_app* inside a Socket.IO ASGI application."""
    sio = create_sio(cors_origins)
    bridge_tracer(sio, tracer)
    return socketio.ASGIApp(sio, other_asgi_app=fastapi_app)
