"""
FastAPI + Socket.IO server for the graph evaluator.

Start with:
    python -m graphflow.server.main

Or via uvicorn directly:
    uvicorn graphflow.server.main:socket_app --port 3001 --reload
"""
from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from graphflow.noderegistry.NodeRegistry import NodeRegistry
from graphflow.server.config import Settings, configure_logging, load_settings
from graphflow.server.routes.graph_routes import router
from graphflow.server.state import ServerState
from graphflow.server.trace.socket_server import create_socket_app


def create_app(settings: Optional[Settings] = None, registry: Optional[NodeRegistry] = None) -> FastAPI:
    settings = settings if settings is not None else Settings()

    app = FastAPI(title="graphflow API", version="1.0.0")
    app.state.graphflow = ServerState(registry)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "nodeTypes": len(app.state.graphflow.registry)}

    return app


# ---------------------------------------------------------------------------
# Module-level application for uvicorn
# ---------------------------------------------------------------------------

settings = load_settings()
app = create_app(settings)

# socket_app is the top-level ASGI app passed to uvicorn. Socket.IO
# connections are handled at the root; all other requests are forwarded to
# the inner FastAPI app.
socket_app = create_socket_app(app, app.state.graphflow.tracer, settings.cors_origins)


if __name__ == "__main__":
    import uvicorn

    configure_logging(settings.log_level)
    uvicorn.run(
        "graphflow.server.main:socket_app",
        host=settings.host,
        port=settings.port,
    )
