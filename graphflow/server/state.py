"""
Per-application server state: the node registry and the trace emitter.

Built once by create_app() and stored on ``app.state.graphflow``; routes reach
it through the get_state dependency rather than a module-level singleton.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Request

from graphflow.core.Evaluator import GraphEvaluator
from graphflow.core.GraphPrimitives import Graph
from graphflow.noderegistry.NodeRegistry import NodeRegistry, create_default_registry
from graphflow.server.trace.trace_emitter import TraceEmitter


class ServerState:
    def __init__(self, registry: Optional[NodeRegistry] = None, tracer: Optional[TraceEmitter] = None):
        self.registry = registry if registry is not None else create_default_registry()
        self.tracer = tracer if tracer is not None else TraceEmitter()

    def evaluator(self, graph: Graph, traced: bool = True) -> GraphEvaluator:
        # a fresh evaluator per request, never shared between runs
        return GraphEvaluator(graph, self.registry, tracer=self.tracer if traced else None)


def get_state(request: Request) -> ServerState:
    return request.app.state.graphflow
