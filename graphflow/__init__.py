"""
graphflow
=========
A dataflow graph evaluator: typed nodes connected by edges, executed as values
arrive, with static validation and array broadcasting.

Public API
----------
    from graphflow import Graph, GraphEvaluator, create_default_registry

    registry = create_default_registry()
    result = asyncio.run(GraphEvaluator(Graph.from_dict(data), registry).evaluate())
    print(result.outputs)
"""

from .core.Errors import GraphError
from .core.Evaluator import EvaluationResult, GraphEvaluator, ValidationResult
from .core.GraphPrimitives import Graph, GraphEdge, GraphNode, Port, SlotRole
from .core.Node import NodeDefinition, PortSpec
from .noderegistry.NodeRegistry import NodeRegistry, create_default_registry

__version__ = "1.0.0"

__all__ = [
    "EvaluationResult",
    "Graph",
    "GraphEdge",
    "GraphError",
    "GraphEvaluator",
    "GraphNode",
    "NodeDefinition",
    "NodeRegistry",
    "Port",
    "PortSpec",
    "SlotRole",
    "ValidationResult",
    "create_default_registry",
]
