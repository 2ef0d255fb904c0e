import asyncio
from typing import Any, Dict, Optional

import pytest

from graphflow.core.GraphPrimitives import Graph
from graphflow.core.Interface import INodeContext
from graphflow.core.Evaluator import GraphEvaluator
from graphflow.noderegistry.NodeRegistry import NodeRegistry, create_default_registry


class FakeContext(INodeContext):
    """Stand-alone node context: inputs and data are given up front, outputs are recorded."""

    def __init__(self, inputs: Optional[Dict[str, Any]] = None, data: Optional[Dict[str, Any]] = None,
                 registry: Optional[NodeRegistry] = None, node_id: str = "node"):
        self.inputs = dict(inputs or {})
        self.data = dict(data or {})
        self.outputs: Dict[str, Any] = {}
        self._registry = registry
        self._node_id = node_id

    @property
    def registry(self) -> NodeRegistry:
        return self._registry

    @property
    def node_id(self) -> str:
        return self._node_id

    def getInputValue(self, port: str) -> Any:
        return self.inputs.get(port)

    def setOutputValue(self, port: str, value: Any) -> None:
        self.outputs[port] = value

    def getNodeData(self) -> Dict[str, Any]:
        return self.data


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def make_context(registry):
    def factory(inputs=None, data=None, node_id="node"):
        return FakeContext(inputs, data, registry, node_id)
    return factory


@pytest.fixture
def evaluate(registry):
    """Run a graph dict on the default registry and return the EvaluationResult."""
    def run(graph_data, tracer=None):
        evaluator = GraphEvaluator(Graph.from_dict(graph_data), registry, tracer=tracer)
        return asyncio.run(evaluator.evaluate())
    return run
