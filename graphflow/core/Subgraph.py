from typing import Any, Dict, List, Optional, TYPE_CHECKING
from logging import getLogger

from .Errors import SubgraphEvaluationError
from .Evaluator import INPUT_PREFIX, GraphEvaluator
from .GraphPrimitives import Graph, GraphNode, SlotRole

if TYPE_CHECKING:
    from ..noderegistry.NodeRegistry import NodeRegistry

logger = getLogger(__name__)

# Fallbacks for subgraphs authored before slot roles existed
LEGACY_ELEMENT_IDS = ("input", "element")
LEGACY_REDUCE_ELEMENT_IDS = ("element", "current")
LEGACY_ACCUMULATOR_IDS = ("accumulator", "acc")
LEGACY_OUTPUT_MARKERS = ("output.", "result.")


def _value_node(node: GraphNode, value: Any) -> GraphNode:
    return GraphNode(id=node.id, type="Value", data={"value": value})


def _has_roles(subgraph: Graph) -> bool:
    return any(n.role is not None for n in subgraph.nodes)


def substitute_slots(subgraph: Graph, element: Any = None, accumulator: Any = None, reduce: bool = False) -> Graph:
    """
    Clone the subgraph's node list, swapping each slot node for a Value node.

    Slots are found by their declared role. A subgraph with no roles falls back
    to the legacy naming: type "Input" or id input/element for Map and Filter,
    ids accumulator/acc and element/current for Reduce.
    """
    structural = _has_roles(subgraph)
    nodes: List[GraphNode] = []

    for node in subgraph.nodes:
        if structural:
            if node.role == SlotRole.ELEMENT:
                node = _value_node(node, element)
            elif node.role == SlotRole.ACCUMULATOR and reduce:
                node = _value_node(node, accumulator)
        elif reduce:
            if node.id in LEGACY_ACCUMULATOR_IDS:
                node = _value_node(node, accumulator)
            elif node.id in LEGACY_REDUCE_ELEMENT_IDS:
                node = _value_node(node, element)
        elif node.type == "Input" or node.id in LEGACY_ELEMENT_IDS:
            node = _value_node(node, element)
        nodes.append(node)

    return subgraph.replace_nodes(nodes)


def extract_output(outputs: Dict[str, Any], output_path: Optional[str] = None) -> Any:
    """
    Pick the single value a subgraph run produced.

    With an explicit ``nodeId.port`` path that key must exist. Otherwise the
    first produced key containing "output." or "result." wins, then the last
    value produced, then None. Staged inputs (``nodeId.input.port``) are never
    picked by the fallback.
    """
    if output_path:
        if output_path not in outputs:
            raise KeyError(output_path)
        return outputs[output_path]

    produced = [(k, v) for k, v in outputs.items() if f".{INPUT_PREFIX}" not in k]

    for key, value in produced:
        if any(marker in key for marker in LEGACY_OUTPUT_MARKERS):
            return value

    if produced:
        return produced[-1][1]
    return None


class SubgraphRunner:
    """Runs a nested graph once per element, each time on a fresh evaluator."""

    def __init__(self, registry: 'NodeRegistry', subgraph: Graph, node_id: str, node_type: str,
                 output_path: Optional[str] = None):
        self.registry = registry
        self.subgraph = subgraph
        self.node_id = node_id
        self.node_type = node_type
        self.output_path = output_path

    @classmethod
    def from_node_data(cls, context, node_type: str) -> Optional['SubgraphRunner']:
        data = context.getNodeData()
        subgraph = data.get("subgraph")
        if not subgraph:
            return None
        if not isinstance(subgraph, Graph):
            subgraph = Graph.model_validate(subgraph)
        return cls(context.registry, subgraph, context.node_id, node_type, data.get("output"))

    async def run(self, element: Any = None, accumulator: Any = None, reduce: bool = False) -> Any:
        graph = substitute_slots(self.subgraph, element=element, accumulator=accumulator, reduce=reduce)
        logger.debug("Running %s subgraph of node '%s' for element %r", self.node_type, self.node_id, element)

        result = await GraphEvaluator(graph, self.registry).evaluate()
        if not result.success:
            raise SubgraphEvaluationError(self.node_id, self.node_type, result.error)

        try:
            return extract_output(result.outputs, self.output_path)
        except KeyError:
            raise SubgraphEvaluationError(
                self.node_id, self.node_type, f"designated output '{self.output_path}' was not produced"
            ) from None
