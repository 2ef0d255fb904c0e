import asyncio
import inspect
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Set, NamedTuple, TYPE_CHECKING
from logging import getLogger

from .Errors import CycleDetectedError, TypeMismatchError, UnknownNodeTypeError
from .GraphAlgorithms import detect_cycle, find_reachable_nodes
from .GraphPrimitives import Graph, GraphEdge, GraphNode
from .Interface import INodeContext, ITracer
from .Node import NodeDefinition
from .Types import DataType, ValueType, areTypesCompatible, getValueType, isTypeCompatible

if TYPE_CHECKING:
    from ..noderegistry.NodeRegistry import NodeRegistry

logger = getLogger(__name__)

# Staged input values live in the node's value map under this prefix
INPUT_PREFIX = "input."


class InferredTypeInfo(NamedTuple):
    inferredType: DataType
    declaredType: Optional[DataType]
    isCompatible: bool

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "inferredType": str(self.inferredType),
            "isCompatible": self.isCompatible,
        }
        if self.declaredType is not None:
            result["declaredType"] = str(self.declaredType)
        return result


@dataclass
class EvaluationResult:
    success: bool
    outputs: Dict[str, Any] = field(default_factory=dict)
    inferredTypes: Optional[Dict[str, InferredTypeInfo]] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "outputs": self.outputs}
        if self.inferredTypes is not None:
            result["inferredTypes"] = {k: v.to_dict() for k, v in self.inferredTypes.items()}
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class ValidationResult:
    success: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    inferredTypes: Dict[str, InferredTypeInfo] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "inferredTypes": {k: v.to_dict() for k, v in self.inferredTypes.items()},
        }


class NodeContext(INodeContext):
    """
    Context object passed to a node's execute().
    Reads come from the node's staging slots, writes go to its output map.
    """
    def __init__(self, evaluator: 'GraphEvaluator', node: GraphNode, definition: NodeDefinition):
        self._evaluator = evaluator
        self._node = node
        self._definition = definition

    @property
    def node_id(self) -> str:
        return self._node.id

    @property
    def registry(self) -> 'NodeRegistry':
        return self._evaluator.registry

    def getInputValue(self, port: str) -> Any:
        return self._evaluator._values_for(self._node.id).get(f"{INPUT_PREFIX}{port}")

    def setOutputValue(self, port: str, value: Any) -> None:
        self._evaluator._values_for(self._node.id)[port] = value

        spec = self._definition.get_output_spec(port)
        self._evaluator._infer_type_for_port(self._node.id, port, value, spec.type if spec else None)

    def getNodeData(self) -> Dict[str, Any]:
        return self._node.data


class GraphEvaluator:
    """
    Validates or executes one Graph against one registry.

    All run state is rebuilt at the start of evaluate()/validate(); an instance
    must not be shared between two overlapping runs.
    """

    def __init__(self, graph: Graph, registry: 'NodeRegistry', tracer: Optional[ITracer] = None):
        self.graph = graph
        self.registry = registry
        self.tracer = tracer
        self.run_id = ""

        self._node_values: Dict[str, Dict[str, Any]] = {}
        self._inferred_types: Dict[str, InferredTypeInfo] = {}
        self._executed_nodes: Set[str] = set()
        self._staged_ports: Dict[str, Set[str]] = {}
        self._expected_ports: Dict[str, Set[str]] = {}
        self._node_map: Dict[str, GraphNode] = {}
        self._outgoing: Dict[str, List[GraphEdge]] = {}

    def _reset(self):
        self._node_values = {}
        self._inferred_types = {}
        self._executed_nodes = set()
        self._staged_ports = {}
        self._node_map = {n.id: n for n in self.graph.nodes}
        self._outgoing = {}

        # A node is ready once every distinct port that has an incoming edge is staged
        self._expected_ports = {n.id: set() for n in self.graph.nodes}
        for edge in self.graph.edges:
            self._expected_ports.setdefault(edge.to.node, set()).add(edge.to.port)
            self._outgoing.setdefault(edge.from_.node, []).append(edge)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def evaluate(self) -> EvaluationResult:
        self.run_id = uuid.uuid4().hex
        try:
            self._reset()

            start_nodes = self.graph.find_start_nodes()
            logger.debug("Evaluating graph: %d nodes, %d start nodes", len(self.graph.nodes), len(start_nodes))
            self._trace("EXEC_START", startNodeIds=[n.id for n in start_nodes])

            # Independent branches interleave
            await asyncio.gather(*[self._run_from(node) for node in start_nodes])

            skipped = [n.id for n in self.graph.nodes if n.id not in self._executed_nodes]
            if skipped:
                logger.warning("Nodes never received all of their inputs and were not executed: %s", skipped)

            outputs: Dict[str, Any] = {}
            for node_id, values in self._node_values.items():
                for port, value in values.items():
                    outputs[f"{node_id}.{port}"] = value

            self._trace("EXEC_DONE")
            return EvaluationResult(success=True, outputs=outputs, inferredTypes=dict(self._inferred_types))
        except Exception as exc:
            logger.error("Graph evaluation failed: %s", exc)
            self._trace("EXEC_ERROR", error=str(exc))
            return EvaluationResult(success=False, outputs={}, error=str(exc))

    def _trace(self, event_type: str, **fields: Any) -> None:
        if self.tracer is None:
            return
        self.tracer.fire({"type": event_type, "runId": self.run_id, **fields})

    def _values_for(self, node_id: str) -> Dict[str, Any]:
        if node_id not in self._node_values:
            self._node_values[node_id] = {}
        return self._node_values[node_id]

    def _is_ready(self, node: GraphNode) -> bool:
        expected = self._expected_ports.get(node.id, set())
        return expected <= self._staged_ports.get(node.id, set())

    async def _run_from(self, start: GraphNode) -> None:
        """
        Depth-first cascade from one start node, driven by an explicit LIFO
        worklist so graph depth never becomes Python stack depth.
        """
        pending: List[GraphNode] = [start]
        while pending:
            node = pending.pop()
            definition = await self._execute_node(node)
            if definition is None:
                continue
            # first edge's target runs first
            pending.extend(reversed(self._propagate_outputs(node, definition)))

    async def _execute_node(self, node: GraphNode) -> Optional[NodeDefinition]:
        """Run ``node`` if it is ready and unclaimed; returns its definition when it ran."""
        if node.id in self._executed_nodes:
            return None
        if not self._is_ready(node):
            return None

        definition = self.registry.get(node.type)
        if definition is None:
            raise UnknownNodeTypeError(node.type)

        # Claim the node before awaiting so a re-entrant arrival cannot run it twice
        self._executed_nodes.add(node.id)

        logger.debug("Executing node %s (%s)", node.id, node.type)
        self._trace("NODE_RUNNING", nodeId=node.id)
        started = time.perf_counter()

        context = NodeContext(self, node, definition)
        self._values_for(node.id)
        try:
            result = definition.execute(context)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            self._trace("NODE_ERROR", nodeId=node.id, error=str(exc))
            raise

        self._trace("NODE_DONE", nodeId=node.id, durationMs=(time.perf_counter() - started) * 1000)
        return definition

    def _propagate_outputs(self, node: GraphNode, definition: NodeDefinition) -> List[GraphNode]:
        """Type-check and stage every outgoing edge; returns the targets in edge order."""
        targets: List[GraphNode] = []
        for edge in self._outgoing.get(node.id, []):
            value = self._node_values.get(node.id, {}).get(edge.from_.port)

            output_spec = definition.get_output_spec(edge.from_.port)
            if output_spec and value is not None and not isTypeCompatible(value, output_spec.type):
                raise TypeMismatchError(
                    f"Type mismatch at node '{node.id}' output port '{edge.from_.port}': "
                    f"expected '{output_spec.type}' but got '{getValueType(value)}'"
                )

            target_node = self._node_map.get(edge.to.node)
            if target_node is None:
                continue

            target_definition = self.registry.get(target_node.type)
            input_spec = target_definition.get_input_spec(edge.to.port) if target_definition else None
            if input_spec and value is not None and not isTypeCompatible(value, input_spec.type):
                raise TypeMismatchError(
                    f"Type mismatch: cannot connect '{node.type}.{edge.from_.port}' ({getValueType(value)}) "
                    f"to '{target_node.type}.{edge.to.port}' (expected {input_spec.type})"
                )

            self._stage_input(edge, value, input_spec.type if input_spec else None)
            targets.append(target_node)
        return targets

    def _stage_input(self, edge: GraphEdge, value: Any, declared: Optional[DataType]) -> None:
        logger.debug("Propagating %s -> %s", edge.from_, edge.to)
        self._trace(
            "EDGE_ACTIVE",
            fromNodeId=edge.from_.node, fromPort=edge.from_.port,
            toNodeId=edge.to.node, toPort=edge.to.port,
        )
        key = f"{INPUT_PREFIX}{edge.to.port}"
        self._values_for(edge.to.node)[key] = value
        self._staged_ports.setdefault(edge.to.node, set()).add(edge.to.port)
        self._infer_type_for_port(edge.to.node, key, value, declared)

    def _infer_type_for_port(self, node_id: str, port: str, value: Any, declared: Optional[DataType]) -> None:
        self._inferred_types[f"{node_id}.{port}"] = InferredTypeInfo(
            inferredType=getValueType(value),
            declaredType=declared,
            isCompatible=isTypeCompatible(value, declared) if declared is not None else True,
        )

    # ------------------------------------------------------------------
    # Validation (static, never runs node logic)
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        errors: List[str] = []
        warnings: List[str] = []
        inferred: Dict[str, InferredTypeInfo] = {}

        try:
            self._reset()

            if not self.graph.nodes:
                errors.append("Graph has no nodes")
                return ValidationResult(False, errors, warnings, inferred)

            for node in self.graph.nodes:
                if self.registry.get(node.type) is None:
                    errors.append(f"Node '{node.id}' has unknown type '{node.type}'")

            for edge in self.graph.edges:
                if edge.from_.node not in self._node_map:
                    errors.append(f"Edge references non-existent source node '{edge.from_.node}'")
                if edge.to.node not in self._node_map:
                    errors.append(f"Edge references non-existent target node '{edge.to.node}'")

            # Type and cycle analysis presume a structurally valid graph
            if errors:
                return ValidationResult(False, errors, warnings, inferred)

            cycle = detect_cycle(self.graph)
            if cycle:
                errors.append(str(CycleDetectedError(cycle)))

            self._seed_value_types(inferred)
            self._check_edge_types(inferred, errors)

            reachable = find_reachable_nodes(self.graph)
            for node in self.graph.nodes:
                if node.id not in reachable:
                    warnings.append(f"Node '{node.id}' ({node.type}) is not reachable from any input")

            return ValidationResult(not errors, errors, warnings, inferred)
        except Exception as exc:
            logger.exception("Unexpected error during validation")
            errors.append(str(exc))
            return ValidationResult(False, errors, warnings, inferred)

    def _seed_value_types(self, inferred: Dict[str, InferredTypeInfo]) -> None:
        for node in self.graph.nodes:
            if node.type != "Value" or "value" not in node.data:
                continue
            definition = self.registry.get(node.type)
            value = node.data["value"]
            output_spec = definition.outputs[0] if definition.outputs else None
            inferred[f"{node.id}.out"] = InferredTypeInfo(
                inferredType=getValueType(value),
                declaredType=output_spec.type if output_spec else None,
                isCompatible=isTypeCompatible(value, output_spec.type) if output_spec else True,
            )

    def _check_edge_types(self, inferred: Dict[str, InferredTypeInfo], errors: List[str]) -> None:
        for edge in self.graph.edges:
            source_node = self._node_map[edge.from_.node]
            target_node = self._node_map[edge.to.node]
            source_definition = self.registry.get(source_node.type)
            target_definition = self.registry.get(target_node.type)

            source_port = source_definition.get_output_spec(edge.from_.port)
            target_port = target_definition.get_input_spec(edge.to.port)

            known = inferred.get(f"{edge.from_.node}.{edge.from_.port}")
            if known is not None:
                source_type = known.inferredType
            elif source_port is not None:
                source_type = source_port.type
            else:
                source_type = ValueType.ANY
            target_type = target_port.type if target_port else ValueType.ANY

            compatible = areTypesCompatible(source_type, target_type)
            if not compatible:
                errors.append(
                    f"Type mismatch: cannot connect '{source_node.type}.{edge.from_.port}' ({source_type}) "
                    f"to '{target_node.type}.{edge.to.port}' (expected {target_type})"
                )

            inferred[f"{edge.to.node}.{INPUT_PREFIX}{edge.to.port}"] = InferredTypeInfo(
                inferredType=source_type,
                declaredType=target_type,
                isCompatible=compatible,
            )
