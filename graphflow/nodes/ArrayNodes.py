from typing import Any, List

from ..core.Errors import GraphError
from ..core.Interface import INodeContext
from ..core.Node import NodeDefinition, PortSpec
from ..core.Subgraph import SubgraphRunner
from ..core.Types import isTruthy


def _require_array(context: INodeContext, node_type: str) -> List[Any]:
    array = context.getInputValue("array")
    if not isinstance(array, (list, tuple)):
        raise GraphError(f"{node_type} node requires an array input")
    return list(array)


class MapNode(NodeDefinition):
    """
    Maps each element of `array` through `data.subgraph`.

    The subgraph's element slot is replaced by a Value node holding the current
    element and the extracted output is collected, one per source element.
    Without a subgraph the array passes through unchanged.
    """
    type = "Map"
    category = "array"
    description = "Maps each element of an array through a transformation subgraph"
    inputs = [PortSpec.of("array", "array")]
    outputs = [PortSpec.of("out", "array")]

    async def execute(self, context: INodeContext) -> None:
        array = _require_array(context, self.type)
        runner = SubgraphRunner.from_node_data(context, self.type)
        if runner is None:
            context.setOutputValue("out", array)
            return

        results = []
        for element in array:
            results.append(await runner.run(element=element))
        context.setOutputValue("out", results)


class FilterNode(NodeDefinition):
    """Keeps the source elements whose subgraph output is truthy."""
    type = "Filter"
    category = "array"
    description = "Filters array elements using a predicate subgraph"
    inputs = [PortSpec.of("array", "array")]
    outputs = [PortSpec.of("out", "array")]

    async def execute(self, context: INodeContext) -> None:
        array = _require_array(context, self.type)
        runner = SubgraphRunner.from_node_data(context, self.type)
        if runner is None:
            context.setOutputValue("out", array)
            return

        results = []
        for element in array:
            if isTruthy(await runner.run(element=element)):
                results.append(element)
        context.setOutputValue("out", results)


class ReduceNode(NodeDefinition):
    """
    Folds `array` through `data.subgraph`, threading an accumulator.

    With `initial` the fold starts at index 0; otherwise the first element is
    the starting accumulator and the fold starts at index 1 (an empty array then
    reduces to None). Steps run strictly one after another.
    """
    type = "Reduce"
    category = "array"
    description = "Reduces an array to a single value using an accumulator subgraph"
    inputs = [
        PortSpec.of("array", "array"),
        PortSpec.of("initial", "any"),
    ]
    outputs = [PortSpec.of("out", "any")]

    async def execute(self, context: INodeContext) -> None:
        array = _require_array(context, self.type)
        initial = context.getInputValue("initial")
        runner = SubgraphRunner.from_node_data(context, self.type)
        if runner is None:
            context.setOutputValue("out", initial)
            return

        if initial is not None:
            accumulator, start = initial, 0
        else:
            accumulator, start = (array[0] if array else None), 1

        for element in array[start:]:
            accumulator = await runner.run(element=element, accumulator=accumulator, reduce=True)

        context.setOutputValue("out", accumulator)
