from typing import Any, Dict

from ..core.Interface import INodeContext
from ..core.Node import NodeDefinition, PortSpec


class ValueNode(NodeDefinition):
    type = "Value"
    category = "special"
    description = "Emits the constant configured in data.value"
    inputs = []
    outputs = [PortSpec.of("out", "any")]

    def execute(self, context: INodeContext) -> None:
        context.setOutputValue("out", context.getNodeData().get("value"))


class InputNode(NodeDefinition):
    """Placeholder for a subgraph's element slot; replaced by a Value node before each run."""
    type = "Input"
    category = "special"
    description = "Subgraph input placeholder"
    inputs = []
    outputs = [PortSpec.of("out", "any")]

    def execute(self, context: INodeContext) -> None:
        context.setOutputValue("out", context.getNodeData().get("value"))


class OutputNode(NodeDefinition):
    """
    Marks final values. With `data.outputs` each listed input port is copied to
    an output of the same name, otherwise `in` is copied to `data.name`
    (default "output").
    """
    type = "Output"
    category = "special"
    description = "Marks a value as a final output of the graph"
    inputs = [PortSpec.of("in", "any")]
    outputs = [PortSpec.of("output", "any")]

    def execute(self, context: INodeContext) -> None:
        data = context.getNodeData()
        names = data.get("outputs")
        if names:
            for name in names:
                context.setOutputValue(name, context.getInputValue(name))
            return

        context.setOutputValue(data.get("name") or "output", context.getInputValue("in"))


class StartNode(NodeDefinition):
    type = "Start"
    category = "special"
    description = "Provides initial input values to the graph"
    inputs = []
    outputs = [
        PortSpec.of("A", "any"),
        PortSpec.of("B", "any"),
        PortSpec.of("x", "any"),
        PortSpec.of("y", "any"),
        PortSpec.of("z", "any"),
        PortSpec.of("out", "any"),
    ]

    def execute(self, context: INodeContext) -> None:
        value = context.getNodeData().get("value")
        if value is None:
            value = {}

        # each key of an object becomes its own port
        if isinstance(value, dict):
            for key, item in value.items():
                context.setOutputValue(key, item)
        else:
            context.setOutputValue("out", value)


class CollectNode(NodeDefinition):
    type = "Collect"
    category = "special"
    description = "Collects input values into a single output object"
    inputs = [
        PortSpec.of("result", "any"),
        PortSpec.of("result1", "any"),
        PortSpec.of("result2", "any"),
        PortSpec.of("result3", "any"),
    ]
    outputs = [PortSpec.of("out", "object")]

    def execute(self, context: INodeContext) -> None:
        names = context.getNodeData().get("inputs") or ["result"]

        collected: Dict[str, Any] = {}
        for name in names:
            value = context.getInputValue(name)
            if value is not None:
                collected[name] = value

        context.setOutputValue("out", collected)
