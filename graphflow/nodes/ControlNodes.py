from typing import Any, Callable, Dict, List

from ..core.Errors import UnknownOperatorError
from ..core.Interface import INodeContext
from ..core.Node import NodeDefinition, PortSpec
from ..core.Types import compareOrdered, isTruthy, looseEquals, strictEquals, toDisplayString
from .MathNodes import broadcast

OPERATORS: Dict[str, Callable[[Any, Any], bool]] = {
    "==": looseEquals,
    "===": strictEquals,
    "!=": lambda a, b: not looseEquals(a, b),
    "!==": lambda a, b: not strictEquals(a, b),
    ">": lambda a, b: compareOrdered(a, b, ">"),
    ">=": lambda a, b: compareOrdered(a, b, ">="),
    "<": lambda a, b: compareOrdered(a, b, "<"),
    "<=": lambda a, b: compareOrdered(a, b, "<="),
}


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class IfNode(NodeDefinition):
    """
    Conditional selection.

    A scalar condition picks the `true` or `false` input for `out`. A list
    condition filters instead: index i of the true input goes to `trueOut`
    when condition[i] is truthy, index i of the false input goes to
    `falseOut` otherwise. Indices past the end of an input are skipped, not
    broadcast. `out` mirrors `trueOut` in that mode.
    """
    type = "If"
    category = "control"
    description = "Conditional selection, or boolean-array filtering when the condition is an array"
    inputs = [
        PortSpec.of("condition", "boolean | array"),
        PortSpec.of("true", "any"),
        PortSpec.of("false", "any"),
    ]
    outputs = [
        PortSpec.of("out", "any"),
        PortSpec.of("trueOut", "array"),
        PortSpec.of("falseOut", "array"),
    ]

    def execute(self, context: INodeContext) -> None:
        condition = context.getInputValue("condition")
        true_value = context.getInputValue("true")
        false_value = context.getInputValue("false")

        if isinstance(condition, (list, tuple)):
            true_array = _as_list(true_value)
            false_array = _as_list(false_value)
            true_out = []
            false_out = []

            for i, flag in enumerate(condition):
                if isTruthy(flag):
                    if i < len(true_array):
                        true_out.append(true_array[i])
                elif i < len(false_array):
                    false_out.append(false_array[i])

            context.setOutputValue("trueOut", true_out)
            context.setOutputValue("falseOut", false_out)
            context.setOutputValue("out", true_out)
            return

        context.setOutputValue("out", true_value if isTruthy(condition) else false_value)


class CompareNode(NodeDefinition):
    type = "Compare"
    category = "control"
    description = "Compares two values using a specified operator. Array inputs compare element-wise."
    inputs = [
        PortSpec.of("a", "any"),
        PortSpec.of("b", "any"),
    ]
    outputs = [PortSpec.of("out", "boolean | array")]

    def execute(self, context: INodeContext) -> None:
        a = context.getInputValue("a")
        b = context.getInputValue("b")
        operator = context.getNodeData().get("operator") or "=="

        compare = OPERATORS.get(operator)
        if compare is None:
            raise UnknownOperatorError(operator)

        if isinstance(a, (list, tuple)) or isinstance(b, (list, tuple)):
            context.setOutputValue("out", [compare(left, right) for left, right in broadcast([a, b])])
        else:
            context.setOutputValue("out", compare(a, b))


class SwitchNode(NodeDefinition):
    """Routes `value` to the port named by the first matching case, else to `default`."""
    type = "Switch"
    category = "control"
    description = "Routes a value to the output port of the first case whose key matches it"
    inputs = [PortSpec.of("value", "any")]
    outputs = [PortSpec.of("default", "any")]  # case ports are configured per node

    def execute(self, context: INodeContext) -> None:
        value = context.getInputValue("value")
        cases = context.getNodeData().get("cases") or {}

        key = toDisplayString(value)
        for case_value, port in cases.items():
            if key == toDisplayString(case_value):
                context.setOutputValue(port, value)
                return

        context.setOutputValue("default", value)


class ForEachNode(NodeDefinition):
    type = "ForEach"
    category = "control"
    description = "Iterates over an array and processes each element"
    inputs = [PortSpec.of("array", "array")]
    outputs = [
        PortSpec.of("out", "array"),
        PortSpec.of("count", "number"),
    ]

    def execute(self, context: INodeContext) -> None:
        array = context.getInputValue("array")
        if not isinstance(array, (list, tuple)):
            context.setOutputValue("out", [])
            return

        context.setOutputValue("out", list(array))
        context.setOutputValue("count", len(array))
