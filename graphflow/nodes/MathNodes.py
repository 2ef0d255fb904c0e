from typing import Any, List, Union
from abc import abstractmethod

from ..core.Errors import DivisionByZeroError
from ..core.Interface import INodeContext
from ..core.Node import NodeDefinition, PortSpec
from ..core.Types import toNumber

Number = Union[int, float]


def collect_variadic_inputs(context: INodeContext, prefix: str = "in") -> List[Any]:
    """Read in0, in1, ... until the first port with no value."""
    values = []
    index = 0
    while True:
        value = context.getInputValue(f"{prefix}{index}")
        if value is None:
            break
        values.append(value)
        index += 1
    return values


def broadcast(inputs: List[Any]) -> List[List[Any]]:
    """
    Align inputs for elementwise work. Scalars become length-1 arrays and
    every array is stretched to the longest length by repeating its last
    element.
    """
    arrays = [list(v) if isinstance(v, (list, tuple)) else [v] for v in inputs]
    length = max((len(a) for a in arrays), default=0)

    rows = []
    for i in range(length):
        row = []
        for arr in arrays:
            if i < len(arr):
                row.append(arr[i])
            else:
                row.append(arr[-1] if arr else None)
        rows.append(row)
    return rows


def has_array(inputs: List[Any]) -> bool:
    return any(isinstance(v, (list, tuple)) for v in inputs)


class ArithmeticNode(NodeDefinition):
    """Variadic arithmetic over in0..inN, elementwise when any input is an array."""
    category = "math"
    inputs = []  # dynamic in0, in1, ...
    outputs = [PortSpec.of("out", "number | array")]

    @abstractmethod
    def fold(self, values: List[Any]) -> Number:
        pass

    def execute(self, context: INodeContext) -> None:
        inputs = collect_variadic_inputs(context)
        if not inputs:
            context.setOutputValue("out", 0)
            return

        if has_array(inputs):
            context.setOutputValue("out", [self.fold(row) for row in broadcast(inputs)])
        else:
            context.setOutputValue("out", self.fold(inputs))


class AddNode(ArithmeticNode):
    type = "Add"
    description = "Adds all connected input values together. Array-aware for element-wise operations."

    def fold(self, values: List[Any]) -> Number:
        total = 0
        for value in values:
            total += toNumber(value)
        return total


class SubtractNode(ArithmeticNode):
    type = "Subtract"
    description = "Subtracts all subsequent inputs from the first input. Array-aware for element-wise operations."

    def fold(self, values: List[Any]) -> Number:
        result = toNumber(values[0])
        for value in values[1:]:
            result -= toNumber(value)
        return result


class MultiplyNode(ArithmeticNode):
    type = "Multiply"
    description = "Multiplies all connected input values together. Array-aware for element-wise operations."

    def fold(self, values: List[Any]) -> Number:
        product = 1
        for value in values:
            product *= toNumber(value)
        return product


class DivideNode(ArithmeticNode):
    type = "Divide"
    description = "Divides the first input by all subsequent inputs. Array-aware for element-wise operations."

    def fold(self, values: List[Any]) -> Number:
        quotient = toNumber(values[0])
        for value in values[1:]:
            divisor = toNumber(value)
            if divisor == 0:
                raise DivisionByZeroError(self.type)
            quotient /= divisor
        return quotient
