from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Awaitable, ClassVar, Dict, List, NamedTuple, Optional, Union

from .Interface import INodeContext
from .Types import DataType, parse_type


class PortSpec(NamedTuple):
    name: str
    type: DataType

    @classmethod
    def of(cls, name: str, type: Union[str, DataType] = "any") -> 'PortSpec':
        return cls(name, parse_type(type))

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "type": str(self.type)}


# =========================================================================================
# A NodeDefinition is the behavioural contract for one node type. Graph data never
# carries behaviour: a GraphNode only names its type, and the evaluator looks the
# definition up in the registry it was handed.
#
# Subclasses declare `type`, `category` and their ports as class attributes and
# implement `execute(context)`, which may be a plain function or a coroutine.
# =========================================================================================
class NodeDefinition(ABC):
    type: ClassVar[str]
    category: ClassVar[str]
    description: ClassVar[str] = ""
    inputs: ClassVar[List[PortSpec]] = []
    outputs: ClassVar[List[PortSpec]] = []

    @abstractmethod
    def execute(self, context: INodeContext) -> Optional[Awaitable[None]]:
        pass

    def get_input_spec(self, port_name: str) -> Optional[PortSpec]:
        for spec in self.inputs:
            if spec.name == port_name:
                return spec
        return None

    def get_output_spec(self, port_name: str) -> Optional[PortSpec]:
        for spec in self.outputs:
            if spec.name == port_name:
                return spec
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "category": self.category,
            "description": self.description,
            "inputs": [p.to_dict() for p in self.inputs],
            "outputs": [p.to_dict() for p in self.outputs],
        }

    def __repr__(self) -> str:
        return f"NodeDefinition({self.type})"
