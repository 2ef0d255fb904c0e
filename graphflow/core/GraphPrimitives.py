from __future__ import annotations

from collections import defaultdict
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SlotRole(str, Enum):
    """Marks a subgraph node as a substitution slot for Map/Filter/Reduce."""
    ELEMENT = "element"
    ACCUMULATOR = "accumulator"


# Endpoint reference, not an owned object
class Port(BaseModel):
    model_config = ConfigDict(frozen=True)

    node: str
    port: str

    def __str__(self) -> str:
        return f"{self.node}.{self.port}"


class GraphEdge(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # "from" is a keyword, keep it on the wire via the alias
    from_: Port = Field(alias="from")
    to: Port

    def __repr__(self) -> str:
        return f"GraphEdge({self.from_} -> {self.to})"


class GraphNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    type: str
    data: Dict[str, Any] = Field(default_factory=dict)
    role: Optional[SlotRole] = None

    def __repr__(self) -> str:
        return f"GraphNode({self.id}:{self.type})"


class Graph(BaseModel):
    """
    Declarative computation graph: the JSON wire shape

        {"nodes": [{"id", "type", "data"}], "edges": [{"from": {...}, "to": {...}}]}

    Acyclicity is not enforced here, the evaluator's validate() checks it.
    """
    model_config = ConfigDict(frozen=True)

    nodes: List[GraphNode] = Field(default_factory=list)
    edges: List[GraphEdge] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Graph':
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def find_start_nodes(self) -> List[GraphNode]:
        """Nodes with no incoming edge."""
        nodes_with_inputs = {e.to.node for e in self.edges}
        return [n for n in self.nodes if n.id not in nodes_with_inputs]

    def adjacency(self) -> Dict[str, List[str]]:
        adjacent: Dict[str, List[str]] = defaultdict(list)
        for node in self.nodes:
            adjacent[node.id] = []
        for edge in self.edges:
            adjacent[edge.from_.node].append(edge.to.node)
        return adjacent

    def replace_nodes(self, nodes: List[GraphNode]) -> 'Graph':
        return Graph(nodes=nodes, edges=list(self.edges))
