from __future__ import annotations
from typing import Any, Dict, TYPE_CHECKING

from abc import ABC, abstractmethod

if TYPE_CHECKING:
    from ..noderegistry.NodeRegistry import NodeRegistry


class INodeContext(ABC):
    """What a node sees of the evaluator while it executes."""

    @abstractmethod
    def getInputValue(self, port: str) -> Any:
        pass

    @abstractmethod
    def setOutputValue(self, port: str, value: Any) -> None:
        pass

    @abstractmethod
    def getNodeData(self) -> Dict[str, Any]:
        pass

    # Subgraph nodes build nested evaluators against the same registry
    @property
    @abstractmethod
    def registry(self) -> 'NodeRegistry':
        pass

    @property
    @abstractmethod
    def node_id(self) -> str:
        pass


class INodeRegistry(ABC):
    @abstractmethod
    def register(self, definition) -> None:
        pass

    @abstractmethod
    def get(self, type_name: str):
        pass

    @abstractmethod
    def getAll(self):
        pass

    @abstractmethod
    def getByCategory(self, category: str):
        pass


class ITracer(ABC):
    """Receives execution trace events as plain dicts."""

    @abstractmethod
    def fire(self, payload: Dict[str, Any]) -> None:
        pass
