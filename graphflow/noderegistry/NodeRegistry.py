from typing import Dict, List, Optional
from logging import getLogger

from ..core.Interface import INodeRegistry
from ..core.Node import NodeDefinition

logger = getLogger(__name__)


class NodeRegistry(INodeRegistry):
    """
    Keyed store from node-type name to its definition.

    There is no process-wide instance: whoever evaluates graphs builds a registry
    (usually with create_default_registry) and hands it to each evaluator.
    """

    def __init__(self):
        self._definitions: Dict[str, NodeDefinition] = {}

    def register(self, definition: NodeDefinition) -> None:
        # last registration wins
        if definition.type in self._definitions:
            logger.debug("Replacing node definition '%s'", definition.type)
        self._definitions[definition.type] = definition

    def get(self, type_name: str) -> Optional[NodeDefinition]:
        return self._definitions.get(type_name)

    def getAll(self) -> List[NodeDefinition]:
        return list(self._definitions.values())

    def getByCategory(self, category: str) -> List[NodeDefinition]:
        return [d for d in self._definitions.values() if d.category == category]

    def categories(self) -> List[str]:
        seen: List[str] = []
        for definition in self._definitions.values():
            if definition.category not in seen:
                seen.append(definition.category)
        return seen

    def __contains__(self, type_name: str) -> bool:
        return type_name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


def register_all_nodes(registry: NodeRegistry) -> NodeRegistry:
    """Register every built-in node definition on ``registry``."""
    from ..nodes import BUILTIN_NODES

    for definition_class in BUILTIN_NODES:
        registry.register(definition_class())
    return registry


def create_default_registry() -> NodeRegistry:
    return register_all_nodes(NodeRegistry())
