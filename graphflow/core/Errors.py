from typing import List, Optional


class GraphError(ValueError):
    """Base class for every error raised while validating or evaluating a graph."""


class UnknownNodeTypeError(GraphError):
    def __init__(self, node_type: str):
        self.node_type = node_type
        super().__init__(f"Node type '{node_type}' not found in registry")


class TypeMismatchError(GraphError):
    pass


class DivisionByZeroError(GraphError, ZeroDivisionError):
    def __init__(self, node_type: str = "Divide"):
        super().__init__(f"Division by zero in {node_type} node")


class UnknownOperatorError(GraphError):
    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Unknown operator: {operator}")


class CycleDetectedError(GraphError):
    def __init__(self, path: List[str]):
        self.path = path
        super().__init__(f"Graph contains cycles: {' -> '.join(path)}")


class SubgraphEvaluationError(GraphError):
    def __init__(self, node_id: str, node_type: str, reason: Optional[str]):
        self.node_id = node_id
        self.reason = reason
        super().__init__(f"{node_type} subgraph evaluation failed in node '{node_id}': {reason}")
