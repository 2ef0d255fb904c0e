"""
Graph serializer: converts registry definitions and evaluator results into
JSON-safe dicts matching the shapes the editor UI expects.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from graphflow.core.Evaluator import EvaluationResult, ValidationResult
from graphflow.core.Node import NodeDefinition
from graphflow.core.Types import UnionType, ValueType
from graphflow.noderegistry.NodeRegistry import NodeRegistry

# ── Wire shapes ───────────────────────────────────────────────────────────────
# SerializedDefinition keys: type, category, description, inputs, outputs
# SerializedEvaluation keys: success, outputs, inferredTypes?, error?
# SerializedValidation keys: success, errors, warnings, inferredTypes


def to_json_safe(value: Any) -> Any:
    """Recursively turn node values into something json.dumps accepts."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (ValueType, UnionType)):
        return str(value)
    if isinstance(value, dict):
        return {str(k): to_json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [to_json_safe(v) for v in value]
    return str(value)


def serialize_definition(definition: NodeDefinition) -> Dict[str, Any]:
    return definition.to_dict()


def serialize_registry(registry: NodeRegistry, category: Optional[str] = None) -> List[Dict[str, Any]]:
    definitions = registry.getByCategory(category) if category else registry.getAll()
    return [serialize_definition(d) for d in definitions]


def serialize_evaluation(result: EvaluationResult) -> Dict[str, Any]:
    return to_json_safe(result.to_dict())


def serialize_validation(result: ValidationResult) -> Dict[str, Any]:
    return to_json_safe(result.to_dict())
