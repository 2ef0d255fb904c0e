"""
Graph REST routes. All routes are mounted under /api by main.py.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from graphflow.core.GraphPrimitives import Graph
from graphflow.examples.SampleGraphs import GRAPHS
from graphflow.server.serializers.graph_serializer import (
    serialize_evaluation,
    serialize_registry,
    serialize_validation,
)
from graphflow.server.state import ServerState, get_state

logger = logging.getLogger(__name__)

router = APIRouter()


# ── GET /nodes ────────────────────────────────────────────────────────────────

@router.get("/nodes")
async def list_node_definitions(
    category: Optional[str] = Query(default=None),
    state: ServerState = Depends(get_state),
) -> List[Dict[str, Any]]:
    return serialize_registry(state.registry, category)


# ── GET /nodes/categories ─────────────────────────────────────────────────────

@router.get("/nodes/categories")
async def list_categories(state: ServerState = Depends(get_state)) -> List[str]:
    return state.registry.categories()


# ── POST /graphs/validate ─────────────────────────────────────────────────────

@router.post("/graphs/validate")
async def validate_graph(graph: Graph, state: ServerState = Depends(get_state)) -> Dict[str, Any]:
    result = state.evaluator(graph, traced=False).validate()
    logger.info("Validated graph (%d nodes): success=%s", len(graph.nodes), result.success)
    return serialize_validation(result)


# ── POST /graphs/evaluate ─────────────────────────────────────────────────────
# Evaluation failures are part of the result body, not HTTP errors.

@router.post("/graphs/evaluate")
async def evaluate_graph(graph: Graph, state: ServerState = Depends(get_state)) -> Dict[str, Any]:
    result = await state.evaluator(graph).evaluate()
    logger.info("Evaluated graph (%d nodes): success=%s", len(graph.nodes), result.success)
    return serialize_evaluation(result)


# ── GET /graphs/samples ───────────────────────────────────────────────────────

@router.get("/graphs/samples")
async def list_samples() -> List[str]:
    return list(GRAPHS.keys())


# ── GET /graphs/samples/:name ─────────────────────────────────────────────────

@router.get("/graphs/samples/{name}")
async def get_sample(name: str) -> Dict[str, Any]:
    sample = GRAPHS.get(name)
    if sample is None:
        raise HTTPException(status_code=404, detail=f"Sample graph '{name}' not found")
    return Graph.from_dict(sample).to_dict()
