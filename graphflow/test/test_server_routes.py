import asyncio
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from graphflow.core.GraphPrimitives import Graph
from graphflow.examples.SampleGraphs import GRAPHS
from graphflow.server.config import Settings
from graphflow.server.main import create_app
from graphflow.server.routes.graph_routes import (
    evaluate_graph,
    get_sample,
    list_categories,
    list_node_definitions,
    list_samples,
    validate_graph,
)
from graphflow.server.serializers.graph_serializer import to_json_safe
from graphflow.server.state import ServerState, get_state


class TestGraphRoutes:

    def setup_method(self):
        self.state = ServerState()

    def test_evaluate(self):
        body = asyncio.run(evaluate_graph(Graph.from_dict(GRAPHS["sample"]), self.state))
        assert body["success"] is True
        assert body["outputs"]["output.result"] == 15
        assert body["inferredTypes"]["add.out"]["inferredType"] == "number"

    def test_evaluate_serializes_dates(self):
        body = asyncio.run(evaluate_graph(Graph.from_dict(GRAPHS["dates"]), self.state))
        assert body["outputs"]["output.originalDate"] == "2025-01-01T00:00:00+00:00"
        assert body["outputs"]["output.formattedDate"] == "2025-01-08T12:00:00.000Z"

    def test_evaluate_failure_is_reported_in_body(self):
        graph = Graph.from_dict({"nodes": [{"id": "x", "type": "Nope"}]})
        body = asyncio.run(evaluate_graph(graph, self.state))
        assert body == {"success": False, "outputs": {}, "error": "Node type 'Nope' not found in registry"}

    def test_evaluate_streams_trace_events(self):
        events = []
        self.state.tracer.on_trace(events.append)
        asyncio.run(evaluate_graph(Graph.from_dict(GRAPHS["sample"]), self.state))
        assert events[0]["type"] == "EXEC_START"
        assert events[-1]["type"] == "EXEC_DONE"

    def test_validate(self):
        body = asyncio.run(validate_graph(Graph.from_dict({"nodes": []}), self.state))
        assert body["success"] is False
        assert body["errors"] == ["Graph has no nodes"]

    def test_validate_does_not_trace(self):
        events = []
        self.state.tracer.on_trace(events.append)
        asyncio.run(validate_graph(Graph.from_dict(GRAPHS["complex"]), self.state))
        assert events == []

    def test_list_nodes(self):
        every = asyncio.run(list_node_definitions(category=None, state=self.state))
        assert len(every) == len(self.state.registry)
        math = asyncio.run(list_node_definitions(category="math", state=self.state))
        assert [d["type"] for d in math] == ["Add", "Subtract", "Multiply", "Divide"]
        assert "datetime" in asyncio.run(list_categories(self.state))

    def test_samples(self):
        names = asyncio.run(list_samples())
        assert names == list(GRAPHS.keys())
        sample = asyncio.run(get_sample("sample"))
        assert sample["edges"][0]["from"] == {"node": "value1", "port": "out"}

    def test_unknown_sample(self):
        with pytest.raises(HTTPException) as exc_info:
            asyncio.run(get_sample("missing"))
        assert exc_info.value.status_code == 404


class TestApp:

    def test_create_app(self):
        app = create_app(Settings(cors_origins=["http://localhost:5173"]))
        paths = {route.path for route in app.routes}
        assert {"/health", "/api/nodes", "/api/graphs/evaluate", "/api/graphs/validate"} <= paths

        state = get_state(SimpleNamespace(app=app))
        assert isinstance(state, ServerState)

        health = next(route for route in app.routes if route.path == "/health")
        assert asyncio.run(health.endpoint()) == {"status": "ok", "nodeTypes": len(state.registry)}


class TestSerializer:

    def test_to_json_safe(self):
        from datetime import datetime, timezone
        from graphflow.core.Types import ValueType

        value = {"when": datetime(2025, 1, 1, tzinfo=timezone.utc), "kind": ValueType.NUMBER, "items": (1, 2)}
        assert to_json_safe(value) == {"when": "2025-01-01T00:00:00+00:00", "kind": "number", "items": [1, 2]}
