import asyncio

import pytest

from graphflow.core.Evaluator import GraphEvaluator
from graphflow.core.GraphPrimitives import Graph
from graphflow.core.Node import NodeDefinition, PortSpec
from graphflow.core.Types import UnionType, ValueType
from graphflow.examples.SampleGraphs import COMPLEX_GRAPH, SAMPLE_GRAPH, _edge, _value
from graphflow.server.trace.trace_emitter import TraceEmitter
from graphflow.server.trace.trace_types import TRACE_EVENT_TYPES


class CountingNode(NodeDefinition):
    type = "Counting"
    category = "test"
    inputs = [PortSpec.of("a", "any"), PortSpec.of("b", "any")]
    outputs = [PortSpec.of("out", "any")]

    def __init__(self):
        self.calls = []

    def execute(self, context):
        seen = (context.getInputValue("a"), context.getInputValue("b"))
        self.calls.append(seen)
        context.setOutputValue("out", seen)


class SlowNode(NodeDefinition):
    type = "Slow"
    category = "test"
    outputs = [PortSpec.of("out", "number")]

    async def execute(self, context):
        await asyncio.sleep(0)
        context.setOutputValue("out", context.getNodeData().get("value"))


class LyingNode(NodeDefinition):
    type = "Lying"
    category = "test"
    outputs = [PortSpec.of("out", "number")]

    def execute(self, context):
        context.setOutputValue("out", "not a number")


class TestGraphEvaluator:

    def test_sample_graph(self, evaluate):
        result = evaluate(SAMPLE_GRAPH)
        assert result.success, result.error
        assert result.error is None
        assert result.outputs["add.out"] == 15
        assert result.outputs["output.result"] == 15

    def test_complex_graph(self, evaluate):
        result = evaluate(COMPLEX_GRAPH)
        assert result.success, result.error
        assert result.outputs["output.result1"] == 7
        assert result.outputs["output.result2"] == 30
        assert result.outputs["output.result3"] == -2

    def test_staged_inputs_are_visible_in_outputs(self, evaluate):
        result = evaluate(SAMPLE_GRAPH)
        assert result.outputs["add.input.in0"] == 10
        assert result.outputs["add.input.in1"] == 5

    def test_inferred_types(self, evaluate):
        result = evaluate(SAMPLE_GRAPH)
        info = result.inferredTypes["add.out"]
        assert info.inferredType is ValueType.NUMBER
        assert info.declaredType == UnionType(ValueType.NUMBER, ValueType.ARRAY)
        assert info.isCompatible

    def test_waits_for_every_connected_input(self, registry):
        counting = CountingNode()
        registry.register(counting)
        graph = Graph.from_dict({
            "nodes": [
                _value("v1", 1),
                _value("v2", 2),
                {"id": "add", "type": "Add"},
                {"id": "join", "type": "Counting"},
            ],
            "edges": [
                _edge("v1", "out", "add", "in0"),
                _edge("v2", "out", "add", "in1"),
                _edge("add", "out", "join", "a"),
                _edge("v1", "out", "join", "b"),
            ],
        })

        result = asyncio.run(GraphEvaluator(graph, registry).evaluate())
        assert result.success, result.error
        assert counting.calls == [(3, 1)]

    def test_staged_none_counts_as_arrived(self, evaluate):
        result = evaluate({
            "nodes": [
                {"id": "empty", "type": "Value", "data": {}},
                {"id": "output", "type": "Output", "data": {"outputs": ["x"]}},
            ],
            "edges": [_edge("empty", "out", "output", "x")],
        })
        assert result.success, result.error
        assert "output.x" in result.outputs
        assert result.outputs["output.x"] is None

    def test_async_definitions(self, registry):
        registry.register(SlowNode())
        graph = Graph.from_dict({
            "nodes": [
                {"id": "slow", "type": "Slow", "data": {"value": 4}},
                _value("two", 2),
                {"id": "mul", "type": "Multiply"},
            ],
            "edges": [
                _edge("slow", "out", "mul", "in0"),
                _edge("two", "out", "mul", "in1"),
            ],
        })
        result = asyncio.run(GraphEvaluator(graph, registry).evaluate())
        assert result.success, result.error
        assert result.outputs["mul.out"] == 8

    def test_repeat_evaluation_is_idempotent(self, registry):
        evaluator = GraphEvaluator(Graph.from_dict(COMPLEX_GRAPH), registry)
        first = asyncio.run(evaluator.evaluate())
        second = asyncio.run(evaluator.evaluate())
        assert first.outputs == second.outputs

    def test_divide_by_zero_fails_the_run(self, evaluate):
        result = evaluate({
            "nodes": [_value("ten", 10), _value("zero", 0), {"id": "div", "type": "Divide"}],
            "edges": [_edge("ten", "out", "div", "in0"), _edge("zero", "out", "div", "in1")],
        })
        assert not result.success
        assert result.error == "Division by zero in Divide node"
        assert result.outputs == {}

    def test_unknown_node_type(self, evaluate):
        result = evaluate({"nodes": [{"id": "x", "type": "Nope"}], "edges": []})
        assert not result.success
        assert result.error == "Node type 'Nope' not found in registry"

    def test_input_type_mismatch(self, evaluate):
        result = evaluate({
            "nodes": [_value("text", "hello"), {"id": "loop", "type": "ForEach"}],
            "edges": [_edge("text", "out", "loop", "array")],
        })
        assert not result.success
        assert result.error == (
            "Type mismatch: cannot connect 'Value.out' (string) to 'ForEach.array' (expected array)"
        )

    def test_output_type_mismatch(self, registry):
        registry.register(LyingNode())
        graph = Graph.from_dict({
            "nodes": [{"id": "liar", "type": "Lying"}, {"id": "output", "type": "Output"}],
            "edges": [_edge("liar", "out", "output", "in")],
        })
        result = asyncio.run(GraphEvaluator(graph, registry).evaluate())
        assert not result.success
        assert result.error == "Type mismatch at node 'liar' output port 'out': expected 'number' but got 'string'"

    def test_cycle_members_never_run(self, evaluate):
        result = evaluate({
            "nodes": [_value("v", 1), {"id": "a", "type": "Add"}, {"id": "b", "type": "Add"}],
            "edges": [
                _edge("v", "out", "a", "in1"),
                _edge("a", "out", "b", "in0"),
                _edge("b", "out", "a", "in0"),
            ],
        })
        assert result.success
        assert result.outputs["v.out"] == 1
        assert "a.out" not in result.outputs
        assert "b.out" not in result.outputs


class TestTracing:

    def setup_method(self):
        self.events = []
        self.tracer = TraceEmitter()
        self.tracer.on_trace(self.events.append)

    def test_successful_run(self, evaluate):
        evaluate(SAMPLE_GRAPH, tracer=self.tracer)

        types = [e["type"] for e in self.events]
        assert types[0] == "EXEC_START"
        assert types[-1] == "EXEC_DONE"
        assert types.count("NODE_RUNNING") == 4
        assert types.count("NODE_DONE") == 4
        assert types.count("EDGE_ACTIVE") == 3
        assert len({e["runId"] for e in self.events}) == 1
        assert all("ts" in e for e in self.events)
        assert sorted(self.events[0]["startNodeIds"]) == ["value1", "value2"]

    def test_failed_run(self, evaluate):
        evaluate({"nodes": [_value("ten", 10), _value("zero", 0), {"id": "div", "type": "Divide"}],
                  "edges": [_edge("ten", "out", "div", "in0"), _edge("zero", "out", "div", "in1")]},
                 tracer=self.tracer)

        types = [e["type"] for e in self.events]
        assert "NODE_ERROR" in types
        assert types[-1] == "EXEC_ERROR"
        error_event = next(e for e in self.events if e["type"] == "NODE_ERROR")
        assert error_event["nodeId"] == "div"

    def test_each_run_gets_a_new_id(self, evaluate):
        evaluate(SAMPLE_GRAPH, tracer=self.tracer)
        evaluate(SAMPLE_GRAPH, tracer=self.tracer)
        starts = [e for e in self.events if e["type"] == "EXEC_START"]
        assert starts[0]["runId"] != starts[1]["runId"]


class TestLongGraphs:

    def test_long_chain_evaluates(self, evaluate):
        length = 2000
        nodes = [_value("start", 1), _value("one", 1)]
        edges = []
        previous = "start"
        for i in range(length):
            step = f"step{i}"
            nodes.append({"id": step, "type": "Add"})
            edges.append(_edge(previous, "out", step, "in0"))
            edges.append(_edge("one", "out", step, "in1"))
            previous = step

        result = evaluate({"nodes": nodes, "edges": edges})
        assert result.success, result.error
        assert result.outputs[f"step{length - 1}.out"] == length + 1

    def test_only_known_trace_events(self, evaluate):
        events = []
        tracer = TraceEmitter()
        tracer.on_trace(events.append)
        evaluate(COMPLEX_GRAPH, tracer=tracer)
        evaluate({"nodes": [{"id": "x", "type": "Nope"}]}, tracer=tracer)
        assert {e["type"] for e in events} <= set(TRACE_EVENT_TYPES)
