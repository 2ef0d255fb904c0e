"""
Bundled example graphs in the Graph JSON wire shape.

    python -m graphflow evaluate --sample complex
"""
from typing import Any, Dict


def _edge(from_node: str, from_port: str, to_node: str, to_port: str) -> Dict[str, Any]:
    return {"from": {"node": from_node, "port": from_port}, "to": {"node": to_node, "port": to_port}}


def _value(node_id: str, value: Any) -> Dict[str, Any]:
    return {"id": node_id, "type": "Value", "data": {"value": value}}


# 10 + 5
SAMPLE_GRAPH: Dict[str, Any] = {
    "nodes": [
        _value("value1", 10),
        _value("value2", 5),
        {"id": "add", "type": "Add", "data": {}},
        {"id": "output", "type": "Output", "data": {"outputs": ["result"]}},
    ],
    "edges": [
        _edge("value1", "out", "add", "in0"),
        _edge("value2", "out", "add", "in1"),
        _edge("add", "out", "output", "result"),
    ],
}

# (5 + 2), (10 * 3), (3 - 5) gathered into one Output node
COMPLEX_GRAPH: Dict[str, Any] = {
    "nodes": [
        _value("value_x", 5),
        _value("value_2", 2),
        _value("value_y", 10),
        _value("value_3", 3),
        _value("value_z", 3),
        _value("value_5", 5),
        {"id": "add1", "type": "Add", "data": {}},
        {"id": "multiply", "type": "Multiply", "data": {}},
        {"id": "subtract", "type": "Subtract", "data": {}},
        {"id": "output", "type": "Output", "data": {"outputs": ["result1", "result2", "result3"]}},
    ],
    "edges": [
        _edge("value_x", "out", "add1", "in0"),
        _edge("value_2", "out", "add1", "in1"),
        _edge("add1", "out", "output", "result1"),
        _edge("value_y", "out", "multiply", "in0"),
        _edge("value_3", "out", "multiply", "in1"),
        _edge("multiply", "out", "output", "result2"),
        _edge("value_z", "out", "subtract", "in0"),
        _edge("value_5", "out", "subtract", "in1"),
        _edge("subtract", "out", "output", "result3"),
    ],
}

DATE_SAMPLE_GRAPH: Dict[str, Any] = {
    "nodes": [
        _value("dateString", "2025-01-01T00:00:00.000Z"),
        {"id": "createDate", "type": "CreateDate", "data": {}},
        _value("daysToAdd", 7),
        _value("hoursToAdd", 12),
        {"id": "addDate", "type": "AddDate", "data": {}},
        _value("formatType", "iso"),
        {"id": "formatDate", "type": "FormatDate", "data": {}},
        {"id": "output", "type": "Output", "data": {"outputs": ["originalDate", "modifiedDate", "formattedDate"]}},
    ],
    "edges": [
        _edge("dateString", "out", "createDate", "value"),
        _edge("createDate", "out", "output", "originalDate"),
        _edge("createDate", "out", "addDate", "date"),
        _edge("daysToAdd", "out", "addDate", "days"),
        _edge("hoursToAdd", "out", "addDate", "hours"),
        _edge("addDate", "out", "output", "modifiedDate"),
        _edge("addDate", "out", "formatDate", "date"),
        _edge("formatType", "out", "formatDate", "format"),
        _edge("formatDate", "out", "output", "formattedDate"),
    ],
}

# Doubles every element: the subgraph multiplies its element slot by 2
MAP_GRAPH: Dict[str, Any] = {
    "nodes": [
        _value("numbers", [1, 2, 3, 4]),
        {
            "id": "double",
            "type": "Map",
            "data": {
                "output": "output.output",
                "subgraph": {
                    "nodes": [
                        {"id": "element", "type": "Input", "data": {}, "role": "element"},
                        _value("two", 2),
                        {"id": "mul", "type": "Multiply", "data": {}},
                        {"id": "output", "type": "Output", "data": {}},
                    ],
                    "edges": [
                        _edge("element", "out", "mul", "in0"),
                        _edge("two", "out", "mul", "in1"),
                        _edge("mul", "out", "output", "in"),
                    ],
                },
            },
        },
        {"id": "output", "type": "Output", "data": {"outputs": ["doubled"]}},
    ],
    "edges": [
        _edge("numbers", "out", "double", "array"),
        _edge("double", "out", "output", "doubled"),
    ],
}

# Keeps elements greater than 10, then sums the survivors
FILTER_REDUCE_GRAPH: Dict[str, Any] = {
    "nodes": [
        _value("numbers", [1, 5, 10, 15, 20]),
        {
            "id": "large",
            "type": "Filter",
            "data": {
                "subgraph": {
                    "nodes": [
                        {"id": "element", "type": "Input", "data": {}, "role": "element"},
                        _value("limit", 10),
                        {"id": "result", "type": "Compare", "data": {"operator": ">"}},
                    ],
                    "edges": [
                        _edge("element", "out", "result", "a"),
                        _edge("limit", "out", "result", "b"),
                    ],
                },
            },
        },
        {
            "id": "sum",
            "type": "Reduce",
            "data": {
                "subgraph": {
                    "nodes": [
                        {"id": "acc", "type": "Input", "data": {}, "role": "accumulator"},
                        {"id": "item", "type": "Input", "data": {}, "role": "element"},
                        {"id": "result", "type": "Add", "data": {}},
                    ],
                    "edges": [
                        _edge("acc", "out", "result", "in0"),
                        _edge("item", "out", "result", "in1"),
                    ],
                },
            },
        },
        {"id": "output", "type": "Output", "data": {"outputs": ["filtered", "total"]}},
    ],
    "edges": [
        _edge("numbers", "out", "large", "array"),
        _edge("large", "out", "sum", "array"),
        _edge("large", "out", "output", "filtered"),
        _edge("sum", "out", "output", "total"),
    ],
}

GRAPHS: Dict[str, Dict[str, Any]] = {
    "sample": SAMPLE_GRAPH,
    "complex": COMPLEX_GRAPH,
    "dates": DATE_SAMPLE_GRAPH,
    "map": MAP_GRAPH,
    "filter_reduce": FILTER_REDUCE_GRAPH,
}
