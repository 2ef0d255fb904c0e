from datetime import datetime, timezone

import pytest

from graphflow.core.Errors import GraphError
from graphflow.examples.SampleGraphs import DATE_SAMPLE_GRAPH
from graphflow.nodes.DateTimeNodes import (
    AddDateNode,
    CreateDateNode,
    FormatDateNode,
    add_months,
    to_iso_string,
)

UTC = timezone.utc


class TestDateHelpers:

    def test_add_months_clamps_day(self):
        assert add_months(datetime(2025, 1, 31, tzinfo=UTC), 1) == datetime(2025, 2, 28, tzinfo=UTC)
        assert add_months(datetime(2024, 2, 29, tzinfo=UTC), 12) == datetime(2025, 2, 28, tzinfo=UTC)
        assert add_months(datetime(2025, 3, 15, tzinfo=UTC), -3) == datetime(2024, 12, 15, tzinfo=UTC)

    def test_iso_string(self):
        assert to_iso_string(datetime(2025, 1, 8, 12, 0, tzinfo=UTC)) == "2025-01-08T12:00:00.000Z"


class TestDateNodes:

    def test_create_from_iso(self, make_context):
        context = make_context({"value": "2025-01-01T00:00:00.000Z"})
        CreateDateNode().execute(context)
        assert context.outputs["out"] == datetime(2025, 1, 1, tzinfo=UTC)

    def test_create_from_epoch_millis(self, make_context):
        context = make_context({"value": 0})
        CreateDateNode().execute(context)
        assert context.outputs["out"] == datetime(1970, 1, 1, tzinfo=UTC)

    def test_create_rejects_garbage(self, make_context):
        context = make_context({"value": "not a date"})
        with pytest.raises(GraphError):
            CreateDateNode().execute(context)

    def test_add_without_date_is_silent(self, make_context):
        context = make_context({"days": 1})
        AddDateNode().execute(context)
        assert context.outputs == {}

    def test_add_intervals(self, make_context):
        start = datetime(2025, 1, 31, tzinfo=UTC)
        context = make_context({"date": start, "hours": 2, "months": 1, "years": 1})
        AddDateNode().execute(context)
        assert context.outputs["out"] == datetime(2026, 2, 28, 2, 0, tzinfo=UTC)

    def test_format_variants(self, make_context):
        moment = datetime(2025, 1, 8, 12, 0, tzinfo=UTC)

        context = make_context({"date": moment, "format": "date"})
        FormatDateNode().execute(context)
        assert context.outputs["out"] == "Wed Jan 08 2025"

        context = make_context({"date": moment, "format": "time"})
        FormatDateNode().execute(context)
        assert context.outputs["out"] == "12:00:00"

        context = make_context({"date": datetime(1970, 1, 1, tzinfo=UTC), "format": "timestamp"})
        FormatDateNode().execute(context)
        assert context.outputs["out"] == "0"

        context = make_context({"date": moment})
        FormatDateNode().execute(context)
        assert context.outputs["out"] == "2025-01-08T12:00:00.000Z"

    def test_date_sample_graph(self, evaluate):
        result = evaluate(DATE_SAMPLE_GRAPH)
        assert result.success, result.error
        assert result.outputs["output.originalDate"] == datetime(2025, 1, 1, tzinfo=UTC)
        assert result.outputs["output.modifiedDate"] == datetime(2025, 1, 8, 12, 0, tzinfo=UTC)
        assert result.outputs["output.formattedDate"] == "2025-01-08T12:00:00.000Z"
