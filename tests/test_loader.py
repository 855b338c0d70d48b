"""Tests for loading traces and graph snapshots from JSON files."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from rationale.ingestion.loader import load_graph, load_traces
from rationale.models import AgentType, ContextEdgeType, OutcomeResult


def _trace_record(**overrides):
    record = {
        "id": "trace-1",
        "run_id": "run-1",
        "tenant_id": "tenant-1",
        "agent_type": "coder",
        "timestamp": "2025-01-01T10:00:00Z",
        "decision": {"action": "generate_code", "confidence": 0.5},
    }
    record.update(overrides)
    return record


class TestLoadTraces:
    def test_example_file(self, traces_file):
        traces = load_traces(traces_file)
        assert [t.id for t in traces] == ["trace-2", "trace-1", "trace-3"]
        assert traces[0].agent_type == AgentType.CODER
        assert traces[2].outcome.result == OutcomeResult.OVERRIDE
        assert traces[2].outcome.human_override.user_id == "jgupta"

    def test_bare_list(self, tmp_path):
        path = tmp_path / "traces.json"
        path.write_text(json.dumps([_trace_record()]))
        [trace] = load_traces(path)
        assert trace.inputs.prompt == ""
        assert trace.decision.alternatives == []
        assert trace.outcome is None

    def test_object_without_traces(self, tmp_path):
        path = tmp_path / "traces.json"
        path.write_text("{}")
        assert load_traces(path) == []

    def test_naive_timestamps_read_as_utc(self, tmp_path):
        path = tmp_path / "traces.json"
        records = [
            _trace_record(id="aware", timestamp="2025-01-01T10:00:00Z"),
            _trace_record(
                id="naive",
                timestamp="2025-01-01T10:00:01",
                outcome={
                    "result": "override",
                    "human_override": {"user_id": "jgupta", "timestamp": "2025-01-01T10:05:00"},
                },
            ),
        ]
        path.write_text(json.dumps(records))
        aware, naive = load_traces(path)
        assert naive.timestamp == datetime(2025, 1, 1, 10, 0, 1, tzinfo=timezone.utc)
        assert naive.outcome.human_override.timestamp.tzinfo is not None
        assert aware.timestamp < naive.timestamp

    def test_confidence_out_of_range(self, tmp_path):
        path = tmp_path / "traces.json"
        path.write_text(json.dumps([_trace_record(decision={"action": "x", "confidence": 1.5})]))
        with pytest.raises(ValidationError):
            load_traces(path)

    def test_unknown_agent_type(self, tmp_path):
        path = tmp_path / "traces.json"
        path.write_text(json.dumps([_trace_record(agent_type="wizard")]))
        with pytest.raises(ValidationError):
            load_traces(path)

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "traces.json"
        path.write_text("{not json")
        with pytest.raises(json.JSONDecodeError):
            load_traces(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_traces(tmp_path / "nope.json")


class TestLoadGraph:
    def test_example_file(self, graph_file):
        nodes, edges = load_graph(graph_file)
        assert [n.id for n in nodes] == ["n1", "n2", "n3"]
        assert [e.id for e in edges] == ["e1", "e2"]
        assert edges[1].type == ContextEdgeType.CAUSED
        assert edges[1].confidence == 0.9

    def test_naive_node_timestamp_read_as_utc(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text(json.dumps({"nodes": [{"id": "n1", "type": "event", "timestamp": "2025-01-01T09:59:00"}]}))
        [n1], _ = load_graph(path)
        assert n1.timestamp.tzinfo is not None

    def test_empty_snapshot(self, tmp_path):
        path = tmp_path / "graph.json"
        path.write_text("{}")
        assert load_graph(path) == ([], [])
