"""Load decision traces and context graphs from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter

from rationale.models import AgentDecisionTrace, ContextEdge, ContextNode

_TRACES = TypeAdapter(list[AgentDecisionTrace])
_NODES = TypeAdapter(list[ContextNode])
_EDGES = TypeAdapter(list[ContextEdge])


def load_traces(path: Path) -> list[AgentDecisionTrace]:
    """Load traces from a JSON file holding a list, or an object with a "traces" list.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        json.JSONDecodeError: If the file isn't valid JSON.
        pydantic.ValidationError: If a record doesn't match the trace schema.
    """
    data = json.loads(path.read_text())
    if isinstance(data, dict):
        data = data.get("traces", [])
    return _TRACES.validate_python(data)


def load_graph(path: Path) -> tuple[list[ContextNode], list[ContextEdge]]:
    """Load a context graph snapshot: {"nodes": [...], "edges": [...]}.

    Raises the same errors as load_traces.
    """
    data = json.loads(path.read_text())
    return _NODES.validate_python(data.get("nodes", [])), _EDGES.validate_python(data.get("edges", []))
