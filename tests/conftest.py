from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from rationale.models import (
    AgentDecision,
    AgentDecisionTrace,
    AgentType,
    DecisionInputs,
    DecisionOutcome,
    HumanOverride,
    OutcomeResult,
)

BASE_TIME = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
EXAMPLES_DIR = Path(__file__).parent.parent / "examples"


def at(seconds: float) -> datetime:
    return BASE_TIME + timedelta(seconds=seconds)


def build_trace(
    trace_id: str = "trace-1",
    run_id: str = "run-123",
    agent_type: AgentType = AgentType.CODER,
    seconds: float = 0,
    step_id: str | None = None,
    tenant_id: str = "tenant-1",
    action: str = "generate_code",
    reasoning: str = "Used ThemeContext pattern because existing codebase uses React Context for global state",
    confidence: float = 0.87,
    alternatives: list[str] | None = None,
    prompt: str = "Test prompt",
    context_window: list[str] | None = None,
    previous_steps: list[str] | None = None,
    outcome: DecisionOutcome | None = None,
) -> AgentDecisionTrace:
    return AgentDecisionTrace(
        id=trace_id,
        run_id=run_id,
        step_id=step_id,
        tenant_id=tenant_id,
        agent_type=agent_type,
        timestamp=at(seconds),
        inputs=DecisionInputs(
            prompt=prompt,
            context_window=context_window or [],
            previous_steps=previous_steps or [],
        ),
        decision=AgentDecision(
            action=action,
            reasoning=reasoning,
            confidence=confidence,
            alternatives=alternatives or [],
        ),
        outcome=outcome,
    )


def success(actual: str | None = None) -> DecisionOutcome:
    return DecisionOutcome(result=OutcomeResult.SUCCESS, actual_outcome=actual)


def failure(actual: str | None = None) -> DecisionOutcome:
    return DecisionOutcome(result=OutcomeResult.FAILURE, actual_outcome=actual)


def overridden(
    user_id: str = "user-456",
    seconds: float = 300,
    result: OutcomeResult = OutcomeResult.OVERRIDE,
    reason: str | None = "Used different implementation approach",
) -> DecisionOutcome:
    return DecisionOutcome(
        result=result,
        human_override=HumanOverride(user_id=user_id, timestamp=at(seconds), reason=reason),
    )


@pytest.fixture
def make_trace():
    return build_trace


@pytest.fixture
def traces_file() -> Path:
    return EXAMPLES_DIR / "traces.json"


@pytest.fixture
def graph_file() -> Path:
    return EXAMPLES_DIR / "graph.json"
