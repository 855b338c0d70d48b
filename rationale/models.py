"""Data models for decision traces, context graph nodes, and explanations."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime | None) -> datetime | None:
    """Read naive timestamps as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ---------------------------------------------------------------------------
# Decision trace records (owned by the decision trace store)
# ---------------------------------------------------------------------------

class AgentType(str, Enum):
    ORCHESTRATOR = "orchestrator"
    TRIAGE = "triage"
    CODER = "coder"
    RESOLVER = "resolver"
    REVIEWER = "reviewer"
    PLANNER = "planner"
    ANALYZER = "analyzer"


class OutcomeResult(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    OVERRIDE = "override"


class DecisionInputs(BaseModel):
    """What the agent saw when it made the decision."""

    prompt: str = ""
    context_window: list[str] = Field(default_factory=list)
    previous_steps: list[str] = Field(default_factory=list)


class AgentDecision(BaseModel):
    """What the agent decided."""

    action: str
    reasoning: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    alternatives: list[str] = Field(default_factory=list)


class HumanOverride(BaseModel):
    user_id: str
    timestamp: datetime
    reason: str | None = None

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)


class DecisionOutcome(BaseModel):
    result: OutcomeResult
    actual_outcome: str | None = None
    human_override: HumanOverride | None = None


class AgentDecisionTrace(BaseModel):
    """One recorded agent decision."""

    id: str
    run_id: str
    step_id: str | None = None
    tenant_id: str
    agent_type: AgentType
    timestamp: datetime
    inputs: DecisionInputs = Field(default_factory=DecisionInputs)
    decision: AgentDecision
    outcome: DecisionOutcome | None = None

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)


# ---------------------------------------------------------------------------
# Context graph (owned by the context graph store)
# ---------------------------------------------------------------------------

class ContextNodeType(str, Enum):
    DECISION = "decision"
    EVENT = "event"
    ENTITY = "entity"
    ARTIFACT = "artifact"
    POLICY = "policy"


class ContextEdgeType(str, Enum):
    CAUSED = "caused"
    APPROVED = "approved"
    REFERENCED = "referenced"
    SUPERSEDED = "superseded"
    BLOCKED = "blocked"
    CREATED = "created"
    MODIFIED = "modified"
    TRIGGERED = "triggered"
    CONTRIBUTED = "contributed"
    INFERRED = "inferred"


class ContextNode(BaseModel):
    id: str
    type: ContextNodeType
    timestamp: datetime
    tenant_id: str = ""
    data: dict[str, Any] = Field(default_factory=dict)
    label: str | None = None

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime) -> datetime:
        return as_utc(v)


class ContextEdge(BaseModel):
    id: str
    source_id: str
    target_id: str
    type: ContextEdgeType = ContextEdgeType.CAUSED
    confidence: float = 1.0
    timestamp: datetime | None = None

    @field_validator("timestamp")
    @classmethod
    def utc_timestamp(cls, v: datetime | None) -> datetime | None:
        return as_utc(v)


class TrajectoryResult(BaseModel):
    """Root-first path of nodes leading to a target node."""

    path: list[ContextNode] = Field(default_factory=list)
    edges: list[ContextEdge] = Field(default_factory=list)
    confidence: float = 1.0


# ---------------------------------------------------------------------------
# Entity resolution
# ---------------------------------------------------------------------------

class EntityMention(BaseModel):
    source: str = "internal"
    identifier: str
    context: str | None = None


class ResolvedEntity(BaseModel):
    canonical_id: str
    type: str = "person"
    display_name: str
    mentions: list[EntityMention] = Field(default_factory=list)
    confidence: float = 1.0


# ---------------------------------------------------------------------------
# Explanations (derived, never persisted)
# ---------------------------------------------------------------------------

class ExplanationLevel(str, Enum):
    BRIEF = "brief"
    STANDARD = "standard"
    DETAILED = "detailed"
    DEBUG = "debug"


class ExplainerOptions(BaseModel):
    level: ExplanationLevel = ExplanationLevel.STANDARD
    include_raw: bool = False
    resolve_entities: bool = False
    max_content_length: int = Field(default=500, ge=3)


class InputType(str, Enum):
    ISSUE = "issue"
    PR = "pr"
    FILE = "file"
    CONTEXT = "context"
    PREVIOUS_STEP = "previous-step"


class ExplainedInput(BaseModel):
    type: InputType
    description: str
    content: str | None = None


class ExplainedAlternative(BaseModel):
    action: str
    rejection_reason: str


class DisplayStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    OVERRIDDEN = "overridden"


class ExplainedOutcome(BaseModel):
    status: DisplayStatus
    description: str
    artifacts: list[str] = Field(default_factory=list)


class ExplainedOverride(BaseModel):
    user: str
    timestamp: datetime
    reason: str | None = None
    changes: list[str] = Field(default_factory=list)


class ExplanationInputs(BaseModel):
    prompt: str
    documents: list[ExplainedInput] = Field(default_factory=list)
    previous_steps: list[ExplainedInput] = Field(default_factory=list)


class ExplanationReasoning(BaseModel):
    action: str
    explanation: str
    confidence: float
    key_factors: list[str] = Field(default_factory=list)


class ExplanationLinks(BaseModel):
    previous_step: str | None = None
    next_step: str | None = None
    related: list[str] = Field(default_factory=list)


class DecisionExplanation(BaseModel):
    """Structured answer to "why did the agent do that?" for one trace."""

    trace_id: str
    run_id: str
    step_id: str | None = None
    agent_type: AgentType
    timestamp: datetime
    inputs: ExplanationInputs
    reasoning: ExplanationReasoning
    alternatives: list[ExplainedAlternative] = Field(default_factory=list)
    outcome: ExplainedOutcome | None = None
    override: ExplainedOverride | None = None
    entities: list[ResolvedEntity] | None = None
    links: ExplanationLinks = Field(default_factory=ExplanationLinks)
    raw: AgentDecisionTrace | None = None


class RunStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PENDING = "pending"
    CANCELLED = "cancelled"


class Actor(str, Enum):
    AI = "ai"
    HUMAN = "human"
    SYSTEM = "system"


class RunOutcome(BaseModel):
    status: RunStatus
    description: str
    artifacts: list[str] = Field(default_factory=list)


class TimelineEvent(BaseModel):
    timestamp: datetime
    event: str
    actor: Actor
    trace_id: str | None = None


class RunStats(BaseModel):
    total_decisions: int
    human_overrides: int
    average_confidence: float
    duration_ms: int


class RunExplanation(BaseModel):
    """Explanation of every decision in a run, in chronological order."""

    run_id: str
    run_type: str
    tenant_id: str
    summary: str
    decisions: list[DecisionExplanation] = Field(default_factory=list)
    outcome: RunOutcome
    timeline: list[TimelineEvent] = Field(default_factory=list)
    stats: RunStats
