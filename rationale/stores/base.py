"""Interfaces for the stores and services the explainer reads from.

Implementations own their own retry, timeout and authorization policy.
The explainer only awaits them and lets their exceptions propagate.
"""

from abc import ABC, abstractmethod

from rationale.models import AgentDecisionTrace, EntityMention, ResolvedEntity, TrajectoryResult


class DecisionTraceStore(ABC):
    """Read side of the decision trace store."""

    @abstractmethod
    async def get_trace(self, trace_id: str) -> AgentDecisionTrace | None:
        """Return the trace with this id, or None."""

    @abstractmethod
    async def list_traces(self, run_id: str, tenant_id: str) -> list[AgentDecisionTrace]:
        """Return every trace of a run for a tenant. Order is not guaranteed."""


class ContextGraphStore(ABC):
    """Read side of the causal context graph."""

    @abstractmethod
    async def get_trajectory(self, node_id: str) -> TrajectoryResult:
        """Return the root-first path of nodes leading to node_id."""


class EntityResolver(ABC):
    """Maps raw actor identifiers onto display identities."""

    @abstractmethod
    async def resolve_many(self, mentions: list[EntityMention]) -> list[ResolvedEntity]:
        """Resolve mentions; unresolvable ones are left out of the result."""
