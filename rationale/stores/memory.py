"""In-memory trace store and entity resolver for local use and tests."""

from __future__ import annotations

import logging

from rationale.models import AgentDecisionTrace, EntityMention, ResolvedEntity
from rationale.stores.base import DecisionTraceStore, EntityResolver

logger = logging.getLogger(__name__)


class InMemoryDecisionTraceStore(DecisionTraceStore):
    """Dict-backed trace store keyed by trace id."""

    def __init__(self, traces: list[AgentDecisionTrace] | None = None):
        self._traces: dict[str, AgentDecisionTrace] = {}
        for trace in traces or []:
            self.save_trace(trace)

    def save_trace(self, trace: AgentDecisionTrace) -> None:
        self._traces[trace.id] = trace

    def count(self) -> int:
        return len(self._traces)

    async def get_trace(self, trace_id: str) -> AgentDecisionTrace | None:
        return self._traces.get(trace_id)

    async def list_traces(self, run_id: str, tenant_id: str) -> list[AgentDecisionTrace]:
        matches = [t for t in self._traces.values() if t.run_id == run_id and t.tenant_id == tenant_id]
        # Newest first, like the hosted store; callers must not rely on it.
        matches.sort(key=lambda t: t.timestamp, reverse=True)
        logger.debug("Listed %d trace(s) for run %s (tenant %s)", len(matches), run_id, tenant_id)
        return matches


class StaticEntityResolver(EntityResolver):
    """Resolves identifiers from a fixed identifier -> entity mapping."""

    def __init__(self, entities: dict[str, ResolvedEntity] | None = None):
        self._entities = dict(entities or {})

    def register(self, identifier: str, entity: ResolvedEntity) -> None:
        self._entities[identifier] = entity

    async def resolve_many(self, mentions: list[EntityMention]) -> list[ResolvedEntity]:
        resolved: list[ResolvedEntity] = []
        seen: set[str] = set()
        for mention in mentions:
            entity = self._entities.get(mention.identifier)
            if entity is None or entity.canonical_id in seen:
                continue
            seen.add(entity.canonical_id)
            resolved.append(entity.model_copy(update={"mentions": [*entity.mentions, mention]}))
        return resolved
