"""Explainer: answers "why did the agent do that?" for a tenant."""

from __future__ import annotations

import asyncio
import logging

from rationale.analyzers.base import ReasoningAnalyzer
from rationale.explain.aggregator import assemble_run_explanation, sort_traces
from rationale.explain.builder import DecisionExplanationBuilder
from rationale.models import DecisionExplanation, ExplainerOptions, RunExplanation
from rationale.reporting.formatters import format_trajectory_node
from rationale.stores.base import ContextGraphStore, DecisionTraceStore, EntityResolver

logger = logging.getLogger(__name__)


class Explainer:
    """Builds decision, step, run and trajectory explanations.

    An instance is bound to one tenant. Every call reads the stores afresh;
    nothing is cached between calls. Store exceptions propagate unchanged.
    """

    def __init__(
        self,
        tenant_id: str,
        trace_store: DecisionTraceStore,
        graph_store: ContextGraphStore | None = None,
        entity_resolver: EntityResolver | None = None,
        analyzer: ReasoningAnalyzer | None = None,
    ):
        self.tenant_id = tenant_id
        self.trace_store = trace_store
        self.graph_store = graph_store
        self.builder = DecisionExplanationBuilder(analyzer=analyzer, entity_resolver=entity_resolver)

    async def explain_decision(self, trace_id: str, options: ExplainerOptions | None = None) -> DecisionExplanation | None:
        """Explain one decision by trace id; None if the store has no such trace."""
        trace = await self.trace_store.get_trace(trace_id)
        if trace is None:
            logger.debug("No trace %s", trace_id)
            return None
        return await self.builder.build(trace, options)

    async def explain_step(
        self, run_id: str, step_id: str, options: ExplainerOptions | None = None
    ) -> DecisionExplanation | None:
        traces = await self.trace_store.list_traces(run_id=run_id, tenant_id=self.tenant_id)
        trace = next((t for t in traces if t.step_id == step_id), None)
        if trace is None:
            logger.debug("No step %s in run %s", step_id, run_id)
            return None
        return await self.builder.build(trace, options)

    async def explain_run(self, run_id: str, options: ExplainerOptions | None = None) -> RunExplanation | None:
        """Explain every decision of a run; None if the run has no traces."""
        traces = await self.trace_store.list_traces(run_id=run_id, tenant_id=self.tenant_id)
        if not traces:
            logger.debug("No traces for run %s", run_id)
            return None

        traces = sort_traces(traces)
        decisions = list(await asyncio.gather(*(self.builder.build(t, options) for t in traces)))
        logger.info("Explained run %s: %d decision(s)", run_id, len(decisions))
        return assemble_run_explanation(run_id, self.tenant_id, traces, decisions)

    async def explain_trajectory(self, node_id: str) -> list[str]:
        """One line per node on the causal path to node_id; empty when there is none."""
        if self.graph_store is None:
            raise RuntimeError("explain_trajectory needs a context graph store")
        trajectory = await self.graph_store.get_trajectory(node_id)
        return [format_trajectory_node(node) for node in trajectory.path]


def create_explainer(
    tenant_id: str,
    trace_store: DecisionTraceStore,
    graph_store: ContextGraphStore | None = None,
    entity_resolver: EntityResolver | None = None,
    analyzer: ReasoningAnalyzer | None = None,
) -> Explainer:
    """Create an explainer scoped to one tenant."""
    return Explainer(
        tenant_id=tenant_id,
        trace_store=trace_store,
        graph_store=graph_store,
        entity_resolver=entity_resolver,
        analyzer=analyzer,
    )
