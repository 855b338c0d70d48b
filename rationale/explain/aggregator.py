"""Combine the explanations of a run's decisions into a RunExplanation."""

from __future__ import annotations

from datetime import timedelta

from rationale.models import (
    Actor,
    AgentDecisionTrace,
    AgentType,
    DecisionExplanation,
    OutcomeResult,
    RunExplanation,
    RunOutcome,
    RunStats,
    RunStatus,
    TimelineEvent,
)

# First agent type present decides the run type.
RUN_TYPE_PRIORITY: tuple[tuple[AgentType, str], ...] = (
    (AgentType.RESOLVER, "conflict-resolution"),
    (AgentType.CODER, "code-generation"),
    (AgentType.REVIEWER, "review"),
    (AgentType.TRIAGE, "triage"),
)
UNKNOWN_RUN_TYPE = "unknown"


def sort_traces(traces: list[AgentDecisionTrace]) -> list[AgentDecisionTrace]:
    """Oldest first; ties keep the order the store returned them in."""
    return sorted(traces, key=lambda t: t.timestamp)


def link_decisions(decisions: list[DecisionExplanation]) -> list[DecisionExplanation]:
    """Return copies of the decisions with previous/next trace ids filled in."""
    linked = []
    for i, decision in enumerate(decisions):
        links = decision.links.model_copy(
            update={
                "previous_step": decisions[i - 1].trace_id if i > 0 else None,
                "next_step": decisions[i + 1].trace_id if i < len(decisions) - 1 else None,
            }
        )
        linked.append(decision.model_copy(update={"links": links}))
    return linked


def build_timeline(traces: list[AgentDecisionTrace]) -> list[TimelineEvent]:
    timeline: list[TimelineEvent] = []

    for trace in traces:
        timeline.append(
            TimelineEvent(
                timestamp=trace.timestamp,
                event=f"{trace.agent_type.value} agent made decision: {trace.decision.action}",
                actor=Actor.AI,
                trace_id=trace.id,
            )
        )
        if trace.outcome and trace.outcome.human_override:
            human = trace.outcome.human_override
            timeline.append(
                TimelineEvent(
                    timestamp=human.timestamp,
                    event=f"Human override by {human.user_id}",
                    actor=Actor.HUMAN,
                    trace_id=trace.id,
                )
            )

    timeline.sort(key=lambda e: e.timestamp)
    return timeline


def count_overrides(traces: list[AgentDecisionTrace]) -> int:
    return sum(1 for t in traces if t.outcome and t.outcome.human_override)


def calculate_stats(traces: list[AgentDecisionTrace]) -> RunStats:
    """Traces must already be sorted by timestamp."""
    confidences = [t.decision.confidence for t in traces]
    average = sum(confidences) / len(confidences) if confidences else 0.0

    duration_ms = 0
    if traces:
        duration_ms = (traces[-1].timestamp - traces[0].timestamp) // timedelta(milliseconds=1)

    return RunStats(
        total_decisions=len(traces),
        human_overrides=count_overrides(traces),
        average_confidence=average,
        duration_ms=duration_ms,
    )


def determine_run_status(traces: list[AgentDecisionTrace]) -> RunStatus:
    """Any failure fails the run, even one a human later overrode."""
    if any(t.outcome and t.outcome.result == OutcomeResult.FAILURE for t in traces):
        return RunStatus.FAILURE
    if any(t.outcome is None for t in traces):
        return RunStatus.PENDING
    return RunStatus.SUCCESS


def summarize_run_outcome(traces: list[AgentDecisionTrace]) -> str:
    if not traces:
        return "No decisions recorded"
    last = traces[-1]
    if last.outcome and last.outcome.actual_outcome:
        return last.outcome.actual_outcome
    return f"{last.agent_type.value} completed with {last.decision.action}"


def collect_artifacts(decisions: list[DecisionExplanation]) -> list[str]:
    artifacts: list[str] = []
    for decision in decisions:
        if decision.outcome:
            artifacts.extend(decision.outcome.artifacts)
    return list(dict.fromkeys(artifacts))


def agent_types_involved(traces: list[AgentDecisionTrace]) -> list[AgentType]:
    return list(dict.fromkeys(t.agent_type for t in traces))


def generate_run_summary(traces: list[AgentDecisionTrace], status: RunStatus) -> str:
    agent_types = ", ".join(a.value for a in agent_types_involved(traces))
    summary = f"Run involved {len(traces)} decision(s) by {agent_types} agent(s). "

    overrides = count_overrides(traces)
    if overrides > 0:
        summary += f"{overrides} decision(s) were overridden by humans. "

    return summary + f"Outcome: {status.value}."


def infer_run_type(traces: list[AgentDecisionTrace]) -> str:
    present = set(agent_types_involved(traces))
    for agent_type, run_type in RUN_TYPE_PRIORITY:
        if agent_type in present:
            return run_type
    return UNKNOWN_RUN_TYPE


def assemble_run_explanation(
    run_id: str,
    tenant_id: str,
    traces: list[AgentDecisionTrace],
    decisions: list[DecisionExplanation],
) -> RunExplanation:
    """Aggregate a run from its sorted traces and their explanations (same order)."""
    status = determine_run_status(traces)
    return RunExplanation(
        run_id=run_id,
        run_type=infer_run_type(traces),
        tenant_id=tenant_id,
        summary=generate_run_summary(traces, status),
        decisions=link_decisions(decisions),
        outcome=RunOutcome(
            status=status,
            description=summarize_run_outcome(traces),
            artifacts=collect_artifacts(decisions),
        ),
        timeline=build_timeline(traces),
        stats=calculate_stats(traces),
    )
