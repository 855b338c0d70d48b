"""Render explanations as plain text, markdown and JSON."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from rationale.models import ContextNode, DecisionExplanation, RunExplanation

PROMPT_PREVIEW_LENGTH = 100


def _percent(value: float) -> str:
    return f"{value * 100:.0f}%"


def format_trajectory_node(node: ContextNode) -> str:
    """One line for a graph node: timestamp, type, and action/agent if known."""
    line = f"[{node.timestamp.isoformat()}] {node.type.value}"
    action = node.data.get("action")
    agent_type = node.data.get("agent_type") or node.data.get("agentType")
    if action:
        line += f": {action}"
    if agent_type:
        line += f" ({agent_type})"
    return line


def format_decision_explanation(explanation: DecisionExplanation) -> str:
    """Render a decision explanation as sectioned terminal text."""
    lines: list[str] = []

    lines.append(f"Run: {explanation.run_id}")
    if explanation.step_id:
        lines.append(f"Step: {explanation.step_id}")
    lines.append(f"Agent: {explanation.agent_type.value}")
    lines.append(f"Time: {explanation.timestamp.isoformat()}")
    lines.append("")

    prompt = explanation.inputs.prompt
    if len(prompt) > PROMPT_PREVIEW_LENGTH:
        prompt = prompt[:PROMPT_PREVIEW_LENGTH] + "..."
    lines.append("INPUTS:")
    lines.append(f"  Prompt: {prompt}")
    for doc in explanation.inputs.documents:
        lines.append(f"  - {doc.type.value}: {doc.description}")
    for step in explanation.inputs.previous_steps:
        lines.append(f"  - {step.description}")
    lines.append("")

    reasoning = explanation.reasoning
    lines.append("REASONING:")
    lines.append(f"  Action: {reasoning.action}")
    lines.append(f"  Confidence: {_percent(reasoning.confidence)}")
    lines.append(f'  "{reasoning.explanation}"')
    if reasoning.key_factors:
        lines.append("  Key factors:")
        for factor in reasoning.key_factors:
            lines.append(f"    - {factor}")
    lines.append("")

    if explanation.alternatives:
        lines.append("ALTERNATIVES CONSIDERED:")
        for i, alt in enumerate(explanation.alternatives, start=1):
            lines.append(f"  {i}. {alt.action}")
            lines.append(f"     Rejected: {alt.rejection_reason}")
        lines.append("")

    if explanation.outcome:
        lines.append("OUTCOME:")
        lines.append(f"  Status: {explanation.outcome.status.value}")
        lines.append(f"  {explanation.outcome.description}")
        if explanation.outcome.artifacts:
            lines.append("  Artifacts:")
            for artifact in explanation.outcome.artifacts:
                lines.append(f"    - {artifact}")

    if explanation.override:
        lines.append("")
        lines.append("HUMAN OVERRIDE:")
        lines.append(f"  By: {explanation.override.user}")
        lines.append(f"  At: {explanation.override.timestamp.isoformat()}")
        if explanation.override.reason:
            lines.append(f"  Reason: {explanation.override.reason}")

    if explanation.entities:
        lines.append("")
        lines.append("PEOPLE:")
        for entity in explanation.entities:
            lines.append(f"  - {entity.display_name} ({entity.canonical_id})")

    return "\n".join(lines)


def format_run_explanation(explanation: RunExplanation) -> str:
    """Render a run explanation as sectioned terminal text."""
    lines: list[str] = []

    lines.append(f"=== Run {explanation.run_id} ===")
    lines.append(f"Type: {explanation.run_type}")
    lines.append(f"Status: {explanation.outcome.status.value}")
    lines.append("")
    lines.append(f"Summary: {explanation.summary}")
    lines.append("")

    stats = explanation.stats
    lines.append("STATISTICS:")
    lines.append(f"  Decisions: {stats.total_decisions}")
    lines.append(f"  Overrides: {stats.human_overrides}")
    lines.append(f"  Avg Confidence: {_percent(stats.average_confidence)}")
    lines.append(f"  Duration: {stats.duration_ms}ms")
    lines.append("")

    lines.append("TIMELINE:")
    for event in explanation.timeline:
        time = event.timestamp.strftime("%H:%M:%S")
        lines.append(f"  {time} [{event.actor.value}] {event.event}")
    lines.append("")

    lines.append("OUTCOME:")
    lines.append(f"  {explanation.outcome.description}")
    if explanation.outcome.artifacts:
        lines.append("  Artifacts:")
        for artifact in explanation.outcome.artifacts:
            lines.append(f"    - {artifact}")

    return "\n".join(lines)


def generate_markdown_report(explanation: RunExplanation) -> str:
    """Generate a markdown audit report for a run."""
    lines: list[str] = []

    lines.append(f"# Run Explanation: {explanation.run_id}")
    lines.append(f"\n**Type:** {explanation.run_type}")
    lines.append(f"**Tenant:** {explanation.tenant_id}")
    lines.append(f"**Status:** {explanation.outcome.status.value}")
    lines.append(f"**Decisions:** {explanation.stats.total_decisions}")
    lines.append(f"**Human Overrides:** {explanation.stats.human_overrides}")
    lines.append(f"**Average Confidence:** {_percent(explanation.stats.average_confidence)}")

    lines.append("\n## Summary")
    lines.append(f"\n{explanation.summary}")

    lines.append("\n## Timeline")
    lines.append("")
    lines.append("| Time | Actor | Event |")
    lines.append("|------|-------|-------|")
    for event in explanation.timeline:
        lines.append(f"| {event.timestamp.isoformat()} | {event.actor.value} | {event.event} |")

    lines.append("\n## Decisions")
    for decision in explanation.decisions:
        heading = decision.step_id or decision.trace_id
        lines.append(f"\n### {heading}: {decision.reasoning.action}")
        lines.append(f"\n**Agent:** {decision.agent_type.value}  ")
        lines.append(f"**Confidence:** {_percent(decision.reasoning.confidence)}")
        if decision.reasoning.explanation:
            lines.append(f"\n**Why:** {decision.reasoning.explanation}")
        if decision.reasoning.key_factors:
            lines.append("\n**Key Factors:**")
            for factor in decision.reasoning.key_factors:
                lines.append(f"- {factor}")
        if decision.alternatives:
            lines.append("\n**Alternatives:**")
            for alt in decision.alternatives:
                lines.append(f"- {alt.action} (rejected: {alt.rejection_reason})")
        if decision.outcome:
            lines.append(f"\n**Outcome:** {decision.outcome.status.value} ({decision.outcome.description})")
        if decision.override:
            reason = f": {decision.override.reason}" if decision.override.reason else ""
            lines.append(f"\n**Overridden by:** {decision.override.user}{reason}")

    lines.append("\n## Outcome")
    lines.append(f"\n{explanation.outcome.description}")
    if explanation.outcome.artifacts:
        lines.append("\n### Artifacts")
        for artifact in explanation.outcome.artifacts:
            lines.append(f"- {artifact}")

    lines.append("")
    return "\n".join(lines)


def generate_json_report(explanation: BaseModel) -> str:
    """Generate a JSON report for a decision or run explanation."""
    return explanation.model_dump_json(indent=2)


def write_report(content: str, path: Path) -> None:
    """Write report content to a file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
