"""CLI entry point for rationale."""

import asyncio
import json
import logging
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

load_dotenv()

from rationale.explain.service import create_explainer
from rationale.graph.store import InMemoryContextGraphStore
from rationale.ingestion.loader import load_graph, load_traces
from rationale.models import AgentDecisionTrace, ExplainerOptions, ExplanationLevel
from rationale.reporting.formatters import (
    format_decision_explanation,
    format_run_explanation,
    generate_json_report,
    generate_markdown_report,
    write_report,
)
from rationale.stores.memory import InMemoryDecisionTraceStore

traces_option = click.option(
    "--traces",
    "traces_file",
    envvar="RATIONALE_TRACES",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of decision traces (or set RATIONALE_TRACES).",
)
tenant_option = click.option(
    "--tenant",
    envvar="RATIONALE_TENANT",
    default=None,
    help="Tenant to explain for (or set RATIONALE_TENANT). Inferred when the file holds a single tenant.",
)
json_option = click.option("--json", "as_json", is_flag=True, default=False, help="Print the explanation as JSON.")
max_length_option = click.option(
    "--max-content-length",
    type=click.IntRange(min=3),
    default=500,
    show_default=True,
    help="Truncate prompts and input documents to this many characters.",
)
level_option = click.option(
    "--level",
    type=click.Choice([level.value for level in ExplanationLevel]),
    default=ExplanationLevel.STANDARD.value,
    show_default=True,
    help="Detail level.",
)
raw_option = click.option("--include-raw", is_flag=True, default=False, help="Attach the raw trace to each decision.")


def _load_traces(path: Path) -> list[AgentDecisionTrace]:
    try:
        traces = load_traces(path)
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.ClickException(f"Could not load traces from {path}: {e}") from e
    logger.info("Loaded %d trace(s) from %s", len(traces), path)
    return traces


def _resolve_tenant(traces: list[AgentDecisionTrace], tenant: str | None) -> str:
    if tenant:
        return tenant
    tenants = sorted({t.tenant_id for t in traces})
    if len(tenants) == 1:
        return tenants[0]
    raise click.UsageError(f"Traces span {len(tenants)} tenant(s); pass --tenant to pick one.")


def _options(max_content_length: int, level: str, include_raw: bool) -> ExplainerOptions:
    return ExplainerOptions(
        level=ExplanationLevel(level),
        include_raw=include_raw,
        max_content_length=max_content_length,
    )


def _not_found(message: str) -> None:
    click.echo(message)
    raise SystemExit(1)


@click.group()
def main():
    """rationale: explain why AI agents made the decisions they made."""


@main.command()
@click.argument("run_id")
@click.argument("step_id", required=False)
@traces_option
@tenant_option
@json_option
@max_length_option
@level_option
@raw_option
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Also write a markdown run report here.")
def explain(
    run_id: str,
    step_id: str | None,
    traces_file: Path,
    tenant: str | None,
    as_json: bool,
    max_content_length: int,
    level: str,
    include_raw: bool,
    output: Path | None,
):
    """Explain a run, or one step of it.

    \b
    Examples:
        rationale explain run-123 --traces traces.json
        rationale explain run-123 step-2 --traces traces.json --json
        rationale explain run-123 --traces traces.json -o logs/run-123.md
    """
    traces = _load_traces(traces_file)
    explainer = create_explainer(_resolve_tenant(traces, tenant), InMemoryDecisionTraceStore(traces))
    options = _options(max_content_length, level, include_raw)

    if step_id:
        decision = asyncio.run(explainer.explain_step(run_id, step_id, options))
        if decision is None:
            _not_found(f"No decision found for step '{step_id}' in run '{run_id}'.")
        click.echo(generate_json_report(decision) if as_json else format_decision_explanation(decision))
        return

    run = asyncio.run(explainer.explain_run(run_id, options))
    if run is None:
        _not_found(f"No decision traces found for run '{run_id}'.")

    click.echo(generate_json_report(run) if as_json else format_run_explanation(run))
    if output:
        write_report(generate_markdown_report(run), output)
        click.echo(f"Markdown report written to {output}", err=True)


@main.command()
@click.argument("trace_id")
@traces_option
@json_option
@max_length_option
@level_option
@raw_option
def decision(trace_id: str, traces_file: Path, as_json: bool, max_content_length: int, level: str, include_raw: bool):
    """Explain a single decision by trace id."""
    traces = _load_traces(traces_file)
    store = InMemoryDecisionTraceStore(traces)
    tenant = traces[0].tenant_id if traces else ""
    explainer = create_explainer(tenant, store)

    explanation = asyncio.run(explainer.explain_decision(trace_id, _options(max_content_length, level, include_raw)))
    if explanation is None:
        _not_found(f"No decision trace '{trace_id}'.")
    click.echo(generate_json_report(explanation) if as_json else format_decision_explanation(explanation))


@main.command()
@click.argument("node_id")
@click.option(
    "--graph",
    "graph_file",
    envvar="RATIONALE_GRAPH",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON context graph snapshot with nodes and edges (or set RATIONALE_GRAPH).",
)
def trajectory(node_id: str, graph_file: Path):
    """Show the causal path of graph nodes that led to NODE_ID."""
    try:
        nodes, edges = load_graph(graph_file)
    except (json.JSONDecodeError, ValidationError) as e:
        raise click.ClickException(f"Could not load graph from {graph_file}: {e}") from e

    explainer = create_explainer(
        "",
        InMemoryDecisionTraceStore(),
        graph_store=InMemoryContextGraphStore(nodes, edges),
    )
    lines = asyncio.run(explainer.explain_trajectory(node_id))
    if not lines:
        _not_found(f"No trajectory found for node '{node_id}'.")
    for i, line in enumerate(lines, start=1):
        click.echo(f"{i:>3}. {line}")


if __name__ == "__main__":
    main()
