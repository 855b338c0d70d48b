"""Demo: explaining a recorded agent run.

Run with:  uv run python examples/demo_explain.py
"""

import asyncio
from pathlib import Path

from rationale import ExplainerOptions, create_explainer, format_decision_explanation, format_run_explanation
from rationale.graph.store import InMemoryContextGraphStore
from rationale.ingestion.loader import load_graph, load_traces
from rationale.stores.memory import InMemoryDecisionTraceStore

HERE = Path(__file__).parent


async def main() -> None:
    traces = load_traces(HERE / "traces.json")
    nodes, edges = load_graph(HERE / "graph.json")

    explainer = create_explainer(
        "tenant-1",
        InMemoryDecisionTraceStore(traces),
        graph_store=InMemoryContextGraphStore(nodes, edges),
    )

    # -- Whole run ------------------------------------------------------------
    run = await explainer.explain_run("run-123")
    print(format_run_explanation(run))

    # -- One step, with short inputs -------------------------------------------
    print("\n" + "=" * 50 + "\n")
    step = await explainer.explain_step("run-123", "step-2", ExplainerOptions(max_content_length=60))
    print(format_decision_explanation(step))

    # -- How did we get to the coder's decision? ---------------------------------
    print("\n" + "=" * 50 + "\n")
    for line in await explainer.explain_trajectory("n3"):
        print(f"  {line}")


if __name__ == "__main__":
    asyncio.run(main())
