from rationale.graph.store import InMemoryContextGraphStore, build_context_graph

__all__ = ["InMemoryContextGraphStore", "build_context_graph"]
