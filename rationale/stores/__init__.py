from rationale.stores.base import ContextGraphStore, DecisionTraceStore, EntityResolver
from rationale.stores.memory import InMemoryDecisionTraceStore, StaticEntityResolver

__all__ = [
    "ContextGraphStore",
    "DecisionTraceStore",
    "EntityResolver",
    "InMemoryDecisionTraceStore",
    "StaticEntityResolver",
]
