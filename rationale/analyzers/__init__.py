from rationale.analyzers.base import ReasoningAnalyzer
from rationale.analyzers.heuristic import HeuristicAnalyzer

__all__ = ["HeuristicAnalyzer", "ReasoningAnalyzer"]
