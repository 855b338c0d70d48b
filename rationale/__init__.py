"""rationale: explain recorded AI agent decisions for humans and auditors."""

__version__ = "0.1.0"

from rationale.explain.service import Explainer, create_explainer
from rationale.models import (
    AgentDecisionTrace,
    AgentType,
    DecisionExplanation,
    ExplainerOptions,
    RunExplanation,
)
from rationale.reporting.formatters import format_decision_explanation, format_run_explanation

__all__ = [
    "AgentDecisionTrace",
    "AgentType",
    "DecisionExplanation",
    "Explainer",
    "ExplainerOptions",
    "RunExplanation",
    "create_explainer",
    "format_decision_explanation",
    "format_run_explanation",
]
