from rationale.explain.builder import DecisionExplanationBuilder, truncate
from rationale.explain.service import Explainer, create_explainer

__all__ = ["DecisionExplanationBuilder", "Explainer", "create_explainer", "truncate"]
