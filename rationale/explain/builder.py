"""Build the explanation of a single decision trace."""

from __future__ import annotations

import logging
import re

from rationale.analyzers.base import ReasoningAnalyzer
from rationale.analyzers.heuristic import HeuristicAnalyzer
from rationale.models import (
    AgentDecisionTrace,
    DecisionExplanation,
    DecisionOutcome,
    DisplayStatus,
    EntityMention,
    ExplainedAlternative,
    ExplainedInput,
    ExplainedOutcome,
    ExplainedOverride,
    ExplainerOptions,
    ExplanationInputs,
    ExplanationLinks,
    ExplanationReasoning,
    InputType,
    OutcomeResult,
    ResolvedEntity,
)
from rationale.stores.base import EntityResolver

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# (input type, description, markers), checked in order; first hit wins.
_DOCUMENT_RULES: tuple[tuple[InputType, str, tuple[str, ...]], ...] = (
    (InputType.ISSUE, "Issue context", ("Issue #", "issue")),
    (InputType.PR, "Pull request context", ("PR #", "pull request")),
    (InputType.FILE, "Code context", ("```", "function ")),
)
_DEFAULT_DOCUMENT = (InputType.CONTEXT, "Context provided")

_HANDLE = re.compile(r"(?<![\w@])@(\w[\w-]*)")


def truncate(text: str, max_length: int) -> str:
    """Shorten text to at most max_length characters, ending in "..."."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def classify_document(content: str) -> tuple[InputType, str]:
    for input_type, description, markers in _DOCUMENT_RULES:
        if any(marker in content for marker in markers):
            return input_type, description
    return _DEFAULT_DOCUMENT


def extract_documents(context_window: list[str], max_length: int) -> list[ExplainedInput]:
    documents = []
    for content in context_window:
        input_type, description = classify_document(content)
        documents.append(ExplainedInput(type=input_type, description=description, content=truncate(content, max_length)))
    return documents


def extract_previous_steps(previous_steps: list[str], max_length: int) -> list[ExplainedInput]:
    return [
        ExplainedInput(
            type=InputType.PREVIOUS_STEP,
            description=f"Step {i} output",
            content=truncate(output, max_length),
        )
        for i, output in enumerate(previous_steps, start=1)
    ]


def display_status(outcome: DecisionOutcome) -> DisplayStatus:
    """A recorded human override always wins over the stored result tag."""
    if outcome.human_override is not None or outcome.result == OutcomeResult.OVERRIDE:
        return DisplayStatus.OVERRIDDEN
    return DisplayStatus(outcome.result.value)


def entity_mentions(trace: AgentDecisionTrace) -> list[EntityMention]:
    """Raw actor identifiers worth resolving: the overriding user, then @handles in the prompt."""
    identifiers: list[str] = []
    if trace.outcome and trace.outcome.human_override:
        identifiers.append(trace.outcome.human_override.user_id)
    identifiers.extend(_HANDLE.findall(trace.inputs.prompt))
    return [EntityMention(identifier=i, context=trace.id) for i in dict.fromkeys(identifiers)]


class DecisionExplanationBuilder:
    """Turns one AgentDecisionTrace into a DecisionExplanation.

    The builder is stateless apart from its collaborators, so one instance can
    serve concurrent builds.
    """

    def __init__(self, analyzer: ReasoningAnalyzer | None = None, entity_resolver: EntityResolver | None = None):
        self.analyzer = analyzer or HeuristicAnalyzer()
        self.entity_resolver = entity_resolver

    def explain_outcome(self, trace: AgentDecisionTrace) -> ExplainedOutcome | None:
        outcome = trace.outcome
        if outcome is None:
            return None
        return ExplainedOutcome(
            status=display_status(outcome),
            description=outcome.actual_outcome or outcome.result.value,
            artifacts=self.artifacts(trace),
        )

    def artifacts(self, trace: AgentDecisionTrace) -> list[str]:
        if trace.outcome is None or not trace.outcome.actual_outcome:
            return []
        return self.analyzer.extract_artifacts(trace.outcome.actual_outcome)

    async def resolve_entities(self, trace: AgentDecisionTrace, options: ExplainerOptions) -> list[ResolvedEntity] | None:
        if not options.resolve_entities or self.entity_resolver is None:
            return None
        mentions = entity_mentions(trace)
        if not mentions:
            return []
        return await self.entity_resolver.resolve_many(mentions)

    async def build(self, trace: AgentDecisionTrace, options: ExplainerOptions | None = None) -> DecisionExplanation:
        options = options or ExplainerOptions()
        max_length = options.max_content_length

        alternatives = [
            ExplainedAlternative(action=action, rejection_reason=reason)
            for action, reason in map(self.analyzer.parse_alternative, trace.decision.alternatives)
        ]

        override = None
        if trace.outcome and trace.outcome.human_override:
            human = trace.outcome.human_override
            # The record does not say what changed, so changes stays empty.
            override = ExplainedOverride(user=human.user_id, timestamp=human.timestamp, reason=human.reason, changes=[])

        explanation = DecisionExplanation(
            trace_id=trace.id,
            run_id=trace.run_id,
            step_id=trace.step_id,
            agent_type=trace.agent_type,
            timestamp=trace.timestamp,
            inputs=ExplanationInputs(
                prompt=truncate(trace.inputs.prompt, max_length),
                documents=extract_documents(trace.inputs.context_window, max_length),
                previous_steps=extract_previous_steps(trace.inputs.previous_steps, max_length),
            ),
            reasoning=ExplanationReasoning(
                action=trace.decision.action,
                explanation=trace.decision.reasoning,
                confidence=trace.decision.confidence,
                key_factors=self.analyzer.extract_key_factors(trace.decision.reasoning),
            ),
            alternatives=alternatives,
            outcome=self.explain_outcome(trace),
            override=override,
            entities=await self.resolve_entities(trace, options),
            links=ExplanationLinks(related=[]),
            raw=trace if options.include_raw else None,
        )
        logger.debug("Built explanation for trace %s (%d key factor(s))", trace.id, len(explanation.reasoning.key_factors))
        return explanation
