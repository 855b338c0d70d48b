"""Regex heuristics for key factors, rejected alternatives and artifacts."""

from __future__ import annotations

import re

from rationale.analyzers.base import ReasoningAnalyzer

MAX_KEY_FACTORS = 5
NOT_SELECTED = "Not selected"

# A causal clause runs from the connective to the end of the sentence or line.
_CAUSAL = re.compile(r"\b(?:because|since|due to|as|given that)\s+([^.\n]+)", re.IGNORECASE)
_BULLET = re.compile(r"(?:^|(?<=\s))[-•]\s*([^-•\n]+)", re.MULTILINE)

_ALTERNATIVE_PATTERNS = (
    re.compile(r"(.+?)\s*\(rejected:\s*(.+?)\)", re.IGNORECASE),
    re.compile(r"(.+?)\s*-\s*rejected because\s*(.+)", re.IGNORECASE),
    re.compile(r"(.+?)\s*:\s*(.+)"),
)

_URL = re.compile(r"https?://\S+")
_TOUCHED_PATH = re.compile(r"\b(?:created|modified|updated)\s+([^\s,]+)", re.IGNORECASE)


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class HeuristicAnalyzer(ReasoningAnalyzer):
    """Pattern-based analyzer; no model calls, deterministic output."""

    def __init__(self, max_key_factors: int = MAX_KEY_FACTORS):
        self.max_key_factors = max_key_factors

    def extract_key_factors(self, reasoning: str) -> list[str]:
        if not reasoning:
            return []

        factors = [m.group(1).strip() for m in _CAUSAL.finditer(reasoning)]
        factors += [m.group(1).strip() for m in _BULLET.finditer(reasoning)]

        return _dedupe([f for f in factors if f])[: self.max_key_factors]

    def parse_alternative(self, alternative: str) -> tuple[str, str]:
        for pattern in _ALTERNATIVE_PATTERNS:
            match = pattern.search(alternative)
            if match:
                return match.group(1).strip(), match.group(2).strip()
        return alternative, NOT_SELECTED

    def extract_artifacts(self, text: str) -> list[str]:
        """Return URLs first, then tokens following created/modified/updated.

        Duplicates are kept; callers aggregating across traces dedupe.
        """
        if not text:
            return []
        artifacts = _URL.findall(text)
        artifacts.extend(m.group(1) for m in _TOUCHED_PATH.finditer(text))
        return artifacts
