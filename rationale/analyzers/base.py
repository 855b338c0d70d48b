"""Abstract base class for reasoning analyzers."""

from abc import ABC, abstractmethod


class ReasoningAnalyzer(ABC):
    """Interface for extracting structure from free-form decision text."""

    @abstractmethod
    def extract_key_factors(self, reasoning: str) -> list[str]:
        """Return the factors that drove a decision, most relevant first."""

    @abstractmethod
    def parse_alternative(self, alternative: str) -> tuple[str, str]:
        """Split an alternative description into (action, rejection_reason)."""

    @abstractmethod
    def extract_artifacts(self, text: str) -> list[str]:
        """Return artifact references (URLs, paths) mentioned in outcome text."""
