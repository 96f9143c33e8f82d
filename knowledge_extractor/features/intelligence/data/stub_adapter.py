from ..domain.interfaces import ILLMAdapter
from ..domain.models import AnalysisResult


class StubLLMAdapter(ILLMAdapter):
    """Deterministic provider. No I/O, always succeeds."""

    def analyze_text(self, text: str) -> AnalysisResult:
        return AnalysisResult(
            summary="mock summary",
            title="mock title",
            topics=["mock", "topic"],
            sentiment="neutral",
            keywords=["keyword"],
            confidence=0.99
        )
