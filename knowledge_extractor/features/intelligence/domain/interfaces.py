from abc import ABC, abstractmethod
from .models import AnalysisResult


class ILLMAdapter(ABC):
    """
    Interface for text-analysis providers.
    The Analysis Service calls analyze_text and never knows which
    implementation (remote, stub, or a resilient wrapper) answered.
    """

    @abstractmethod
    def analyze_text(self, text: str) -> AnalysisResult:
        """
        Analyze non-empty text and return a fully populated result.
        Raises ProviderError on failure; no partial result is returned.
        """
        pass
