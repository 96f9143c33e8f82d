import logging

from knowledge_extractor.core.common.errors import ProviderError
from ..domain.interfaces import ILLMAdapter
from ..domain.models import AnalysisResult

logger = logging.getLogger(__name__)


class ResilientLLMAdapter(ILLMAdapter):
    """
    Wraps a primary provider and fails over to a fallback on error.

    Every call tries the primary first. There is no retry, backoff or
    breaker state, so a failure never affects the next call.
    """

    def __init__(self, primary: ILLMAdapter, fallback: ILLMAdapter):
        self.primary = primary
        self.fallback = fallback

    def analyze_text(self, text: str) -> AnalysisResult:
        try:
            return self.primary.analyze_text(text)
        except ProviderError as e:
            logger.warning(
                f"{type(self.primary).__name__} request failed, "
                f"falling back to {type(self.fallback).__name__}: {e}"
            )
        return self.fallback.analyze_text(text)
