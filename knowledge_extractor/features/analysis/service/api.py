import logging
import uuid
from typing import Any

from knowledge_extractor.core.common.errors import ClientInputError
from knowledge_extractor.features.intelligence.domain.interfaces import ILLMAdapter
from ..domain.interfaces import IAnalysisRepository
from ..domain.models import Analysis

logger = logging.getLogger(__name__)


class AnalysisService:
    """
    Facade for the Analysis Feature.
    Orchestrates the provider call, record construction and persistence.
    """

    def __init__(self, llm: ILLMAdapter, repo: IAnalysisRepository):
        self.llm = llm
        self.repo = repo

    def analyze(self, text: Any) -> Analysis:
        """
        Analyzes text and stores the result.

        Raises:
            ClientInputError: text is missing, not a string, or blank.
            ProviderError: the provider (and its fallback, if any) failed.
            PersistenceError: the record could not be written.

        Returns:
            The stored record, including its id and created_at.
        """
        # 1. Validate
        if not isinstance(text, str) or not text.strip():
            raise ClientInputError("invalid input: 'text' must be a non-empty string")

        # 2. Analyze (no retry here; failover lives inside the adapter)
        result = self.llm.analyze_text(text)

        # 3. Build the record. The id is fixed before the first write attempt.
        analysis = Analysis(
            id=str(uuid.uuid4()),
            raw_text=text,
            summary=result.summary,
            title=result.title,
            topics=list(result.topics),
            sentiment=result.sentiment,
            keywords=list(result.keywords),
            confidence=result.confidence
        )

        # 4. Persist
        stored = self.repo.insert(analysis)
        logger.info(f"Stored analysis {stored.id} ({len(text)} chars, {len(stored.topics)} topics)")
        return stored
