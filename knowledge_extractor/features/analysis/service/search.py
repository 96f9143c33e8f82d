import logging
from typing import Any, List

from knowledge_extractor.core.common.errors import ClientInputError
from ..domain.interfaces import IAnalysisRepository
from ..domain.models import Analysis

logger = logging.getLogger(__name__)


class SearchService:
    def __init__(self, repo: IAnalysisRepository):
        self.repo = repo

    def search(self, term: Any) -> List[Analysis]:
        """Records whose topics or keywords contain the term. Empty list when none do."""
        if not isinstance(term, str) or not term.strip():
            raise ClientInputError("missing topic query param")

        results = self.repo.search(term.strip())
        logger.debug(f"Search '{term.strip()}' returned {len(results)} records")
        return results
