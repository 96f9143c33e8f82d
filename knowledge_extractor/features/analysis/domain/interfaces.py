from abc import ABC, abstractmethod
from typing import List

from knowledge_extractor.core.common.enums import StorageDialect
from .models import Analysis


class IAnalysisRepository(ABC):
    """
    Contract for Analysis persistence.
    Callers only see logical string lists; how arrays are stored is
    owned by the implementation.
    """

    dialect: StorageDialect

    @abstractmethod
    def insert(self, analysis: Analysis) -> Analysis:
        """
        Persists a new record.
        Returns the stored record, including the server-assigned created_at.
        """
        pass

    @abstractmethod
    def search(self, term: str) -> List[Analysis]:
        """Returns every record whose topics or keywords contain the term."""
        pass
