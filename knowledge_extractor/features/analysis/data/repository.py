import logging
from abc import abstractmethod
from datetime import timezone
from typing import List

from sqlalchemy import Text, any_, literal, or_, type_coerce
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from knowledge_extractor.core.common.enums import StorageDialect
from knowledge_extractor.core.common.errors import PersistenceError
from knowledge_extractor.core.database.connection import DatabaseHandle
from ..domain.interfaces import IAnalysisRepository
from ..domain.models import Analysis
from .sql_models import AnalysisModel

logger = logging.getLogger(__name__)


def _to_domain(row: AnalysisModel) -> Analysis:
    created_at = row.created_at
    # SQLite hands back naive CURRENT_TIMESTAMP values, which are UTC
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    return Analysis(
        id=row.id,
        raw_text=row.raw_text,
        summary=row.summary or "",
        title=row.title or "",
        topics=list(row.topics or []),
        sentiment=row.sentiment or "",
        keywords=list(row.keywords or []),
        confidence=row.confidence if row.confidence is not None else 0.0,
        created_at=created_at
    )


class SqlAnalysisRepo(IAnalysisRepository):
    """Insert path and row mapping shared by both dialects."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def insert(self, analysis: Analysis) -> Analysis:
        with self.session_factory() as db:
            try:
                row = AnalysisModel(
                    id=analysis.id,
                    raw_text=analysis.raw_text,
                    summary=analysis.summary,
                    title=analysis.title,
                    topics=analysis.topics,
                    sentiment=analysis.sentiment,
                    keywords=analysis.keywords,
                    confidence=analysis.confidence
                )
                db.add(row)
                db.commit()
                db.refresh(row)  # pulls the server-assigned created_at
                return _to_domain(row)
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"failed to insert into db: {e}") from e

    def search(self, term: str) -> List[Analysis]:
        with self.session_factory() as db:
            try:
                rows = (
                    db.query(AnalysisModel)
                    .filter(self._membership_clause(term))
                    .order_by(AnalysisModel.created_at, AnalysisModel.id)
                    .all()
                )
                return [_to_domain(row) for row in rows]
            except SQLAlchemyError as e:
                raise PersistenceError(f"db query failed: {e}") from e

    @abstractmethod
    def _membership_clause(self, term: str):
        """Dialect-specific WHERE clause matching topics or keywords."""
        pass


class PostgresAnalysisRepo(SqlAnalysisRepo):
    """Native TEXT[] columns; membership is tested with ANY()."""

    dialect = StorageDialect.POSTGRES

    def _membership_clause(self, term: str):
        return or_(
            literal(term, Text) == any_(AnalysisModel.topics),
            literal(term, Text) == any_(AnalysisModel.keywords),
        )


class SqliteAnalysisRepo(SqlAnalysisRepo):
    """
    Delimited TEXT columns.
    The LIKE prefilter is substring based ("go" hits "mango"), so rows are
    re-checked against the decoded lists to keep matching token-exact.
    """

    dialect = StorageDialect.SQLITE

    def _membership_clause(self, term: str):
        return or_(
            type_coerce(AnalysisModel.topics, Text).contains(term, autoescape=True),
            type_coerce(AnalysisModel.keywords, Text).contains(term, autoescape=True),
        )

    def search(self, term: str) -> List[Analysis]:
        candidates = super().search(term)
        # Python-side comparison for exact token match
        matches = [a for a in candidates if term in a.topics or term in a.keywords]
        logger.debug(f"Search '{term}': {len(candidates)} candidates, {len(matches)} exact matches")
        return matches


def build_repository(handle: DatabaseHandle) -> IAnalysisRepository:
    """Picks the dialect implementation once, at startup."""
    if handle.dialect == StorageDialect.POSTGRES:
        return PostgresAnalysisRepo(handle.session_factory)
    return SqliteAnalysisRepo(handle.session_factory)
