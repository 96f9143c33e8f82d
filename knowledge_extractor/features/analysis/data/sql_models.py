import logging

from sqlalchemy import Column, String, Text, Float, DateTime, func
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.types import TypeDecorator

from knowledge_extractor.core.common.errors import DecodingError
from knowledge_extractor.core.database.base import Base
from .array_codec import encode_list, decode_list

logger = logging.getLogger(__name__)


class StringArray(TypeDecorator):
    """
    A list of strings.
    Postgres stores it as a native TEXT[]; other dialects get a
    comma-delimited TEXT column handled by the array codec.
    NULL always reads back as an empty list.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(ARRAY(Text))
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if dialect.name == "postgresql":
            return list(value) if value is not None else []
        return encode_list(value)

    def process_result_value(self, value, dialect):
        if dialect.name == "postgresql":
            return list(value) if value else []
        try:
            return decode_list(value)
        except DecodingError as e:
            # A malformed cell must not take down the read path
            logger.warning(f"Dropping undecodable array value: {e}")
            return []


class AnalysisModel(Base):
    __tablename__ = "analyses"

    id = Column(String, primary_key=True)
    raw_text = Column(Text, nullable=False)
    summary = Column(Text)
    title = Column(Text)
    topics = Column(StringArray)
    sentiment = Column(String)
    keywords = Column(StringArray)
    confidence = Column(Float)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
