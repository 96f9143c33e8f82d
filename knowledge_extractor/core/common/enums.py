# File: knowledge_extractor/core/common/enums.py

from enum import Enum, unique


@unique
class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@unique
class StorageDialect(str, Enum):
    POSTGRES = "postgresql"
    SQLITE = "sqlite"
