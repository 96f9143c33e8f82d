from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class Analysis:
    """
    One persisted outcome of analyzing a piece of text.
    Written once, never updated. Topics and keywords keep insertion order.
    """
    id: str
    raw_text: str
    summary: str
    title: str
    topics: List[str] = field(default_factory=list)
    sentiment: str = "neutral"
    keywords: List[str] = field(default_factory=list)
    confidence: float = 0.0
    # Assigned by the database on insert
    created_at: Optional[datetime] = None
