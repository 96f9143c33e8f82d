from dataclasses import dataclass, field
from typing import List


@dataclass
class AnalysisResult:
    """Structured output of a provider for one piece of text."""
    summary: str
    title: str
    topics: List[str] = field(default_factory=list)
    sentiment: str = "neutral"
    keywords: List[str] = field(default_factory=list)
    confidence: float = 0.0
