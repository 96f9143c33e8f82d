from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AnalyzeRequest(BaseModel):
    text: str


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    raw_text: str
    summary: str
    title: str
    topics: List[str]
    sentiment: str
    keywords: List[str]
    confidence: float
    created_at: Optional[datetime] = None


class HealthResponse(BaseModel):
    status: str
    storage: str
