from pydantic import BaseModel, Field
from typing import List, Optional

class SummarizeRequest(BaseModel):
    text: str
    num_sentences: Optional[int] = Field(default=None, ge=0)

class SentenceDTO(BaseModel):
    index: int
    text: str
    score: float

class SummaryDTO(BaseModel):
    summary: str
    sentences: List[SentenceDTO]

class StatsDTO(BaseModel):
    documents: int
    terms: int
    built_at: Optional[str] = None
    files: Optional[int] = None
