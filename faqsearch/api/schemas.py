"""
Request and response models for the FAQ search API.
"""

from pydantic import BaseModel, Field, field_validator
from typing import List, Optional


class RecordCreateRequest(BaseModel):
    label: str

    @field_validator('label')
    @classmethod
    def label_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('label cannot be empty')
        return v


class RecordCreateResponse(BaseModel):
    success: bool
    label: str
    dimension: int


class SearchRequest(BaseModel):
    query: str
    limit: Optional[int] = Field(default=None, ge=1, le=100)

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('query cannot be empty')
        return v


class SearchResult(BaseModel):
    rank: int
    label: str
    distance: Optional[float]  # None when the stored vector is corrupt (NaN)
    similarity: Optional[float]
    strong_match: bool


class SearchResponse(BaseModel):
    query: str
    results: List[SearchResult]
    total: int


class FaqLoadRequest(BaseModel):
    path: Optional[str] = None


class FaqLoadResponse(BaseModel):
    success: bool
    path: str
    loaded: int


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    record_count: int
