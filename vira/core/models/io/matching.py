"""
ViRA Match, similarity search and assistant I/O models.
"""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field


class VendorRecommendation(BaseModel):
    """One structured recommendation, as produced by the match agent or the fallback scorer."""

    vendor_name: str
    vira_score: int = Field(ge=0, le=100, description="Fit score from 0 to 100")
    reason: str
    key_strengths: List[str] = Field(default_factory=list)
    considerations: List[str] = Field(default_factory=list)


class SemanticMatchRequest(BaseModel):
    service_category: Optional[str] = None
    project_scope: Optional[str] = None


class VendorMatch(VendorRecommendation):
    vendor_id: int
    avg_rating: Optional[float] = None
    total_ratings: int = 0
    recommendation_rate: Optional[float] = None


class RemainingVendor(BaseModel):
    vendor_id: int
    vendor_name: str
    pre_score: int
    total_ratings: int = 0


class MatchQueryInfo(BaseModel):
    category_filter: Optional[str] = None
    total_matches: int = 0
    candidates_analyzed: int = 0
    sent_to_ai: int = 0
    used_fallback: bool = False


class SemanticMatchResponse(BaseModel):
    matches: List[VendorMatch]
    remaining_vendors: List[RemainingVendor] = Field(default_factory=list)
    query_info: MatchQueryInfo


class SimilarRequest(BaseModel):
    query: str = Field(min_length=1)
    limit: int = Field(default=10, ge=1, le=50)


class SimilarVendor(BaseModel):
    vendor_id: int
    vendor_name: str
    service_categories: List[str] = Field(default_factory=list)
    similarity: float


class SimilarResponse(BaseModel):
    results: List[SimilarVendor]


class EmbeddingRunResult(BaseModel):
    projects_embedded: int
    vendors_embedded: int
    errors: List[str]


class EmbeddingCounts(BaseModel):
    with_embedding: int
    without_embedding: int


class EmbeddingStatus(BaseModel):
    projects: EmbeddingCounts
    vendors: EmbeddingCounts


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    message: str = Field(min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)


class ChatVendor(BaseModel):
    vendor_id: int
    vendor_name: str
    service_categories: List[str] = Field(default_factory=list)
    specialties: Optional[str] = None


class ChatResponse(BaseModel):
    response: str
    intent: str
    category: Optional[str] = None
    vendors: Optional[List[ChatVendor]] = None
    matches: Optional[List[VendorMatch]] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
