"""
ViRA Match endpoints.

``/semantic`` ranks the vendors of a service category for a project scope
with the LLM (or the deterministic fallback). ``/similar`` ranks vendors by
embedding similarity to free text.
"""

from __future__ import annotations

from fastapi import APIRouter

from vira.core.models.io.matching import SemanticMatchRequest, SemanticMatchResponse, SimilarRequest, SimilarResponse
from vira.server.core.config import settings
from vira.server.services.auth import StaffDep
from vira.server.services.deps import EmbeddingDep, MatchModelDep, ReposDep
from vira.server.services.matching import find_similar_vendors, semantic_match

router = APIRouter(tags=["match"])


@router.post(
    "/semantic",
    response_model=SemanticMatchResponse,
    summary="ViRA Match",
    description=(
        "Recommend vendors of a service category for a project scope. Candidates are pre-scored from their "
        "ratings; the best are ranked by the LLM, or by a deterministic score when no LLM is available."
    ),
    response_description="Ranked matches, the remaining candidates and query details.",
    responses={
        200: {"description": "Matching finished"},
        400: {"description": "Service category and project scope are required"},
    },
)
async def match_semantic(
    payload: SemanticMatchRequest, repos: ReposDep, model: MatchModelDep, _user: StaffDep
) -> SemanticMatchResponse:
    """
    Run ViRA Match.

    - **service_category**: Category the vendors must offer.
    - **project_scope**: Free-text description of the work.
    """
    return await semantic_match(
        repos,
        payload.service_category,
        payload.project_scope,
        model=model,
        top_candidates=settings.matching.top_candidates,
    )


@router.post(
    "/similar",
    response_model=SimilarResponse,
    summary="Similar Vendors",
    description="Vendors ranked by cosine similarity between their embedding and the query text.",
    response_description="Vendors with their similarity.",
    responses={
        200: {"description": "Ranking returned"},
        502: {"description": "The embeddings provider failed"},
    },
)
async def match_similar(
    payload: SimilarRequest, repos: ReposDep, client: EmbeddingDep, _user: StaffDep
) -> SimilarResponse:
    return await find_similar_vendors(repos, client, payload.query, payload.limit)
