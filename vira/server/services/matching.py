"""ViRA Match: ranking vendors for a project.

Flow
----
1. Candidates are active vendors offering the requested service category.
2. Each candidate is enriched with analytics computed from its ratings and
   pre-scored with ``compute_pre_score``.
3. The top candidates go to the LLM agent, which returns structured
   ``VendorRecommendation`` objects. Recommendations naming vendors that
   were not sent are dropped.
4. When no model is configured, or the agent fails or returns nothing
   usable, a deterministic score is used instead (``fallback_recommendations``).

``find_similar_vendors`` is the embedding-based search used by
``/match/similar``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from pydantic_ai import Agent

from vira.core.database.entities.ratings import Rating
from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.matching import (
    MatchQueryInfo,
    RemainingVendor,
    SemanticMatchResponse,
    SimilarResponse,
    SimilarVendor,
    VendorMatch,
    VendorRecommendation,
)
from vira.core.monitoring import log_llm_call

from .embeddings import EmbeddingClient
from .llm import model_name

logger = get_logger(__name__)

MATCH_SYSTEM_PROMPT = (
    "You are ViRA (Vendor Intelligence & Recommendation Assistant). "
    "You rank vendor candidates for a project using their services, skills, pricing and rating history. "
    "Scoring weights: project fit 40%, performance and reliability 40%, qualitative match 20%. "
    "Only recommend vendors from the candidate list and use their exact names."
)


def _mean(values: Sequence[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return sum(present) / len(present)


def _pct(flags: Sequence[Optional[bool]]) -> Optional[float]:
    if not flags:
        return None
    return sum(1 for flag in flags if flag) / len(flags) * 100


@dataclass
class VendorAnalytics:
    """Rating-derived metrics of one vendor."""

    total_ratings: int = 0
    avg_success: Optional[float] = None
    avg_overall: Optional[float] = None
    avg_quality: Optional[float] = None
    avg_communication: Optional[float] = None
    on_time_pct: Optional[float] = None
    on_budget_pct: Optional[float] = None
    recommendation_pct: Optional[float] = None
    went_well: List[str] = field(default_factory=list)

    @classmethod
    def from_ratings(cls, ratings: Sequence[Rating]) -> "VendorAnalytics":
        """Aggregate ratings, which are expected most recent first."""
        if not ratings:
            return cls()
        return cls(
            total_ratings=len(ratings),
            avg_success=_mean([r.project_success_rating for r in ratings]),
            avg_overall=_mean([r.vendor_overall_rating for r in ratings]),
            avg_quality=_mean([r.quality_rating for r in ratings]),
            avg_communication=_mean([r.communication_rating for r in ratings]),
            on_time_pct=_pct([r.project_on_time for r in ratings]),
            on_budget_pct=_pct([r.project_on_budget for r in ratings]),
            recommendation_pct=_pct([r.recommend_again for r in ratings]),
            went_well=[r.what_went_well.strip() for r in ratings if r.what_went_well and r.what_went_well.strip()][:3],
        )


@dataclass
class Candidate:
    vendor: Vendor
    analytics: VendorAnalytics
    pre_score: float = 0.0


def compute_pre_score(
    avg_rating: Optional[float], recommendation_pct: Optional[float], rated_projects: int, max_projects: int
) -> float:
    """Numeric pre-score in 0..100: rating 40%, recommendation rate 40%, rated volume 20%."""
    rating = avg_rating or 0.0
    rec = recommendation_pct or 0.0
    weight = rated_projects / max_projects if max_projects > 0 else 0.0
    return (rating / 10) * 40 + (rec / 100) * 40 + weight * 20


def fallback_score(analytics: VendorAnalytics) -> int:
    raw = (analytics.avg_overall or 0) * 6 + (analytics.recommendation_pct or 0) * 0.4 + min(analytics.total_ratings * 5, 20)
    return int(round(max(10, min(100, raw))))


def fallback_recommendation(candidate: Candidate) -> VendorRecommendation:
    analytics = candidate.analytics
    vendor = candidate.vendor
    strengths = [
        "High client satisfaction" if (analytics.avg_overall or 0) > 7 else "Established track record",
        "Reliable delivery" if (analytics.on_time_pct or 0) > 80 else "Professional service",
        "Specialized expertise" if vendor.specialties else "Comprehensive capabilities",
    ]
    if analytics.total_ratings < 3:
        considerations = ["Limited rating history - consider as emerging vendor"]
    else:
        considerations = ["Well-established vendor with proven track record"]

    avg_text = f"{analytics.avg_overall:.1f}/10" if analytics.avg_overall is not None else "no ratings yet"
    reason = (
        f"{vendor.vendor_name} offers {', '.join(vendor.service_categories or []) or vendor.vendor_type or 'related services'} "
        f"with an average rating of {avg_text} across {analytics.total_ratings} rated project(s)."
    )
    return VendorRecommendation(
        vendor_name=vendor.vendor_name,
        vira_score=fallback_score(analytics),
        reason=reason,
        key_strengths=strengths,
        considerations=considerations,
    )


def fallback_recommendations(candidates: Sequence[Candidate], limit: int = 5) -> List[VendorRecommendation]:
    recommendations = [fallback_recommendation(c) for c in candidates]
    recommendations.sort(key=lambda rec: rec.vira_score, reverse=True)
    return recommendations[:limit]


def _fmt(value: Optional[float], digits: int = 1) -> str:
    return "N/A" if value is None else f"{value:.{digits}f}"


def build_match_prompt(service_category: str, project_scope: str, candidates: Sequence[Candidate]) -> str:
    blocks = []
    for c in candidates:
        v, a = c.vendor, c.analytics
        history = "\n".join(f'  * Went well: "{text}"' for text in a.went_well[:2]) or "  * No history available"
        blocks.append(
            f"VENDOR: {v.vendor_name}\n"
            f"- Services: {', '.join(v.service_categories or []) or v.vendor_type or 'Not specified'}\n"
            f"- Skills: {v.skills or 'Not specified'}\n"
            f"- Pricing: {v.pricing_structure or 'Not specified'} | Rate: {v.rate_cost or 'Contact for pricing'}\n"
            f"- Rated Projects: {a.total_ratings} | Avg Rating: {_fmt(a.avg_overall)}/10 | "
            f"Recommend Rate: {_fmt(a.recommendation_pct, 0)}%\n"
            f"- Quality: {_fmt(a.avg_quality)}/10 | Communication: {_fmt(a.avg_communication)}/10\n"
            f"- Recent Projects:\n{history}"
        )
    return (
        "Analyze these vendor candidates for a project and return ranked recommendations.\n\n"
        f"PROJECT:\n- Service Category: {service_category}\n- Scope: \"{project_scope}\"\n\n"
        "VENDOR CANDIDATES:\n" + "\n---\n".join(blocks) + "\n\n"
        f"Rank all {len(candidates)} vendors by ViRA score (0-100)."
    )


class VendorMatcher:
    """LLM ranking of pre-scored candidates with a deterministic fallback.

    - ``model=None``: always use the fallback scorer.
    - ``model!=None``: ask a pydantic-ai agent for ``List[VendorRecommendation]``.
    """

    def __init__(self, *, model: Any | None = None) -> None:
        self._model = model

    async def recommend(
        self, service_category: str, project_scope: str, candidates: Sequence[Candidate]
    ) -> tuple[List[VendorRecommendation], bool]:
        """Return ``(recommendations, used_fallback)``."""
        if self._model is None or not candidates:
            return fallback_recommendations(candidates), True

        agent: Agent = Agent(self._model, output_type=List[VendorRecommendation], system_prompt=MATCH_SYSTEM_PROMPT)
        started = time.perf_counter()
        try:
            result = await agent.run(build_match_prompt(service_category, project_scope, candidates))
        except Exception as e:
            log_llm_call(model_name(self._model), "match", (time.perf_counter() - started) * 1000, False)
            logger.error(f"ViRA Match LLM call failed, using fallback scoring: {e}", exc_info=True)
            return fallback_recommendations(candidates), True

        log_llm_call(model_name(self._model), "match", (time.perf_counter() - started) * 1000, True)
        known = {c.vendor.vendor_name for c in candidates}
        recommendations = [rec for rec in result.output if rec.vendor_name in known]
        dropped = len(result.output) - len(recommendations)
        if dropped:
            logger.warning(f"Dropped {dropped} recommendation(s) naming vendors outside the candidate list")
        if not recommendations:
            logger.warning("ViRA Match LLM returned no usable recommendations, using fallback scoring")
            return fallback_recommendations(candidates), True
        recommendations.sort(key=lambda rec: rec.vira_score, reverse=True)
        return recommendations, False


async def load_candidates(repos: RepositoryBundle, vendors: Sequence[Vendor]) -> List[Candidate]:
    """Enrich vendors with analytics and pre-scores, highest pre-score first."""
    ratings = await repos.ratings.list_by_vendors([v.vendor_id for v in vendors])
    candidates = [Candidate(vendor=v, analytics=VendorAnalytics.from_ratings(ratings.get(v.vendor_id, []))) for v in vendors]
    max_projects = max([c.analytics.total_ratings for c in candidates] + [1])
    for c in candidates:
        c.pre_score = compute_pre_score(
            c.analytics.avg_overall, c.analytics.recommendation_pct, c.analytics.total_ratings, max_projects
        )
    candidates.sort(key=lambda c: c.pre_score, reverse=True)
    return candidates


def _to_match(rec: VendorRecommendation, candidate: Candidate) -> VendorMatch:
    return VendorMatch(
        **rec.model_dump(),
        vendor_id=candidate.vendor.vendor_id,
        avg_rating=round(candidate.analytics.avg_overall, 1) if candidate.analytics.avg_overall is not None else None,
        total_ratings=candidate.analytics.total_ratings,
        recommendation_rate=(
            round(candidate.analytics.recommendation_pct)
            if candidate.analytics.recommendation_pct is not None
            else None
        ),
    )


async def semantic_match(
    repos: RepositoryBundle,
    service_category: Optional[str],
    project_scope: Optional[str],
    *,
    model: Any | None = None,
    top_candidates: int = 5,
) -> SemanticMatchResponse:
    """Run ViRA Match for a service category and project scope."""
    if not service_category or not service_category.strip() or not project_scope or not project_scope.strip():
        raise ValidationFailedError("Service category and project scope are required")
    category = service_category.strip()

    vendors = await repos.vendors.list_active_in_category(category)
    if not vendors:
        return SemanticMatchResponse(matches=[], query_info=MatchQueryInfo(category_filter=category))

    candidates = await load_candidates(repos, vendors)
    top = candidates[:top_candidates]
    rest = candidates[top_candidates:]

    recommendations, used_fallback = await VendorMatcher(model=model).recommend(category, project_scope.strip(), top)
    by_name = {c.vendor.vendor_name: c for c in top}
    matches = [_to_match(rec, by_name[rec.vendor_name]) for rec in recommendations if rec.vendor_name in by_name]

    remaining = [
        RemainingVendor(
            vendor_id=c.vendor.vendor_id,
            vendor_name=c.vendor.vendor_name,
            pre_score=int(round(c.pre_score)),
            total_ratings=c.analytics.total_ratings,
        )
        for c in rest
    ]
    logger.info(
        f"ViRA Match for '{category}': candidates={len(candidates)}, sent={len(top)}, "
        f"matches={len(matches)}, fallback={used_fallback}"
    )
    return SemanticMatchResponse(
        matches=matches,
        remaining_vendors=remaining,
        query_info=MatchQueryInfo(
            category_filter=category,
            total_matches=len(matches),
            candidates_analyzed=len(candidates),
            sent_to_ai=len(top),
            used_fallback=used_fallback,
        ),
    )


async def find_similar_vendors(
    repos: RepositoryBundle, client: EmbeddingClient, query: str, limit: int = 10
) -> SimilarResponse:
    """Vendors ranked by cosine similarity between their embedding and the query's."""
    vector = await client.embed_one(query)
    ranked = await repos.vendors.search_by_embedding(vector, limit=limit)
    return SimilarResponse(
        results=[
            SimilarVendor(
                vendor_id=vendor.vendor_id,
                vendor_name=vendor.vendor_name,
                service_categories=list(vendor.service_categories or []),
                similarity=round(score, 4),
            )
            for vendor, score in ranked
        ]
    )
