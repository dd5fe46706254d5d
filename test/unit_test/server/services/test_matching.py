"""
Unit tests for ViRA Match scoring, prompting and the agent wrapper.
"""

from typing import List

import pytest
from pydantic_ai import models
from pydantic_ai.messages import ModelMessage, ModelResponse, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from vira.core.database.entities.ratings import Rating
from vira.core.database.entities.vendors import Vendor
from vira.core.errors import ValidationFailedError
from vira.server.services.matching import (
    Candidate,
    VendorAnalytics,
    VendorMatcher,
    build_match_prompt,
    compute_pre_score,
    fallback_recommendation,
    fallback_score,
    semantic_match,
)

models.ALLOW_MODEL_REQUESTS = False


def rating(overall: int, **fields) -> Rating:
    return Rating(
        project_id=1,
        vendor_id=1,
        rater_email="r@vira.test",
        project_success_rating=overall,
        quality_rating=overall,
        communication_rating=overall,
        vendor_overall_rating=overall,
        **fields,
    )


class TestAnalytics:
    def test_empty(self):
        analytics = VendorAnalytics.from_ratings([])
        assert analytics.total_ratings == 0
        assert analytics.avg_overall is None

    def test_aggregates(self):
        analytics = VendorAnalytics.from_ratings(
            [
                rating(9, recommend_again=True, project_on_time=True, what_went_well=" Fast "),
                rating(7, recommend_again=False, project_on_time=None, what_went_well=""),
            ]
        )
        assert analytics.total_ratings == 2
        assert analytics.avg_overall == 8.0
        assert analytics.recommendation_pct == 50.0
        assert analytics.on_time_pct == 50.0
        assert analytics.went_well == ["Fast"]


class TestScores:
    def test_pre_score_weights(self):
        assert compute_pre_score(10, 100, 4, 4) == 100
        assert compute_pre_score(5, 50, 1, 4) == pytest.approx(20 + 20 + 5)
        assert compute_pre_score(None, None, 0, 0) == 0

    def test_fallback_score_is_clamped(self):
        assert fallback_score(VendorAnalytics()) == 10
        assert fallback_score(VendorAnalytics(total_ratings=10, avg_overall=10, recommendation_pct=100)) == 100
        assert fallback_score(VendorAnalytics(total_ratings=1, avg_overall=6, recommendation_pct=50)) == 61

    def test_fallback_recommendation_wording(self):
        vendor = Vendor(vendor_name="Pixel", service_categories=["Design"], specialties="logos")
        rec = fallback_recommendation(Candidate(vendor=vendor, analytics=VendorAnalytics(total_ratings=1, avg_overall=8)))
        assert rec.key_strengths == ["High client satisfaction", "Professional service", "Specialized expertise"]
        assert rec.considerations == ["Limited rating history - consider as emerging vendor"]
        assert "Design" in rec.reason
        assert "8.0/10" in rec.reason


def test_prompt_lists_every_candidate():
    candidates = [
        Candidate(vendor=Vendor(vendor_name="Pixel", skills="branding"), analytics=VendorAnalytics(went_well=["Quick"])),
        Candidate(vendor=Vendor(vendor_name="Byte"), analytics=VendorAnalytics()),
    ]
    prompt = build_match_prompt("Design", "A new logo", candidates)
    assert "VENDOR: Pixel" in prompt
    assert "VENDOR: Byte" in prompt
    assert 'Went well: "Quick"' in prompt
    assert "No history available" in prompt
    assert 'Scope: "A new logo"' in prompt
    assert "Rank all 2 vendors" in prompt


@pytest.mark.asyncio
class TestVendorMatcher:
    @pytest.fixture
    def candidates(self):
        return [
            Candidate(vendor=Vendor(vendor_id=1, vendor_name="Pixel"), analytics=VendorAnalytics()),
            Candidate(vendor=Vendor(vendor_id=2, vendor_name="Byte"), analytics=VendorAnalytics()),
        ]

    async def test_prompt_reaches_the_model(self, candidates):
        seen: List[str] = []

        def respond(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
            seen.append(str(messages[-1].parts[-1].content))
            ranking = [{"vendor_name": "Byte", "vira_score": 60, "reason": "ok"}]
            return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, {"response": ranking})])

        recommendations, used_fallback = await VendorMatcher(model=FunctionModel(respond)).recommend(
            "Design", "Logo", candidates
        )
        assert used_fallback is False
        assert [r.vendor_name for r in recommendations] == ["Byte"]
        assert "VENDOR: Pixel" in seen[0]

    async def test_no_model_uses_fallback(self, candidates):
        recommendations, used_fallback = await VendorMatcher().recommend("Design", "Logo", candidates)
        assert used_fallback is True
        assert len(recommendations) == 2


@pytest.mark.asyncio
async def test_semantic_match_requires_category(repos):
    with pytest.raises(ValidationFailedError):
        await semantic_match(repos, "", "scope")
