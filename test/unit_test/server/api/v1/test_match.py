"""
Unit tests for the ViRA Match endpoints.

The LLM path runs against pydantic-ai's ``FunctionModel`` so the agent's
structured output is fully controlled; real model requests are disabled.
"""

from typing import List

import pytest
from httpx import AsyncClient
from pydantic_ai import models
from pydantic_ai.messages import ModelMessage, ModelResponse, ToolCallPart
from pydantic_ai.models.function import AgentInfo, FunctionModel

from vira.server.core.config import settings

pytestmark = pytest.mark.asyncio

models.ALLOW_MODEL_REQUESTS = False

BASE = "/api/v1/match"


def ranking_model(ranking: List[dict]) -> FunctionModel:
    def respond(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
        return ModelResponse(parts=[ToolCallPart(info.output_tools[0].name, {"response": ranking})])

    return FunctionModel(respond)


def failing_model() -> FunctionModel:
    def respond(messages: List[ModelMessage], info: AgentInfo) -> ModelResponse:
        raise RuntimeError("provider unavailable")

    return FunctionModel(respond)


@pytest.fixture
async def staff(make_user, login):
    user = await make_user("team")
    login(user)
    return user


@pytest.fixture
async def design_vendors(make_vendor, make_project, make_rating):
    proven = await make_vendor("Proven Design", service_categories=["Design"], skills="branding")
    fresh = await make_vendor("Fresh Design", service_categories=["Design"])
    await make_vendor("Dormant Design", service_categories=["Design"], status="inactive")
    await make_vendor("Code Shop", service_categories=["Development"])
    for title in ("Logo", "Brochure"):
        project = await make_project(title, vendor_id=proven.vendor_id)
        await make_rating(project, overall=9, recommend_again=True, what_went_well="Sharp concepts")
    return proven, fresh


class TestSemanticFallback:
    async def test_without_model_uses_deterministic_scores(self, client: AsyncClient, staff, design_vendors):
        response = await client.post(
            f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "New brand identity"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["query_info"]["used_fallback"] is True
        assert data["query_info"]["candidates_analyzed"] == 2
        assert [m["vendor_name"] for m in data["matches"]] == ["Proven Design", "Fresh Design"]

        best = data["matches"][0]
        assert best["vira_score"] == 100
        assert best["avg_rating"] == 9.0
        assert best["total_ratings"] == 2
        assert best["recommendation_rate"] == 100
        assert data["matches"][1]["vira_score"] == 10

    async def test_candidates_beyond_the_top_are_listed_as_remaining(
        self, client: AsyncClient, staff, design_vendors, monkeypatch
    ):
        monkeypatch.setattr(settings, "VIRA_MATCH_TOP_CANDIDATES", 1)
        data = (
            await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "Logo"})
        ).json()
        assert [m["vendor_name"] for m in data["matches"]] == ["Proven Design"]
        assert [r["vendor_name"] for r in data["remaining_vendors"]] == ["Fresh Design"]
        assert data["query_info"]["sent_to_ai"] == 1

    async def test_no_vendors_in_category(self, client: AsyncClient, staff, design_vendors):
        data = (
            await client.post(f"{BASE}/semantic", json={"service_category": "Legal", "project_scope": "Contracts"})
        ).json()
        assert data["matches"] == []
        assert data["query_info"]["category_filter"] == "Legal"

    async def test_scope_is_required(self, client: AsyncClient, staff):
        response = await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": " "})
        assert response.status_code == 400

    async def test_vendors_cannot_match(self, client: AsyncClient, make_user, login):
        login(await make_user("vendor"))
        response = await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "x"})
        assert response.status_code == 403


class TestSemanticWithModel:
    async def test_llm_ranking_is_used(self, client: AsyncClient, staff, design_vendors, match_model_holder):
        match_model_holder["model"] = ranking_model(
            [
                {"vendor_name": "Proven Design", "vira_score": 70, "reason": "Solid", "key_strengths": ["Branding"]},
                {"vendor_name": "Fresh Design", "vira_score": 85, "reason": "Great fit for the scope"},
                {"vendor_name": "Made Up Agency", "vira_score": 99, "reason": "Not a candidate"},
            ]
        )
        data = (
            await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "Brand refresh"})
        ).json()
        assert data["query_info"]["used_fallback"] is False
        assert [(m["vendor_name"], m["vira_score"]) for m in data["matches"]] == [
            ("Fresh Design", 85),
            ("Proven Design", 70),
        ]
        assert data["matches"][1]["key_strengths"] == ["Branding"]

    async def test_only_unknown_vendors_falls_back(self, client: AsyncClient, staff, design_vendors, match_model_holder):
        match_model_holder["model"] = ranking_model([{"vendor_name": "Ghost", "vira_score": 90, "reason": "?"}])
        data = (
            await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "Brochure"})
        ).json()
        assert data["query_info"]["used_fallback"] is True
        assert len(data["matches"]) == 2

    async def test_model_error_falls_back(self, client: AsyncClient, staff, design_vendors, match_model_holder):
        match_model_holder["model"] = failing_model()
        response = await client.post(f"{BASE}/semantic", json={"service_category": "Design", "project_scope": "Logo"})
        assert response.status_code == 200
        assert response.json()["query_info"]["used_fallback"] is True


class TestSimilar:
    async def test_ranks_by_embedding(self, client: AsyncClient, staff, make_vendor, repos, embedding_stub):
        await make_vendor("Web Works", embedding=[0.0, 1.0, 0.0, 0.0, 0.1])
        await make_vendor("Data Lab", embedding=[0.0, 0.0, 1.0, 0.0, 0.1])
        await make_vendor("No Vector")

        response = await client.post(f"{BASE}/similar", json={"query": "data pipeline", "limit": 5})
        assert response.status_code == 200
        results = response.json()["results"]
        assert [r["vendor_name"] for r in results] == ["Data Lab", "Web Works"]
        assert results[0]["similarity"] == pytest.approx(1.0)
        assert len(embedding_stub.requests) == 1

    async def test_provider_failure(self, client: AsyncClient, staff, embedding_stub):
        embedding_stub.fail_with = 500
        response = await client.post(f"{BASE}/similar", json={"query": "anything"})
        assert response.status_code == 502
