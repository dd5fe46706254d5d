"""ViRA assistant chat endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from vira.core.models.io.matching import ChatRequest, ChatResponse
from vira.server.core.config import settings
from vira.server.services.assistant import ChatAssistant
from vira.server.services.auth import StaffDep
from vira.server.services.deps import MatchModelDep, ReposDep

router = APIRouter(tags=["chat"])


@router.post(
    "",
    response_model=ChatResponse,
    summary="Chat with ViRA",
    description=(
        "Answer one chat message. Recommendation requests run ViRA Match, searches look vendors up "
        "by name, category or specialty, anything else is answered conversationally."
    ),
    response_description="The reply with its detected intent and any vendors found.",
    responses={200: {"description": "Reply produced"}},
)
async def chat(payload: ChatRequest, repos: ReposDep, model: MatchModelDep, _user: StaffDep) -> ChatResponse:
    """
    Chat with the assistant.

    - **message**: The user's message.
    - **history**: Earlier turns; the last six are used as context.
    """
    assistant = ChatAssistant(repos, model=model, top_candidates=settings.matching.top_candidates)
    return await assistant.respond(payload.message, payload.history)
