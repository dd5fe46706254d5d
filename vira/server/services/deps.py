"""
Service Dependencies.

FastAPI dependencies shared by the API routers: the request's repository
bundle and the outbound clients (email, identity provider, embeddings, LLM).
Tests swap any of them through ``app.dependency_overrides``.
"""

from typing import Annotated, Any, AsyncGenerator, Optional

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from vira.core.database import get_session
from vira.core.database.repositories import RepositoryBundle, build_repositories

from .email_service import EmailService
from .embeddings import EmbeddingClient
from .identity import IdentityProviderClient
from .llm import build_match_model

SessionDep = Annotated[AsyncSession, Depends(get_session)]


async def get_repositories(session: SessionDep) -> RepositoryBundle:
    return build_repositories(session)


ReposDep = Annotated[RepositoryBundle, Depends(get_repositories)]


async def get_email_service() -> AsyncGenerator[EmailService, None]:
    service = EmailService.from_settings()
    try:
        yield service
    finally:
        await service.aclose()


async def get_identity_client() -> AsyncGenerator[IdentityProviderClient, None]:
    client = IdentityProviderClient.from_settings()
    try:
        yield client
    finally:
        await client.aclose()


async def get_embedding_client() -> AsyncGenerator[EmbeddingClient, None]:
    client = EmbeddingClient.from_settings()
    try:
        yield client
    finally:
        await client.aclose()


def get_match_model() -> Optional[Any]:
    """The pydantic-ai model used by ViRA Match and the assistant, or None when no provider is configured."""
    return build_match_model()


EmailDep = Annotated[EmailService, Depends(get_email_service)]
IdentityDep = Annotated[IdentityProviderClient, Depends(get_identity_client)]
EmbeddingDep = Annotated[EmbeddingClient, Depends(get_embedding_client)]
MatchModelDep = Annotated[Optional[Any], Depends(get_match_model)]
