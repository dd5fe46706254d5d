"""
Shared fixtures for the server unit tests.

Every test gets its own in-memory SQLite database. Outbound providers
(Mailgun, the identity provider and the embeddings API) are the real clients
wired to ``httpx.MockTransport`` stubs that record each request, so tests
can both assert what was sent and switch a provider into failure mode.
"""

import json
from typing import AsyncGenerator, Callable, Dict, List, Optional
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from fastapi import HTTPException, status
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from vira.core.database import create_all, create_sessionmaker
from vira.core.database.entities.clients import Client
from vira.core.database.entities.projects import Project
from vira.core.database.entities.ratings import Rating
from vira.core.database.entities.users import UserProfile, VendorUser
from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle, build_repositories
from vira.server.services.email_service import EmailService
from vira.server.services.embeddings import EmbeddingClient
from vira.server.services.identity import IdentityProviderClient

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

MAILGUN_URL = "http://mock-mailgun"
IDENTITY_URL = "http://mock-identity/v1"
EMBEDDINGS_URL = "http://mock-openai/v1"

# Keywords mapped onto the axes of the fake embedding space
EMBEDDING_AXES = ("design", "web", "data", "writing")


def fake_vector(text: str) -> List[float]:
    lower = text.lower()
    return [1.0 if axis in lower else 0.0 for axis in EMBEDDING_AXES] + [0.1]


class ProviderStub:
    """Records requests to a provider and answers them, or fails with ``fail_with``."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[int] = None
        self._responder = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, text="provider error")
        return self._responder(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class MailgunStub(ProviderStub):
    def __init__(self) -> None:
        super().__init__(lambda request: httpx.Response(200, json={"id": "<msg@mock>", "message": "Queued."}))

    @property
    def messages(self) -> List[Dict[str, List[str]]]:
        return [parse_qs(r.content.decode()) for r in self.requests]

    def recipients(self) -> List[str]:
        return [form["to"][0] for form in self.messages]

    def tags(self) -> List[str]:
        return [form["o:tag"][0] for form in self.messages if "o:tag" in form]


class IdentityStub(ProviderStub):
    def __init__(self) -> None:
        self.created: List[str] = []
        self.deleted: List[str] = []
        super().__init__(self._respond)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            user_id = f"user_{len(self.created) + 1}"
            self.created.append(user_id)
            return httpx.Response(200, json={"id": user_id})
        if request.method == "DELETE":
            self.deleted.append(request.url.path.rsplit("/", 1)[-1])
            return httpx.Response(200, json={"deleted": True})
        return httpx.Response(200, json={})


class EmbeddingStub(ProviderStub):
    def __init__(self) -> None:
        super().__init__(self._respond)

    def _respond(self, request: httpx.Request) -> httpx.Response:
        texts = json.loads(request.content)["input"]
        data = [{"index": i, "embedding": fake_vector(text)} for i, text in enumerate(texts)]
        return httpx.Response(200, json={"data": data})


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory database for one test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(test_engine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = create_sessionmaker(test_engine)

    async with async_session_maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> RepositoryBundle:
    return build_repositories(session)


@pytest.fixture
def mailgun() -> MailgunStub:
    return MailgunStub()


@pytest.fixture
def identity_stub() -> IdentityStub:
    return IdentityStub()


@pytest.fixture
def embedding_stub() -> EmbeddingStub:
    return EmbeddingStub()


@pytest_asyncio.fixture
async def email_service(mailgun: MailgunStub) -> AsyncGenerator[EmailService, None]:
    http = mailgun.client()
    yield EmailService(api_key="key-test", domain="mg.vira.test", base_url=MAILGUN_URL, client=http)
    await http.aclose()


@pytest_asyncio.fixture
async def identity_client(identity_stub: IdentityStub) -> AsyncGenerator[IdentityProviderClient, None]:
    http = identity_stub.client()
    yield IdentityProviderClient(IDENTITY_URL, secret_key="sk_test", client=http)
    await http.aclose()


@pytest_asyncio.fixture
async def embedding_client(embedding_stub: EmbeddingStub) -> AsyncGenerator[EmbeddingClient, None]:
    http = embedding_stub.client()
    yield EmbeddingClient(api_key="sk-test", base_url=EMBEDDINGS_URL, dimensions=5, client=http)
    await http.aclose()


# ---------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------


@pytest.fixture
def make_user(repos: RepositoryBundle):
    counter = {"n": 0}

    async def _make(role: str = "team", email: Optional[str] = None, **fields) -> UserProfile:
        counter["n"] += 1
        n = counter["n"]
        profile = UserProfile(
            auth_user_id=fields.pop("auth_user_id", f"auth_{role}_{n}"),
            email=email or f"{role}{n}@vira.test",
            full_name=fields.pop("full_name", f"{role.title()} User {n}"),
            role=role,
            **fields,
        )
        return await repos.users.create(profile)

    return _make


@pytest.fixture
def make_vendor(repos: RepositoryBundle):
    async def _make(name: str, **fields) -> Vendor:
        return await repos.vendors.create(Vendor(vendor_name=name, **fields))

    return _make


@pytest.fixture
def make_client(repos: RepositoryBundle):
    async def _make(name: str, **fields) -> Client:
        return await repos.clients.create(Client(client_name=name, **fields))

    return _make


@pytest.fixture
def make_project(repos: RepositoryBundle):
    async def _make(title: str, **fields) -> Project:
        return await repos.projects.create(Project(project_title=title, **fields))

    return _make


@pytest.fixture
def make_rating(repos: RepositoryBundle):
    async def _make(project: Project, overall: int = 8, **fields) -> Rating:
        values = {
            "project_success_rating": overall,
            "quality_rating": overall,
            "communication_rating": overall,
            "vendor_overall_rating": overall,
            "rater_email": "rater@vira.test",
        }
        values.update(fields)
        rating = Rating(project_id=project.project_id, vendor_id=project.vendor_id, client_id=project.client_id, **values)
        return await repos.ratings.create(rating)

    return _make


@pytest.fixture
def link_vendor_user(repos: RepositoryBundle):
    async def _link(user: UserProfile, vendor: Vendor) -> VendorUser:
        return await repos.vendor_users.create(VendorUser(vendor_id=vendor.vendor_id, user_id=user.id))

    return _link


# ---------------------------------------------------------------------
# Application client
# ---------------------------------------------------------------------


class AuthState:
    """The profile the overridden ``get_current_user`` returns."""

    def __init__(self) -> None:
        self.user: Optional[UserProfile] = None


@pytest.fixture
def auth_state() -> AuthState:
    return AuthState()


@pytest.fixture
def login(auth_state: AuthState) -> Callable[[Optional[UserProfile]], None]:
    def _login(user: Optional[UserProfile]) -> None:
        auth_state.user = user

    return _login


@pytest.fixture
def match_model_holder() -> Dict[str, object]:
    """Tests put a pydantic-ai test model under ``"model"`` to exercise the LLM path."""
    return {"model": None}


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession,
    auth_state: AuthState,
    email_service: EmailService,
    identity_client: IdentityProviderClient,
    embedding_client: EmbeddingClient,
    match_model_holder: Dict[str, object],
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with overridden dependencies."""
    from vira.core.database import get_session
    from vira.server.main import app
    from vira.server.services.auth import get_current_user
    from vira.server.services.deps import (
        get_email_service,
        get_embedding_client,
        get_identity_client,
        get_match_model,
    )

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    async def get_current_user_override() -> UserProfile:
        if auth_state.user is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        if not auth_state.user.is_active:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")
        return auth_state.user

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_current_user] = get_current_user_override
    app.dependency_overrides[get_email_service] = lambda: email_service
    app.dependency_overrides[get_identity_client] = lambda: identity_client
    app.dependency_overrides[get_embedding_client] = lambda: embedding_client
    app.dependency_overrides[get_match_model] = lambda: match_model_holder["model"]

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
        yield client

    app.dependency_overrides.clear()
