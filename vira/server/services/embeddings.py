"""Text embeddings for similarity search.

``EmbeddingClient`` calls the OpenAI-compatible ``POST {base}/embeddings``
endpoint. ``generate_missing_embeddings`` fills the embedding columns of
projects and vendors that have none, in batches, and
``embedding_status`` reports how many rows are covered.
"""

from __future__ import annotations

import time
from typing import Any, List, Optional, Sequence

import httpx

from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ExternalServiceError
from vira.core.logging_config import get_logger
from vira.core.models.io.matching import EmbeddingCounts, EmbeddingRunResult, EmbeddingStatus
from vira.server.core.config import settings

logger = get_logger(__name__)

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
EMBEDDING_BATCH_SIZE = 50


class EmbeddingError(ExternalServiceError):
    """Raised when the embeddings API cannot produce vectors."""

    def __init__(self, message: str, *, provider_status: Optional[int] = None, details: Optional[Any] = None) -> None:
        super().__init__(message, details=details)
        self.provider_status = provider_status


class EmbeddingClient:
    """Async client for an OpenAI-compatible embeddings endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.dimensions = dimensions
        self.base_url = (base_url or DEFAULT_OPENAI_BASE_URL).rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    @classmethod
    def from_settings(cls, client: Optional[httpx.AsyncClient] = None) -> "EmbeddingClient":
        config = settings.openai
        return cls(
            api_key=config.api_key.get_secret_value() if config.api_key else None,
            model=config.embedding_model,
            dimensions=config.embedding_dimensions,
            base_url=config.base_url,
            client=client,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def embed(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed several texts, returning vectors in input order.

        Raises:
            EmbeddingError: empty input text, missing key, or a failed request
        """
        if not texts:
            return []
        if any(not text or not text.strip() for text in texts):
            raise EmbeddingError("Cannot embed empty text")
        if not self.api_key:
            raise EmbeddingError("Embeddings provider is not configured")

        try:
            r = await self._client.post(
                f"{self.base_url}/embeddings",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={"model": self.model, "input": list(texts), "dimensions": self.dimensions},
            )
            r.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise EmbeddingError(
                f"Embeddings request failed: {e.response.status_code}",
                provider_status=e.response.status_code,
                details=e.response.text,
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingError(f"Embeddings request failed: {e}") from e

        data = r.json().get("data")
        if not isinstance(data, list) or len(data) != len(texts):
            raise EmbeddingError("Unexpected response shape from embeddings API", details=data)
        ordered = sorted(data, key=lambda item: item.get("index", 0))
        return [list(item["embedding"]) for item in ordered]

    async def embed_one(self, text: str) -> List[float]:
        return (await self.embed([text]))[0]


async def _embed_rows(rows: list, client: EmbeddingClient, save, label: str, errors: List[str]) -> int:
    embedded = 0
    for start in range(0, len(rows), EMBEDDING_BATCH_SIZE):
        batch = rows[start : start + EMBEDDING_BATCH_SIZE]
        ready = []
        for row in batch:
            text = row.embedding_text().strip()
            if text:
                ready.append((row, text))
            else:
                errors.append(f"{label} {row}: empty text, skipped")
        if not ready:
            continue
        try:
            vectors = await client.embed([text for _, text in ready])
        except EmbeddingError as e:
            logger.error(f"Embedding batch of {label}s failed: {e.message}", exc_info=True)
            errors.append(f"{label} batch starting at {start}: {e.message}")
            continue
        for (row, _), vector in zip(ready, vectors):
            row.embedding = vector
            await save(row)
            embedded += 1
    return embedded


async def generate_missing_embeddings(repos: RepositoryBundle, client: EmbeddingClient) -> EmbeddingRunResult:
    """Embed every project and vendor that has no embedding yet."""
    started = time.perf_counter()
    errors: List[str] = []
    projects = await repos.projects.missing_embeddings()
    vendors = await repos.vendors.missing_embeddings()

    projects_embedded = await _embed_rows(projects, client, repos.projects.update, "project", errors)
    vendors_embedded = await _embed_rows(vendors, client, repos.vendors.update, "vendor", errors)

    logger.info(
        f"Embedding run finished: projects={projects_embedded}, vendors={vendors_embedded}, "
        f"errors={len(errors)}, took={(time.perf_counter() - started) * 1000:.0f}ms"
    )
    return EmbeddingRunResult(projects_embedded=projects_embedded, vendors_embedded=vendors_embedded, errors=errors)


async def embedding_status(repos: RepositoryBundle) -> EmbeddingStatus:
    project_with, project_without = await repos.projects.embedding_counts()
    vendor_with, vendor_without = await repos.vendors.embedding_counts()
    return EmbeddingStatus(
        projects=EmbeddingCounts(with_embedding=project_with, without_embedding=project_without),
        vendors=EmbeddingCounts(with_embedding=vendor_with, without_embedding=vendor_without),
    )
