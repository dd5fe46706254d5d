"""
Client repository.

Clients are the companies projects are delivered for. Names are unique, and
imports look them up case-insensitively before creating new ones.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.clients import Client
from ..entities.projects import Project
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class ClientRepository(BaseRepository[Client]):
    """Repository for client data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Client)

    async def create(self, client: Client) -> Client:
        return await self._save(client)

    async def get_by_id(self, client_id: int) -> Optional[Client]:
        stmt = select(Client).where(Client.client_id == client_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, client: Client) -> Client:
        client.updated_at = utc_now()
        return await self._save(client)

    async def delete(self, client_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(client_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Client]:
        """List clients ordered by name, optionally filtered by a ``search`` term."""
        filters = dict(filters or {})
        stmt = select(Client).order_by(Client.client_name)
        stmt = QueryBuilder.apply_search(stmt, [Client.client_name], filters.pop("search", None))
        stmt = QueryBuilder.apply_filters(stmt, Client, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Client))
        return int(result.scalar_one())

    async def get_by_name_ci(self, name: str) -> Optional[Client]:
        stmt = select(Client).where(func.lower(Client.client_name) == name.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_or_create(self, name: str) -> Client:
        """Return the client named ``name`` (any case), creating it when absent."""
        existing = await self.get_by_name_ci(name)
        if existing is not None:
            return existing
        return await self.create(Client(client_name=name.strip()))

    async def count_projects(self, client_id: int) -> int:
        stmt = select(func.count()).select_from(Project).where(Project.client_id == client_id)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())
