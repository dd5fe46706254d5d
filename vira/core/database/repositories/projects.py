"""
Project repository.

Projects link a client to the vendor that delivered the work. Besides CRUD
this covers the duplicate check used by CSV imports, the unrated-project
queue, vendor reassignment during merges and embedding bookkeeping.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.projects import Project, ProjectStatus
from ..entities.ratings import Rating
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class ProjectRepository(BaseRepository[Project]):
    """Repository for project data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Project)

    async def create(self, project: Project) -> Project:
        return await self._save(project)

    async def get_by_id(self, project_id: int) -> Optional[Project]:
        stmt = select(Project).where(Project.project_id == project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, project: Project) -> Project:
        project.updated_at = utc_now()
        return await self._save(project)

    async def delete(self, project_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(project_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Project]:
        """List projects, newest first.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: Field filters (status, vendor_id, client_id)

        Returns:
            List of Project instances
        """
        stmt = select(Project).order_by(Project.created_at.desc(), Project.project_id.desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Project, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Project))
        return int(result.scalar_one())

    async def find_existing(self, title: str, vendor_id: int, client_id: int) -> Optional[Project]:
        """Project with the same title (any case) for the same vendor and client."""
        stmt = (
            select(Project)
            .where(func.lower(Project.project_title) == title.strip().lower())
            .where(Project.vendor_id == vendor_id)
            .where(Project.client_id == client_id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def list_unrated(self, limit: Optional[int] = None) -> List[Project]:
        """Completed or active projects without a rating, newest first."""
        rated = select(Rating.project_id)
        stmt = (
            select(Project)
            .where(Project.status.in_([ProjectStatus.completed.value, ProjectStatus.active.value]))
            .where(Project.project_id.not_in(rated))
            .order_by(Project.created_at.desc(), Project.project_id.desc())
        )
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_by_vendor(self, vendor_id: int) -> List[Project]:
        stmt = select(Project).where(Project.vendor_id == vendor_id).order_by(Project.project_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def reassign_vendor(self, project_ids: List[int], vendor_id: int) -> int:
        """Point the given projects at ``vendor_id``; returns the number of rows touched."""
        if not project_ids:
            return 0
        stmt = (
            update(Project)
            .where(Project.project_id.in_(project_ids))
            .values(vendor_id=vendor_id, updated_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def missing_embeddings(self, limit: Optional[int] = None) -> List[Project]:
        stmt = select(Project).where(Project.embedding.is_(None)).order_by(Project.project_id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def embedding_counts(self) -> Tuple[int, int]:
        """Return ``(with_embedding, without_embedding)``."""
        total = await self.count()
        result = await self.session.execute(
            select(func.count()).select_from(Project).where(Project.embedding.is_not(None))
        )
        with_embedding = int(result.scalar_one())
        return with_embedding, total - with_embedding
