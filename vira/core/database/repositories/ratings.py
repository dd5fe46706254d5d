"""
Rating repository.

One rating per project. Aggregations (averages, rates) are computed by the
services from the rows returned here.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.ratings import Rating
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class RatingRepository(BaseRepository[Rating]):
    """Repository for rating data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Rating)

    async def create(self, rating: Rating) -> Rating:
        return await self._save(rating)

    async def get_by_id(self, rating_id: int) -> Optional[Rating]:
        stmt = select(Rating).where(Rating.rating_id == rating_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, rating: Rating) -> Rating:
        rating.updated_at = utc_now()
        return await self._save(rating)

    async def delete(self, rating_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(rating_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Rating]:
        """List ratings, most recent first (filters: vendor_id, project_id, client_id)."""
        stmt = select(Rating).order_by(Rating.rating_date.desc(), Rating.rating_id.desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Rating, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Rating))
        return int(result.scalar_one())

    async def get_by_project(self, project_id: int) -> Optional[Rating]:
        stmt = select(Rating).where(Rating.project_id == project_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_vendor(self, vendor_id: int, limit: Optional[int] = None) -> List[Rating]:
        return await self.list(limit=limit, filters={"vendor_id": vendor_id})

    async def list_by_vendors(self, vendor_ids: Iterable[int]) -> Dict[int, List[Rating]]:
        """Group ratings of several vendors by vendor id, most recent first."""
        ids = list(vendor_ids)
        grouped: Dict[int, List[Rating]] = {vendor_id: [] for vendor_id in ids}
        if not ids:
            return grouped
        stmt = (
            select(Rating)
            .where(Rating.vendor_id.in_(ids))
            .order_by(Rating.rating_date.desc(), Rating.rating_id.desc())
        )
        result = await self.session.execute(stmt)
        for rating in result.scalars().all():
            grouped.setdefault(rating.vendor_id, []).append(rating)
        return grouped

    async def recent(self, limit: int = 5) -> List[Rating]:
        return await self.list(limit=limit)

    async def reassign_vendor(self, rating_ids: List[int], vendor_id: int) -> int:
        """Point the given ratings at ``vendor_id``; returns the number of rows touched."""
        if not rating_ids:
            return 0
        stmt = (
            update(Rating)
            .where(Rating.rating_id.in_(rating_ids))
            .values(vendor_id=vendor_id, updated_at=utc_now())
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return int(result.rowcount or 0)

    async def average_overall(self) -> Optional[float]:
        result = await self.session.execute(select(func.avg(Rating.vendor_overall_rating)))
        value = result.scalar_one_or_none()
        return float(value) if value is not None else None

    async def top_vendors(self, limit: int = 5) -> List[Tuple[int, float, int]]:
        """``(vendor_id, average overall rating, rating count)`` for the best-rated vendors."""
        average = func.avg(Rating.vendor_overall_rating).label("average")
        total = func.count(Rating.rating_id).label("total")
        stmt = (
            select(Rating.vendor_id, average, total)
            .group_by(Rating.vendor_id)
            .order_by(average.desc(), total.desc())
            .limit(limit)
        )
        result = await self.session.execute(stmt)
        return [(int(vendor_id), float(avg), int(count)) for vendor_id, avg, count in result.all()]
