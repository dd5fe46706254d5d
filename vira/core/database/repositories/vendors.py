"""
Vendor repository.

Data access for vendors: CRUD, the filtered listing used by the vendors
page, case-insensitive name lookups used by imports and merges, vendor code
bookkeeping and the embedding queries behind similarity search.
"""

from __future__ import annotations

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.vendors import Vendor
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder

VENDOR_CODE_PATTERN = re.compile(r"^VEN-(\d+)$")


def cosine_similarity(left: Sequence[float], right: Sequence[float]) -> float:
    """Cosine similarity of two vectors; 0.0 when either has no magnitude."""
    dot = sum(a * b for a, b in zip(left, right))
    norm_left = math.sqrt(sum(a * a for a in left))
    norm_right = math.sqrt(sum(b * b for b in right))
    if norm_left == 0 or norm_right == 0:
        return 0.0
    return dot / (norm_left * norm_right)


class VendorRepository(BaseRepository[Vendor]):
    """Repository for vendor data access operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Vendor)

    async def create(self, vendor: Vendor) -> Vendor:
        return await self._save(vendor)

    async def get_by_id(self, vendor_id: int) -> Optional[Vendor]:
        stmt = select(Vendor).where(Vendor.vendor_id == vendor_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, vendor: Vendor) -> Vendor:
        vendor.updated_at = utc_now()
        return await self._save(vendor)

    async def delete(self, vendor_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(vendor_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[Vendor]:
        """List vendors ordered by name.

        Args:
            limit: Maximum records to return
            offset: Records to skip
            filters: ``search`` (name, skills, specialties), ``status`` and
                ``service_category``

        Returns:
            List of Vendor instances
        """
        filters = dict(filters or {})
        search = filters.pop("search", None)
        category = filters.pop("service_category", None)

        stmt = select(Vendor).order_by(Vendor.vendor_name)
        stmt = QueryBuilder.apply_search(stmt, [Vendor.vendor_name, Vendor.skills, Vendor.specialties], search)
        if category:
            stmt = stmt.where(self._category_clause(category))
        stmt = QueryBuilder.apply_filters(stmt, Vendor, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)

        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _category_clause(category: str):
        # JSON arrays are stored as text on every backend we support
        return cast(Vendor.service_categories, String).ilike(f'%"{category}"%')

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(Vendor))
        return int(result.scalar_one())

    async def get_by_name_ci(self, name: str) -> Optional[Vendor]:
        """Find a vendor by name, ignoring case and surrounding whitespace."""
        stmt = select(Vendor).where(func.lower(Vendor.vendor_name) == name.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def find_by_names(self, names: Iterable[str]) -> Dict[str, Vendor]:
        """Map lower-cased names to the vendors that carry them."""
        lowered = {name.strip().lower() for name in names if name and name.strip()}
        if not lowered:
            return {}
        stmt = select(Vendor).where(func.lower(Vendor.vendor_name).in_(lowered))
        result = await self.session.execute(stmt)
        return {vendor.vendor_name.lower(): vendor for vendor in result.scalars().all()}

    async def list_names(self) -> List[str]:
        result = await self.session.execute(select(Vendor.vendor_name).order_by(Vendor.vendor_name))
        return [row for row in result.scalars().all()]

    async def list_active(self, limit: Optional[int] = None) -> List[Vendor]:
        stmt = select(Vendor).where(Vendor.status == "active").order_by(Vendor.vendor_name)
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_active_in_category(self, category: str) -> List[Vendor]:
        """Active vendors offering ``category`` either as a service category or in their vendor type."""
        stmt = (
            select(Vendor)
            .where(Vendor.status == "active")
            .where(self._category_clause(category) | Vendor.vendor_type.ilike(f"%{category}%"))
            .order_by(Vendor.vendor_name)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def search_active(self, term: str, limit: int = 10) -> List[Vendor]:
        """Active vendors matching ``term`` by name, category or specialty."""
        stmt = select(Vendor).where(Vendor.status == "active")
        stmt = QueryBuilder.apply_search(
            stmt,
            [Vendor.vendor_name, cast(Vendor.service_categories, String), Vendor.specialties, Vendor.vendor_type],
            term,
        )
        stmt = stmt.order_by(Vendor.vendor_name).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_vendor_codes(self) -> List[str]:
        result = await self.session.execute(select(Vendor.vendor_code).where(Vendor.vendor_code.is_not(None)))
        return [code for code in result.scalars().all() if code]

    async def next_vendor_code(self) -> str:
        """Next free ``VEN-###`` code: highest numeric suffix plus one."""
        highest = 0
        for code in await self.list_vendor_codes():
            match = VENDOR_CODE_PATTERN.match(code.strip())
            if match:
                highest = max(highest, int(match.group(1)))
        return f"VEN-{highest + 1:03d}"

    async def missing_embeddings(self, limit: Optional[int] = None) -> List[Vendor]:
        stmt = select(Vendor).where(Vendor.embedding.is_(None)).order_by(Vendor.vendor_id)
        stmt = QueryBuilder.apply_pagination(stmt, limit, None)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def embedding_counts(self) -> Tuple[int, int]:
        """Return ``(with_embedding, without_embedding)``."""
        total = await self.count()
        result = await self.session.execute(
            select(func.count()).select_from(Vendor).where(Vendor.embedding.is_not(None))
        )
        with_embedding = int(result.scalar_one())
        return with_embedding, total - with_embedding

    async def search_by_embedding(self, query: Sequence[float], limit: int = 10) -> List[Tuple[Vendor, float]]:
        """Rank vendors by cosine similarity to ``query``.

        PostgreSQL delegates the ranking to pgvector. Other dialects (SQLite in
        tests) load the stored vectors and compute the same score in Python.
        """
        dialect = self.session.bind.dialect.name if self.session.bind is not None else ""
        if dialect == "postgresql":
            similarity = (1 - Vendor.embedding.cosine_distance(list(query))).label("similarity")
            stmt = (
                select(Vendor, similarity)
                .where(Vendor.embedding.is_not(None))
                .order_by(similarity.desc())
                .limit(limit)
            )
            result = await self.session.execute(stmt)
            return [(vendor, float(score)) for vendor, score in result.all()]

        result = await self.session.execute(select(Vendor).where(Vendor.embedding.is_not(None)))
        scored = [
            (vendor, cosine_similarity(vendor.embedding, query))
            for vendor in result.scalars().all()
            if vendor.embedding
        ]
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:limit]
