"""
Vendor invite and application repositories.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.vendor_onboarding import InviteStatus, VendorApplication, VendorInvite
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class VendorInviteRepository(BaseRepository[VendorInvite]):
    """Repository for vendor invites."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VendorInvite)

    async def create(self, invite: VendorInvite) -> VendorInvite:
        return await self._save(invite)

    async def get_by_id(self, invite_id: int) -> Optional[VendorInvite]:
        stmt = select(VendorInvite).where(VendorInvite.invite_id == invite_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, invite: VendorInvite) -> VendorInvite:
        invite.updated_at = utc_now()
        return await self._save(invite)

    async def delete(self, invite_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(invite_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[VendorInvite]:
        stmt = select(VendorInvite).order_by(VendorInvite.created_at.desc(), VendorInvite.invite_id.desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, VendorInvite, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_token(self, token: str) -> Optional[VendorInvite]:
        stmt = select(VendorInvite).where(VendorInvite.invite_token == token)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_pending_by_email(self, email: str) -> Optional[VendorInvite]:
        stmt = (
            select(VendorInvite)
            .where(func.lower(VendorInvite.email) == email.strip().lower())
            .where(VendorInvite.status == InviteStatus.pending.value)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()


class VendorApplicationRepository(BaseRepository[VendorApplication]):
    """Repository for vendor applications."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, VendorApplication)

    async def create(self, application: VendorApplication) -> VendorApplication:
        return await self._save(application)

    async def get_by_id(self, application_id: int) -> Optional[VendorApplication]:
        stmt = select(VendorApplication).where(VendorApplication.application_id == application_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, application: VendorApplication) -> VendorApplication:
        return await self._save(application)

    async def delete(self, application_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(application_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[VendorApplication]:
        stmt = select(VendorApplication).order_by(
            VendorApplication.submitted_at.desc(), VendorApplication.application_id.desc()
        )
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, VendorApplication, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_invite(self, invite_id: int) -> Optional[VendorApplication]:
        stmt = select(VendorApplication).where(VendorApplication.invite_id == invite_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
