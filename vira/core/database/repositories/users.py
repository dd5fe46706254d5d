"""
User profile and vendor-user link repositories.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.users import UserProfile, UserRole, VendorUser
from ..utils import utc_now
from .base import BaseRepository, QueryBuilder


class UserProfileRepository(BaseRepository[UserProfile]):
    """Repository for user profiles."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, UserProfile)

    async def create(self, profile: UserProfile) -> UserProfile:
        return await self._save(profile)

    async def get_by_id(self, profile_id: int) -> Optional[UserProfile]:
        stmt = select(UserProfile).where(UserProfile.id == profile_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, profile: UserProfile) -> UserProfile:
        profile.updated_at = utc_now()
        return await self._save(profile)

    async def delete(self, profile_id: int) -> bool:
        return await self._delete_entity(await self.get_by_id(profile_id))

    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[UserProfile]:
        stmt = select(UserProfile).order_by(UserProfile.created_at.desc(), UserProfile.id.desc())
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, UserProfile, filters)
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_auth_user_id(self, auth_user_id: str) -> Optional[UserProfile]:
        stmt = select(UserProfile).where(UserProfile.auth_user_id == auth_user_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[UserProfile]:
        stmt = select(UserProfile).where(func.lower(UserProfile.email) == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def count_active_admins(self) -> int:
        stmt = (
            select(func.count())
            .select_from(UserProfile)
            .where(UserProfile.role == UserRole.admin.value)
            .where(UserProfile.is_active.is_(True))
        )
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def touch_last_login(self, profile: UserProfile) -> UserProfile:
        profile.last_login = utc_now()
        return await self._save(profile)


class VendorUserRepository:
    """Repository for the vendor/user link table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create(self, link: VendorUser) -> VendorUser:
        self.session.add(link)
        await self.session.commit()
        await self.session.refresh(link)
        return link

    async def get_active_link(self, user_id: int) -> Optional[VendorUser]:
        """The active vendor link of a vendor-role user, if any."""
        stmt = (
            select(VendorUser)
            .where(VendorUser.user_id == user_id)
            .where(VendorUser.status == "active")
            .order_by(VendorUser.id)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def delete_for_user(self, user_id: int) -> int:
        """Remove every vendor link of a user; returns how many were removed."""
        result = await self.session.execute(select(VendorUser).where(VendorUser.user_id == user_id))
        links = list(result.scalars().all())
        for link in links:
            await self.session.delete(link)
        await self.session.commit()
        return len(links)

    async def list_by_vendor(self, vendor_id: int) -> List[VendorUser]:
        stmt = select(VendorUser).where(VendorUser.vendor_id == vendor_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
