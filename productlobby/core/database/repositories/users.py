"""
User and brand repositories.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.users import Brand, User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for user data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(User.email == email.lower())
        result = await self.session.execute(stmt)
        return result.scalars().first()

    async def get_by_handle(self, handle: str) -> Optional[User]:
        stmt = select(User).where(User.handle == handle)
        result = await self.session.execute(stmt)
        return result.scalars().first()


class BrandRepository(BaseRepository[Brand]):
    """Repository for brand data access operations using SQLModel."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Brand)

    async def get_by_slug(self, slug: str) -> Optional[Brand]:
        stmt = select(Brand).where(Brand.slug == slug)
        result = await self.session.execute(stmt)
        return result.scalars().first()
