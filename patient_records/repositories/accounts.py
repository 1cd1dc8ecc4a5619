"""Repository for user account persistence and lookups."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import or_, select

from patient_records.models.user import User
from patient_records.repositories.base import SqlRepository


class AccountRepository(SqlRepository):
    async def list_all(self) -> List[User]:
        async with self._reading():
            result = await self.session.execute(select(User).order_by(User.created_at))
            return list(result.scalars().all())

    async def get(self, user_id: str) -> Optional[User]:
        async with self._reading():
            result = await self.session.execute(select(User).where(User.user_id == user_id))
            return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        async with self._reading():
            result = await self.session.execute(select(User).where(User.username == username))
            return result.scalar_one_or_none()

    async def find_by_username_or_email(self, username: str, email: str) -> Optional[User]:
        async with self._reading():
            stmt = (
                select(User)
                .where(or_(User.username == username, User.email == email))
                .limit(1)
            )
            result = await self.session.execute(stmt)
            return result.scalars().first()

    async def add(self, user: User) -> User:
        async with self._writing():
            self.session.add(user)
        return user

    async def save(self, user: User) -> User:
        async with self._writing():
            self.session.add(user)
        return user

    async def delete(self, user: User) -> None:
        async with self._writing():
            await self.session.delete(user)
