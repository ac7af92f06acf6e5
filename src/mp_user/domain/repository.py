from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_user.domain.models import UserStanding


class UserStandingProtocol(Protocol):
    async def get_standing(
        self, db: AsyncSession, user_id: str, lock: bool = False
    ) -> UserStanding | None: ...
