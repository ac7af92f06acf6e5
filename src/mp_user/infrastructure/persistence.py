"""UserRepository — account standing lookups.

With `lock=True` the user row is read FOR SHARE: a concurrent freeze (an
UPDATE of the same row) waits until the caller's unit of work ends, while
other purchases by the same user proceed.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.db_errors import translate_db_errors
from src.mp_user.domain.models import UserStanding

_GET_STANDING_SQL = text("SELECT id, is_frozen FROM users WHERE id = :user_id")

_GET_STANDING_FOR_SHARE_SQL = text(
    "SELECT id, is_frozen FROM users WHERE id = :user_id FOR SHARE"
)


class UserRepository:
    async def get_standing(
        self, db: AsyncSession, user_id: str, lock: bool = False
    ) -> UserStanding | None:
        sql = _GET_STANDING_FOR_SHARE_SQL if lock else _GET_STANDING_SQL
        with translate_db_errors():
            result = await db.execute(sql, {"user_id": user_id})
            row = result.fetchone()
        if row is None:
            return None
        return UserStanding(user_id=str(row.id), is_frozen=bool(row.is_frozen))
