"""User Standing Guard — rejects frozen accounts from taking part in purchases."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.mp_common.enums import ActorRole
from src.mp_common.errors import (
    AccountFrozenError,
    BuyerFrozenError,
    SellerFrozenError,
    UserNotFoundError,
)
from src.mp_user.domain.models import UserStanding
from src.mp_user.domain.repository import UserStandingProtocol
from src.mp_user.infrastructure.persistence import UserRepository

_module_logger = logging.getLogger(__name__)


def frozen_error_for(role: ActorRole, user_id: str) -> AccountFrozenError:
    if role == ActorRole.SELLER:
        return SellerFrozenError(user_id)
    return BuyerFrozenError(user_id)


class UserStandingGuard:
    def __init__(
        self,
        repo: UserStandingProtocol | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._repo: UserStandingProtocol = repo or UserRepository()
        self._logger = logger or _module_logger

    async def assert_not_frozen(
        self,
        db: AsyncSession,
        user_id: str,
        role: ActorRole = ActorRole.BUYER,
        lock: bool = False,
    ) -> UserStanding:
        """Raise BuyerFrozenError / SellerFrozenError (by `role`) if suspended.

        Pass `lock=True` inside a unit of work to hold the standing stable
        until the scope ends.
        """
        standing = await self._repo.get_standing(db, user_id, lock=lock)
        if standing is None:
            raise UserNotFoundError(user_id)
        if standing.is_frozen:
            self._logger.warning("Frozen %s rejected: user=%s", role.value.lower(), user_id)
            raise frozen_error_for(role, user_id)
        return standing
