"""Which participants may drive an order's post-purchase steps.

Each step names the roles allowed to trigger it; the caller's id is matched
against the order's buyer and seller, and ADMIN is granted only through the
token's role claim.
"""
from collections.abc import Collection

from src.mp_common.enums import ActorRole
from src.mp_common.errors import ForbiddenError
from src.mp_risk.rules.self_purchase import same_user


def actor_roles(
    actor_id: str, buyer_id: str, seller_id: str, is_admin: bool = False
) -> frozenset[ActorRole]:
    roles: set[ActorRole] = set()
    if same_user(actor_id, buyer_id):
        roles.add(ActorRole.BUYER)
    if same_user(actor_id, seller_id):
        roles.add(ActorRole.SELLER)
    if is_admin:
        roles.add(ActorRole.ADMIN)
    return frozenset(roles)


def check_order_actor(
    action: str,
    actor_id: str,
    buyer_id: str,
    seller_id: str,
    allowed: Collection[ActorRole],
    is_admin: bool = False,
) -> frozenset[ActorRole]:
    """Return the caller's roles on the order, or raise ForbiddenError."""
    roles = actor_roles(actor_id, buyer_id, seller_id, is_admin)
    if roles.isdisjoint(allowed):
        names = " or ".join(r.value.lower() for r in allowed)
        raise ForbiddenError(f"Only the order's {names} can {action}")
    return roles
