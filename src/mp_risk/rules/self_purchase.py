"""Self-purchase detection.

A seller may never buy their own listing, regardless of quantity or the
listing's state. UUID comparison is case-insensitive.
"""
from src.mp_common.errors import SelfPurchaseError


def same_user(user_a: str, user_b: str) -> bool:
    return str(user_a).lower() == str(user_b).lower()


def is_self_purchase(buyer_id: str, seller_id: str) -> bool:
    return same_user(buyer_id, seller_id)


def check_not_self_purchase(buyer_id: str, seller_id: str) -> None:
    if is_self_purchase(buyer_id, seller_id):
        raise SelfPurchaseError()
