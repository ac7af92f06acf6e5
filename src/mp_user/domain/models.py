from dataclasses import dataclass


@dataclass(frozen=True)
class UserStanding:
    user_id: str
    is_frozen: bool
