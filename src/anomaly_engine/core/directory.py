"""
User Directory: the run's single owner of User state.

Users are created on first reference (any event naming their id) and live
for the rest of the run.
"""

from typing import Callable, Dict, List, Optional

from anomaly_engine.core.purchase_window import PurchaseWindow
from anomaly_engine.core.user import User


class UserDirectory:
    """
    id -> User registry.

    Args:
        window_factory: builds the empty PurchaseWindow given to each new user
    """

    def __init__(self, window_factory: Callable[[], PurchaseWindow]):
        self._users: Dict[str, User] = {}
        self._window_factory = window_factory

    def get_or_create(self, user_id: str) -> User:
        user = self._users.get(user_id)
        if user is None:
            user = User(user_id, self._window_factory())
            self._users[user_id] = user
        return user

    def get(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def all_users(self) -> List[User]:
        """Every user, ordered by id (deterministic, for diagnostics)."""
        return [self._users[user_id] for user_id in sorted(self._users)]

    def __getitem__(self, user_id: str) -> User:
        return self._users[user_id]

    def __contains__(self, user_id: str) -> bool:
        return user_id in self._users

    def __len__(self) -> int:
        return len(self._users)
