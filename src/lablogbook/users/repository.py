from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import NewUser, User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def create_user(self, new_user: NewUser) -> int:
        raise NotImplementedError

    def update_profile(self, user_id: int, fields: Mapping[str, Optional[str]]) -> bool:
        """Overwrite the given profile columns. False if the user does not exist."""

        raise NotImplementedError

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_users(self, *, role: Optional[Role] = None, search: Optional[str] = None) -> Sequence[User]:
        """Newest first."""

        raise NotImplementedError

    def list_students(self) -> Sequence[User]:
        """Students and working students, ordered by last name then first name."""

        raise NotImplementedError

    def count_by_role(self) -> Mapping[Role, int]:
        raise NotImplementedError
