from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Mapping, Optional, Sequence, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import NewUser, User
from .provisioning import EDITABLE_FIELDS, PROFILE_FIELDS, UserProvisioningPolicy
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: manage accounts (admin and working-student screens)."""

    def __init__(self, users: UserRepository, *, policy: Optional[UserProvisioningPolicy] = None):
        self._users = users
        self._policy = policy or UserProvisioningPolicy()

    def create_account(self, *, role: Union[Role, str], fields: Mapping[str, object]) -> int:
        result = self._policy.validate(role, fields)

        if self._users.get_by_username(result.login_name):
            raise ConflictError(f"Login name already exists: {result.login_name}")

        password_hash = generate_password_hash(self._policy.default_password(result.role, fields))
        user_id = self._users.create_user(
            NewUser(username=result.login_name, password_hash=password_hash, role=result.role, **result.fields)
        )
        logger.info("Created %s account %s (user_id=%s)", result.role.value, result.login_name, user_id)
        return user_id

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(f"User {user_id} does not exist")
        return user

    def list_users(self, *, role: Optional[Role] = None, search: Optional[str] = None) -> Sequence[User]:
        return self._users.list_users(role=role, search=(search or "").strip() or None)

    def update_user(self, user_id: int, fields: Mapping[str, object]) -> User:
        """Change profile fields; the role's required fields must stay filled."""
        user = self.get_user(user_id)

        locked = sorted(set(fields) - set(EDITABLE_FIELDS))
        if locked:
            raise ValidationError(f"Field(s) cannot be changed: {', '.join(locked)}", fields=locked)

        changes = {name: optional_text(None if value is None else str(value)) for name, value in fields.items()}
        merged = {name: getattr(user, name) for name in PROFILE_FIELDS}
        merged.update(changes)
        self._policy.validate(user.role, merged)

        if not self._users.update_profile(user.user_id, changes):
            raise NotFoundError(f"User {user_id} does not exist")
        logger.info("Updated profile of user_id=%s (%s)", user.user_id, ", ".join(sorted(changes)) or "no fields")
        return User(**{**asdict(user), **changes})

    def change_password(self, user_id: int, *, current_password: str, new_password: str) -> None:
        user = self.get_user(user_id)
        if not check_password_hash(user.password_hash, current_password or ""):
            raise ValidationError("Current password is incorrect", fields=("current_password",))
        if not (new_password or "").strip():
            raise ValidationError("New password is required", fields=("new_password",))
        if new_password == current_password:
            raise ValidationError("New password must differ from the current one", fields=("new_password",))

        if not self._users.update_password_hash(user.user_id, generate_password_hash(new_password)):
            raise NotFoundError(f"User {user_id} does not exist")
        logger.info("Password changed for user_id=%s", user.user_id)

    def delete_user(self, user_id: int) -> None:
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError(f"User {user_id} does not exist")
        logger.info("Deleted user_id=%s", user_id)
