"""Role-specific account rules: required fields and the initial credential.

Each role maps to the fields it requires and to the field that identifies the
account (and doubles as its login name). The tables below must cover every
`Role`; a role added to the enum without an entry here fails at import time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional, Union

from ..common.validators import missing_fields
from ..core.enums import Role
from ..core.exceptions import ValidationError

PROFILE_FIELDS = (
    "first_name",
    "middle_name",
    "last_name",
    "gender",
    "email",
    "employee_id",
    "student_id",
    "year_level",
    "section",
)

REQUIRED_FIELDS: Mapping[Role, tuple[str, ...]] = {
    Role.ADMIN: ("employee_id",),
    Role.TEACHER: ("employee_id",),
    Role.WORKING_STUDENT: ("student_id", "year_level", "section", "gender"),
    # Self-registration: student code plus full name (first and last name parts).
    Role.STUDENT: ("student_id", "first_name", "last_name"),
}

# Fields an existing account may change. Identifiers and role are fixed once
# the account exists because the identifier is the login name.
EDITABLE_FIELDS = ("first_name", "middle_name", "last_name", "gender", "email", "year_level", "section")

IDENTIFIER_FIELD: Mapping[Role, str] = {
    Role.ADMIN: "employee_id",
    Role.TEACHER: "employee_id",
    Role.WORKING_STUDENT: "student_id",
    Role.STUDENT: "student_id",
}

for _table in (REQUIRED_FIELDS, IDENTIFIER_FIELD):
    _uncovered = set(Role) - set(_table)
    if _uncovered:
        raise RuntimeError(f"Provisioning rules missing for roles: {sorted(r.value for r in _uncovered)}")


@dataclass(frozen=True)
class ValidationResult:
    role: Role
    login_name: str
    fields: Mapping[str, Optional[str]]


class UserProvisioningPolicy:
    """Pure decision logic for new accounts. No storage."""

    @staticmethod
    def _coerce_role(role: Union[Role, str]) -> Role:
        if isinstance(role, Role):
            return role
        try:
            return Role(str(role).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown role: {role!r}", fields=("role",))

    def validate(self, role: Union[Role, str], fields: Mapping[str, object]) -> ValidationResult:
        """Check role-specific required fields.

        Raises ValidationError naming every missing field at once.
        """
        role = self._coerce_role(role)
        missing = missing_fields(fields, REQUIRED_FIELDS[role])
        if missing:
            raise ValidationError(
                f"Missing required field(s) for {role.value}: {', '.join(missing)}",
                fields=missing,
            )

        cleaned = {}
        for name in PROFILE_FIELDS:
            value = fields.get(name)
            cleaned[name] = (str(value).strip() or None) if value is not None else None

        return ValidationResult(role=role, login_name=cleaned[IDENTIFIER_FIELD[role]], fields=cleaned)

    def default_password(self, role: Union[Role, str], fields: Mapping[str, object]) -> str:
        """Initial credential equals the role-specific identifier.

        Callers are expected to prompt for a password change; this is not enforced here.
        """
        return self.validate(role, fields).login_name
