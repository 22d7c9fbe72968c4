from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty, require_positive_id
from ..core.constants import MAX_ENROLL_BATCH
from ..core.exceptions import DomainError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .class_model import LabClass
from .class_repository import ClassRepository
from .model import AvailableStudent, ClassEnrollment, EnrollResult
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


def _by_name(users: Iterable[User]) -> list[User]:
    return sorted(users, key=lambda u: (u.sort_name, u.user_id))


class ClassService:
    """Use case: create and browse lab classes."""

    def __init__(self, classes: ClassRepository, enrollments: EnrollmentRepository, users: UserRepository):
        self._classes = classes
        self._enrollments = enrollments
        self._users = users

    def create_class(
        self,
        *,
        code: str,
        subject_name: str,
        instructor_id: Optional[int] = None,
        room: Optional[str] = None,
        section: Optional[str] = None,
        year_level: Optional[str] = None,
        schedule: Optional[str] = None,
    ) -> int:
        code = require_non_empty(code, "code")
        subject_name = require_non_empty(subject_name, "subject_name")

        if instructor_id is not None and not self._users.get_by_id(int(instructor_id)):
            raise NotFoundError(f"Instructor {instructor_id} does not exist")

        class_id = self._classes.create_class(
            code=code,
            subject_name=subject_name,
            instructor_id=int(instructor_id) if instructor_id is not None else None,
            room=optional_text(room),
            section=optional_text(section),
            year_level=optional_text(year_level),
            schedule=optional_text(schedule),
        )
        logger.info("Created class %s (class_id=%s)", code, class_id)
        return class_id

    def get_class(self, class_id: int) -> LabClass:
        lab_class = self._classes.get_by_id(int(class_id))
        if not lab_class:
            raise NotFoundError(f"Class {class_id} does not exist")
        return lab_class

    def list_classes(self, *, instructor_id: Optional[int] = None) -> Sequence[LabClass]:
        return self._classes.list_classes(instructor_id=instructor_id)

    def list_roster(self, class_id: int) -> list[User]:
        self.get_class(class_id)
        enrolled = self._enrollments.student_ids_for_class(int(class_id))
        return _by_name(u for u in self._users.list_students() if u.user_id in enrolled)

    def list_enrollments(self, class_id: int) -> Sequence[ClassEnrollment]:
        """Roster rows with who enrolled each student and when, oldest first."""
        self.get_class(class_id)
        return self._enrollments.list_for_class(int(class_id))


class EnrollmentManager:
    """Adds and removes students from class rosters.

    Enrolling is idempotent: an already-enrolled pair is left untouched and is
    not an error. Each enrollment is atomic on its own; batches are not
    wrapped in a cross-student transaction.
    """

    def __init__(self, enrollments: EnrollmentRepository, classes: ClassRepository, users: UserRepository):
        self._enrollments = enrollments
        self._classes = classes
        self._users = users

    def _require_class(self, class_id: int) -> LabClass:
        lab_class = self._classes.get_by_id(int(class_id))
        if not lab_class:
            raise NotFoundError(f"Class {class_id} does not exist")
        return lab_class

    def _require_student(self, student_id: int) -> User:
        user = self._users.get_by_id(int(student_id))
        if not user:
            raise NotFoundError(f"Student {student_id} does not exist")
        if not user.is_student:
            raise ValidationError(f"User {student_id} is not a student", fields=("student_id",))
        return user

    def enroll(self, student_id: int, class_id: int, actor_id: Optional[int], *, now: Optional[datetime] = None) -> bool:
        """Returns True if newly enrolled, False if the student was already on the roster."""
        self._require_class(class_id)
        self._require_student(student_id)

        created = self._enrollments.add(
            class_id=int(class_id),
            student_id=int(student_id),
            enrolled_by=int(actor_id) if actor_id is not None else None,
            enrolled_at=now or now_local(),
        )
        if created:
            logger.info("Enrolled student_id=%s in class_id=%s (by %s)", student_id, class_id, actor_id)
        return created

    def enroll_many(
        self,
        student_ids: Iterable[object],
        class_id: int,
        actor_id: Optional[int],
        *,
        now: Optional[datetime] = None,
    ) -> EnrollResult:
        raw_ids = list(student_ids)
        if len(raw_ids) > MAX_ENROLL_BATCH:
            raise ValidationError(f"At most {MAX_ENROLL_BATCH} students per batch", fields=("student_ids",))

        self._require_class(class_id)

        result = EnrollResult()
        seen: set[int] = set()
        for raw in raw_ids:
            try:
                student_id = require_positive_id(raw, "student_id")
            except ValidationError as e:
                logger.warning("Skipping malformed student id %r for class_id=%s", raw, class_id)
                result.failed[raw if isinstance(raw, (int, str)) else str(raw)] = e
                continue
            if student_id in seen:
                continue
            seen.add(student_id)

            try:
                self.enroll(student_id, class_id, actor_id, now=now)
            except DomainError as e:
                # Per-student failures are part of the result, not a batch abort.
                logger.warning("Could not enroll student_id=%s in class_id=%s: %s", student_id, class_id, e)
                result.failed[student_id] = e
            else:
                result.succeeded.append(student_id)
        return result

    def unenroll(self, student_id: int, class_id: int) -> None:
        removed = self._enrollments.remove(class_id=int(class_id), student_id=int(student_id))
        if not removed:
            raise NotFoundError(f"Student {student_id} is not enrolled in class {class_id}")
        logger.info("Unenrolled student_id=%s from class_id=%s", student_id, class_id)

    def list_available_for_enrollment(self, class_id: int) -> list[AvailableStudent]:
        self._require_class(class_id)
        enrolled = self._enrollments.student_ids_for_class(int(class_id))
        return [AvailableStudent(student=u, is_enrolled=u.user_id in enrolled) for u in _by_name(self._users.list_students())]
