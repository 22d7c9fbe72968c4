from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence, Set

from .model import ClassEnrollment


class EnrollmentRepository(Protocol):
    def add(self, *, class_id: int, student_id: int, enrolled_by: Optional[int], enrolled_at: datetime) -> bool:
        """Idempotent insert. True if a row was created, False if the pair already existed."""

        raise NotImplementedError

    def remove(self, *, class_id: int, student_id: int) -> bool:
        raise NotImplementedError

    def list_for_class(self, class_id: int) -> Sequence[ClassEnrollment]:
        raise NotImplementedError

    def student_ids_for_class(self, class_id: int) -> Set[int]:
        raise NotImplementedError
