from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .class_model import LabClass


class ClassRepository(Protocol):
    def get_by_id(self, class_id: int) -> Optional[LabClass]:
        raise NotImplementedError

    def create_class(
        self,
        *,
        code: str,
        subject_name: str,
        instructor_id: Optional[int],
        room: Optional[str],
        section: Optional[str],
        year_level: Optional[str],
        schedule: Optional[str],
    ) -> int:
        """Raises ConflictError if the code is taken."""

        raise NotImplementedError

    def list_classes(self, *, instructor_id: Optional[int] = None) -> Sequence[LabClass]:
        raise NotImplementedError
