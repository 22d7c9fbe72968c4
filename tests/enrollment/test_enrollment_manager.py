from __future__ import annotations

from datetime import timedelta

import pytest

from lablogbook.core.enums import Role
from lablogbook.core.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
def lab(container, users_repo):
    teacher = users_repo.add(Role.TEACHER, "EMP-1001", user_id=100, first_name="Maria", last_name="Santos")
    class_id = container.class_service.create_class(code="IT101-A", subject_name="Intro to Computing", instructor_id=teacher.user_id)
    return teacher, class_id


def _students(users_repo):
    users_repo.add(Role.STUDENT, "2024-0001", user_id=1, first_name="Ben", last_name="Lim")
    users_repo.add(Role.WORKING_STUDENT, "WS-0002", user_id=2, first_name="Ana", last_name="Cruz")


def test_enroll_is_idempotent(container, users_repo, enrollments_repo, lab, fixed_now):
    teacher, class_id = lab
    _students(users_repo)

    assert container.enrollment_manager.enroll(1, class_id, teacher.user_id, now=fixed_now) is True
    assert container.enrollment_manager.enroll(1, class_id, teacher.user_id, now=fixed_now) is False
    assert list(enrollments_repo.rows) == [(class_id, 1)]


def test_enroll_many_reports_partial_failures(container, users_repo, lab, fixed_now):
    teacher, class_id = lab
    _students(users_repo)

    result = container.enrollment_manager.enroll_many([1, 2, 999, 1], class_id, teacher.user_id, now=fixed_now)

    assert result.succeeded == [1, 2]
    assert list(result.failed) == [999]
    assert isinstance(result.failed[999], NotFoundError)
    assert not result.ok
    assert result.to_dict()["failed"]["999"]["error"] == "NotFound"


def test_enroll_many_rejects_non_students_per_item(container, users_repo, lab):
    teacher, class_id = lab
    _students(users_repo)

    result = container.enrollment_manager.enroll_many([teacher.user_id, 1], class_id, teacher.user_id)
    assert result.succeeded == [1]
    assert isinstance(result.failed[teacher.user_id], ValidationError)


def test_enroll_many_unknown_class_fails_whole_batch(container, users_repo):
    _students(users_repo)
    with pytest.raises(NotFoundError):
        container.enrollment_manager.enroll_many([1, 2], 77, None)


def test_unenroll_requires_existing_pair(container, users_repo, lab):
    teacher, class_id = lab
    _students(users_repo)
    container.enrollment_manager.enroll(2, class_id, teacher.user_id)

    container.enrollment_manager.unenroll(2, class_id)
    with pytest.raises(NotFoundError):
        container.enrollment_manager.unenroll(2, class_id)


def test_available_students_sorted_with_flags(container, users_repo, lab):
    teacher, class_id = lab
    _students(users_repo)
    container.enrollment_manager.enroll(1, class_id, teacher.user_id)

    available = container.enrollment_manager.list_available_for_enrollment(class_id)
    assert [(a.student.username, a.is_enrolled) for a in available] == [("WS-0002", False), ("2024-0001", True)]
    assert [u.username for u in container.class_service.list_roster(class_id)] == ["2024-0001"]


def test_create_class_validation_and_duplicates(container, lab):
    with pytest.raises(ValidationError):
        container.class_service.create_class(code=" ", subject_name="Networks")
    with pytest.raises(NotFoundError):
        container.class_service.create_class(code="IT102", subject_name="Networks", instructor_id=404)
    with pytest.raises(ConflictError):
        container.class_service.create_class(code="IT101-A", subject_name="Again")


def test_enroll_many_records_malformed_ids_per_item(container, users_repo, lab):
    teacher, class_id = lab
    _students(users_repo)

    result = container.enrollment_manager.enroll_many([1, 0, "abc", -3, "2"], class_id, teacher.user_id)

    assert result.succeeded == [1, 2]
    assert set(result.failed) == {0, "abc", -3}
    assert all(isinstance(e, ValidationError) for e in result.failed.values())
    assert result.to_dict()["failed"]["abc"]["error"] == "Validation"


def test_list_enrollments_shows_who_and_when(container, users_repo, lab, fixed_now):
    teacher, class_id = lab
    _students(users_repo)
    container.enrollment_manager.enroll(2, class_id, teacher.user_id, now=fixed_now)
    container.enrollment_manager.enroll(1, class_id, None, now=fixed_now + timedelta(minutes=5))

    rows = container.class_service.list_enrollments(class_id)
    assert [(e.student_id, e.enrolled_by) for e in rows] == [(2, teacher.user_id), (1, None)]
    assert rows[0].to_dict()["enrolled_at"] == "2026-02-02T09:00:00"

    with pytest.raises(NotFoundError):
        container.class_service.list_enrollments(77)
