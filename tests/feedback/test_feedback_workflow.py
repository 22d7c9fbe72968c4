from __future__ import annotations

import threading
from datetime import timedelta

import pytest

from lablogbook.core.enums import Condition, ReportStatus
from lablogbook.core.exceptions import ConflictError, NotFoundError, ValidationError

GOOD = {"equipment": "Good", "monitor": "Good", "keyboard": "Good", "mouse": "Good"}


def test_submit_then_forward(container, fixed_now):
    workflow = container.feedback_workflow
    report_id = workflow.submit(
        7,
        "PC-03",
        {**GOOD, "monitor": "Minor Issue"},
        "flickers",
        now=fixed_now,
    )

    report = workflow.get_report(report_id)
    assert report.is_pending
    assert report.conditions.monitor == Condition.MINOR_ISSUE
    assert report.conditions.has_issue
    assert report.forwarded_by is None

    workflow.forward(report_id, 3, "check cable", now=fixed_now + timedelta(minutes=10))
    report = workflow.get_report(report_id)
    assert report.status == ReportStatus.FORWARDED
    assert report.forwarded_by == 3
    assert report.forwarded_at == fixed_now + timedelta(minutes=10)
    assert report.forward_notes == "check cable"

    with pytest.raises(ConflictError):
        workflow.forward(report_id, 4)


def test_invalid_conditions_are_named(container):
    with pytest.raises(ValidationError) as exc:
        container.feedback_workflow.submit(7, "PC-03", {**GOOD, "keyboard": "Broken", "mouse": None})
    assert exc.value.fields == ("keyboard", "mouse")


def test_submit_requires_workstation(container):
    with pytest.raises(ValidationError):
        container.feedback_workflow.submit(7, "  ", GOOD)


def test_forward_unknown_report(container):
    with pytest.raises(NotFoundError):
        container.feedback_workflow.forward(12345, 3)


def test_concurrent_forwards_exactly_one_wins(container, reports_repo, fixed_now):
    workflow = container.feedback_workflow
    report_id = workflow.submit(7, "PC-03", GOOD, now=fixed_now)
    barrier = threading.Barrier(2)
    outcomes: list[object] = []

    def forward(actor_id: int) -> None:
        barrier.wait()
        try:
            workflow.forward(report_id, actor_id)
            outcomes.append(actor_id)
        except ConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=forward, args=(actor,)) for actor in (3, 4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("conflict") == 1
    winner = next(o for o in outcomes if o != "conflict")
    assert reports_repo.get_by_id(report_id).forwarded_by == winner


def test_pending_is_oldest_first(container, fixed_now):
    workflow = container.feedback_workflow
    late = workflow.submit(7, "PC-02", GOOD, now=fixed_now + timedelta(hours=1))
    early = workflow.submit(8, "PC-01", GOOD, now=fixed_now)
    done = workflow.submit(9, "PC-04", GOOD, now=fixed_now - timedelta(hours=1))
    workflow.forward(done, 3)

    assert [r.report_id for r in workflow.list_pending()] == [early, late]
    assert [r.report_id for r in workflow.list_reports()] == [late, early, done]
    assert [r.report_id for r in workflow.list_reports(status=ReportStatus.FORWARDED)] == [done]


def test_pending_returns_whole_queue(container, fixed_now):
    workflow = container.feedback_workflow
    ids = [workflow.submit(7, f"PC-{i:03d}", GOOD, now=fixed_now + timedelta(seconds=i)) for i in range(501)]

    pending = workflow.list_pending()
    assert len(pending) == 501
    assert [r.report_id for r in pending] == ids
    assert [r.report_id for r in workflow.list_pending(limit=2)] == ids[:2]


@pytest.mark.parametrize("limit", [0, -1])
def test_non_positive_limit_is_rejected(container, fixed_now, limit):
    workflow = container.feedback_workflow
    workflow.submit(7, "PC-01", GOOD, now=fixed_now)

    with pytest.raises(ValidationError):
        workflow.list_pending(limit=limit)
    with pytest.raises(ValidationError):
        workflow.list_reports(limit=limit)
