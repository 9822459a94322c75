from __future__ import annotations

import asyncio

import pytest

from portfolio_api.core.exceptions import NotFoundError, UpstreamError
from portfolio_api.services.portfolio import PortfolioService

PLACEHOLDER = "/api/placeholder/120/120"


@pytest.fixture
def service(sheet_source) -> PortfolioService:
    return PortfolioService(sheet_source, photo_placeholder_url=PLACEHOLDER)


def test_build_portfolio(service, sheets):
    portfolio = service.build_portfolio(sheets, "10234")

    info = portfolio.student_info
    assert (info.name, info.class_name, info.admission_no, info.roll_no) == ("Ravi Kumar", "7-B", "10234", "12")
    assert info.photo_url == PLACEHOLDER

    assert [(p.subject, p.progress, p.grade) for p in portfolio.subject_progress] == [
        ("Math", 82.5, "A"),
        ("Science", 74.0, "B+"),
    ]
    assert [(a.activity, a.status) for a in portfolio.subject_activities] == [
        ("Quiz Bowl", "complete"),
        ("Lab Model", "pending"),
    ]
    assert [t.name for t in portfolio.tests] == ["Unit Test", "Weekly Test", "Surprise Quiz"]
    assert [t.percentage for t in portfolio.tests] == [90.0, 75.0, 70.0]
    assert [c.copy_type for c in portfolio.corrections] == ["Class Work"]
    assert [(m.month, m.percentage) for m in portfolio.attendance] == [("April", 90.0), ("June", 80.0)]

    assert [(t.name, t.marks) for t in portfolio.recent_tests] == [
        ("Weekly Test", "15/20"),
        ("Unit Test", "45/50"),
        ("Surprise Quiz", "7/10"),
    ]

    summary = portfolio.summary
    assert summary.total_subjects == 2
    assert summary.completed_assignments == 1
    assert summary.pending_assignments == 1
    assert summary.overall_attendance_percentage == "85.0%"


def test_unknown_student_is_not_found(service, sheets):
    with pytest.raises(NotFoundError) as exc_info:
        service.build_portfolio(sheets, "99999")
    assert exc_info.value.status_code == 404
    assert exc_info.value.details == {"identifier": "99999"}


def test_other_students_have_no_records(service, sheets):
    portfolio = service.build_portfolio(sheets, "10233")

    assert portfolio.student_info.name == "Asha Rao"
    assert portfolio.tests == []
    assert portfolio.attendance == []
    assert portfolio.summary.overall_attendance_percentage == "0.0%"


def test_missing_category_sheet_leaves_collection_empty(service, sheets):
    del sheets["Corrections"]
    portfolio = service.build_portfolio(sheets, "10234")
    assert portfolio.corrections == []
    assert len(portfolio.tests) == 3


def test_missing_students_sheet_is_an_upstream_error(service, sheets):
    del sheets["Students"]
    with pytest.raises(UpstreamError):
        service.build_portfolio(sheets, "10234")


def test_recent_tests_limit(sheet_source, sheets):
    service = PortfolioService(sheet_source, recent_tests_limit=1)
    portfolio = service.build_portfolio(sheets, "10234")
    assert [t.name for t in portfolio.recent_tests] == ["Weekly Test"]


def test_get_portfolio_fetches_a_fresh_snapshot(service, sheet_source):
    first = asyncio.run(service.get_portfolio("10234"))
    second = asyncio.run(service.get_portfolio("10234"))

    assert sheet_source.fetches == 2
    assert first == second
    assert first is not second


def test_portfolio_document_shape(service, sheets):
    document = service.build_portfolio(sheets, "10234").model_dump(by_alias=True)

    assert list(document) == [
        "studentInfo",
        "subjectProgress",
        "recentTests",
        "subjectActivities",
        "assignments",
        "tests",
        "corrections",
        "attendance",
        "summary",
    ]
    assert document["studentInfo"]["class"] == "7-B"
    assert document["studentInfo"]["photoUrl"] == PLACEHOLDER
    assert document["tests"][0] == {
        "subject": "Math",
        "name": "Unit Test",
        "date": "12-07-2024",
        "maxMarks": 50,
        "marksObtained": 45,
        "percentage": 90.0,
        "grade": "A",
    }
    assert document["assignments"][0]["assignedDate"] == "01-07-2024"
