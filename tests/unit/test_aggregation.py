from __future__ import annotations

from datetime import date

import pytest

from portfolio_api.schemas import student as schemas
from portfolio_api.services.aggregation import parse_sheet_date, select_recent, summarize


def _assignment(status: str) -> schemas.Assignment:
    return schemas.Assignment(subject="Math", name="Worksheet", status=status)


def _month(name: str, percentage: float) -> schemas.AttendanceMonth:
    return schemas.AttendanceMonth(month=name, working_days=20, percentage=percentage)


def _test(name: str, test_date: str, obtained: int = 8, max_marks: int = 10) -> schemas.TestRecord:
    return schemas.TestRecord(
        subject="Math",
        name=name,
        date=test_date,
        max_marks=max_marks,
        marks_obtained=obtained,
        percentage=obtained / max_marks * 100,
        grade="B",
    )


def test_summarize_counts_assignment_statuses():
    assignments = [_assignment(s) for s in ["complete", "pending", "complete", "late", "in review"]]
    progress = [schemas.SubjectProgress(subject="Math"), schemas.SubjectProgress(subject="Science")]

    summary = summarize(assignments, [_month("April", 90), _month("June", 80)], progress)

    assert summary.completed_assignments == 2
    assert summary.pending_assignments == 1
    assert summary.total_subjects == 2
    assert summary.overall_attendance_percentage == "85.0%"


def test_summarize_without_attendance_is_zero_percent():
    summary = summarize([], [], [])
    assert summary.overall_attendance_percentage == "0.0%"
    assert summary.completed_assignments == 0
    assert summary.total_subjects == 0


def test_summarize_renders_one_decimal():
    months = [_month("April", 100), _month("May", 90), _month("June", 90)]
    assert summarize([], months, []).overall_attendance_percentage == "93.3%"


def test_summary_serializes_in_camel_case():
    payload = summarize([], [], []).model_dump(by_alias=True)
    assert payload == {
        "totalSubjects": 0,
        "completedAssignments": 0,
        "pendingAssignments": 0,
        "overallAttendancePercentage": "0.0%",
    }


@pytest.mark.parametrize(
    "text, expected",
    [
        ("02-01-2024", date(2024, 1, 2)),
        (" 31-12-2023 ", date(2023, 12, 31)),
        ("2024-01-02", None),
        ("02/01/2024", None),
        ("31-02-2024", None),
        ("", None),
    ],
)
def test_parse_sheet_date(text, expected):
    assert parse_sheet_date(text) == expected


def test_select_recent_orders_by_calendar_date():
    tests = [
        _test("January", "02-01-2024"),
        _test("February", "01-02-2024"),
        _test("Last year", "31-12-2023"),
        _test("March", "15-03-2024"),
    ]

    recent = select_recent(tests)

    assert [t.name for t in recent] == ["March", "February", "January", "Last year"]


def test_select_recent_keeps_decode_order_for_ties():
    tests = [
        _test("First", "10-07-2024"),
        _test("Older", "01-07-2024"),
        _test("Second", "10-07-2024"),
        _test("Third", "10-07-2024"),
    ]

    recent = select_recent(tests)

    assert [t.name for t in recent] == ["First", "Second", "Third", "Older"]


def test_select_recent_truncates():
    tests = [_test(f"Test {day}", f"{day:02d}-07-2024") for day in range(1, 9)]

    assert [t.name for t in select_recent(tests)] == ["Test 8", "Test 7", "Test 6", "Test 5", "Test 4"]
    assert len(select_recent(tests, n=2)) == 2
    assert select_recent([]) == []


def test_select_recent_puts_undated_tests_last():
    tests = [_test("Undated", ""), _test("Bad format", "2024-07-10"), _test("Dated", "01-01-2020")]
    assert [t.name for t in select_recent(tests)] == ["Dated", "Undated", "Bad format"]


def test_select_recent_projection():
    (summary,) = select_recent([_test("Unit Test", "12-07-2024", obtained=45, max_marks=50)])

    assert summary.model_dump(by_alias=True) == {
        "subject": "Math",
        "name": "Unit Test",
        "date": "12-07-2024",
        "marks": "45/50",
        "percentage": 90.0,
        "grade": "B",
    }
