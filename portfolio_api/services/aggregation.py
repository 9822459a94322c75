"""Summary statistics and recent-test selection over decoded records."""

from datetime import date, datetime

from portfolio_api.schemas.student import (
    Assignment,
    AttendanceMonth,
    PortfolioSummary,
    SubjectProgress,
    TestRecord,
    TestSummary,
)
from portfolio_api.services.sheet import SHEET_DATE_FORMAT

COMPLETE_STATUS = "complete"
PENDING_STATUS = "pending"


def parse_sheet_date(value: str) -> date | None:
    """Parse a ``dd-mm-yyyy`` sheet date. Any other shape is None."""
    try:
        return datetime.strptime(value.strip(), SHEET_DATE_FORMAT).date()
    except ValueError:
        return None


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


def summarize(
    assignments: list[Assignment],
    attendance_months: list[AttendanceMonth],
    subject_progress: list[SubjectProgress],
) -> PortfolioSummary:
    """Count assignments by status and average the monthly attendance.

    Statuses other than "complete" and "pending" are counted in neither bucket.
    """
    completed = sum(1 for a in assignments if a.status == COMPLETE_STATUS)
    pending = sum(1 for a in assignments if a.status == PENDING_STATUS)

    if attendance_months:
        overall = sum(m.percentage for m in attendance_months) / len(attendance_months)
    else:
        overall = 0.0

    return PortfolioSummary(
        total_subjects=len(subject_progress),
        completed_assignments=completed,
        pending_assignments=pending,
        overall_attendance_percentage=format_percentage(overall),
    )


def select_recent(tests: list[TestRecord], n: int = 5) -> list[TestSummary]:
    """Latest `n` tests by date, newest first.

    Ties keep decode order; tests without a readable date sort last.
    """
    def sort_key(test: TestRecord) -> date:
        return parse_sheet_date(test.date) or date.min

    ordered = sorted(tests, key=sort_key, reverse=True)
    return [
        TestSummary(
            subject=test.subject,
            name=test.name,
            date=test.date,
            marks=f"{test.marks_obtained}/{test.max_marks}",
            percentage=test.percentage,
            grade=test.grade,
        )
        for test in ordered[:n]
    ]
