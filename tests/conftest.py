from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from portfolio_api.core.dependencies import get_sheet_source
from portfolio_api.core.security import create_access_token
from portfolio_api.main import app
from portfolio_api.services.sheet import Sheet
from portfolio_api.services.sheet_source import SheetSource

ADMISSION_NO = "10234"


class StaticSheetSource(SheetSource):
    """In-memory source returning a fixed snapshot."""

    def __init__(self, sheets: dict[str, Sheet]):
        super().__init__()
        self.sheets = sheets
        self.fetches = 0

    async def fetch(self) -> dict[str, Sheet]:
        self.fetches += 1
        return self.sheets


def make_sheet(name: str, values: list[list[object]]) -> Sheet:
    return Sheet.from_values(name, values)


def portfolio_values() -> dict[str, list[list[object]]]:
    """Raw values of a small school workbook in the wide layout."""
    return {
        "Students": [
            ["admission_no", "name", "class", "roll_no", "dob", "contact", "photo_url"],
            ["10233", "Asha Rao", "7-B", "11", "02-03-2012", "9800000001", ""],
            [ADMISSION_NO, "Ravi Kumar", "7-B", "12", "14-06-2012", "9800000002", ""],
        ],
        "Subjects": [
            ["admission_no", "math_progress", "math_grade", "science_progress", "science_grade",
             "social_science_progress", "social_science_grade"],
            [ADMISSION_NO, "82.5", "A", "74", "B+", "", "C"],
        ],
        "Activities": [
            ["admission_no", "math_activity1", "math_activity1_date", "math_activity1_description",
             "math_activity1_status", "science_activity1", "science_activity1_status"],
            [ADMISSION_NO, "Quiz Bowl", "05-07-2024", "Inter-class quiz", "Complete", "Lab Model", ""],
        ],
        "Assignments": [
            ["admission_no", "math_assignment1", "math_assignment1_assigned_date", "math_assignment1_due_date",
             "math_assignment1_status", "math_assignment1_remarks", "science_assignment1",
             "science_assignment1_status", "english_assignment1", "english_assignment1_status"],
            [ADMISSION_NO, "Fractions Sheet", "01-07-2024", "08-07-2024", "complete", "Neat work",
             "Plant Cells", "pending", "Essay", "late"],
        ],
        "Tests": [
            ["admission_no", "math_test1", "math_test1_date", "math_test1_max_marks",
             "math_test1_marks_obtained", "math_test1_grade", "science_test1", "science_test1_date",
             "science_test1_max_marks", "science_test1_marks_obtained", "science_test1_percentage",
             "math_test2", "math_test2_date", "math_test2_max_marks", "math_test2_marks_obtained"],
            [ADMISSION_NO, "Unit Test", "12-07-2024", "50", "45", "A", "Weekly Test", "03-08-2024",
             "20", "15", "75", "Surprise Quiz", "01-06-2024", "10", "7"],
        ],
        "Corrections": [
            ["admission_no", "english_correction1", "english_correction1_date",
             "english_correction1_improvements", "english_correction1_remarks"],
            [ADMISSION_NO, "Class Work", "10-07-2024", "Handwriting", "Better than last month"],
        ],
        "Attendance": [
            ["admission_no", "april_working", "april_present", "april_absent",
             "may_working", "may_present", "june_working", "june_present"],
            [ADMISSION_NO, "20", "18", "2", "0", "0", "25", "20"],
        ],
    }


@pytest.fixture
def sheets() -> dict[str, Sheet]:
    return {name: make_sheet(name, values) for name, values in portfolio_values().items()}


@pytest.fixture
def sheet_source(sheets: dict[str, Sheet]) -> StaticSheetSource:
    return StaticSheetSource(sheets)


@pytest.fixture
def client(sheet_source: StaticSheetSource) -> Iterator[TestClient]:
    app.dependency_overrides[get_sheet_source] = lambda: sheet_source
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(ADMISSION_NO)}"}
