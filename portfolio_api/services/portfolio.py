"""Student portfolio assembly service."""

import logging

from portfolio_api.core.exceptions import NotFoundError, UpstreamError
from portfolio_api.schemas.student import StudentInfo, StudentPortfolio
from portfolio_api.services.aggregation import select_recent, summarize
from portfolio_api.services.decoder import (
    ACTIVITIES,
    ASSIGNMENTS,
    ATTENDANCE,
    CORRECTIONS,
    SUBJECT_PROGRESS,
    TESTS,
    CategorySpec,
    decode_sheet,
)
from portfolio_api.services.sheet import Sheet, locate
from portfolio_api.services.sheet_source import SheetSource

logger = logging.getLogger(__name__)

STUDENTS_SHEET = "Students"

# Category sheet -> record layout
CATEGORY_SHEETS: tuple[tuple[str, CategorySpec], ...] = (
    ("Subjects", SUBJECT_PROGRESS),
    ("Activities", ACTIVITIES),
    ("Assignments", ASSIGNMENTS),
    ("Tests", TESTS),
    ("Corrections", CORRECTIONS),
    ("Attendance", ATTENDANCE),
)


class PortfolioService:
    """Builds a student's portfolio document from the source sheets."""

    def __init__(
        self,
        source: SheetSource,
        key_column: str = "admission_no",
        recent_tests_limit: int = 5,
        photo_placeholder_url: str = "",
    ):
        self.source = source
        self.key_column = key_column
        self.recent_tests_limit = recent_tests_limit
        self.photo_placeholder_url = photo_placeholder_url

    async def get_portfolio(self, admission_no: str) -> StudentPortfolio:
        """Fetch a fresh sheet snapshot and build the portfolio for one student."""
        sheets = await self.source.fetch()
        return self.build_portfolio(sheets, admission_no)

    def build_portfolio(self, sheets: dict[str, Sheet], admission_no: str) -> StudentPortfolio:
        students = sheets.get(STUDENTS_SHEET)
        if students is None:
            raise UpstreamError(f"{STUDENTS_SHEET} sheet is missing from the source")

        row = locate(students, self.key_column, admission_no)
        if row is None:
            logger.info(f"[PORTFOLIO] No student with {self.key_column}={admission_no}")
            raise NotFoundError("Student", admission_no)

        records = {
            category.name: self._decode_category(sheets, sheet_name, category, admission_no)
            for sheet_name, category in CATEGORY_SHEETS
        }

        portfolio = StudentPortfolio(
            student_info=self._student_info(students, row),
            subject_progress=records[SUBJECT_PROGRESS.name],
            recent_tests=select_recent(records[TESTS.name], self.recent_tests_limit),
            subject_activities=records[ACTIVITIES.name],
            assignments=records[ASSIGNMENTS.name],
            tests=records[TESTS.name],
            corrections=records[CORRECTIONS.name],
            attendance=records[ATTENDANCE.name],
            summary=summarize(
                records[ASSIGNMENTS.name],
                records[ATTENDANCE.name],
                records[SUBJECT_PROGRESS.name],
            ),
        )
        logger.info(
            f"[PORTFOLIO] Built portfolio for {admission_no}: "
            + ", ".join(f"{name}={len(items)}" for name, items in records.items())
        )
        return portfolio

    def _decode_category(
        self,
        sheets: dict[str, Sheet],
        sheet_name: str,
        category: CategorySpec,
        admission_no: str,
    ) -> list:
        sheet = sheets.get(sheet_name)
        if sheet is None:
            logger.warning(f"[PORTFOLIO] Sheet '{sheet_name}' missing, {category.name} left empty")
            return []
        return decode_sheet(sheet, category, self.key_column, admission_no)

    def _student_info(self, students: Sheet, row: list[str]) -> StudentInfo:
        def value(column: str) -> str:
            return students.index.value(row, column).strip()

        return StudentInfo(
            name=value("name"),
            class_name=value("class"),
            admission_no=value(self.key_column),
            roll_no=value("roll_no"),
            dob=value("dob"),
            contact=value("contact"),
            photo_url=value("photo_url") or self.photo_placeholder_url,
        )
