"""Student portfolio schemas."""

from pydantic import Field

from portfolio_api.schemas.common import BaseSchema, RecordSchema


class StudentInfo(RecordSchema):
    """Basic student details from the Students sheet."""

    name: str = ""
    class_name: str = Field("", alias="class")
    admission_no: str
    roll_no: str = ""
    dob: str = ""
    contact: str = ""
    photo_url: str = ""


class SubjectProgress(RecordSchema):
    """Progress and grade for one subject."""

    subject: str
    progress: float = 0.0
    grade: str = ""


class Activity(RecordSchema):
    """Subject activity."""

    subject: str
    activity: str
    date: str = ""
    description: str = ""
    status: str = "pending"


class Assignment(RecordSchema):
    """Subject assignment."""

    subject: str
    name: str
    assigned_date: str = ""
    due_date: str = ""
    status: str = "pending"
    remarks: str = ""


class TestRecord(RecordSchema):
    """Scored test for one subject."""

    subject: str
    name: str
    date: str = ""
    max_marks: int = 0
    marks_obtained: int = 0
    percentage: float = 0.0
    grade: str = ""


class Correction(RecordSchema):
    """Copy correction feedback."""

    subject: str
    copy_type: str
    date: str = ""
    improvements: str = ""
    remarks: str = ""


class AttendanceMonth(RecordSchema):
    """Attendance totals for one month."""

    month: str
    working_days: int
    present: int = 0
    absent: int = 0
    percentage: float = 0.0


class TestSummary(RecordSchema):
    """Display shape of a test in the recent tests list."""

    subject: str
    name: str
    date: str
    marks: str
    percentage: float
    grade: str


class PortfolioSummary(RecordSchema):
    """Aggregated counters shown on the portfolio overview."""

    total_subjects: int = 0
    completed_assignments: int = 0
    pending_assignments: int = 0
    overall_attendance_percentage: str = Field(
        default="0.0%",
        description="Mean monthly attendance, one decimal with a % suffix",
    )


class StudentPortfolio(BaseSchema):
    """Complete portfolio document for one student."""

    student_info: StudentInfo
    subject_progress: list[SubjectProgress] = []
    recent_tests: list[TestSummary] = []
    subject_activities: list[Activity] = []
    assignments: list[Assignment] = []
    tests: list[TestRecord] = []
    corrections: list[Correction] = []
    attendance: list[AttendanceMonth] = []
    summary: PortfolioSummary
