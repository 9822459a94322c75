"""Wide-schema decoder.

A category sheet holds one row per student and encodes repeated records as
extra columns. A record is a group of columns sharing a stem: the primary
column (``math_test1``) says the record exists, and satellite columns
(``math_test1_date``, ``math_test1_max_marks``) carry its other fields. For
one-record-per-key categories the stem is the key alone: ``april_working``
groups with ``april_present``, ``math_progress`` with ``math_grade``.

Each category is described by a ``CategorySpec`` and decoded by the same
routine. Cell problems never fail a decode: missing columns and unparsable
numbers fall back to typed defaults.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from portfolio_api.schemas.common import RecordSchema
from portfolio_api.schemas.student import (
    Activity,
    Assignment,
    AttendanceMonth,
    Correction,
    SubjectProgress,
    TestRecord,
)
from portfolio_api.services.sheet import HeaderIndex, Sheet, cell_at, filter_rows, locate

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "pending"

# Larger cell values read as unparsable
MAX_NUMBER_EXPONENT = 15


class FieldKind(str, Enum):
    """How a cell is coerced into a record field."""

    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    STATUS = "status"


@dataclass(frozen=True)
class FieldSpec:
    """One field of a record.

    `suffix` is appended to the group stem in the wide layout;
    `column` names the field in the row-per-record layout and defaults to the
    suffix without its leading underscore.
    """

    name: str
    suffix: str = ""
    kind: FieldKind = FieldKind.TEXT
    column: str | None = None

    @property
    def record_column(self) -> str:
        return self.column or self.suffix.lstrip("_")


@dataclass(frozen=True)
class PercentageRule:
    """Fallback for a percentage field: numerator / denominator * 100."""

    field: str
    numerator: str
    denominator: str


@dataclass(frozen=True)
class CategorySpec:
    """Naming convention and field layout of one record category."""

    name: str
    model: type[RecordSchema]
    pattern: re.Pattern[str]
    key_field: str
    record_key_column: str
    primary: FieldSpec
    satellites: tuple[FieldSpec, ...] = ()
    percentage: PercentageRule | None = None
    require_positive_primary: bool = False


def ordinal_pattern(tag: str) -> re.Pattern[str]:
    """Pattern for repeatable records: ``<key>_<tag><N>``."""
    return re.compile(rf"(?P<stem>(?P<key>.+?)_{tag}(?P<ordinal>\d+))", re.IGNORECASE)


def suffix_pattern(suffix: str) -> re.Pattern[str]:
    """Pattern for one record per key: ``<key>_<suffix>``."""
    return re.compile(rf"(?P<stem>(?P<key>.+))_{suffix}", re.IGNORECASE)


# ==========================================
# Cell coercion
# ==========================================

def parse_number(text: str) -> Decimal | None:
    """Parse cell text as a finite decimal, or None."""
    text = text.strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite() or number.adjusted() > MAX_NUMBER_EXPONENT:
        return None
    return number


def coerce(text: str, kind: FieldKind) -> Any:
    """Coerce cell text to a field value, falling back to the kind's default."""
    if kind is FieldKind.TEXT:
        return text.strip()
    if kind is FieldKind.STATUS:
        return text.strip().lower() or DEFAULT_STATUS

    if kind is FieldKind.FLOAT:
        # Formatted sheet values may carry a percent sign
        number = parse_number(text.strip().removesuffix("%"))
        return float(number) if number is not None else 0.0

    number = parse_number(text)
    return int(number) if number is not None else 0


def derive_percentage(rule: PercentageRule, text: str, fields: dict[str, Any]) -> float:
    """Use the percentage cell when it parses, else compute it from the group's own fields."""
    verbatim = parse_number(text.strip().removesuffix("%"))
    if verbatim is not None:
        return float(verbatim)

    denominator = fields[rule.denominator]
    if denominator > 0:
        return round(fields[rule.numerator] / denominator * 100, 10)
    return 0.0


def display_key(raw: str) -> str:
    """Render a group key for display: ``social_science`` -> ``Social Science``."""
    return " ".join(word.capitalize() for word in raw.split("_") if word)


# ==========================================
# Decoding
# ==========================================

def _materialize(
    category: CategorySpec,
    group_key: str,
    primary_text: str,
    read: Callable[[FieldSpec], str],
) -> RecordSchema | None:
    primary_value = coerce(primary_text, category.primary.kind)
    if category.require_positive_primary and not primary_value > 0:
        return None

    fields: dict[str, Any] = {
        category.key_field: group_key,
        category.primary.name: primary_value,
    }
    raw: dict[str, str] = {}
    for spec in category.satellites:
        raw[spec.name] = read(spec)
        fields[spec.name] = coerce(raw[spec.name], spec.kind)

    rule = category.percentage
    if rule is not None:
        fields[rule.field] = derive_percentage(rule, raw.get(rule.field, ""), fields)

    return category.model.model_validate(fields)


def decode(index: HeaderIndex, row: list[str], category: CategorySpec) -> list[RecordSchema]:
    """Decode every record of `category` from one wide row, in header order."""
    entities: list[RecordSchema] = []

    for position, column in enumerate(index.columns):
        name = column.strip()
        match = category.pattern.fullmatch(name)
        if match is None:
            continue

        primary_text = cell_at(row, position).strip()
        if not primary_text:
            logger.debug(f"[DECODE] {category.name}: '{name}' is empty, skipped")
            continue

        entity = _materialize(
            category,
            display_key(match.group("key")),
            primary_text,
            lambda spec: index.value(row, match.group("stem") + spec.suffix),
        )
        if entity is None:
            logger.debug(f"[DECODE] {category.name}: '{name}' dropped ({primary_text!r} is not positive)")
            continue
        entities.append(entity)

    return entities


def decode_records(index: HeaderIndex, rows: list[list[str]], category: CategorySpec) -> list[RecordSchema]:
    """Decode a row-per-record sheet: each row is one record keyed by `record_key_column`."""
    entities: list[RecordSchema] = []

    for row in rows:
        primary_text = index.value(row, category.primary.record_column).strip()
        if not primary_text:
            continue

        entity = _materialize(
            category,
            index.value(row, category.record_key_column).strip(),
            primary_text,
            lambda spec: index.value(row, spec.record_column),
        )
        if entity is not None:
            entities.append(entity)

    return entities


def decode_sheet(
    sheet: Sheet,
    category: CategorySpec,
    key_column: str,
    key_value: str,
) -> list[RecordSchema]:
    """Decode the records of one student from a category sheet of either layout."""
    if category.record_key_column in sheet.index:
        rows = filter_rows(sheet, key_column, key_value)
        entities = decode_records(sheet.index, rows, category)
    else:
        row = locate(sheet, key_column, key_value)
        if row is None:
            logger.debug(f"[DECODE] {category.name}: no row for '{key_value}' in '{sheet.name}'")
            return []
        entities = decode(sheet.index, row, category)

    logger.debug(f"[DECODE] {category.name}: {len(entities)} records from '{sheet.name}'")
    return entities


# ==========================================
# Category table
# ==========================================

SUBJECT_PROGRESS = CategorySpec(
    name="subject_progress",
    model=SubjectProgress,
    pattern=suffix_pattern("progress"),
    key_field="subject",
    record_key_column="subject",
    primary=FieldSpec("progress", kind=FieldKind.FLOAT, column="progress"),
    satellites=(FieldSpec("grade", "_grade"),),
)

ACTIVITIES = CategorySpec(
    name="activities",
    model=Activity,
    pattern=ordinal_pattern("activity"),
    key_field="subject",
    record_key_column="subject",
    primary=FieldSpec("activity", column="activity"),
    satellites=(
        FieldSpec("date", "_date"),
        FieldSpec("description", "_description"),
        FieldSpec("status", "_status", FieldKind.STATUS),
    ),
)

ASSIGNMENTS = CategorySpec(
    name="assignments",
    model=Assignment,
    pattern=ordinal_pattern("assignment"),
    key_field="subject",
    record_key_column="subject",
    primary=FieldSpec("name", column="name"),
    satellites=(
        FieldSpec("assigned_date", "_assigned_date"),
        FieldSpec("due_date", "_due_date"),
        FieldSpec("status", "_status", FieldKind.STATUS),
        FieldSpec("remarks", "_remarks"),
    ),
)

TESTS = CategorySpec(
    name="tests",
    model=TestRecord,
    pattern=ordinal_pattern("test"),
    key_field="subject",
    record_key_column="subject",
    primary=FieldSpec("name", column="name"),
    satellites=(
        FieldSpec("date", "_date"),
        FieldSpec("max_marks", "_max_marks", FieldKind.INTEGER),
        FieldSpec("marks_obtained", "_marks_obtained", FieldKind.INTEGER),
        FieldSpec("percentage", "_percentage", FieldKind.FLOAT),
        FieldSpec("grade", "_grade"),
    ),
    percentage=PercentageRule("percentage", numerator="marks_obtained", denominator="max_marks"),
)

CORRECTIONS = CategorySpec(
    name="corrections",
    model=Correction,
    pattern=ordinal_pattern("correction"),
    key_field="subject",
    record_key_column="subject",
    primary=FieldSpec("copy_type", column="copy_type"),
    satellites=(
        FieldSpec("date", "_date"),
        FieldSpec("improvements", "_improvements"),
        FieldSpec("remarks", "_remarks"),
    ),
)

ATTENDANCE = CategorySpec(
    name="attendance",
    model=AttendanceMonth,
    pattern=suffix_pattern("working"),
    key_field="month",
    record_key_column="month",
    primary=FieldSpec("working_days", kind=FieldKind.INTEGER, column="working_days"),
    satellites=(
        FieldSpec("present", "_present", FieldKind.INTEGER),
        FieldSpec("absent", "_absent", FieldKind.INTEGER),
        FieldSpec("percentage", "_percentage", FieldKind.FLOAT),
    ),
    percentage=PercentageRule("percentage", numerator="present", denominator="working_days"),
    require_positive_primary=True,
)
