"""Sources that fetch the raw portfolio sheets."""

import asyncio
import logging
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import httpx
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from portfolio_api.core.exceptions import UpstreamError
from portfolio_api.services.sheet import Sheet

logger = logging.getLogger(__name__)

SOURCE_SHEETS = (
    "Students",
    "Subjects",
    "Activities",
    "Assignments",
    "Tests",
    "Corrections",
    "Attendance",
)


class SheetSource(ABC):
    """Fetches a fresh snapshot of the named sheets."""

    def __init__(self, sheet_names: tuple[str, ...] = SOURCE_SHEETS):
        self.sheet_names = sheet_names

    @abstractmethod
    async def fetch(self) -> dict[str, Sheet]:
        """Return the available sheets keyed by name."""


def range_sheet_name(a1_range: str | None) -> str | None:
    """Extract the sheet name from an A1 range such as ``'My Sheet'!A1:G20``."""
    if not a1_range:
        return None
    name = a1_range.rpartition("!")[0] if "!" in a1_range else a1_range
    if len(name) >= 2 and name.startswith("'") and name.endswith("'"):
        name = name[1:-1].replace("''", "'")
    return name or None


class GoogleSheetsSource(SheetSource):
    """Reads whole sheets through the Google Sheets ``values:batchGet`` API."""

    def __init__(
        self,
        sheet_id: str,
        api_key: str,
        base_url: str = "https://sheets.googleapis.com/v4/spreadsheets",
        timeout: float = 15.0,
        sheet_names: tuple[str, ...] = SOURCE_SHEETS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(sheet_names)
        self.sheet_id = sheet_id
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def fetch(self) -> dict[str, Sheet]:
        if not self.sheet_id:
            raise UpstreamError("Google Sheets ID is not configured")

        url = f"{self.base_url}/{self.sheet_id}/values:batchGet"
        params = [("key", self.api_key)] + [("ranges", name) for name in self.sheet_names]
        logger.info(f"[SHEETS FETCH] Requesting {len(self.sheet_names)} ranges from spreadsheet {self.sheet_id}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[SHEETS FETCH] Sheets API returned {e.response.status_code}")
            raise UpstreamError(
                "Failed to fetch data",
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"[SHEETS FETCH] Request failed: {e!r}")
            raise UpstreamError("Failed to fetch data") from e
        except ValueError as e:
            raise UpstreamError("Sheets API returned invalid JSON") from e

        return self.parse_payload(payload)

    def parse_payload(self, payload: Any) -> dict[str, Sheet]:
        """Turn a batchGet response into sheets keyed by name."""
        value_ranges = payload.get("valueRanges") if isinstance(payload, dict) else None
        if not isinstance(value_ranges, list):
            raise UpstreamError("Malformed Sheets API response: missing valueRanges")

        sheets: dict[str, Sheet] = {}
        for position, value_range in enumerate(value_ranges):
            if not isinstance(value_range, dict):
                raise UpstreamError("Malformed Sheets API response: invalid value range")
            name = range_sheet_name(value_range.get("range"))
            if name is None and position < len(self.sheet_names):
                name = self.sheet_names[position]
            if name is None:
                continue
            sheets[name] = Sheet.from_values(name, value_range.get("values"))
            logger.debug(f"[SHEETS FETCH] '{name}': {len(sheets[name].rows)} data rows")

        return sheets


class WorkbookSource(SheetSource):
    """Reads the same sheets from a local ``.xlsx`` workbook."""

    def __init__(self, path: Path, sheet_names: tuple[str, ...] = SOURCE_SHEETS):
        super().__init__(sheet_names)
        self.path = path

    async def fetch(self) -> dict[str, Sheet]:
        return await asyncio.to_thread(self.read)

    def read(self) -> dict[str, Sheet]:
        try:
            workbook = load_workbook(filename=self.path, read_only=True, data_only=True)
        except (OSError, InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            logger.error(f"[WORKBOOK READ] Cannot open {self.path}: {e}")
            raise UpstreamError(
                "Failed to read workbook",
                details={"path": str(self.path)},
            ) from e

        sheets: dict[str, Sheet] = {}
        try:
            for name in self.sheet_names:
                if name not in workbook.sheetnames:
                    logger.warning(f"[WORKBOOK READ] Worksheet '{name}' not found in {self.path.name}")
                    continue
                values = [list(row) for row in workbook[name].iter_rows(values_only=True)]
                sheets[name] = Sheet.from_values(name, values)
        finally:
            workbook.close()

        logger.info(f"[WORKBOOK READ] Loaded {len(sheets)} worksheets from {self.path.name}")
        return sheets
