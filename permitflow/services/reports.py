"""Permit report export: metadata block plus a sixteen-column table, as CSV or XLSX."""

from __future__ import annotations

import base64
import csv
import io
import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import TYPE_CHECKING

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from permitflow.models import Permit, User
from permitflow.schemas.report import ReportExportRequest, ReportExportResponse, ReportFormat
from permitflow.services.date_ranges import day_bounds
from permitflow.services.errors import InfrastructureError

if TYPE_CHECKING:
    from permitflow.core.config import Settings

logger = logging.getLogger(__name__)

REPORT_TITLE = "VEHICLE PERMIT REPORT"
ALL_STATUSES_LABEL = "All"
MISSING = "-"
UTF8_BOM = "\ufeff".encode("utf-8")

REPORT_HEADERS = (
    "No",
    "Requester",
    "Vehicle User",
    "National ID",
    "Driver",
    "Plate Number",
    "Destination",
    "Departure Date",
    "Departure Time",
    "Return Date",
    "Return Time",
    "Note",
    "Status",
    "Approval Date",
    "Approval Time",
    "Created",
)

MIME_TYPES: dict[str, str] = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@dataclass(frozen=True)
class ReportFile:
    content: bytes
    filename: str
    mime_type: str
    total: int

    def to_response(self) -> ReportExportResponse:
        return ReportExportResponse(
            data=base64.b64encode(self.content).decode("ascii"),
            filename=self.filename,
            mime_type=self.mime_type,
            total=self.total,
        )


def fetch_report_rows(
    session: Session,
    request: ReportExportRequest,
    tz: tzinfo,
) -> list[tuple[Permit, str]]:
    """(permit, owner display name) for permits created within the period, oldest first."""
    start, end = day_bounds(request.start_date, request.end_date, tz)
    query = (
        session.query(Permit, User.name)
        .join(User, Permit.user_id == User.id)
        .filter(Permit.created_at >= start, Permit.created_at <= end)
    )
    if request.status is not None:
        query = query.filter(Permit.status == request.status)
    return [(permit, name) for permit, name in query.order_by(Permit.created_at, Permit.id).all()]


def _fmt_date(value: date | datetime | None, date_format: str, tz: tzinfo) -> str:
    if value is None:
        return MISSING
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        value = value.date()
    return value.strftime(date_format)


def build_table_rows(
    rows: list[tuple[Permit, str]],
    date_format: str,
    tz: tzinfo,
) -> list[list[int | str]]:
    """One list per permit, aligned with REPORT_HEADERS; missing optionals become '-'."""
    table: list[list[int | str]] = []
    for index, (permit, owner_name) in enumerate(rows, start=1):
        table.append(
            [
                index,
                owner_name,
                permit.requester_name,
                permit.national_id,
                permit.driver_name,
                permit.plate_number,
                permit.destination,
                _fmt_date(permit.departure_date, date_format, tz),
                permit.departure_time,
                _fmt_date(permit.return_date, date_format, tz),
                permit.return_time,
                permit.note or MISSING,
                permit.status.value,
                _fmt_date(permit.approval_date, date_format, tz),
                permit.approval_time or MISSING,
                _fmt_date(permit.created_at, date_format, tz),
            ]
        )
    return table


def metadata_lines(
    request: ReportExportRequest,
    total: int,
    date_format: str,
) -> list[str]:
    """Title, period, status and total lines shown above the table."""
    status = request.status.value if request.status is not None else ALL_STATUSES_LABEL
    return [
        REPORT_TITLE,
        f"Period: {request.start_date.strftime(date_format)} - {request.end_date.strftime(date_format)}",
        f"Status: {status}",
        f"Total: {total} permit",
    ]


def render_csv(meta: list[str], table: list[list[int | str]]) -> bytes:
    """BOM-prefixed UTF-8 CSV. Text cells are quoted; the sequence number is not."""
    buf = io.StringIO()
    for line in meta:
        buf.write(line + "\n")
    buf.write("\n")
    buf.write(",".join(REPORT_HEADERS) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerows(table)
    return UTF8_BOM + buf.getvalue().encode("utf-8")


def render_xlsx(meta: list[str], table: list[list[int | str]]) -> bytes:
    """Single-sheet workbook: metadata rows, bold header row frozen, then data."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Permits"

    for line in meta:
        ws.append([line])
    ws["A1"].font = Font(bold=True, size=13)
    ws.append([])

    header_row = len(meta) + 2
    ws.append(list(REPORT_HEADERS))
    header_font = Font(bold=True)
    for col in range(1, len(REPORT_HEADERS) + 1):
        cell = ws.cell(row=header_row, column=col)
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

    for row in table:
        ws.append(row)

    ws.freeze_panes = f"A{header_row + 1}"

    # Width from header and data cells only.
    for col_idx in range(1, len(REPORT_HEADERS) + 1):
        col_letter = get_column_letter(col_idx)
        max_len = len(REPORT_HEADERS[col_idx - 1])
        for row in table:
            max_len = max(max_len, len(str(row[col_idx - 1])))
        ws.column_dimensions[col_letter].width = min(max(10, max_len + 2), 55)

    bio = io.BytesIO()
    wb.save(bio)
    return bio.getvalue()


def report_filename(request: ReportExportRequest, fmt: ReportFormat) -> str:
    return f"permits_{request.start_date.isoformat()}_to_{request.end_date.isoformat()}.{fmt}"


def export_permits_report(
    session: Session,
    request: ReportExportRequest,
    settings: Settings,
) -> ReportFile:
    """
    Build the permit report for the requested period and status.

    The metadata total always equals the number of data rows, including zero.
    Store failures are logged and raised as InfrastructureError.
    """
    tz = settings.timezone
    try:
        rows = fetch_report_rows(session, request, tz)
    except SQLAlchemyError as e:
        logger.exception("Permit report query failed")
        raise InfrastructureError("Permit store is unavailable; report was not generated.") from e

    table = build_table_rows(rows, settings.REPORT_DATE_FORMAT, tz)
    meta = metadata_lines(request, len(table), settings.REPORT_DATE_FORMAT)
    if request.format == "xlsx":
        content = render_xlsx(meta, table)
    else:
        content = render_csv(meta, table)

    logger.info(
        "Permit report generated",
        extra={
            "report_format": request.format,
            "row_count": len(table),
            "status_filter": request.status.value if request.status else None,
        },
    )
    return ReportFile(
        content=content,
        filename=report_filename(request, request.format),
        mime_type=MIME_TYPES[request.format],
        total=len(table),
    )
