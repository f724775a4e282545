"""Report endpoint: export permits for a period as a CSV or Excel file (base64 in JSON)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from permitflow.api.v1.auth import require
from permitflow.api.v1.errors import raise_http
from permitflow.core.config import get_settings
from permitflow.core.database import get_db
from permitflow.schemas.auth import CurrentUser
from permitflow.schemas.report import ReportExportRequest, ReportExportResponse
from permitflow.services.access import Action
from permitflow.services.errors import InfrastructureError, ValidationError
from permitflow.services.reports import export_permits_report

router = APIRouter()


@router.post("/permits/export", response_model=ReportExportResponse)
def export_permits(
    body: ReportExportRequest,
    db: Annotated[Session, Depends(get_db)],
    _admin: Annotated[CurrentUser, Depends(require(Action.EXPORT_REPORTS))],
) -> ReportExportResponse:
    """
    Export permits created between start_date and end_date (both inclusive).

    The file opens with a title, period, status and total block followed by one
    row per permit. Default format is BOM-prefixed CSV; set format to xlsx for a
    workbook. Returns 503 when the permit store is unreachable.
    """
    try:
        report = export_permits_report(db, body, get_settings())
    except (ValidationError, InfrastructureError) as e:
        raise_http(e)
    return report.to_response()
