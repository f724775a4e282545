"""Unit tests for permitflow.services.reports: CSV and XLSX permit reports."""

import base64
import csv
import io
import unittest
from datetime import date, datetime
from unittest.mock import MagicMock

from openpyxl import load_workbook
from sqlalchemy.exc import OperationalError

from permitflow.core.config import settings
from permitflow.models import PermitStatus
from permitflow.schemas.report import ReportExportRequest
from permitflow.services.errors import InfrastructureError
from permitflow.services.reports import (
    MISSING,
    REPORT_HEADERS,
    REPORT_TITLE,
    UTF8_BOM,
    export_permits_report,
    report_filename,
)
from tests.support import JAKARTA, add_permit, add_user, make_engine, make_session_factory

JANUARY = {"start_date": date(2024, 1, 1), "end_date": date(2024, 1, 31)}


class ReportTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = make_engine()
        self.session = make_session_factory(self.engine)()
        self.alice = add_user(self.session, name="Alice")
        self.bob = add_user(self.session, username="bob", national_id="999", name="Bob")
        self.first = add_permit(
            self.session,
            self.alice,
            datetime(2024, 1, 1, 0, 0, tzinfo=JAKARTA),
            note=None,
        )
        self.second = add_permit(
            self.session,
            self.bob,
            datetime(2024, 1, 20, 9, 15, tzinfo=JAKARTA),
            status=PermitStatus.APPROVED,
            destination='Gudang "Utama", Bekasi',
            note="Urgent",
        )
        self.third = add_permit(
            self.session,
            self.alice,
            datetime(2024, 1, 31, 23, 59, 59, tzinfo=JAKARTA),
            status=PermitStatus.REJECTED,
        )
        # Outside the January window on both sides.
        add_permit(self.session, self.alice, datetime(2023, 12, 31, 23, 59, 59, tzinfo=JAKARTA))
        add_permit(self.session, self.alice, datetime(2024, 2, 1, 0, 0, tzinfo=JAKARTA))

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()

    def _csv(self, **request: object) -> tuple[bytes, list[list[str]]]:
        body = ReportExportRequest(**{**JANUARY, **request})
        report = export_permits_report(self.session, body, settings)
        text = report.content.decode("utf-8-sig")
        return report.content, list(csv.reader(io.StringIO(text)))


class TestCsvReport(ReportTestCase):
    def test_starts_with_bom(self) -> None:
        content, _ = self._csv()
        self.assertTrue(content.startswith(UTF8_BOM))

    def test_metadata_block(self) -> None:
        _, rows = self._csv()
        self.assertEqual(rows[0], [REPORT_TITLE])
        self.assertEqual(rows[1], ["Period: 01/01/2024 - 31/01/2024"])
        self.assertEqual(rows[2], ["Status: All"])
        self.assertEqual(rows[3], ["Total: 3 permit"])
        self.assertEqual(rows[4], [])
        self.assertEqual(rows[5], list(REPORT_HEADERS))

    def test_rows_inside_period_oldest_first(self) -> None:
        _, rows = self._csv()
        data = rows[6:]
        self.assertEqual(len(data), 3)
        self.assertEqual([r[0] for r in data], ["1", "2", "3"])
        self.assertEqual([r[1] for r in data], ["Alice", "Bob", "Alice"])
        self.assertEqual([r[12] for r in data], ["Pending", "Approved", "Rejected"])

    def test_missing_optionals_are_dashes(self) -> None:
        _, rows = self._csv()
        pending = rows[6]
        self.assertEqual(pending[11], MISSING)
        self.assertEqual(pending[13], MISSING)
        self.assertEqual(pending[14], MISSING)

    def test_dates_use_report_format(self) -> None:
        _, rows = self._csv()
        approved = rows[7]
        self.assertEqual(approved[7], "15/01/2024")
        self.assertEqual(approved[9], "16/01/2024")
        self.assertEqual(approved[13], "14/01/2024")
        self.assertEqual(approved[14], "09:30")
        self.assertEqual(approved[15], "20/01/2024")

    def test_text_with_commas_and_quotes_round_trips(self) -> None:
        content, rows = self._csv()
        self.assertEqual(rows[7][6], 'Gudang "Utama", Bekasi')
        self.assertIn(b'"Gudang ""Utama"", Bekasi"', content)

    def test_sequence_number_is_unquoted(self) -> None:
        content, _ = self._csv()
        lines = content.decode("utf-8-sig").splitlines()
        self.assertTrue(lines[6].startswith('1,"Alice",'))

    def test_status_filter(self) -> None:
        _, rows = self._csv(status=PermitStatus.APPROVED)
        self.assertEqual(rows[2], ["Status: Approved"])
        self.assertEqual(rows[3], ["Total: 1 permit"])
        self.assertEqual(len(rows[6:]), 1)

    def test_empty_period_still_has_header(self) -> None:
        body = ReportExportRequest(start_date=date(2020, 1, 1), end_date=date(2020, 1, 31))
        report = export_permits_report(self.session, body, settings)
        rows = list(csv.reader(io.StringIO(report.content.decode("utf-8-sig"))))
        self.assertEqual(report.total, 0)
        self.assertEqual(rows[3], ["Total: 0 permit"])
        self.assertEqual(rows[5], list(REPORT_HEADERS))
        self.assertEqual(rows[6:], [])

    def test_single_day_period(self) -> None:
        body = ReportExportRequest(start_date=date(2024, 1, 31), end_date=date(2024, 1, 31))
        report = export_permits_report(self.session, body, settings)
        self.assertEqual(report.total, 1)

    def test_response_envelope(self) -> None:
        body = ReportExportRequest(**JANUARY)
        report = export_permits_report(self.session, body, settings)
        response = report.to_response()
        self.assertEqual(response.filename, "permits_2024-01-01_to_2024-01-31.csv")
        self.assertEqual(response.mime_type, "text/csv")
        self.assertEqual(response.total, 3)
        self.assertEqual(base64.b64decode(response.data), report.content)


class TestXlsxReport(ReportTestCase):
    def test_workbook_layout(self) -> None:
        body = ReportExportRequest(format="xlsx", **JANUARY)
        report = export_permits_report(self.session, body, settings)
        self.assertTrue(report.filename.endswith(".xlsx"))
        self.assertEqual(report.total, 3)

        ws = load_workbook(io.BytesIO(report.content)).active
        self.assertEqual(ws.title, "Permits")
        self.assertEqual(ws["A1"].value, REPORT_TITLE)
        self.assertEqual(ws["A4"].value, "Total: 3 permit")
        header = [c.value for c in ws[6]]
        self.assertEqual(header, list(REPORT_HEADERS))
        self.assertTrue(ws["A6"].font.bold)
        self.assertEqual(ws.freeze_panes, "A7")
        self.assertEqual(ws["A7"].value, 1)
        self.assertEqual(ws["B8"].value, "Bob")
        self.assertEqual(ws.max_row, 9)


class TestReportHelpers(unittest.TestCase):
    def test_filename(self) -> None:
        body = ReportExportRequest(start_date=date(2024, 3, 1), end_date=date(2024, 3, 5))
        self.assertEqual(report_filename(body, "xlsx"), "permits_2024-03-01_to_2024-03-05.xlsx")

    def test_store_failure_becomes_infrastructure_error(self) -> None:
        session = MagicMock()
        session.query.side_effect = OperationalError("SELECT 1", {}, Exception("down"))
        body = ReportExportRequest(**JANUARY)
        with self.assertRaises(InfrastructureError):
            export_permits_report(session, body, settings)

    def test_inverted_period_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ReportExportRequest(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))


if __name__ == "__main__":
    unittest.main()
