"""
Connectors for hardware scan reports and previously exported latest-record tables.
"""

from typing import Dict, List, Optional

from ..processors.records import CANONICAL_COLUMNS, CanonicalRecord, ScanRecord
from .base_connector import BaseConnector

REQUIRED_FIELDS = ('workstation_name', 'last_hardware_scan')


class ScanReportConnector(BaseConnector):
    """
    Reads an inventory scan report, one row per hardware scan event.
    """

    def __init__(
        self,
        path: str,
        columns: Optional[Dict[str, str]] = None,
        sheet_name: Optional[str] = None,
        delimiter: str = ","
    ):
        super().__init__(path=path, sheet_name=sheet_name, delimiter=delimiter)
        self.columns = dict(columns or CANONICAL_COLUMNS)

    def fetch_all_data(self) -> List[ScanRecord]:
        """Read the report into scan records, in report order."""
        df = self._read_frame()
        resolved = self._resolve_columns(df, self.columns, REQUIRED_FIELDS)
        mapped_headers = {header for header in resolved.values() if header is not None}

        records = []
        for source_row, row in self._iter_rows(df):
            values = {
                name: row.get(header, '') if header is not None else ''
                for name, header in resolved.items()
            }
            extra = {k: v for k, v in row.items() if k not in mapped_headers}

            records.append(ScanRecord(
                workstation_name=values['workstation_name'],
                last_hardware_scan=values['last_hardware_scan'],
                last_logged_user_id=values['last_logged_user_id'],
                primary_user_id=values['primary_user_id'],
                ip_address=values['ip_address'],
                subnet=values['subnet'],
                source_row=source_row,
                extra=extra
            ))

        self._finish()
        self.logger.info(f"Loaded {len(records)} scan records from {self.path.name}")
        return records


class ReferenceTableConnector(ScanReportConnector):
    """
    Reads a latest-record table exported by an earlier run.
    Only the workstation name column is required.
    The factory reads it with the output delimiter it was written with.
    """

    def fetch_all_data(self) -> List[CanonicalRecord]:
        df = self._read_frame()
        resolved = self._resolve_columns(df, self.columns, ('workstation_name',))

        records = []
        for _, row in self._iter_rows(df):
            values = {
                name: row.get(header, '') if header is not None else ''
                for name, header in resolved.items()
            }
            records.append(CanonicalRecord(**values))

        self._finish()
        self.logger.info(f"Loaded {len(records)} reference records from {self.path.name}")
        return records


def create_scan_connector(config) -> ScanReportConnector:
    """Factory function to create a scan report connector from config."""
    return ScanReportConnector(
        path=config.inputs.scan_report,
        columns=config.columns.record_columns(),
        sheet_name=config.inputs.sheet_name,
        delimiter=config.inputs.delimiter
    )


def create_reference_connector(config) -> ReferenceTableConnector:
    """Factory function to create a reference table connector from config."""
    return ReferenceTableConnector(
        path=config.inputs.reference_table,
        columns=config.columns.record_columns(),
        sheet_name=config.inputs.sheet_name,
        delimiter=config.output.delimiter
    )
