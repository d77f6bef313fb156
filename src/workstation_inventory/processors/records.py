"""
Record types shared by the connectors, processors and exporters.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union

ScanValue = Union[str, datetime, None]

# Canonical field name -> default column header in reports
CANONICAL_COLUMNS: Dict[str, str] = {
    'workstation_name': 'Workstation Name',
    'last_hardware_scan': 'Last Hardware Scan',
    'last_logged_user_id': 'Last Logged User ID',
    'primary_user_id': 'Primary User ID',
    'ip_address': 'IP Address',
    'subnet': 'Subnet',
}

ROSTER_COLUMN = 'PC Name'


@dataclass(frozen=True)
class ScanRecord:
    """One hardware scan observation as delivered by the scan report."""
    workstation_name: str
    last_hardware_scan: ScanValue = None
    last_logged_user_id: str = ''
    primary_user_id: str = ''
    ip_address: str = ''
    subnet: str = ''
    source_row: Optional[int] = field(default=None, compare=False)
    extra: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def has_name(self) -> bool:
        return bool(self.workstation_name and self.workstation_name.strip())


@dataclass(frozen=True)
class CanonicalRecord:
    """Latest known state of a single workstation."""
    workstation_name: str
    last_hardware_scan: ScanValue = None
    last_logged_user_id: str = ''
    primary_user_id: str = ''
    ip_address: str = ''
    subnet: str = ''

    @classmethod
    def from_scan(cls, record: ScanRecord) -> 'CanonicalRecord':
        """Project a scan record down to the canonical field subset."""
        return cls(
            workstation_name=record.workstation_name,
            last_hardware_scan=record.last_hardware_scan,
            last_logged_user_id=record.last_logged_user_id,
            primary_user_id=record.primary_user_id,
            ip_address=record.ip_address,
            subnet=record.subnet,
        )

    def to_dict(
        self,
        columns: Optional[Dict[str, str]] = None,
        timestamp_format: str = '%m/%d/%Y %H:%M'
    ) -> Dict[str, str]:
        """
        Render the record with report column headers.

        Spreadsheet datetimes are formatted back to text so every output
        cell is a string.
        """
        columns = columns or CANONICAL_COLUMNS
        scan = self.last_hardware_scan
        if isinstance(scan, datetime):
            scan = scan.strftime(timestamp_format)

        values = {
            'workstation_name': self.workstation_name,
            'last_hardware_scan': scan or '',
            'last_logged_user_id': self.last_logged_user_id,
            'primary_user_id': self.primary_user_id,
            'ip_address': self.ip_address,
            'subnet': self.subnet,
        }
        return {columns[name]: value for name, value in values.items()}


@dataclass(frozen=True)
class RosterEntry:
    """One workstation name to look up, with its original roster row."""
    pc_name: str
    source_row: Optional[int] = field(default=None, compare=False)
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self, column: str = ROSTER_COLUMN) -> Dict[str, Any]:
        """Return the original roster row, or a one-column row if none was kept."""
        if self.raw:
            return dict(self.raw)
        return {column: self.pc_name}
