"""File connectors for scan reports, rosters and reference tables."""

from .base_connector import BaseConnector
from .roster_connector import RosterConnector, create_roster_connector
from .scan_report_connector import (
    ReferenceTableConnector,
    ScanReportConnector,
    create_reference_connector,
    create_scan_connector
)

__all__ = [
    'BaseConnector',
    'RosterConnector',
    'create_roster_connector',
    'ReferenceTableConnector',
    'ScanReportConnector',
    'create_reference_connector',
    'create_scan_connector'
]
