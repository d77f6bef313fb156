"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_SRC = Path(__file__).resolve().parents[1] / "src"
project_src_str = str(PROJECT_SRC)
if project_src_str not in sys.path:
    # Ensure tests can import `workstation_inventory` without package installation.
    sys.path.insert(0, project_src_str)

from workstation_inventory.processors.records import RosterEntry, ScanRecord  # noqa: E402


def scan(
    name: str,
    scanned: str | None = "",
    user: str = "",
    primary: str = "",
    ip: str = "",
    subnet: str = "",
    row: int | None = None,
) -> ScanRecord:
    """Build a scan record for targeted tests."""
    return ScanRecord(
        workstation_name=name,
        last_hardware_scan=scanned,
        last_logged_user_id=user,
        primary_user_id=primary,
        ip_address=ip,
        subnet=subnet,
        source_row=row,
    )


def roster(*names: str) -> list[RosterEntry]:
    """Build roster entries in the given order."""
    return [RosterEntry(pc_name=name, source_row=i + 2) for i, name in enumerate(names)]


@pytest.fixture
def lab_scans() -> list[ScanRecord]:
    """Two scans of LAB-01 and one unscanned lab-02."""
    return [
        scan("LAB-01", "1/5/2024 08:00", user="u1", primary="p1", ip="10.0.0.1", subnet="10.0.0.0/24"),
        scan("LAB-01", "1/6/2024 08:00", user="u2", primary="p1", ip="10.0.0.2", subnet="10.0.0.0/24"),
        scan("lab-02", "", user="", primary="", ip="", subnet=""),
    ]
