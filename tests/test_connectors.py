"""Tests for scan report, roster and reference table connectors."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from workstation_inventory.connectors import ReferenceTableConnector, RosterConnector, ScanReportConnector
from workstation_inventory.processors.exceptions import SourceError
from workstation_inventory.processors.records import CanonicalRecord

SCAN_CSV = """\
Workstation Name,Last Hardware Scan,Last Logged User ID,Primary User ID,IP Address,Subnet,Department
LAB-01,1/5/2024 08:00,u1,p1,10.0.0.1,10.0.0.0/24,Chemistry
,,,,,,
LAB-01,1/6/2024 08:00,u2,p1,10.0.0.2,10.0.0.0/24,Chemistry
lab-02,,,,,,Physics
"""


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_scan_report_csv(tmp_path: Path) -> None:
    connector = ScanReportConnector(str(_write(tmp_path / "scans.csv", SCAN_CSV)))
    records = connector.fetch_all_data()

    assert [r.workstation_name for r in records] == ["LAB-01", "LAB-01", "lab-02"]
    assert records[1].last_hardware_scan == "1/6/2024 08:00"
    assert records[1].last_logged_user_id == "u2"
    assert records[2].last_hardware_scan == ""
    assert records[0].extra == {"Department": "Chemistry"}
    assert [r.source_row for r in records] == [2, 4, 5]

    stats = connector.get_stats()
    assert stats["rows_read"] == 4
    assert stats["rows_skipped"] == 1
    assert "duration_seconds" in stats


def test_scan_report_headers_are_matched_loosely(tmp_path: Path) -> None:
    text = " workstation name ,LAST HARDWARE SCAN\nPC1,1/1/2024 10:00\n"
    records = ScanReportConnector(str(_write(tmp_path / "scans.csv", text))).fetch_all_data()

    assert records[0].workstation_name == "PC1"
    assert records[0].ip_address == ""


def test_scan_report_custom_columns(tmp_path: Path) -> None:
    text = "Computer,Scanned\nPC1,1/1/2024 10:00\n"
    columns = {
        "workstation_name": "Computer",
        "last_hardware_scan": "Scanned",
        "last_logged_user_id": "User",
        "primary_user_id": "Primary",
        "ip_address": "IP",
        "subnet": "Net",
    }
    records = ScanReportConnector(str(_write(tmp_path / "scans.csv", text)), columns=columns).fetch_all_data()

    assert records[0].workstation_name == "PC1"
    assert records[0].last_hardware_scan == "1/1/2024 10:00"


def test_scan_report_missing_required_column(tmp_path: Path) -> None:
    text = "Workstation Name,IP Address\nPC1,10.0.0.1\n"
    connector = ScanReportConnector(str(_write(tmp_path / "scans.csv", text)))

    with pytest.raises(SourceError, match="Last Hardware Scan"):
        connector.fetch_all_data()


def test_missing_and_unsupported_files(tmp_path: Path) -> None:
    missing = ScanReportConnector(str(tmp_path / "nope.csv"))
    assert not missing.test_connection()
    with pytest.raises(SourceError):
        missing.fetch_all_data()

    unsupported = ScanReportConnector(str(_write(tmp_path / "scans.txt", SCAN_CSV)))
    assert not unsupported.test_connection()


def test_scan_report_xlsx_keeps_datetimes(tmp_path: Path) -> None:
    path = tmp_path / "scans.xlsx"
    pd.DataFrame(
        {
            "Workstation Name": ["LAB-01", "LAB-02"],
            "Last Hardware Scan": [datetime(2024, 1, 6, 8, 0), None],
            "Last Logged User ID": ["u2", None],
            "Primary User ID": [12345, None],
            "IP Address": ["10.0.0.2", None],
            "Subnet": ["10.0.0.0/24", None],
        }
    ).to_excel(path, index=False)

    records = ScanReportConnector(str(path)).fetch_all_data()

    assert records[0].last_hardware_scan == datetime(2024, 1, 6, 8, 0)
    assert records[0].primary_user_id == "12345"
    assert records[1].last_hardware_scan == ""
    assert records[1].last_logged_user_id == ""


def test_roster_csv_keeps_original_rows(tmp_path: Path) -> None:
    text = "PC Name,Owner\n Lab-01 ,alice\nLAB-03,bob\n,\n"
    connector = RosterConnector(str(_write(tmp_path / "roster.csv", text)))
    entries = connector.fetch_all_data()

    assert [e.pc_name for e in entries] == ["Lab-01", "LAB-03"]
    assert entries[0].raw == {"PC Name": "Lab-01", "Owner": "alice"}
    assert connector.get_stats()["rows_skipped"] == 1


def test_headerless_single_column_roster_keeps_every_row(tmp_path: Path) -> None:
    text = "LAB-01\nLAB-03\n"
    entries = RosterConnector(str(_write(tmp_path / "roster.csv", text))).fetch_all_data()

    assert [e.pc_name for e in entries] == ["LAB-01", "LAB-03"]
    assert [e.source_row for e in entries] == [1, 2]
    assert entries[0].raw == {"PC Name": "LAB-01"}


def test_headerless_single_column_roster_xlsx(tmp_path: Path) -> None:
    path = tmp_path / "roster.xlsx"
    pd.DataFrame([["LAB-01"], ["LAB-03"]]).to_excel(path, index=False, header=False)

    entries = RosterConnector(str(path)).fetch_all_data()

    assert [e.pc_name for e in entries] == ["LAB-01", "LAB-03"]


def test_roster_with_custom_delimiter(tmp_path: Path) -> None:
    text = "PC Name;Owner\nLAB-01;alice\n"
    entries = RosterConnector(str(_write(tmp_path / "roster.csv", text)), delimiter=";").fetch_all_data()

    assert entries[0].raw == {"PC Name": "LAB-01", "Owner": "alice"}


def test_roster_missing_column_with_several_columns(tmp_path: Path) -> None:
    text = "Computer,Owner\nLAB-01,alice\n"

    with pytest.raises(SourceError, match="PC Name"):
        RosterConnector(str(_write(tmp_path / "roster.csv", text))).fetch_all_data()


def test_reference_table(tmp_path: Path) -> None:
    text = "Workstation Name,Last Hardware Scan,Last Logged User ID\nLAB-01,1/6/2024 08:00,u2\n"
    records = ReferenceTableConnector(str(_write(tmp_path / "latest.csv", text))).fetch_all_data()

    assert records == [
        CanonicalRecord(workstation_name="LAB-01", last_hardware_scan="1/6/2024 08:00", last_logged_user_id="u2")
    ]


def test_reference_table_with_custom_delimiter(tmp_path: Path) -> None:
    text = "Workstation Name;Last Hardware Scan;Last Logged User ID\nLAB-01;1/6/2024 08:00;u2\n"
    connector = ReferenceTableConnector(str(_write(tmp_path / "latest.csv", text)), delimiter=";")

    assert connector.fetch_all_data() == [
        CanonicalRecord(workstation_name="LAB-01", last_hardware_scan="1/6/2024 08:00", last_logged_user_id="u2")
    ]


def test_scan_report_with_custom_delimiter(tmp_path: Path) -> None:
    connector = ScanReportConnector(str(_write(tmp_path / "scans.csv", SCAN_CSV.replace(",", ";"))), delimiter=";")
    records = connector.fetch_all_data()

    assert [r.workstation_name for r in records] == ["LAB-01", "LAB-01", "lab-02"]
    assert records[0].extra == {"Department": "Chemistry"}
