"""
Latest-record selection: one canonical record per workstation.
"""

import logging
import warnings
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .exceptions import EmptyGroupKeyWarning, MalformedTimestampError
from .normalizer import is_blank, normalize_name
from .records import CanonicalRecord, ScanRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMESTAMP_FORMATS: Tuple[str, ...] = (
    '%m/%d/%Y %H:%M',
    '%m/%d/%Y %H:%M:%S',
    '%m/%d/%Y %I:%M %p',
    '%Y-%m-%d %H:%M:%S',
    '%m/%d/%Y',
)


class GroupKey(Enum):
    """How scan records are grouped into workstations."""
    RAW = "raw"
    NORMALIZED = "normalized"


@dataclass
class SelectionStats:
    """Statistics from latest-record selection."""
    total_records: int = 0
    eligible_records: int = 0
    blank_name_records: int = 0
    workstations: int = 0
    duplicates_collapsed: int = 0
    without_scan: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            'total_records': self.total_records,
            'eligible_records': self.eligible_records,
            'blank_name_records': self.blank_name_records,
            'workstations': self.workstations,
            'duplicates_collapsed': self.duplicates_collapsed,
            'without_scan': self.without_scan,
        }


@dataclass
class SelectionResult:
    """Canonical records plus the statistics of the run that produced them."""
    records: List[CanonicalRecord]
    stats: SelectionStats


def parse_scan_timestamp(
    record: ScanRecord,
    timestamp_formats: Sequence[str] = DEFAULT_TIMESTAMP_FORMATS
) -> Optional[datetime]:
    """
    Parse the last hardware scan of a record.

    Returns None for a blank scan. Raises MalformedTimestampError when the
    value is present but matches none of the formats.
    """
    value = record.last_hardware_scan
    if isinstance(value, datetime):
        return value
    if is_blank(value):
        return None

    cleaned = str(value).strip()
    for fmt in timestamp_formats:
        try:
            return datetime.strptime(cleaned, fmt)
        except ValueError:
            continue

    raise MalformedTimestampError(
        workstation_name=record.workstation_name,
        raw_value=cleaned,
        source_row=record.source_row,
        expected_formats=timestamp_formats
    )


def _group_key(record: ScanRecord, group_key: GroupKey, uppercase: bool) -> str:
    if group_key is GroupKey.NORMALIZED:
        return normalize_name(record.workstation_name, uppercase)
    return record.workstation_name


def select_latest(
    records: Iterable[ScanRecord],
    timestamp_formats: Sequence[str] = DEFAULT_TIMESTAMP_FORMATS,
    group_key: GroupKey = GroupKey.RAW,
    uppercase: bool = True
) -> SelectionResult:
    """
    Keep the most recent scan record per workstation.

    Records without a scan never win over a scanned record of the same
    workstation. Ties keep the first record in input order. Records with a
    blank workstation name are skipped and counted.

    Raw grouping keys on the name as the connector delivered it. Connectors
    trim cell text, so "LAB-01" and " LAB-01 " in a report share a group
    while "lab-01" does not.

    Args:
        records: Scan records in report order
        timestamp_formats: strptime formats tried in order
        group_key: Group on the name as received or on its normalized form
        uppercase: Case folding used when group_key is NORMALIZED

    Returns:
        SelectionResult with one CanonicalRecord per workstation

    Raises:
        MalformedTimestampError: If any non-blank scan cannot be parsed
    """
    group_key = GroupKey(group_key)
    stats = SelectionStats()

    # key -> (parsed scan, record); dict keeps first-seen group order
    latest: Dict[str, Tuple[Optional[datetime], ScanRecord]] = {}

    for record in records:
        stats.total_records += 1

        if not record.has_name:
            stats.blank_name_records += 1
            continue

        stats.eligible_records += 1
        scanned_at = parse_scan_timestamp(record, timestamp_formats)
        key = _group_key(record, group_key, uppercase)

        current = latest.get(key)
        if current is None:
            latest[key] = (scanned_at, record)
            continue

        current_scan = current[0]
        if scanned_at is not None and (current_scan is None or scanned_at > current_scan):
            latest[key] = (scanned_at, record)

    if stats.blank_name_records:
        logger.warning(
            f"Skipped {stats.blank_name_records} scan records with a blank workstation name"
        )
        warnings.warn(
            f"{stats.blank_name_records} scan records have a blank workstation name",
            EmptyGroupKeyWarning,
            stacklevel=2
        )

    selected = []
    for scanned_at, record in latest.values():
        if scanned_at is None:
            stats.without_scan += 1
        selected.append(CanonicalRecord.from_scan(record))

    stats.workstations = len(selected)
    stats.duplicates_collapsed = stats.eligible_records - stats.workstations

    logger.info(
        f"Selected {stats.workstations} workstations from {stats.total_records} scan records "
        f"(grouped by {group_key.value} name)"
    )

    return SelectionResult(records=selected, stats=stats)
