"""
Delimited-text exporter for latest-record and reconciliation results.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..processors.records import CANONICAL_COLUMNS, ROSTER_COLUMN, CanonicalRecord, RosterEntry


def records_frame(
    records: Sequence[CanonicalRecord],
    columns: Dict[str, str],
    timestamp_format: str
) -> pd.DataFrame:
    """Build a DataFrame of canonical records with report column headers."""
    rows = [r.to_dict(columns, timestamp_format) for r in records]
    return pd.DataFrame(rows, columns=list(columns.values()))


def roster_frame(entries: Sequence[RosterEntry], column: str) -> pd.DataFrame:
    """Build a DataFrame of roster entries, keeping their original columns."""
    rows = [e.to_dict(column) for e in entries]
    if not rows:
        return pd.DataFrame(columns=[column])

    df = pd.DataFrame(rows).fillna('')
    if column in df.columns:
        other_cols = [c for c in df.columns if c != column]
        df = df[[column] + other_cols]
    return df


def summary_frame(stats: Dict[str, Dict[str, Any]]) -> pd.DataFrame:
    """Flatten per-stage statistics into Stage/Metric/Value rows."""
    rows = []
    for stage, values in stats.items():
        for metric, value in values.items():
            if isinstance(value, float):
                value = f"{value:.2f}"
            rows.append({'Stage': stage, 'Metric': metric, 'Value': value})
    return pd.DataFrame(rows, columns=['Stage', 'Metric', 'Value'])


class CsvExporter:
    """
    Exports results to delimited text files.
    """

    extension = "csv"

    def __init__(
        self,
        output_path: Path,
        file_prefix: str = "workstation_inventory",
        date_suffix: bool = True,
        delimiter: str = ",",
        columns: Optional[Dict[str, str]] = None,
        roster_column: str = ROSTER_COLUMN,
        timestamp_format: str = '%m/%d/%Y %H:%M'
    ):
        self.output_path = Path(output_path)
        self.file_prefix = file_prefix
        self.date_suffix = date_suffix
        self.delimiter = delimiter
        self.columns = dict(columns or CANONICAL_COLUMNS)
        self.roster_column = roster_column
        self.timestamp_format = timestamp_format
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _get_filename(self, name: str) -> Path:
        """Generate filename, with the date when configured."""
        parts = [self.file_prefix, name]
        if self.date_suffix:
            parts.append(datetime.now().strftime("%d-%m-%Y"))
        return self.output_path / f"{'_'.join(p for p in parts if p)}.{self.extension}"

    def _write(self, df: pd.DataFrame, filename: Path, sheet_name: str) -> Path:
        self.output_path.mkdir(parents=True, exist_ok=True)
        df.to_csv(filename, index=False, sep=self.delimiter, encoding='utf-8-sig')
        return filename

    def export_latest_records(self, records: Sequence[CanonicalRecord]) -> Path:
        """Export the latest-record table."""
        filename = self._get_filename("latest_records")
        self.logger.info(f"Exporting {len(records)} latest records to {filename}")

        df = records_frame(records, self.columns, self.timestamp_format)
        return self._write(df, filename, 'Latest_Records')

    def export_matched(self, matched: Sequence[CanonicalRecord]) -> Path:
        """Export reference records found for roster entries."""
        filename = self._get_filename("matched")
        self.logger.info(f"Exporting {len(matched)} matched records to {filename}")

        df = records_frame(matched, self.columns, self.timestamp_format)
        return self._write(df, filename, 'Matched')

    def export_unmatched(self, unmatched: Sequence[RosterEntry]) -> Path:
        """Export roster entries that were not found."""
        filename = self._get_filename("unmatched")
        self.logger.info(f"Exporting {len(unmatched)} unmatched roster entries to {filename}")

        df = roster_frame(unmatched, self.roster_column)
        return self._write(df, filename, 'Unmatched')

    def export_summary(self, stats: Dict[str, Dict[str, Any]]) -> Path:
        """Export run statistics as Stage/Metric/Value rows."""
        filename = self._get_filename("summary")
        self.logger.info(f"Exporting run summary to {filename}")

        return self._write(summary_frame(stats), filename, 'Summary')

    def export_all(
        self,
        latest: Optional[Sequence[CanonicalRecord]] = None,
        matched: Optional[Sequence[CanonicalRecord]] = None,
        unmatched: Optional[Sequence[RosterEntry]] = None,
        stats: Optional[Dict[str, Dict[str, Any]]] = None
    ) -> List[Path]:
        """Export every result that was produced; None means the stage did not run."""
        written = []
        if latest is not None:
            written.append(self.export_latest_records(latest))
        if matched is not None:
            written.append(self.export_matched(matched))
        if unmatched is not None:
            written.append(self.export_unmatched(unmatched))
        if stats:
            written.append(self.export_summary(stats))
        return written
