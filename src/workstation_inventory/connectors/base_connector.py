"""
Base connector class for tabular file sources.
Provides common functionality for reading spreadsheets, header lookup and statistics.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..processors.exceptions import SourceError

SUPPORTED_EXTENSIONS = ('.csv', '.xlsx', '.xlsm')


def normalize_header(header: Any) -> str:
    """Normalize header names so column lookup is resilient to formatting."""
    if header is None:
        return ''
    return str(header).strip().lower()


class BaseConnector(ABC):
    """
    Abstract base class for tabular file connectors.
    Reads every cell as text, keeping spreadsheet datetimes as datetime objects.
    """

    def __init__(
        self,
        path: str,
        sheet_name: Optional[str] = None,
        delimiter: str = ","
    ):
        self.path = Path(path)
        self.sheet_name = sheet_name
        self.delimiter = delimiter
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

        self.stats = {
            'rows_read': 0,
            'rows_skipped': 0,
            'start_time': None,
            'end_time': None
        }

    @abstractmethod
    def fetch_all_data(self) -> List[Any]:
        """Read the source and return its records."""
        pass

    def test_connection(self) -> bool:
        """Return True when the source file exists and has a supported extension."""
        if not self.path.is_file():
            self.logger.error(f"Source file not found: {self.path}")
            return False
        if self.path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            self.logger.error(f"Unsupported source file type: {self.path.suffix}")
            return False
        return True

    def _read_frame(self, header: Optional[int] = 0) -> pd.DataFrame:
        """
        Read the source file into a DataFrame.

        With header=None every row is data and columns are numbered from 0.
        """
        if not self.test_connection():
            raise SourceError(f"Cannot read source file: {self.path}")

        self.stats['start_time'] = datetime.now()
        suffix = self.path.suffix.lower()

        try:
            if suffix == '.csv':
                df = pd.read_csv(
                    self.path,
                    sep=self.delimiter,
                    header=header,
                    dtype=str,
                    keep_default_na=False,
                    encoding='utf-8-sig'
                )
            else:
                df = pd.read_excel(
                    self.path,
                    sheet_name=self.sheet_name if self.sheet_name is not None else 0,
                    header=header,
                    dtype=object,
                    engine='openpyxl'
                )
        except (OSError, ValueError) as e:
            raise SourceError(f"Failed to read {self.path}: {e}") from e

        self.logger.info(f"Read {len(df)} rows from {self.path.name}")
        return df

    def _resolve_columns(
        self,
        df: pd.DataFrame,
        wanted: Dict[str, str],
        required: Sequence[str]
    ) -> Dict[str, Optional[str]]:
        """
        Map field names to the actual DataFrame headers.

        Raises:
            SourceError: If a required column is missing
        """
        available = {normalize_header(col): str(col) for col in df.columns}
        resolved = {
            name: available.get(normalize_header(header))
            for name, header in wanted.items()
        }

        missing = [wanted[name] for name in required if resolved.get(name) is None]
        if missing:
            raise SourceError(
                f"{self.path.name} is missing required columns: {', '.join(missing)}"
            )
        return resolved

    @staticmethod
    def _clean_cell(value: Any) -> Any:
        """Convert a cell to text, keeping datetimes and mapping empty cells to ''."""
        if isinstance(value, str):
            return value.strip()
        if value is None or pd.isna(value):
            return ''
        if isinstance(value, pd.Timestamp):
            return value.to_pydatetime()
        if isinstance(value, datetime):
            return value
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value).strip()

    def _iter_rows(self, df: pd.DataFrame, first_row: int = 2):
        """
        Yield (source_row, cleaned row dict), skipping fully blank rows.

        first_row is the spreadsheet row of the first data row: 2 below a
        header, 1 for a headerless file.
        """
        for position, raw_row in enumerate(df.to_dict(orient="records")):
            source_row = position + first_row
            row = {str(k): self._clean_cell(v) for k, v in raw_row.items()}
            self.stats['rows_read'] += 1

            if all(v == '' for v in row.values()):
                self.stats['rows_skipped'] += 1
                continue

            yield source_row, row

    def _finish(self):
        self.stats['end_time'] = datetime.now()
        if self.stats['rows_skipped']:
            self.logger.info(f"Skipped {self.stats['rows_skipped']} blank rows in {self.path.name}")

    def get_stats(self) -> Dict[str, Any]:
        """Return statistics about the read."""
        stats = self.stats.copy()
        if stats['start_time'] and stats['end_time']:
            stats['duration_seconds'] = (
                stats['end_time'] - stats['start_time']
            ).total_seconds()
        return stats
