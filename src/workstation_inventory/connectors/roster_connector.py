"""
Roster connector: the list of workstation names to reconcile.
"""

from typing import List, Optional

from ..processors.exceptions import SourceError
from ..processors.records import ROSTER_COLUMN, RosterEntry
from .base_connector import BaseConnector


class RosterConnector(BaseConnector):
    """
    Reads a roster of workstation names.

    A file without the configured name column is accepted when it has exactly
    one column. It is then read as a headerless list: every row, the first
    included, is a workstation name.
    """

    def __init__(
        self,
        path: str,
        column: str = ROSTER_COLUMN,
        sheet_name: Optional[str] = None,
        delimiter: str = ","
    ):
        super().__init__(path=path, sheet_name=sheet_name, delimiter=delimiter)
        self.column = column

    def fetch_all_data(self) -> List[RosterEntry]:
        """Read the roster into entries, in roster order."""
        df = self._read_frame()
        first_row = 2

        try:
            header = self._resolve_columns(df, {'pc_name': self.column}, ('pc_name',))['pc_name']
        except SourceError:
            if len(df.columns) != 1:
                raise
            self.logger.warning(
                f"Column '{self.column}' not found in {self.path.name}; "
                f"reading it as a headerless single-column roster"
            )
            df = self._read_frame(header=None)
            df.columns = [self.column]
            header = self.column
            first_row = 1

        entries = []
        for source_row, row in self._iter_rows(df, first_row=first_row):
            entries.append(RosterEntry(
                pc_name=str(row.get(header, '')),
                source_row=source_row,
                raw=row
            ))

        self._finish()
        self.logger.info(f"Loaded {len(entries)} roster entries from {self.path.name}")
        return entries


def create_roster_connector(config) -> RosterConnector:
    """Factory function to create a roster connector from config."""
    return RosterConnector(
        path=config.inputs.roster,
        column=config.columns.pc_name,
        sheet_name=config.inputs.sheet_name,
        delimiter=config.inputs.delimiter
    )
