"""
Exceptions and warnings raised while processing inventory data.
"""

from typing import Optional, Sequence


class InventoryError(Exception):
    """Base exception for workstation inventory errors."""
    pass


class SourceError(InventoryError):
    """Raised when an input source cannot be read or lacks required columns."""
    pass


class ParseError(InventoryError):
    """Raised when a field of a single record cannot be parsed."""
    pass


class MalformedTimestampError(ParseError):
    """Raised when a scan timestamp is present but matches no known format."""

    def __init__(
        self,
        workstation_name: str,
        raw_value: str,
        source_row: Optional[int] = None,
        expected_formats: Sequence[str] = ()
    ):
        self.workstation_name = workstation_name
        self.raw_value = raw_value
        self.source_row = source_row
        self.expected_formats = tuple(expected_formats)

        location = f" (row {source_row})" if source_row is not None else ""
        message = (
            f"Malformed last hardware scan '{raw_value}' for workstation "
            f"'{workstation_name}'{location}"
        )
        if self.expected_formats:
            message += f"; expected one of: {', '.join(self.expected_formats)}"
        super().__init__(message)


class EmptyGroupKeyWarning(UserWarning):
    """Emitted when scan records with a blank workstation name are skipped."""
    pass
