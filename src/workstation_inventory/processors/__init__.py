"""Data processing modules for normalization, selection and reconciliation."""

from .exceptions import (
    EmptyGroupKeyWarning,
    InventoryError,
    MalformedTimestampError,
    ParseError,
    SourceError
)
from .normalizer import normalize_name
from .records import CanonicalRecord, RosterEntry, ScanRecord
from .reconciliation import (
    ReconciliationResult,
    ReconciliationStats,
    RosterReconciliation,
    reconcile
)
from .selector import (
    DEFAULT_TIMESTAMP_FORMATS,
    GroupKey,
    SelectionResult,
    SelectionStats,
    select_latest
)

__all__ = [
    'EmptyGroupKeyWarning',
    'InventoryError',
    'MalformedTimestampError',
    'ParseError',
    'SourceError',
    'normalize_name',
    'CanonicalRecord',
    'RosterEntry',
    'ScanRecord',
    'ReconciliationResult',
    'ReconciliationStats',
    'RosterReconciliation',
    'reconcile',
    'DEFAULT_TIMESTAMP_FORMATS',
    'GroupKey',
    'SelectionResult',
    'SelectionStats',
    'select_latest'
]
