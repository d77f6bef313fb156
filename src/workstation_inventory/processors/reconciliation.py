"""
Reconciliation of a workstation roster against the latest-record table.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence

from .normalizer import normalize_name
from .records import CanonicalRecord, RosterEntry


@dataclass
class ReconciliationStats:
    """Statistics from reconciliation process."""
    total_roster: int = 0
    total_reference: int = 0

    matched: int = 0
    unmatched: int = 0

    duplicate_roster_names: int = 0
    ambiguous_reference_keys: int = 0

    match_rate: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert stats to dictionary."""
        return {
            'total_roster': self.total_roster,
            'total_reference': self.total_reference,
            'matched': self.matched,
            'unmatched': self.unmatched,
            'duplicate_roster_names': self.duplicate_roster_names,
            'ambiguous_reference_keys': self.ambiguous_reference_keys,
            'match_rate': self.match_rate
        }


@dataclass
class ReconciliationResult:
    """Roster partitioned into found reference records and missing entries."""
    matched: List[CanonicalRecord] = field(default_factory=list)
    unmatched: List[RosterEntry] = field(default_factory=list)
    stats: ReconciliationStats = field(default_factory=ReconciliationStats)


class RosterReconciliation:
    """
    Matches roster names against reference records by normalized name.
    """

    def __init__(self, uppercase: bool = True):
        self.uppercase = uppercase
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.stats = ReconciliationStats()

    def build_index(
        self,
        reference: Iterable[CanonicalRecord]
    ) -> Dict[str, CanonicalRecord]:
        """
        Index reference records by normalized workstation name.

        When several records share a key the first one in reference order
        is kept.
        """
        index: Dict[str, CanonicalRecord] = {}
        collisions = Counter()

        for record in reference:
            key = normalize_name(record.workstation_name, self.uppercase)
            if not key:
                continue
            if key in index:
                collisions[key] += 1
                continue
            index[key] = record

        self.stats.ambiguous_reference_keys = len(collisions)
        if collisions:
            sample = sorted(collisions)[:10]
            self.logger.warning(
                f"{len(collisions)} workstation names collide after normalization; "
                f"keeping the first record for each: {sample}"
            )

        return index

    def reconcile(
        self,
        reference: Sequence[CanonicalRecord],
        roster: Sequence[RosterEntry]
    ) -> ReconciliationResult:
        """
        Reconcile roster entries with reference records.

        Args:
            reference: Latest-record table to search
            roster: Workstation names to look up, in output order

        Returns:
            ReconciliationResult with one matched record or one unmatched
            entry per roster entry
        """
        self.stats = ReconciliationStats()
        self.stats.total_reference = len(reference)
        self.stats.total_roster = len(roster)

        self.logger.info(
            f"Reconciling {len(roster)} roster entries with {len(reference)} reference records"
        )

        index = self.build_index(reference)
        result = ReconciliationResult(stats=self.stats)
        seen = Counter()

        for entry in roster:
            key = normalize_name(entry.pc_name, self.uppercase)
            if key:
                seen[key] += 1

            record = index.get(key) if key else None
            if record is not None:
                result.matched.append(record)
            else:
                result.unmatched.append(entry)

        self.stats.matched = len(result.matched)
        self.stats.unmatched = len(result.unmatched)
        self.stats.duplicate_roster_names = sum(1 for count in seen.values() if count > 1)
        self._calculate_rates()

        self.logger.info(f"Reconciliation complete. Stats: {self.stats.to_dict()}")

        return result

    def _calculate_rates(self):
        """Calculate the match rate."""
        if self.stats.total_roster > 0:
            self.stats.match_rate = (self.stats.matched / self.stats.total_roster) * 100

    def get_matched_names(self, result: ReconciliationResult) -> List[str]:
        """Workstation names of the matched reference records."""
        return [r.workstation_name for r in result.matched]

    def get_unmatched_names(self, result: ReconciliationResult) -> List[str]:
        """Roster names that were not found, as supplied."""
        return [r.pc_name for r in result.unmatched]


def reconcile(
    reference: Sequence[CanonicalRecord],
    roster: Sequence[RosterEntry],
    uppercase: bool = True
) -> ReconciliationResult:
    """Reconcile a roster against reference records with a fresh reconciler."""
    return RosterReconciliation(uppercase=uppercase).reconcile(reference, roster)
