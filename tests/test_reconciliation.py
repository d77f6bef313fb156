"""Unit tests for roster reconciliation."""

from __future__ import annotations

import logging

from conftest import roster
from workstation_inventory.processors.records import CanonicalRecord, RosterEntry
from workstation_inventory.processors.reconciliation import RosterReconciliation, reconcile
from workstation_inventory.processors.selector import select_latest


def _ref(name: str, user: str = "") -> CanonicalRecord:
    return CanonicalRecord(workstation_name=name, last_hardware_scan="1/1/2024 08:00", last_logged_user_id=user)


def test_matches_by_normalized_name() -> None:
    reference = [_ref("LAB-01", user="u1"), _ref("LAB-02")]
    result = reconcile(reference, roster("  lab-01 ", "LAB-03"))

    assert result.matched == [reference[0]]
    assert [e.pc_name for e in result.unmatched] == ["LAB-03"]


def test_unmatched_entries_keep_their_original_name() -> None:
    entries = [RosterEntry(pc_name="  Missing-PC ", source_row=2, raw={"PC Name": "  Missing-PC ", "Owner": "x"})]
    result = reconcile([_ref("LAB-01")], entries)

    assert result.unmatched == entries
    assert result.unmatched[0].pc_name == "  Missing-PC "
    assert result.unmatched[0].raw == {"PC Name": "  Missing-PC ", "Owner": "x"}


def test_partition_is_complete() -> None:
    reference = [_ref("A"), _ref("B"), _ref("C")]
    names = ("a", "b", "x", "", "  ", "C", "c", "y")
    result = reconcile(reference, roster(*names))

    assert len(result.matched) + len(result.unmatched) == len(names)
    assert result.stats.matched == 4
    assert result.stats.unmatched == 4


def test_duplicate_roster_names_are_looked_up_each_time() -> None:
    reference = [_ref("LAB-01")]
    result = reconcile(reference, roster("LAB-01", "lab-01", "LAB-01"))

    assert result.matched == [reference[0]] * 3
    assert result.unmatched == []
    assert result.stats.duplicate_roster_names == 1


def test_empty_reference_leaves_everything_unmatched() -> None:
    entries = roster("A", "B")
    result = reconcile([], entries)

    assert result.matched == []
    assert result.unmatched == entries
    assert result.stats.match_rate == 0.0


def test_empty_roster() -> None:
    result = reconcile([_ref("A")], [])

    assert result.matched == []
    assert result.unmatched == []
    assert result.stats.total_reference == 1


def test_blank_roster_names_never_match_blank_reference_names() -> None:
    result = reconcile([_ref(""), _ref("   ")], roster("", "  "))

    assert result.matched == []
    assert len(result.unmatched) == 2


def test_colliding_reference_names_pick_first_in_reference_order(caplog) -> None:
    first = _ref("PC01", user="first")
    second = _ref("pc01", user="second")

    with caplog.at_level(logging.WARNING):
        result = reconcile([first, second], roster("Pc01"))

    assert result.matched == [first]
    assert result.stats.ambiguous_reference_keys == 1
    assert "collide" in caplog.text


def test_inputs_are_not_mutated() -> None:
    reference = [_ref("A"), _ref("B")]
    entries = roster("b", "z")
    reference_before = list(reference)
    entries_before = list(entries)

    reconcile(reference, entries)

    assert reference == reference_before
    assert entries == entries_before


def test_stats_and_name_helpers() -> None:
    reconciler = RosterReconciliation()
    result = reconciler.reconcile([_ref("A"), _ref("B")], roster("a", "b", "c", "d"))

    assert result.stats.to_dict() == {
        "total_roster": 4,
        "total_reference": 2,
        "matched": 2,
        "unmatched": 2,
        "duplicate_roster_names": 0,
        "ambiguous_reference_keys": 0,
        "match_rate": 50.0,
    }
    assert reconciler.get_matched_names(result) == ["A", "B"]
    assert reconciler.get_unmatched_names(result) == ["c", "d"]


def test_lowercase_folding_matches_the_same_names() -> None:
    result = reconcile([_ref("STRASSE-PC")], roster("straße-pc"), uppercase=False)

    assert len(result.matched) == 1


def test_end_to_end_scenario(lab_scans) -> None:
    latest = select_latest(lab_scans).records
    result = reconcile(latest, roster("Lab-01", "LAB-03"))

    assert len(result.matched) == 1
    assert result.matched[0].workstation_name == "LAB-01"
    assert result.matched[0].last_logged_user_id == "u2"
    assert [e.pc_name for e in result.unmatched] == ["LAB-03"]
