#!/usr/bin/env python3
"""
Workstation Inventory Tool - Main Entry Point

This script reads a hardware scan report, keeps the latest scan per workstation,
reconciles a roster of workstation names against that table, and exports the
results as CSV or Excel files.

Usage:
    workstation-inventory [--config CONFIG_PATH] [--mode {latest,reconcile,full}]
                          [--scan-report PATH] [--roster PATH] [--reference-table PATH]
                          [--output-dir DIR] [--format {csv,xlsx}]
"""

import argparse
import sys
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .connectors import create_reference_connector, create_roster_connector, create_scan_connector
from .exporters import create_exporter
from .processors import (
    CanonicalRecord,
    InventoryError,
    RosterEntry,
    RosterReconciliation,
    ScanRecord,
    select_latest
)
from .utils import ProcessingMode, create_output_directories, load_config, setup_logger


class InventoryTool:
    """
    Main orchestrator for the Workstation Inventory Tool.
    """

    def __init__(
        self,
        config_path: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ):
        self.config_path = config_path
        self.overrides = overrides or {}
        self.config = None
        self.logger = None
        self.output_path = None

        self.scan_records: List[ScanRecord] = []
        self.roster: List[RosterEntry] = []
        self.latest: Optional[List[CanonicalRecord]] = None
        self.reference: List[CanonicalRecord] = []
        self.matched: Optional[List[CanonicalRecord]] = None
        self.unmatched: Optional[List[RosterEntry]] = None
        self.stats: Dict[str, Dict[str, Any]] = {}

        self.execution_stats = {
            'start_time': None,
            'end_time': None,
            'load_time': None,
            'selection_time': None,
            'reconciliation_time': None,
            'export_time': None,
            'errors': []
        }

    def initialize(self) -> bool:
        """Initialize configuration and logging."""
        try:
            self.config = load_config(self.config_path, self.overrides)

            self.logger = setup_logger(
                name="workstation_inventory",
                level=self.config.logging.level,
                log_file=self.config.logging.file,
                max_size_mb=self.config.logging.max_size_mb,
                backup_count=self.config.logging.backup_count,
                log_format=self.config.logging.format
            )

            self.output_path = create_output_directories(self.config)

            self.logger.info("=" * 60)
            self.logger.info("Workstation Inventory Tool - Starting")
            self.logger.info("=" * 60)
            self.logger.info(f"Configuration loaded from: {self.config_path or 'command line'}")
            self.logger.info(f"Mode: {self.config.mode.value}")
            self.logger.info(f"Output: {self.output_path}")

            return True

        except FileNotFoundError as e:
            print(f"ERROR: Configuration file not found: {e}", file=sys.stderr)
            return False
        except (ValidationError, ValueError) as e:
            print(f"ERROR: Configuration validation failed: {e}", file=sys.stderr)
            return False

    def load_inputs(self) -> bool:
        """Read the scan report, roster and reference table required by the mode."""
        self.logger.info("-" * 40)
        self.logger.info("Loading input files...")

        start_time = datetime.now()
        mode = self.config.mode

        try:
            if mode in (ProcessingMode.LATEST, ProcessingMode.FULL):
                connector = create_scan_connector(self.config)
                self.scan_records = connector.fetch_all_data()
                self.logger.info(f"Scan report stats: {connector.get_stats()}")

            if mode in (ProcessingMode.RECONCILE, ProcessingMode.FULL):
                connector = create_roster_connector(self.config)
                self.roster = connector.fetch_all_data()
                self.logger.info(f"Roster stats: {connector.get_stats()}")

            if mode is ProcessingMode.RECONCILE:
                connector = create_reference_connector(self.config)
                self.reference = connector.fetch_all_data()
                self.logger.info(f"Reference table stats: {connector.get_stats()}")

            self.execution_stats['load_time'] = (
                datetime.now() - start_time
            ).total_seconds()
            return True

        except InventoryError as e:
            self.logger.error(f"Error loading input files: {e}")
            self.execution_stats['errors'].append(f"Load error: {str(e)}")
            return False

    def select_latest_records(self) -> bool:
        """Keep the latest scan record per workstation."""
        self.logger.info("-" * 40)
        self.logger.info("Selecting latest scan per workstation...")

        start_time = datetime.now()

        try:
            result = select_latest(
                self.scan_records,
                timestamp_formats=self.config.selection.timestamp_formats,
                group_key=self.config.selection.group_key,
                uppercase=self.config.normalization.uppercase
            )
        except InventoryError as e:
            self.logger.error(f"Error selecting latest records: {e}")
            self.execution_stats['errors'].append(f"Selection error: {str(e)}")
            return False

        self.latest = result.records
        self.reference = result.records
        self.stats['selection'] = result.stats.to_dict()

        self.execution_stats['selection_time'] = (
            datetime.now() - start_time
        ).total_seconds()

        self.logger.info(f"Selection complete: {len(self.latest)} workstations")
        return True

    def reconcile_roster(self) -> bool:
        """Reconcile the roster against the reference table."""
        self.logger.info("-" * 40)
        self.logger.info("Reconciling roster...")

        start_time = datetime.now()

        reconciler = RosterReconciliation(uppercase=self.config.normalization.uppercase)
        result = reconciler.reconcile(self.reference, self.roster)

        self.matched = result.matched
        self.unmatched = result.unmatched
        self.stats['reconciliation'] = result.stats.to_dict()

        self.execution_stats['reconciliation_time'] = (
            datetime.now() - start_time
        ).total_seconds()

        self.logger.info(
            f"Reconciliation complete: {len(self.matched)} matched, {len(self.unmatched)} unmatched"
        )
        self.logger.info(f"Match rate: {result.stats.match_rate:.2f}%")
        return True

    def generate_exports(self) -> bool:
        """Write every produced result to the output folder."""
        self.logger.info("-" * 40)
        self.logger.info(f"Generating {self.config.output.format.upper()} exports...")

        start_time = datetime.now()

        try:
            exporter = create_exporter(self.config, self.output_path)
            written = exporter.export_all(
                latest=self.latest,
                matched=self.matched,
                unmatched=self.unmatched,
                stats=self.stats
            )
        except OSError as e:
            self.logger.error(f"Error generating exports: {e}", exc_info=True)
            self.execution_stats['errors'].append(f"Export error: {str(e)}")
            return False

        self.execution_stats['export_time'] = (
            datetime.now() - start_time
        ).total_seconds()

        for path in written:
            self.logger.info(f"Wrote {path}")
        return True

    def run(self) -> bool:
        """Run the complete workflow for the configured mode."""
        self.execution_stats['start_time'] = datetime.now()

        if not self.initialize():
            return False

        mode = self.config.mode

        if not self.load_inputs():
            self.logger.error("Failed to load input files. Aborting.")
            return False

        if mode in (ProcessingMode.LATEST, ProcessingMode.FULL):
            if not self.select_latest_records():
                self.logger.error("Failed to select latest records. Aborting.")
                return False

        if mode in (ProcessingMode.RECONCILE, ProcessingMode.FULL):
            self.reconcile_roster()

        if not self.generate_exports():
            self.logger.error("Failed to write exports.")
            return False

        self.execution_stats['end_time'] = datetime.now()
        self._log_summary()

        return len(self.execution_stats['errors']) == 0

    def _log_summary(self):
        """Log execution summary."""
        duration = (
            self.execution_stats['end_time'] -
            self.execution_stats['start_time']
        ).total_seconds()

        self.logger.info("=" * 60)
        self.logger.info("EXECUTION SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Total duration: {duration:.2f} seconds")
        self.logger.info(f"Load: {self.execution_stats.get('load_time') or 0:.2f}s")
        self.logger.info(f"Selection: {self.execution_stats.get('selection_time') or 0:.2f}s")
        self.logger.info(f"Reconciliation: {self.execution_stats.get('reconciliation_time') or 0:.2f}s")
        self.logger.info(f"Export generation: {self.execution_stats.get('export_time') or 0:.2f}s")
        self.logger.info("-" * 40)
        self.logger.info(f"Scan records read: {len(self.scan_records)}")
        if self.latest is not None:
            self.logger.info(f"Workstations (latest): {len(self.latest)}")
        if self.matched is not None:
            self.logger.info(f"Roster entries: {len(self.roster)}")
            self.logger.info(f"Matched: {len(self.matched)}")
            self.logger.info(f"Unmatched: {len(self.unmatched)}")
        self.logger.info("-" * 40)
        self.logger.info(f"Exports saved to: {self.output_path}")
        self.logger.info("=" * 60)
        self.logger.info("Execution complete")
        self.logger.info("=" * 60)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Workstation Inventory Tool - Latest scan per workstation and roster reconciliation"
    )
    parser.add_argument(
        "--config", "-c",
        default=None,
        help="Path to a YAML configuration file"
    )
    parser.add_argument(
        "--mode", "-m",
        choices=[m.value for m in ProcessingMode],
        help="latest: dedupe the scan report; reconcile: match a roster against "
             "a reference table; full: both (default: full)"
    )
    parser.add_argument("--scan-report", help="Scan report file (.csv, .xlsx, .xlsm)")
    parser.add_argument("--roster", help="Roster file with a PC Name column")
    parser.add_argument("--reference-table", help="Latest-record table for reconcile mode")
    parser.add_argument("--sheet-name", help="Worksheet to read from Excel inputs")
    parser.add_argument("--output-dir", "-o", help="Folder for the exported files")
    parser.add_argument("--format", choices=["csv", "xlsx"], help="Export file format")
    parser.add_argument(
        "--group-key",
        choices=["raw", "normalized"],
        help="Group scan records by the name as received or by its normalized form"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level"
    )
    parser.add_argument("--log-file", help="Log file path")
    return parser.parse_args(argv)


def build_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map command-line flags to dotted configuration keys."""
    return {
        'mode': args.mode,
        'inputs.scan_report': args.scan_report,
        'inputs.roster': args.roster,
        'inputs.reference_table': args.reference_table,
        'inputs.sheet_name': args.sheet_name,
        'output.base_path': args.output_dir,
        'output.format': args.format,
        'selection.group_key': args.group_key,
        'logging.level': args.log_level,
        'logging.file': args.log_file,
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    tool = InventoryTool(config_path=args.config, overrides=build_overrides(args))

    success = tool.run()

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
