"""Export modules for delimited text and Excel output."""

from pathlib import Path

from .csv_exporter import CsvExporter
from .excel_exporter import ExcelExporter


def create_exporter(config, output_path: Path) -> CsvExporter:
    """Factory function to create the exporter selected by output.format."""
    exporter_cls = ExcelExporter if config.output.format == 'xlsx' else CsvExporter
    return exporter_cls(
        output_path=output_path,
        file_prefix=config.output.file_prefix,
        date_suffix=config.output.date_suffix,
        delimiter=config.output.delimiter,
        columns=config.columns.record_columns(),
        roster_column=config.columns.pc_name,
        timestamp_format=config.selection.timestamp_formats[0]
    )


__all__ = [
    'CsvExporter',
    'ExcelExporter',
    'create_exporter'
]
