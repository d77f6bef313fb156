"""
Excel exporter for latest-record and reconciliation results.
Uses xlsxwriter for efficient large file generation.
"""

from pathlib import Path

import pandas as pd

from .csv_exporter import CsvExporter


class ExcelExporter(CsvExporter):
    """
    Exports results to Excel files with a formatted header row.
    """

    extension = "xlsx"

    def _write(self, df: pd.DataFrame, filename: Path, sheet_name: str) -> Path:
        self.output_path.mkdir(parents=True, exist_ok=True)

        with pd.ExcelWriter(filename, engine='xlsxwriter') as writer:
            df.to_excel(writer, sheet_name=sheet_name, index=False)

            workbook = writer.book
            header_format = workbook.add_format({
                'bold': True,
                'bg_color': '1F4E78',
                'font_color': 'white',
                'border': 1
            })

            worksheet = writer.sheets[sheet_name]
            for col_num, value in enumerate(df.columns.values):
                worksheet.write(0, col_num, value, header_format)
                if len(df):
                    max_len = max(df[value].astype(str).map(len).max(), len(str(value))) + 2
                else:
                    max_len = len(str(value)) + 2
                worksheet.set_column(col_num, col_num, min(max_len, 50))

            if len(df.columns):
                worksheet.autofilter(0, 0, len(df), len(df.columns) - 1)
            worksheet.freeze_panes(1, 0)

        return filename
