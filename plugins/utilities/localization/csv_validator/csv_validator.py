"""
CsvValidator - diagnostic checks for parsed translation tables
Never changes data and never blocks its use
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence


@dataclass(frozen=True)
class CsvFinding:
    level: str  # "info" | "warning"
    code: str
    message: str
    row: Optional[int] = None


class CsvValidator:
    """Checks column-count consistency of parsed rows and reports anomalies"""

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.settings_manager = kwargs['settings_manager']

        settings = self.settings_manager.get_plugin_settings("csv_validator")
        self.preview_fields = settings.get('preview_fields', 3)

    def validate(self, rows: Optional[Sequence[Sequence[str]]]) -> List[CsvFinding]:
        findings: List[CsvFinding] = []

        if not rows:
            self._report(findings, "warning", "empty_input", "CSV validation: empty or missing parsed data")
            return findings

        if len(rows[0]) == 0:
            self._report(findings, "warning", "empty_header", "CSV validation: header row is empty")
            return findings

        header_width = len(rows[0])
        self._report(findings, "info", "structure",
                     f"CSV structure: {len(rows)} rows, {header_width} columns in header")

        for index in range(1, len(rows)):
            row = rows[index]
            if len(row) == header_width:
                continue
            self._report(
                findings, "warning", "column_mismatch",
                f"CSV validation: row {index + 1} has {len(row)} columns, expected {header_width}. "
                f"Preview: {self._preview(row)}",
                row=index,
            )

        empty_rows = sum(1 for row in rows if len(row) == 1 and not row[0].strip())
        if empty_rows:
            self._report(findings, "warning", "empty_rows",
                         f"CSV validation: found {empty_rows} empty rows that may indicate parsing issues")

        return findings

    def _preview(self, row: Sequence[str]) -> str:
        preview = ", ".join(row[:self.preview_fields])
        if len(row) > self.preview_fields:
            preview += "..."
        return preview

    def _report(self, findings: List[CsvFinding], level: str, code: str, message: str, row: Optional[int] = None):
        findings.append(CsvFinding(level=level, code=code, message=message, row=row))
        if level == "warning":
            self.logger.warning(f"[Localization] {message}")
        else:
            self.logger.info(f"[Localization] {message}")
