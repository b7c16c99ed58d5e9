"""
TableCache - holds the parsed translation table
Re-parses the source lazily when its fingerprint (mtime/size) changes
"""

import os
from typing import Dict, List, Optional, Tuple

from .fingerprint import SourceFingerprint


class TableCache:
    """
    Owner of the parsed table:
    - Lazy load on first access
    - Reload only when the source file changed (mtime or size) or the path changed
    - Fallback to naive splitting when the parser returns nothing
    - Valid column range from fixed languages and header width
    """

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.settings_manager = kwargs['settings_manager']
        self.csv_parser = kwargs['csv_parser']
        self.csv_validator = kwargs['csv_validator']

        settings = self.settings_manager.get_plugin_settings("table_cache")

        self.csv_path = settings.get('csv_path', 'resources/localization/strings.csv')
        self.encoding = settings.get('encoding', 'utf-8-sig')
        self.delimiter = settings.get('delimiter') or None  # None -> parser default
        self.watch_changes = settings.get('watch_changes', True)
        self._fixed_languages = self._normalize_fixed_languages(settings.get('fixed_languages') or {})

        self._rows: Optional[List[List[str]]] = None
        self._fingerprint: Optional[SourceFingerprint] = None
        self._source_path: Optional[str] = None
        self._memory_text: Optional[str] = None

        self._min_column = 0
        self._max_column = 0
        self.last_findings = []

        # Incremented on every successful (re)load, caches compare against it
        self.version = 0

    def _normalize_fixed_languages(self, mapping: dict) -> Dict[str, int]:
        fixed = {}
        for name, column in mapping.items():
            try:
                fixed[str(name)] = int(column)
            except (TypeError, ValueError):
                self.logger.warning(f"[Localization] Fixed language '{name}' has invalid column index: {column}")
        return fixed

    # === Loading ===

    def ensure_fresh(self, source: Optional[str] = None) -> bool:
        """
        Re-parse the source if it changed since the last load
        :param source: CSV file path (absolute or relative to the project root), configured csv_path by default
        :return: True if the table was (re)loaded
        """
        path = self.settings_manager.resolve_file_path(str(source or self._source_path or self.csv_path))

        try:
            stat = os.stat(path)
        except OSError as e:
            self.logger.error(f"[Localization] Failed to load CSV file '{path}': {e}")
            return False

        fingerprint = SourceFingerprint(path=path, mtime_ns=stat.st_mtime_ns, size=stat.st_size)
        if self._rows and self._memory_text is None and fingerprint == self._fingerprint:
            return False

        try:
            with open(path, 'r', encoding=self.encoding) as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as e:
            self.logger.error(f"[Localization] Failed to read CSV file '{path}': {e}")
            return False

        if self._fingerprint is not None and fingerprint.path == self._fingerprint.path:
            self.logger.info(f"[Localization] CSV source changed, reloading: {path}")

        self._source_path = path
        self._fingerprint = fingerprint
        self._memory_text = None
        self._apply_text(text, path)
        return True

    def load_text(self, text: str, origin: str = "<memory>"):
        """Load the table from in-memory text (no fingerprint tracking)"""
        self._fingerprint = None
        self._source_path = None
        self._memory_text = text
        self._apply_text(text, origin)

    def reload(self) -> bool:
        """Forced re-parse of the current source"""
        if self._memory_text is not None:
            self._apply_text(self._memory_text, "<memory>")
            return True

        self._fingerprint = None
        self._rows = None
        return self.ensure_fresh()

    def _apply_text(self, text: str, origin: str):
        rows = self.csv_parser.parse(text, self.delimiter)
        self.last_findings = self.csv_validator.validate(rows)

        if not rows:
            self.logger.warning(f"[Localization] Parsed CSV data is empty, using fallback parsing: {origin}")
            rows = self.csv_parser.split_naive(text, self.delimiter)
        else:
            self.logger.info(f"[Localization] CSV file successfully parsed: {len(rows)} rows, {len(rows[0])} columns")

        self._rows = rows
        self._update_column_range()
        self.version += 1

    def _update_column_range(self):
        columns = [column for column in self._fixed_languages.values() if column >= 0]
        self._min_column = min(columns) if columns else 0

        self._max_column = 0
        header = self._rows[0] if self._rows else []
        for index in range(len(header) - 1, -1, -1):
            if header[index].strip():
                self._max_column = index
                break

    def _ensure_loaded(self):
        if self._memory_text is not None:
            return
        if not self._rows or self.watch_changes:
            self.ensure_fresh()

    def check_source(self) -> int:
        """Load or reload the table if needed, return the current version"""
        self._ensure_loaded()
        return self.version

    # === Access ===

    def get_rows(self) -> List[List[str]]:
        self._ensure_loaded()
        return self._rows or []

    def get_header(self) -> List[str]:
        rows = self.get_rows()
        return rows[0] if rows else []

    def get_row_count(self) -> int:
        return len(self.get_rows())

    def get_element(self, row: int, column: int) -> str:
        """Cell value; out of range access logs a warning and yields an empty string"""
        rows = self.get_rows()

        if not 0 <= row < len(rows):
            self.logger.warning(f"[Localization] Not enough rows in the CSV file. Requested row: {row}, total rows: {len(rows)}")
            return ""

        fields = rows[row]
        if not 0 <= column < len(fields):
            self.logger.warning(f"[Localization] Row {row} does not contain an element at column {column}. Columns available: {len(fields)}")
            return ""

        return fields[column]

    def get_fixed_languages(self) -> Dict[str, int]:
        return dict(self._fixed_languages)

    def get_column_range(self) -> Tuple[int, int]:
        """(min, max) known language column indices"""
        return self._min_column, self._max_column

    def get_source_fingerprint(self) -> Optional[SourceFingerprint]:
        return self._fingerprint

    def is_loaded(self) -> bool:
        return bool(self._rows)
