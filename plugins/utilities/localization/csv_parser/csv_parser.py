"""
CsvParser - quote-aware parser for translation tables
Turns raw CSV text into rows of fields
"""

from typing import List, Optional

DEFAULT_DELIMITER = ';'


class CsvParser:
    """
    Parser for semicolon (or other single character) separated tables:
    - Fields in quotes may contain delimiters, newlines and escaped quotes ("")
    - Carriage returns are dropped everywhere
    - Last row is emitted even without a trailing newline
    - Unterminated quoted field is closed implicitly with a warning
    """

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.settings_manager = kwargs['settings_manager']

        settings = self.settings_manager.get_plugin_settings("csv_parser")

        self.delimiter = self._normalize_delimiter(settings.get('delimiter', DEFAULT_DELIMITER))
        qualifier = settings.get('text_qualifier') or '"'
        self.text_qualifier = qualifier[0]

    @staticmethod
    def _normalize_delimiter(delimiter: Optional[str]) -> str:
        # Only the first character counts
        return delimiter[0] if delimiter else DEFAULT_DELIMITER

    def parse(self, text: Optional[str], delimiter: Optional[str] = None) -> List[List[str]]:
        """
        Parse CSV text into rows
        Empty result means the table is unusable, not that it is empty
        """
        if not text:
            return []

        if not text.strip():
            # Keep the structure callers expect: one row with one empty field
            return [[""]]

        sep = self._normalize_delimiter(delimiter) if delimiter is not None else self.delimiter
        quote = self.text_qualifier

        result: List[List[str]] = []
        current_row: List[str] = []
        current_field: List[str] = []
        in_quotes = False
        field_started = False

        try:
            i = 0
            length = len(text)
            while i < length:
                char = text[i]

                if char == '\r':
                    i += 1
                    continue

                if in_quotes:
                    if char == quote:
                        if i + 1 < length and text[i + 1] == quote:
                            # Escaped quote
                            current_field.append(quote)
                            i += 1
                        else:
                            in_quotes = False
                    else:
                        current_field.append(char)
                elif char == quote:
                    in_quotes = True
                    field_started = True
                elif char == sep:
                    current_row.append(''.join(current_field))
                    current_field = []
                    field_started = False
                elif char == '\n':
                    current_row.append(''.join(current_field))
                    current_field = []
                    field_started = False
                    result.append(current_row)
                    current_row = []
                else:
                    current_field.append(char)
                    field_started = True

                i += 1

            # Final field and row when the text has no trailing newline, "" included
            if field_started or current_row:
                current_row.append(''.join(current_field))
            if current_row:
                result.append(current_row)

            if in_quotes:
                self.logger.warning("[Localization] CSV parsing warning: unterminated quoted field at end of input")

        except Exception as e:
            self.logger.error(f"[Localization] CSV parsing error: {e}")
            # Never hand out partial data
            return []

        return result

    def split_naive(self, text: Optional[str], delimiter: Optional[str] = None) -> List[List[str]]:
        """
        Degraded parsing: split on newlines, then on the delimiter, no quote handling
        Empty lines become rows without fields
        """
        if text is None:
            return []

        sep = self._normalize_delimiter(delimiter) if delimiter is not None else self.delimiter
        rows = []
        for line in text.split('\n'):
            line = line.rstrip('\r')
            rows.append(line.split(sep) if line else [])
        return rows
