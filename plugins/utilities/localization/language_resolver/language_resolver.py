"""
LanguageResolver - maps a language identifier to a table column
Fixed languages first, then the header row (exact, then partial match)
"""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class LanguageSelection:
    """Active language: display name + column; custom when resolved only from header text"""
    name: str
    column: int
    is_custom: bool = False


class LanguageResolver:
    """
    Resolution order for an identifier:
    1. Fixed language name (case-insensitive) -> its configured column
    2. Header cell equal to the identifier (case-insensitive)
    3. Header cell containing the identifier or contained in it
    4. Not found (None)
    """

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.table_cache = kwargs['table_cache']

    def find_fixed_language(self, identifier: str) -> Optional[LanguageSelection]:
        """Fixed language by name, without touching the table"""
        wanted = identifier.strip().lower()
        for name, column in self.table_cache.get_fixed_languages().items():
            if name.lower() == wanted:
                return LanguageSelection(name=name, column=column)
        return None

    def _find_fixed_by_column(self, column: int) -> Optional[LanguageSelection]:
        for name, fixed_column in self.table_cache.get_fixed_languages().items():
            if fixed_column == column:
                return LanguageSelection(name=name, column=fixed_column)
        return None

    def find_language_column(self, identifier: str) -> Optional[int]:
        """Column of a language by header text (steps 2-3)"""
        header = self.table_cache.get_header()
        if not header:
            self.logger.error("[Localization] CSV file is empty or not loaded properly")
            return None

        wanted = identifier.strip().lower()
        cells = [cell.strip().lower() for cell in header]

        for index, cell in enumerate(cells):
            if cell == wanted:
                return index

        for index, cell in enumerate(cells):
            # Blank header cells would match anything
            if cell and (wanted in cell or cell in wanted):
                return index

        return None

    def resolve(self, identifier: Union[str, int, None]) -> Optional[int]:
        """Column index for a fixed name, fixed id or header text; None if not found"""
        selection = self.resolve_language(identifier)
        return selection.column if selection else None

    def resolve_language(self, identifier: Union[str, int, None]) -> Optional[LanguageSelection]:
        """Full selection for an identifier (see class docstring for the order)"""
        if identifier is None:
            return None

        if isinstance(identifier, int) and not isinstance(identifier, bool):
            selection = self._find_fixed_by_column(identifier)
            if selection is None:
                self.logger.warning(f"[Localization] No fixed language bound to column {identifier}")
            return self._checked(selection)

        identifier = str(identifier)
        if not identifier.strip():
            return None

        selection = self.find_fixed_language(identifier)
        if selection is not None:
            return self._checked(selection)

        column = self.find_language_column(identifier)
        if column is None:
            return None

        # A header match on a fixed column is that fixed language
        selection = self._find_fixed_by_column(column)
        if selection is not None:
            return self._checked(selection)

        return LanguageSelection(name=identifier, column=column, is_custom=True)

    def _checked(self, selection: Optional[LanguageSelection]) -> Optional[LanguageSelection]:
        if selection is None or not self.table_cache.is_loaded():
            return selection

        min_column, max_column = self.table_cache.get_column_range()
        if not min_column <= selection.column <= max_column:
            self.logger.warning(
                f"[Localization] Language '{selection.name}' uses column {selection.column}, "
                f"outside the table range {min_column}..{max_column}"
            )
        return selection

    def find_row_by_key(self, key: Optional[str]) -> Optional[int]:
        """First row whose column 0 equals the key (trimmed, case-insensitive)"""
        if key is None:
            return None

        wanted = key.strip().lower()
        for index, row in enumerate(self.table_cache.get_rows()):
            if row and row[0].strip().lower() == wanted:
                return index
        return None
