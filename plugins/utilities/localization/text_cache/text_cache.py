"""
TextCache - two-level memoized lookup
Cells by (row, column) and substituted texts by (row, language, argument signature)
"""

import hashlib
import json
from typing import Any, Dict, Optional, Sequence, Tuple


class TextCache:
    """
    Cell and formatted text caches:
    - Both caches are cleared together (language change, table reload, explicit clear)
    - Cell values come from table_cache, formatting from placeholder_substitutor
    """

    EMPTY_SIGNATURE = "empty"

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.table_cache = kwargs['table_cache']
        self.placeholder_substitutor = kwargs['placeholder_substitutor']

        self._cells: Dict[Tuple[int, int], str] = {}
        self._formatted: Dict[Tuple[int, str, str], str] = {}

        self._cached_language: Optional[str] = None
        self._cached_version: Optional[int] = None

        self._hits = 0
        self._misses = 0

    def _sync_state(self, language_tag: Optional[str]):
        """Drop everything when the language or the table version moved"""
        version = self.table_cache.check_source()
        if language_tag != self._cached_language or version != self._cached_version:
            self.clear()
            self._cached_language = language_tag
            self._cached_version = version

    def get_cell(self, row: int, column: int, language_tag: Optional[str]) -> str:
        self._sync_state(language_tag)
        return self._cell(row, column)

    def _cell(self, row: int, column: int) -> str:
        # Caller has already synced the state
        key = (row, column)
        cached = self._cells.get(key)
        if cached is not None:
            self._hits += 1
            return cached

        self._misses += 1
        value = self.table_cache.get_element(row, column)
        self._cells[key] = value
        return value

    def get_formatted(self, row: int, column: int, language_tag: Optional[str], args: Optional[Sequence[Any]] = None) -> str:
        self._sync_state(language_tag)

        key = (row, language_tag or "", self.compute_signature(args))
        cached = self._formatted.get(key)
        if cached is not None:
            self._hits += 1
            return cached

        text = self._cell(row, column)
        if not text:
            return text

        self._misses += 1
        formatted = self.placeholder_substitutor.apply(text, args)
        self._formatted[key] = formatted
        return formatted

    @classmethod
    def compute_signature(cls, args: Optional[Sequence[Any]]) -> str:
        """Stable signature of an ordered argument list"""
        if not args:
            return cls.EMPTY_SIGNATURE

        payload = json.dumps([None if value is None else str(value) for value in args], ensure_ascii=False)
        return hashlib.md5(payload.encode('utf-8')).hexdigest()

    def clear(self):
        """Wholesale invalidation of both caches"""
        if self._cells or self._formatted:
            self.logger.debug(f"[Localization] Text cache cleared ({len(self._cells)} cells, {len(self._formatted)} formatted)")
        self._cells.clear()
        self._formatted.clear()
        self._cached_language = None
        self._cached_version = None

    def get_stats(self) -> Dict[str, int]:
        return {
            'hits': self._hits,
            'misses': self._misses,
            'cells': len(self._cells),
            'formatted': len(self._formatted),
        }
