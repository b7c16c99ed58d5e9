"""
Font selector lookup - opaque font key per language
"""

from typing import Dict, Optional


class FontSelector:
    """Language name -> font key from a lookup table, default key otherwise"""

    def __init__(self, logger, default_font: str = "default", special_fonts: Optional[Dict[str, str]] = None):
        self.logger = logger
        self.default_font = default_font or "default"
        self.special_fonts = {
            str(name).strip().lower(): str(font)
            for name, font in (special_fonts or {}).items()
        }
        self._current: Optional[str] = None

    def select(self, language_name: Optional[str]) -> str:
        """Font key for a language; a change of key is logged once"""
        font = self.default_font
        if language_name:
            font = self.special_fonts.get(language_name.strip().lower(), self.default_font)

        if font != self._current:
            self.logger.info(f"[Localization] Font selector changed to '{font}' for language '{language_name}'")
            self._current = font
        return font

    @property
    def current(self) -> str:
        return self._current or self.default_font
