"""
LanguageStorage - persisted language choice
Single JSON document {"currentSavedLanguage": "<name>"}
"""

import json
import os
from typing import Optional


class LanguageStorage:
    """Reads and writes the last selected language"""

    KEY = "currentSavedLanguage"

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.settings_manager = kwargs['settings_manager']

        settings = self.settings_manager.get_plugin_settings("language_storage")
        self.file_path = self.settings_manager.resolve_file_path(
            settings.get('file_path', 'data/localization/language_global.json')
        )

    def exists(self) -> bool:
        return os.path.isfile(self.file_path)

    def load(self) -> Optional[str]:
        """Saved language name or None (missing file, unreadable or malformed document)"""
        if not self.exists():
            return None

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            self.logger.error(f"[Localization] Failed to read saved language from '{self.file_path}': {e}")
            return None

        if not isinstance(data, dict):
            self.logger.warning(f"[Localization] Unexpected saved language document in '{self.file_path}'")
            return None

        language = data.get(self.KEY)
        if not isinstance(language, str) or not language.strip():
            return None
        return language

    def save(self, language: str) -> bool:
        """Write the language name, creating parent directories as needed"""
        try:
            directory = os.path.dirname(self.file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump({self.KEY: language}, f, ensure_ascii=False, indent=4)
            return True
        except OSError as e:
            self.logger.error(f"[Localization] Failed to save language to '{self.file_path}': {e}")
            return False

    def load_or_create(self, default_language: str) -> str:
        """Saved language, or the default written to a fresh file"""
        language = self.load()
        if language is not None:
            return language

        self.save(default_language)
        return default_language
