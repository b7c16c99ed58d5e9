"""
Localization Service - consumer-facing text lookup
(language selection, text by row or key, placeholders, bindings refreshed on language change)
"""

from typing import Any, Optional, Union

from .modules.binding_registry import BindingRegistry, TextTarget
from .modules.font_selector import FontSelector


class LocalizationService:
    """
    Entry point for the rendering layer:
    - Active language (restored from storage on initialize, persisted on change)
    - Text lookup by row or key, with positional placeholder substitution
    - Static and dynamic bindings re-filled on language change and reload
    - Font selector key for the active language
    """

    def __init__(self, **kwargs):
        self.logger = kwargs['logger']
        self.settings_manager = kwargs['settings_manager']
        self.table_cache = kwargs['table_cache']
        self.language_resolver = kwargs['language_resolver']
        self.text_cache = kwargs['text_cache']
        self.language_storage = kwargs['language_storage']

        self.settings = self.settings_manager.get_plugin_settings('localization_service')
        self.default_language = self.settings.get('default_language', 'English')
        self.persist_language = self.settings.get('persist_language', True)

        self.font_selector = FontSelector(
            self.logger,
            default_font=self.settings.get('default_font', 'default'),
            special_fonts=self.settings.get('special_fonts') or {},
        )
        self.bindings = BindingRegistry(self.logger)

        self._initialized = False
        self._selection = self._default_selection()

    def _default_selection(self):
        selection = self.language_resolver.find_fixed_language(self.default_language)
        if selection is not None:
            return selection

        fixed = self.table_cache.get_fixed_languages()
        if fixed:
            name = next(iter(fixed))
            self.logger.warning(f"[Localization] Default language '{self.default_language}' is not fixed, using '{name}'")
            return self.language_resolver.find_fixed_language(name)

        self.logger.warning("[Localization] No fixed languages configured, language must be selected explicitly")
        return None

    # === Lifecycle ===

    def initialize(self) -> bool:
        """Restore the saved language and fill bindings registered before initialization"""
        if self._initialized:
            return True

        language = self.default_language
        if self.persist_language:
            language = self.language_storage.load_or_create(self.default_language)

        selection = self.language_resolver.resolve_language(language)
        if selection is None:
            self.logger.warning(f"[Localization] Saved language '{language}' not found, using default")
        else:
            self._selection = selection

        self._initialized = True
        self.text_cache.clear()
        self.font_selector.select(self.current_language_tag())
        self.refresh_bindings()

        self.logger.info(f"[Localization] Initialized with language '{self.current_language_tag()}'")
        return True

    def is_initialized(self) -> bool:
        return self._initialized

    def shutdown(self):
        self.text_cache.clear()
        self._initialized = False

    def reload(self) -> bool:
        """Forced re-parse of the table, cache invalidation and binding refresh"""
        reloaded = self.table_cache.reload()
        self.text_cache.clear()
        self.refresh_bindings()
        return reloaded

    # === Language ===

    def change_language(self, language: Union[str, int, None]) -> bool:
        """Switch by language name, header text or fixed id; invalid input is logged and ignored"""
        if language is None or (isinstance(language, str) and not language.strip()):
            self.logger.error("[Localization] Language name is empty")
            return False

        selection = self.language_resolver.resolve_language(language)
        if selection is None:
            self.logger.error(f"[Localization] Language '{language}' not found in the CSV file")
            return False

        previous = self._selection
        self._selection = selection

        if self.persist_language and (previous is None or previous.name != selection.name):
            self.language_storage.save(selection.name)

        self.text_cache.clear()
        self.font_selector.select(selection.name)
        self.refresh_bindings()

        self.logger.info(f"[Localization] Language changed to '{selection.name}' (column {selection.column})")
        return True

    def current_language(self):
        return self._selection

    def current_language_tag(self) -> Optional[str]:
        return self._selection.name if self._selection else None

    def current_font_selector(self) -> str:
        return self.font_selector.select(self.current_language_tag())

    # === Text ===

    def _row_for_key(self, key: Optional[str]) -> Optional[int]:
        if key is None or not key.strip():
            self.logger.warning("[Localization] Text key is empty")
            return None

        row = self.language_resolver.find_row_by_key(key)
        if row is None:
            self.logger.warning(f"[Localization] Key '{key}' not found in the CSV file")
        return row

    def get_text(self, row: int) -> str:
        if self._selection is None:
            self.logger.warning("[Localization] No language selected")
            return ""
        return self.text_cache.get_cell(row, self._selection.column, self._selection.name)

    def get_text_by_key(self, key: Optional[str]) -> str:
        row = self._row_for_key(key)
        if row is None:
            return ""
        return self.get_text(row)

    def replace_placeholders(self, row: int, *args: Any) -> str:
        if self._selection is None:
            self.logger.warning("[Localization] No language selected")
            return ""
        return self.text_cache.get_formatted(row, self._selection.column, self._selection.name, args)

    def replace_placeholders_by_key(self, key: Optional[str], *args: Any) -> str:
        row = self._row_for_key(key)
        if row is None:
            return ""
        return self.replace_placeholders(row, *args)

    # === Bindings ===

    def bind_static(self, target: Optional[TextTarget], row: int) -> bool:
        if target is None:
            self.logger.error("[Localization] Cannot bind text: target is None")
            return False

        binding = self.bindings.bind_static(target, row)
        if self._initialized:
            self.bindings.push(binding, self.get_text(row), self.current_font_selector())
        return True

    def bind_dynamic(self, target: Optional[TextTarget], row: int, *args: Any) -> bool:
        if target is None:
            self.logger.error("[Localization] Cannot bind text: target is None")
            return False

        binding = self.bindings.bind_dynamic(target, row, args)
        if self._initialized:
            self.bindings.push(binding, self.replace_placeholders(row, *args), self.current_font_selector())
        return True

    def bind_static_by_key(self, key: Optional[str], target: Optional[TextTarget]) -> bool:
        row = self._row_for_key(key)
        if row is None:
            return False
        return self.bind_static(target, row)

    def bind_dynamic_by_key(self, key: Optional[str], target: Optional[TextTarget], *args: Any) -> bool:
        row = self._row_for_key(key)
        if row is None:
            return False
        return self.bind_dynamic(target, row, *args)

    def unbind(self, target: TextTarget) -> bool:
        return self.bindings.unbind(target)

    def refresh_bindings(self) -> int:
        """Re-push text to every live binding, returns the number of targets updated"""
        if not self._initialized:
            return 0

        self.bindings.prune()
        font = self.current_font_selector()
        updated = 0

        for binding in self.bindings.static_bindings():
            if self.bindings.push(binding, self.get_text(binding.row), font):
                updated += 1

        for binding in self.bindings.dynamic_bindings():
            text = self.replace_placeholders(binding.row, *binding.args)
            if self.bindings.push(binding, text, font):
                updated += 1

        return updated

    def get_bindings_count(self) -> int:
        return len(self.bindings)
