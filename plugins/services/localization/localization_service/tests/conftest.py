"""
Local fixtures for localization_service tests
"""
import os
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger, temp_dir  # noqa: F401

from plugins.services.localization.localization_service.localization_service import LocalizationService
from plugins.utilities.localization.csv_parser.csv_parser import CsvParser
from plugins.utilities.localization.csv_validator.csv_validator import CsvValidator
from plugins.utilities.localization.language_resolver.language_resolver import LanguageResolver
from plugins.utilities.localization.language_storage.language_storage import LanguageStorage
from plugins.utilities.localization.placeholder_substitutor.placeholder_substitutor import PlaceholderSubstitutor
from plugins.utilities.localization.table_cache.table_cache import TableCache
from plugins.utilities.localization.text_cache.text_cache import TextCache

TABLE_TEXT = (
    "key;description;English;Chinese;German;Klingon\n"
    "yes_key;Confirmation;Yes;是;Ja;HIja'\n"
    "greeting;Greeting;Hello, {name}!;你好，{name}！;Hallo, {name}!;nuqneH, {name}!\n"
    "score;Score;{0} of {1};{0} / {1};{0} von {1};\n"
)


class TextTarget:
    """Renderable stand-in: remembers what was pushed to it"""

    def __init__(self):
        self.text = None
        self.font = None
        self.calls = 0

    def set_text(self, text, font_selector):
        self.text = text
        self.font = font_selector
        self.calls += 1


@pytest.fixture
def csv_file(temp_dir):
    path = temp_dir / "strings.csv"
    path.write_text(TABLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def language_file(temp_dir):
    return temp_dir / "language_global.json"


@pytest.fixture
def service_settings():
    return {
        'default_language': 'English',
        'persist_language': True,
        'default_font': 'default',
        'special_fonts': {'Chinese': 'cjk', 'Japanese': 'cjk', 'Korean': 'cjk'},
    }


@pytest.fixture
def mock_settings_manager(temp_dir, csv_file, language_file, service_settings):
    settings = {
        'csv_parser': {'delimiter': ';', 'text_qualifier': '"'},
        'csv_validator': {'preview_fields': 3},
        'table_cache': {
            'csv_path': str(csv_file),
            'encoding': 'utf-8-sig',
            'delimiter': '',
            'watch_changes': True,
            'fixed_languages': {'English': 2, 'Chinese': 3, 'German': 4},
        },
        'language_storage': {'file_path': str(language_file)},
        'localization_service': service_settings,
    }
    mock = MagicMock()
    mock.get_plugin_settings.side_effect = lambda name: dict(settings.get(name, {}))
    mock.resolve_file_path.side_effect = lambda path: path if os.path.isabs(path) else os.path.join(str(temp_dir), path)
    return mock


@pytest.fixture
def localization_service(module_logger, mock_settings_manager):
    """Service wired by hand the same way the DI container wires it"""
    settings_manager = mock_settings_manager
    table_cache = TableCache(
        logger=module_logger.get_logger("table_cache"),
        settings_manager=settings_manager,
        csv_parser=CsvParser(logger=module_logger.get_logger("csv_parser"), settings_manager=settings_manager),
        csv_validator=CsvValidator(logger=module_logger.get_logger("csv_validator"), settings_manager=settings_manager),
    )
    text_cache = TextCache(
        logger=module_logger.get_logger("text_cache"),
        table_cache=table_cache,
        placeholder_substitutor=PlaceholderSubstitutor(logger=module_logger.get_logger("placeholder_substitutor")),
    )
    return LocalizationService(
        logger=module_logger.get_logger("localization_service"),
        settings_manager=settings_manager,
        table_cache=table_cache,
        language_resolver=LanguageResolver(logger=module_logger.get_logger("language_resolver"), table_cache=table_cache),
        text_cache=text_cache,
        language_storage=LanguageStorage(logger=module_logger.get_logger("language_storage"), settings_manager=settings_manager),
    )


@pytest.fixture
def initialized_service(localization_service):
    localization_service.initialize()
    return localization_service


@pytest.fixture
def make_text_target():
    return TextTarget


@pytest.fixture
def text_target(make_text_target):
    return make_text_target()
