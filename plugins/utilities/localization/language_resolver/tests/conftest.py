"""
Local fixtures for language_resolver tests
"""
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger  # noqa: F401

from plugins.utilities.localization.csv_parser.csv_parser import CsvParser
from plugins.utilities.localization.csv_validator.csv_validator import CsvValidator
from plugins.utilities.localization.language_resolver.language_resolver import LanguageResolver
from plugins.utilities.localization.table_cache.table_cache import TableCache

TABLE_TEXT = (
    "key;desc;English;Chinese;Klingon (tlhIngan)\n"
    "GREET;Greeting;Hello;你好;nuqneH\n"
    "bye;Farewell;Bye;再见;Qapla'\n"
    "greet;Duplicate key;Hi;嗨;\n"
)


@pytest.fixture
def mock_settings_manager():
    settings = {
        'csv_parser': {'delimiter': ';', 'text_qualifier': '"'},
        'csv_validator': {'preview_fields': 3},
        'table_cache': {
            'csv_path': 'unused.csv',
            'encoding': 'utf-8-sig',
            'delimiter': '',
            'watch_changes': False,
            'fixed_languages': {'English': 2, 'Chinese': 3, 'Korean': 13},
        },
    }
    mock = MagicMock()
    mock.get_plugin_settings.side_effect = lambda name: dict(settings.get(name, {}))
    return mock


@pytest.fixture
def table_cache(module_logger, mock_settings_manager):
    cache = TableCache(
        logger=module_logger.get_logger("table_cache"),
        settings_manager=mock_settings_manager,
        csv_parser=CsvParser(logger=module_logger.get_logger("csv_parser"), settings_manager=mock_settings_manager),
        csv_validator=CsvValidator(logger=module_logger.get_logger("csv_validator"), settings_manager=mock_settings_manager),
    )
    cache.load_text(TABLE_TEXT)
    return cache


@pytest.fixture
def language_resolver(module_logger, table_cache):
    return LanguageResolver(logger=module_logger.get_logger("language_resolver"), table_cache=table_cache)
