"""
Local fixtures for table_cache tests
"""
import os
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger, temp_dir  # noqa: F401

from plugins.utilities.localization.csv_parser.csv_parser import CsvParser
from plugins.utilities.localization.csv_validator.csv_validator import CsvValidator
from plugins.utilities.localization.table_cache.table_cache import TableCache

TABLE_TEXT = (
    "key;description;English;Chinese\n"
    "yes_key;Confirmation;Yes;是\n"
    "no_key;Rejection;No;否\n"
)


@pytest.fixture
def csv_file(temp_dir):
    path = temp_dir / "strings.csv"
    path.write_text(TABLE_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def table_cache_factory(module_logger, temp_dir):
    """Builds a TableCache over temp_dir/strings.csv with table_cache setting overrides"""

    def _factory(csv_parser=None, **overrides):
        settings = {
            'csv_parser': {'delimiter': ';', 'text_qualifier': '"'},
            'csv_validator': {'preview_fields': 3},
            'table_cache': {
                'csv_path': 'strings.csv',
                'encoding': 'utf-8-sig',
                'delimiter': '',
                'watch_changes': True,
                'fixed_languages': {'English': 2, 'Chinese': 3},
            },
        }
        settings['table_cache'].update(overrides)

        settings_manager = MagicMock()
        settings_manager.get_plugin_settings.side_effect = lambda name: dict(settings.get(name, {}))
        settings_manager.resolve_file_path.side_effect = \
            lambda path: path if os.path.isabs(path) else os.path.join(str(temp_dir), path)

        if csv_parser is None:
            csv_parser = CsvParser(logger=module_logger.get_logger("csv_parser"), settings_manager=settings_manager)

        return TableCache(
            logger=module_logger.get_logger("table_cache"),
            settings_manager=settings_manager,
            csv_parser=csv_parser,
            csv_validator=CsvValidator(logger=module_logger.get_logger("csv_validator"), settings_manager=settings_manager),
        )

    return _factory


@pytest.fixture
def table_cache(table_cache_factory, csv_file):
    return table_cache_factory()
