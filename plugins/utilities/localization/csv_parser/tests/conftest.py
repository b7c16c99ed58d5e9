"""
Local fixtures for csv_parser tests
"""
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger  # noqa: F401

from plugins.utilities.localization.csv_parser.csv_parser import CsvParser


@pytest.fixture
def mock_settings_manager():
    mock = MagicMock()
    mock.get_plugin_settings.return_value = {
        'delimiter': ';',
        'text_qualifier': '"',
    }
    return mock


@pytest.fixture
def csv_parser(module_logger, mock_settings_manager):
    return CsvParser(logger=module_logger.get_logger("csv_parser"), settings_manager=mock_settings_manager)
