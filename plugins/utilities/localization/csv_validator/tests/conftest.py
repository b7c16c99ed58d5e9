"""
Local fixtures for csv_validator tests
"""
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger  # noqa: F401

from plugins.utilities.localization.csv_validator.csv_validator import CsvValidator


@pytest.fixture
def csv_validator(module_logger):
    settings_manager = MagicMock()
    settings_manager.get_plugin_settings.return_value = {'preview_fields': 3}
    return CsvValidator(logger=module_logger.get_logger("csv_validator"), settings_manager=settings_manager)
