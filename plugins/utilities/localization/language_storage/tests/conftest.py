"""
Local fixtures for language_storage tests
"""
from unittest.mock import MagicMock

import pytest

from tests.conftest import logger, module_logger, temp_dir  # noqa: F401

from plugins.utilities.localization.language_storage.language_storage import LanguageStorage


@pytest.fixture
def language_file(temp_dir):
    return temp_dir / "nested" / "language_global.json"


@pytest.fixture
def language_storage(module_logger, language_file):
    settings_manager = MagicMock()
    settings_manager.get_plugin_settings.return_value = {'file_path': str(language_file)}
    settings_manager.resolve_file_path.side_effect = lambda path: path
    return LanguageStorage(logger=module_logger.get_logger("language_storage"), settings_manager=settings_manager)
