"""
Local fixtures for placeholder_substitutor tests
"""
import pytest

from tests.conftest import logger, module_logger  # noqa: F401

from plugins.utilities.localization.placeholder_substitutor.placeholder_substitutor import PlaceholderSubstitutor


@pytest.fixture
def placeholder_substitutor(module_logger):
    return PlaceholderSubstitutor(logger=module_logger.get_logger("placeholder_substitutor"))
