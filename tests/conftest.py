"""
Base fixtures for all tests
"""
import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# No __pycache__ files for test runs
os.environ['PYTHONDONTWRITEBYTECODE'] = '1'


def _find_project_root(start_path: Path) -> Path:
    """
    Reliably determines the project root
    """
    env_root = os.environ.get('PROJECT_ROOT')
    if env_root and Path(env_root).exists():
        return Path(env_root)

    current = start_path.resolve()
    if current.is_file():
        current = current.parent

    while current != current.parent:
        if (current / "main.py").exists() and \
           (current / "plugins").exists() and \
           (current / "app").exists():
            return current
        current = current.parent

    # Fallback
    if start_path.name == "tests" or "tests" in start_path.parts:
        return start_path.parent if start_path.is_dir() else start_path.parent.parent

    return start_path.parent if start_path.is_file() else start_path


# Project root is already on sys.path via pythonpath = ["."] in pyproject.toml
PROJECT_ROOT = _find_project_root(Path(__file__))

from plugins.utilities.foundation.logger.logger import Logger
from plugins.utilities.foundation.plugins_manager.plugins_manager import PluginsManager
from plugins.utilities.foundation.settings_manager.settings_manager import SettingsManager
from app.di_container import DIContainer


@pytest.fixture(scope="session")
def project_root() -> Path:
    return PROJECT_ROOT


@pytest.fixture
def logger() -> Logger:
    """Logger for a single test"""
    return Logger()


@pytest.fixture(scope="session")
def module_logger() -> Logger:
    """Logger shared by the whole test session"""
    return Logger()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="session")
def plugins_manager(module_logger: Logger) -> PluginsManager:
    return PluginsManager(logger=module_logger.get_logger("plugins_manager"))


@pytest.fixture(scope="session")
def settings_manager(module_logger: Logger, plugins_manager: PluginsManager) -> SettingsManager:
    return SettingsManager(
        logger=module_logger.get_logger("settings_manager"),
        plugins_manager=plugins_manager
    )


@pytest.fixture
def di_container(module_logger: Logger, plugins_manager: PluginsManager, settings_manager: SettingsManager) -> DIContainer:
    """DI container per test, so shutdown state does not leak between tests"""
    return DIContainer(
        logger=module_logger,
        plugins_manager=plugins_manager,
        settings_manager=settings_manager
    )


@pytest.fixture
def initialized_di_container(
    di_container: DIContainer,
    module_logger: Logger,
    plugins_manager: PluginsManager,
    settings_manager: SettingsManager,
) -> Generator[DIContainer, None, None]:
    """
    DI container with all plugins created.

    Shutdown clears the container caches, so the foundation utilities are
    registered again before initialization, the same way Application does it.
    """
    di_container._utilities['logger'] = module_logger
    di_container._utilities['plugins_manager'] = plugins_manager
    di_container._utilities['settings_manager'] = settings_manager

    di_container.initialize_all_plugins()
    yield di_container
    di_container.shutdown()
