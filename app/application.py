import sys
from typing import Any, Optional

from plugins.utilities.foundation.logger.logger import Logger
from plugins.utilities.foundation.plugins_manager.plugins_manager import \
    PluginsManager
from plugins.utilities.foundation.settings_manager.settings_manager import \
    SettingsManager

from .di_container import DIContainer


class Application:
    """Main application class - manages the plugin lifecycle"""

    def __init__(self):
        self.logger_instance = Logger()
        self.logger = self.logger_instance.get_logger("application")
        self.is_running = False
        self.plugins_manager = None
        self.settings_manager = None
        self.di_container = None

    def startup(self):
        """Build the container, create plugins and initialize services"""
        self.logger.info("Starting application...")
        self.is_running = True

        try:
            # 1. Plugin registry
            self.plugins_manager = PluginsManager(logger=self.logger_instance.get_logger("plugins_manager"))

            # 2. Settings on top of plugin defaults
            self.settings_manager = SettingsManager(
                logger=self.logger_instance.get_logger("settings_manager"),
                plugins_manager=self.plugins_manager
            )

            # 3. DI container with all plugins
            self.di_container = DIContainer(
                logger=self.logger_instance,
                plugins_manager=self.plugins_manager,
                settings_manager=self.settings_manager
            )
            self.di_container.initialize_all_plugins()

            # 4. Services with an initialize() step
            self._initialize_all_services()

            self.logger.info("Application started successfully")

        except Exception as e:
            self.logger.error(f"Error starting application: {e}")
            self.shutdown()
            sys.exit(1)

    def _initialize_all_services(self):
        services = self.di_container.get_all_services()
        if not services:
            self.logger.info("No services to initialize")
            return

        for service_name, service_instance in services.items():
            if hasattr(service_instance, 'initialize'):
                self.logger.info(f"Initializing service: {service_name}")
                service_instance.initialize()

    def get_service(self, name: str) -> Optional[Any]:
        if self.di_container is None:
            return None
        return self.di_container.get_service(name)

    def get_utility(self, name: str) -> Optional[Any]:
        if self.di_container is None:
            return None
        return self.di_container.get_utility(name)

    def shutdown(self):
        """Shut down services and utilities"""
        if not self.is_running:
            return

        self.logger.info("Shutting down application...")
        self.is_running = False

        try:
            if self.di_container:
                self.di_container.shutdown()
            self.logger.info("Application shut down correctly")
        except Exception as e:
            self.logger.error(f"Error during shutdown: {e}")

    def __enter__(self):
        self.startup()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
