import importlib.util
import os
from typing import Any, Dict, List, Optional, Type


class DIContainer:
    """DI container for managing plugin dependencies"""

    # Created by the application before the container
    PREREGISTERED = ('logger', 'plugins_manager', 'settings_manager')

    def __init__(self, logger: Any, plugins_manager: Any, settings_manager: Any = None):
        self.logger = logger
        self.plugins_manager = plugins_manager
        self.settings_manager = settings_manager

        # Caches for instances and classes
        self._utilities: Dict[str, Any] = {}
        self._services: Dict[str, Any] = {}
        self._utilities_classes: Dict[str, Type] = {}
        self._services_classes: Dict[str, Type] = {}

        # Register passed utilities as already initialized
        self._utilities['logger'] = logger
        self._utilities['plugins_manager'] = plugins_manager
        self._utilities['settings_manager'] = settings_manager

        # Initialization flags
        self._utilities_initialized = False
        self._services_initialized = False

    def initialize_all_plugins(self):
        """Initialize all plugins according to plan from SettingsManager"""
        self.logger.info("Starting initialization of all plugins...")

        if self.settings_manager is None:
            self.logger.error("SettingsManager not passed to DIContainer")
            return

        startup_plan = self.settings_manager.get_startup_plan()
        if not startup_plan:
            self.logger.error("SettingsManager failed to build startup plan")
            return

        self.logger.info(f"Startup plan: {startup_plan['total_services']} services, {startup_plan['total_utilities']} utilities")

        # Utilities in dependency order, then services
        self._initialize_utilities_from_plan(startup_plan['dependency_order'])
        self._initialize_services_from_plan(startup_plan['enabled_services'])

        self.logger.info("All plugins successfully initialized")

    def get_startup_plan(self) -> Optional[Dict[str, Any]]:
        """Get startup plan from SettingsManager"""
        return self.settings_manager.get_startup_plan()

    def _initialize_utilities_from_plan(self, dependency_order: List[str]):
        if self._utilities_initialized:
            return

        for utility_name in dependency_order:
            if utility_name in self.PREREGISTERED and self._utilities.get(utility_name) is not None:
                continue
            self._register_utility_from_manager(utility_name)

        self._utilities_initialized = True
        self.logger.info(f"Initialized utilities: {len(self._utilities)}")

    def _initialize_services_from_plan(self, enabled_services: List[str]):
        if self._services_initialized:
            return

        for service_name in enabled_services:
            self._register_service_from_manager(service_name)

        self._services_initialized = True
        self.logger.info(f"Initialized services: {len(self._services)}")

    def _register_utility_from_manager(self, utility_name: str):
        utility_info = self.plugins_manager.get_plugin_info(utility_name)
        if not utility_info:
            self.logger.error(f"Information about utility {utility_name} not found")
            return

        try:
            utility_class = self._load_plugin_class(utility_info)
            if not utility_class:
                return

            if utility_info.get('singleton', False):
                # Singleton instance is created immediately
                self._utilities[utility_name] = self._create_instance(utility_name, utility_class)
            else:
                self._utilities_classes[utility_name] = utility_class

        except Exception as e:
            self.logger.error(f"Error registering utility {utility_name}: {e}")

    def _register_service_from_manager(self, service_name: str):
        service_info = self.plugins_manager.get_plugin_info(service_name)
        if not service_info:
            self.logger.error(f"Information about service {service_name} not found")
            return

        try:
            service_class = self._load_plugin_class(service_info)
            if not service_class:
                return

            if service_info.get('singleton', False):
                self._services[service_name] = self._create_instance(service_name, service_class)
            else:
                self._services_classes[service_name] = service_class

        except Exception as e:
            self.logger.error(f"Error registering service {service_name}: {e}")

    def _load_plugin_class(self, plugin_info: Dict) -> Optional[Type]:
        """Load plugin class from <plugin_path>/<plugin_name>.py"""
        plugin_path = plugin_info['path']
        plugin_name = plugin_info['name']

        root = str(getattr(self.plugins_manager, 'project_root', ''))
        full_path = os.path.join(root, plugin_path) if root else plugin_path
        class_file_path = os.path.join(full_path, f"{plugin_name}.py")

        if not os.path.exists(class_file_path):
            self.logger.error(f"Plugin file not found: {class_file_path}")
            return None

        try:
            # Dotted module name keeps relative imports (.modules, .fingerprint) working
            package = plugin_path.replace('\\', '/').strip('/').replace('/', '.')
            module_name = f"{package}.{plugin_name}"
            spec = importlib.util.spec_from_file_location(module_name, class_file_path)
            module = importlib.util.module_from_spec(spec)
            spec.loader.exec_module(module)

            class_name = self._get_class_name(plugin_name)
            plugin_class = getattr(module, class_name, None)
            if not isinstance(plugin_class, type):
                self.logger.error(f"Class {class_name} not found in {class_file_path}")
                return None
            return plugin_class

        except Exception as e:
            self.logger.error(f"Error loading class for plugin {plugin_name}: {e}")
            return None

    @staticmethod
    def _get_class_name(plugin_name: str) -> str:
        """table_cache -> TableCache"""
        return ''.join(part.capitalize() for part in plugin_name.split('_'))

    def _create_instance(self, plugin_name: str, plugin_class: Type) -> Any:
        """Create plugin instance with dependency injection"""
        dependencies = self.plugins_manager.get_plugin_dependencies(plugin_name)

        deps_dict = {}
        for dep_name in dependencies:
            dep_instance = self.get_utility(dep_name)
            if dep_instance is None:
                self.logger.warning(f"Dependency {dep_name} for {plugin_name} not found - will be skipped")
                continue

            # Each plugin gets its own named logger
            if dep_name == 'logger':
                deps_dict[dep_name] = dep_instance.get_logger(plugin_name)
            else:
                deps_dict[dep_name] = dep_instance

        try:
            return plugin_class(**deps_dict)
        except Exception as e:
            self.logger.error(f"Error creating instance {plugin_name}: {e}")
            raise

    def get_utility(self, name: str) -> Optional[Any]:
        """Get utility by name"""
        if self._utilities.get(name) is not None:
            return self._utilities[name]

        if name in self._utilities_classes:
            # Non-singleton: new instance per request
            return self._create_instance(name, self._utilities_classes[name])

        return None

    def get_service(self, name: str) -> Optional[Any]:
        """Get service by name"""
        if name in self._services:
            return self._services[name]

        if name in self._services_classes:
            return self._create_instance(name, self._services_classes[name])

        return None

    def get_all_utilities(self) -> Dict[str, Any]:
        return self._utilities.copy()

    def get_all_services(self) -> Dict[str, Any]:
        """Singleton services plus fresh instances of the others"""
        all_services = self._services.copy()

        for service_name, service_class in self._services_classes.items():
            try:
                all_services[service_name] = self._create_instance(service_name, service_class)
            except Exception as e:
                self.logger.error(f"Error creating service instance {service_name}: {e}")

        return all_services

    def shutdown(self):
        """Graceful container termination"""
        self.logger.info("Shutting down DI container...")

        for service_name, service_instance in self._services.items():
            if hasattr(service_instance, 'shutdown'):
                try:
                    service_instance.shutdown()
                except Exception as e:
                    self.logger.error(f"Error shutting down service {service_name}: {e}")

        for utility_name, utility_instance in self._utilities.items():
            if hasattr(utility_instance, 'shutdown'):
                try:
                    utility_instance.shutdown()
                except Exception as e:
                    self.logger.error(f"Error shutting down utility {utility_name}: {e}")

        self._utilities.clear()
        self._services.clear()
        self._utilities_classes.clear()
        self._services_classes.clear()

        self.logger.info("DI container terminated")
