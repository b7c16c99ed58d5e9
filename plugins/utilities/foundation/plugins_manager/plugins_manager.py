import os
from pathlib import Path
from typing import Dict, List, Optional, Set

import yaml


class PluginsManager:
    """Registry of utilities and services with dependency graph for DI"""

    # Folders that never contain plugins
    SKIP_DIRS = {'tests', 'modules', '__pycache__'}

    @staticmethod
    def _find_project_root(start_path: Path) -> Path:
        """Reliably determine the project root"""
        env_root = os.environ.get('PROJECT_ROOT')
        if env_root and Path(env_root).exists():
            return Path(env_root)

        current = start_path.resolve()
        while current != current.parent:
            if (current / "plugins").exists() and (current / "app").exists():
                return current
            current = current.parent

        return start_path.resolve().parents[4]

    def __init__(self, plugins_dir: str = "plugins", utilities_dir: str = "utilities", services_dir: str = "services", **kwargs):
        self.logger = kwargs['logger']
        self.plugins_dir = plugins_dir
        self.utilities_dir = utilities_dir
        self.services_dir = services_dir

        self._utilities_info: Dict[str, Dict] = {}
        self._services_info: Dict[str, Dict] = {}
        self._dependency_graph: Dict[str, Set[str]] = {}

        self.project_root = self._find_project_root(Path(__file__))

        self._load_utilities_and_services_info()

    def _load_utilities_and_services_info(self):
        """Scan plugin folders and build the dependency graph"""
        self.logger.info("Loading utilities and services info...")
        self._utilities_info.clear()
        self._services_info.clear()
        self._dependency_graph.clear()

        utilities_dir = os.path.join(self.project_root, self.plugins_dir, self.utilities_dir)
        self._scan_plugins_recursively(utilities_dir, "utilities", self._utilities_info)

        services_dir = os.path.join(self.project_root, self.plugins_dir, self.services_dir)
        self._scan_plugins_recursively(services_dir, "services", self._services_info)

        self._build_dependency_graph()
        self._check_circular_dependencies()

    def _scan_plugins_recursively(self, root_dir: str, plugin_type: str, target_cache: Dict[str, Dict]):
        if not os.path.exists(root_dir):
            self.logger.warning(f"Directory for {plugin_type} not found: {root_dir}")
            return

        self._scan_directory_recursively(root_dir, plugin_type, target_cache)
        self.logger.info(f"Loaded {plugin_type}: {len(target_cache)}")

    def _scan_directory_recursively(self, directory: str, plugin_type: str, target_cache: Dict[str, Dict]):
        """A folder with config.yaml is a plugin, any other folder is scanned deeper"""
        for item_name in sorted(os.listdir(directory)):
            item_path = os.path.join(directory, item_name)
            if not os.path.isdir(item_path) or item_name in self.SKIP_DIRS or item_name.startswith('.'):
                continue

            config_path = os.path.join(item_path, 'config.yaml')
            if os.path.exists(config_path):
                relative_plugin_path = os.path.relpath(item_path, self.project_root)
                self._load_plugin_info(relative_plugin_path, item_name, plugin_type, target_cache)
            else:
                self._scan_directory_recursively(item_path, plugin_type, target_cache)

    def _load_plugin_info(self, plugin_path: str, plugin_name: str, plugin_type: str, target_cache: Dict[str, Dict]):
        """Read config.yaml of a single plugin"""
        full_plugin_path = os.path.join(self.project_root, plugin_path)
        config_path = os.path.join(full_plugin_path, 'config.yaml')

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f) or {}

            if not config.get('enabled', True):
                self.logger.info(f"Plugin {plugin_name} is disabled in its config, skipping")
                return

            plugin_info = {
                'name': config.get('name', plugin_name),
                'description': config.get('description', ''),
                'type': plugin_type,
                'path': plugin_path,
                'config_path': config_path,
                'dependencies': (config.get('dependencies') or {}).get('utilities', []),
                'settings': config.get('settings') or {},
                'singleton': config.get('singleton', False),
                'interface': config.get('interface') or {},
                'actions': config.get('actions') or {},
            }

            if plugin_type == "utilities" and not plugin_info['interface']:
                self.logger.warning(f"Utility {plugin_name} has no interface section")
            elif plugin_type == "services" and not plugin_info['actions']:
                self.logger.warning(f"Service {plugin_name} has no actions section")

            target_cache[plugin_info['name']] = plugin_info

        except Exception as e:
            self.logger.error(f"Error loading config of {plugin_type[:-1]} {plugin_name}: {e}")

    def _build_dependency_graph(self):
        for name in list(self._utilities_info) + list(self._services_info):
            self._dependency_graph[name] = set()

        for infos, kind in ((self._utilities_info, "Utility"), (self._services_info, "Service")):
            for plugin_name, plugin_info in infos.items():
                for dep in plugin_info['dependencies']:
                    if dep in self._utilities_info:
                        self._dependency_graph[plugin_name].add(dep)
                    else:
                        self.logger.warning(f"{kind} {plugin_name} depends on unknown utility: {dep}")

    def _check_circular_dependencies(self):
        def has_cycle(node: str, visited: Set[str], rec_stack: Set[str]) -> bool:
            visited.add(node)
            rec_stack.add(node)

            for neighbor in self._dependency_graph.get(node, set()):
                if neighbor not in visited:
                    if has_cycle(neighbor, visited, rec_stack):
                        return True
                elif neighbor in rec_stack:
                    return True

            rec_stack.remove(node)
            return False

        visited = set()
        for node in self._dependency_graph:
            if node not in visited and has_cycle(node, visited, set()):
                self.logger.error(f"Circular dependency detected for: {node}")
                raise ValueError(f"Circular dependency detected for: {node}")

    # === Public methods ===

    def get_plugin_info(self, plugin_name: str) -> Optional[Dict]:
        """Info about a utility or a service, None if unknown"""
        return self._utilities_info.get(plugin_name) or self._services_info.get(plugin_name)

    def get_plugin_type(self, plugin_name: str) -> Optional[str]:
        plugin_info = self.get_plugin_info(plugin_name)
        return plugin_info.get('type') if plugin_info else None

    def get_all_plugins_info(self) -> Dict[str, Dict]:
        all_plugins = {}
        all_plugins.update(self._utilities_info)
        all_plugins.update(self._services_info)
        return all_plugins

    def get_plugins_by_type(self, plugin_type: str) -> Dict[str, Dict]:
        if plugin_type == "utilities":
            return self._utilities_info.copy()
        elif plugin_type == "services":
            return self._services_info.copy()
        self.logger.warning(f"Unknown plugin type: {plugin_type}")
        return {}

    def get_plugin_dependencies(self, plugin_name: str) -> List[str]:
        plugin_info = self.get_plugin_info(plugin_name)
        if plugin_info:
            return plugin_info.get('dependencies', [])
        return []

    def get_dependency_order(self) -> List[str]:
        """Utility initialization order (topological sort); services come after utilities"""
        def topological_sort(graph: Dict[str, Set[str]]) -> List[str]:
            result = []
            visited = set()
            temp_visited = set()

            def visit(node: str):
                if node in temp_visited:
                    raise ValueError(f"Circular dependency detected for: {node}")
                if node in visited:
                    return

                temp_visited.add(node)
                for neighbor in sorted(graph.get(node, set())):
                    visit(neighbor)
                temp_visited.remove(node)

                visited.add(node)
                result.append(node)

            for node in graph:
                if node not in visited:
                    visit(node)

            return result

        utilities_graph = {name: deps for name, deps in self._dependency_graph.items()
                           if name in self._utilities_info}

        return topological_sort(utilities_graph)

    def check_circular_dependencies(self) -> bool:
        try:
            self._check_circular_dependencies()
            return True
        except ValueError:
            return False

    def reload(self):
        """Rescan plugin folders"""
        self.logger.info("Reloading plugins info...")
        self._load_utilities_and_services_info()
