import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


class SettingsManager:
    """Global settings and per-plugin settings resolution"""

    @staticmethod
    def _find_project_root(start_path: Path) -> Path:
        """Reliably determine the project root"""
        env_root = os.environ.get('PROJECT_ROOT')
        if env_root and Path(env_root).exists():
            return Path(env_root)

        current = start_path.resolve()
        while current != current.parent:
            if (current / "main.py").exists() and \
               (current / "plugins").exists() and \
               (current / "app").exists():
                return current
            current = current.parent

        return start_path.resolve().parents[4]

    def __init__(self, config_dir: str = "config", **kwargs):
        self.logger = kwargs['logger']
        self.plugins_manager = kwargs['plugins_manager']
        self.config_dir = config_dir

        self._cache: Dict[str, Any] = {}

        self.project_root = self._find_project_root(Path(__file__))

        self._load_settings()

    def _load_settings(self):
        self.logger.info("Loading settings...")
        self._cache.clear()
        self._cache['settings'] = self._load_yaml_file('settings.yaml')
        self.logger.info("Settings loaded")

    def _load_yaml_file(self, relative_path: str) -> dict:
        """Load a YAML file relative to config_dir"""
        file_path = os.path.join(self.project_root, self.config_dir, relative_path)
        if os.path.exists(file_path):
            with open(file_path, 'r', encoding='utf-8') as f:
                return yaml.safe_load(f) or {}
        return {}

    # === Public methods ===

    def get_settings_section(self, section: str) -> dict:
        """Section of settings.yaml by name (e.g. 'logger', 'table_cache')"""
        settings = self._cache.get('settings', {})
        return settings.get(section) or {}

    def get_all_settings(self) -> dict:
        return self._cache.get('settings', {}).copy()

    def get_global_settings(self) -> dict:
        return self.get_settings_section('global')

    def get_project_root(self) -> Path:
        return self.project_root

    def resolve_file_path(self, path: str) -> str:
        """
        Absolute path for a settings value
        :param path: absolute path, or path relative to the project root
        """
        if os.path.isabs(path):
            return path
        return os.path.join(self.project_root, path)

    def get_plugin_settings(self, plugin_name: str) -> dict:
        """
        Settings of any plugin (utility or service) with priority:
        global from settings.yaml > local defaults from the plugin's config.yaml
        """
        plugin_info = self.plugins_manager.get_plugin_info(plugin_name)
        if not plugin_info:
            self.logger.warning(f"Plugin {plugin_name} not found")
            return {}

        global_settings = self.get_settings_section(plugin_name)
        local_settings = plugin_info.get('settings', {})

        merged = {}
        for key in set(global_settings.keys()) | set(local_settings.keys()):
            global_val = global_settings.get(key, None)
            local_val = local_settings.get(key, None)

            # Local parameter declared as {type, default, description}
            if isinstance(local_val, dict) and 'default' in local_val:
                local_val = local_val['default']

            merged[key] = global_val if global_val is not None else local_val

        return merged

    def get_startup_plan(self) -> Optional[Dict[str, Any]]:
        """Utility initialization order and the list of enabled services"""
        try:
            dependency_order = self.plugins_manager.get_dependency_order()
        except ValueError as e:
            self.logger.error(f"Failed to build startup plan: {e}")
            return None

        disabled = set(self.get_global_settings().get('disabled_services') or [])
        services = self.plugins_manager.get_plugins_by_type("services")
        enabled_services = [name for name in services if name not in disabled]

        return {
            'dependency_order': dependency_order,
            'enabled_services': enabled_services,
            'total_utilities': len(dependency_order),
            'total_services': len(enabled_services),
        }

    def reload(self):
        """Reload settings.yaml"""
        self.logger.info("Reloading settings...")
        self._load_settings()
