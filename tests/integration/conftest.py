"""
Fixtures for integration tests
"""
from unittest.mock import patch

import pytest

CSV_TEXT = (
    "key;description;English;Chinese;Japanese;German;French;Spanish;Portuguese;Italian;Ukrainian;Polish;Turkish;Korean\n"
    "yes_key;Confirmation;Yes;是;はい;Ja;Oui;Sí;Sim;Sì;Так;Tak;Evet;예\n"
    "greeting;Greeting;Hello, {name}!;你好，{name}！;こんにちは、{name}！;Hallo, {name}!;Bonjour, {name} !;"
    "¡Hola, {name}!;Olá, {name}!;Ciao, {name}!;Привіт, {name}!;Cześć, {name}!;Merhaba, {name}!;안녕하세요, {name}!\n"
)


@pytest.fixture
def localization_files(temp_dir):
    """Translation table and saved language file inside a temporary directory"""
    csv_path = temp_dir / "strings.csv"
    csv_path.write_text(CSV_TEXT, encoding="utf-8")
    return {
        'csv_path': str(csv_path),
        'language_path': str(temp_dir / "language_global.json"),
    }


@pytest.fixture(autouse=True)
def override_localization_paths(settings_manager, localization_files):
    """
    Points table_cache and language_storage at temporary files
    Applied BEFORE container initialization via autouse=True
    """
    original_get_plugin_settings = settings_manager.get_plugin_settings

    def patched_get_plugin_settings(plugin_name: str):
        settings = original_get_plugin_settings(plugin_name)
        if plugin_name == 'table_cache':
            settings = settings.copy()
            settings['csv_path'] = localization_files['csv_path']
        elif plugin_name == 'language_storage':
            settings = settings.copy()
            settings['file_path'] = localization_files['language_path']
        return settings

    with patch.object(settings_manager, 'get_plugin_settings', side_effect=patched_get_plugin_settings):
        yield
