import os
import unittest
from unittest.mock import patch

from ferret.shared.settings import (
    FerretSettings,
    _flatten_config,
    default_open_command,
    get_settings,
    reload_settings,
)


class TestFerretSettings(unittest.TestCase):

    def test_defaults(self):
        settings = FerretSettings()

        self.assertEqual(settings.search_timeout, "5000ms")
        self.assertEqual(settings.goto_cmd, default_open_command())
        self.assertEqual(settings.github_url, "https://api.github.com")
        self.assertIsNone(settings.github_token)
        self.assertEqual(settings.log_format, "json")

    def test_environment_variables(self):
        env = {
            "FERRET_GOTO_CMD": "firefox",
            "FERRET_SEARCH_TIMEOUT": "2s",
            "FERRET_GITHUB_URL": "https://ghe.example.com/api/v3/",
            "FERRET_GITHUB_TOKEN": "secret",
            "FERRET_GITHUB_SEARCH_USER": "yieldbot",
        }
        with patch.dict(os.environ, env):
            settings = FerretSettings()

        self.assertEqual(settings.goto_cmd, "firefox")
        self.assertEqual(settings.search_timeout, "2s")
        self.assertEqual(settings.github_url, "https://ghe.example.com/api/v3")
        self.assertEqual(settings.github_token.get_secret_value(), "secret")
        self.assertEqual(settings.github_search_user, "yieldbot")

    def test_blank_values_fall_back_to_defaults(self):
        with patch.dict(os.environ, {"FERRET_GOTO_CMD": "", "FERRET_SEARCH_TIMEOUT": " "}):
            settings = FerretSettings()

        self.assertEqual(settings.goto_cmd, default_open_command())
        self.assertEqual(settings.search_timeout, "5000ms")

    def test_token_is_not_printed(self):
        settings = FerretSettings(github_token="secret")

        self.assertNotIn("secret", repr(settings))


class TestYamlConfig(unittest.TestCase):

    def setUp(self):
        # conftest points FERRET_CONFIG at a missing file inside a temp cwd
        self.config_path = os.path.join(os.getcwd(), "config.yaml")

    def _write(self, name, text):
        with open(os.path.join(os.getcwd(), name), "w") as f:
            f.write(text)

    def test_flatten_config(self):
        self.assertEqual(
            _flatten_config({"github": {"url": "u", "search": {"user": "x"}}, "goto_cmd": "open"}),
            {"github_url": "u", "github_search_user": "x", "goto_cmd": "open"},
        )

    def test_yaml_values_are_loaded(self):
        self._write("config.yaml", "search_timeout: 3s\ngithub:\n  url: https://ghe.example.com\n  search_user: acme\n")

        with patch.dict(os.environ, {"FERRET_CONFIG": self.config_path}):
            settings = reload_settings()

        self.assertEqual(settings.search_timeout, "3s")
        self.assertEqual(settings.github_url, "https://ghe.example.com")
        self.assertEqual(settings.github_search_user, "acme")

    def test_environment_overlay(self):
        self._write("config.yaml", "environment: production\nsearch_timeout: 3s\n")
        self._write("config.production.yaml", "search_timeout: 1s\n")

        with patch.dict(os.environ, {"FERRET_CONFIG": self.config_path}):
            settings = reload_settings()

        self.assertEqual(settings.search_timeout, "1s")

    def test_environment_variables_win_over_yaml(self):
        self._write("config.yaml", "search_timeout: 3s\n")

        with patch.dict(os.environ, {"FERRET_CONFIG": self.config_path, "FERRET_SEARCH_TIMEOUT": "9s"}):
            settings = reload_settings()

        self.assertEqual(settings.search_timeout, "9s")

    def test_get_settings_is_cached(self):
        self.assertIs(get_settings(), get_settings())
        self.assertIsNot(get_settings(), reload_settings())


if __name__ == '__main__':
    unittest.main()
