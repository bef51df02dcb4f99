#!/usr/bin/env python3
"""
Unit tests for process-wide settings.
"""

import unittest

from modular.di import FolderSettings, Settings, SettingsNotInitializedError, get_settings, init_settings
from modular.di.settings import reset_settings


class TestSettings(unittest.TestCase):
    def setUp(self):
        reset_settings()

    def tearDown(self):
        reset_settings()

    def test_get_before_init_raises(self):
        with self.assertRaises(SettingsNotInitializedError):
            get_settings()

    def test_init_then_get(self):
        settings = Settings(localhost_port="3000")
        init_settings(settings)

        self.assertIs(get_settings(), settings)
        self.assertEqual(get_settings().folders, FolderSettings("dist-renderer", "dist-main"))

    def test_last_init_wins(self):
        init_settings(Settings(localhost_port="3000"))
        init_settings(Settings(localhost_port="4000"))

        self.assertEqual(get_settings().localhost_port, "4000")

    def test_from_env(self):
        settings = Settings.from_env(
            {
                "MODULAR_LOCALHOST_PORT": "5173",
                "MODULAR_DIST_MAIN": "build-main",
                "MODULAR_CSP_CONNECT_SOURCES": "https://api.example.com wss://ws.example.com",
            }
        )

        self.assertEqual(settings.localhost_port, "5173")
        self.assertEqual(settings.folders.dist_renderer, "dist-renderer")
        self.assertEqual(settings.folders.dist_main, "build-main")
        self.assertIsNone(settings.base_rest_api)
        self.assertEqual(settings.csp_connect_sources, ("https://api.example.com", "wss://ws.example.com"))

    def test_error_is_runtime_error(self):
        with self.assertRaises(RuntimeError):
            get_settings()


if __name__ == "__main__":
    unittest.main()
