"""
Process-wide application settings used by the window layer.

Settings must be initialized once with ``init_settings`` before anything
calls ``get_settings``.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from .errors import SettingsNotInitializedError

ENV_PREFIX = "MODULAR_"


@dataclass(frozen=True)
class FolderSettings:
    dist_renderer: str = "dist-renderer"
    dist_main: str = "dist-main"


@dataclass(frozen=True)
class Settings:
    localhost_port: str
    folders: FolderSettings = field(default_factory=FolderSettings)
    base_rest_api: str | None = None
    csp_connect_sources: tuple[str, ...] | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from ``MODULAR_*`` environment variables."""
        env = os.environ if environ is None else environ
        defaults = FolderSettings()
        sources = env.get(f"{ENV_PREFIX}CSP_CONNECT_SOURCES")

        return cls(
            localhost_port=env.get(f"{ENV_PREFIX}LOCALHOST_PORT", ""),
            folders=FolderSettings(
                dist_renderer=env.get(f"{ENV_PREFIX}DIST_RENDERER", defaults.dist_renderer),
                dist_main=env.get(f"{ENV_PREFIX}DIST_MAIN", defaults.dist_main),
            ),
            base_rest_api=env.get(f"{ENV_PREFIX}BASE_REST_API") or None,
            csp_connect_sources=tuple(sources.split()) if sources else None,
        )


_settings: dict[str, Settings] = {}


def init_settings(settings: Settings) -> None:
    _settings["settings"] = settings


def get_settings() -> Settings:
    settings = _settings.get("settings")
    if settings is None:
        raise SettingsNotInitializedError()
    return settings


def reset_settings() -> None:
    """Forget the current settings (mainly for tests)."""
    _settings.clear()
