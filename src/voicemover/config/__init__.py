"""Configuration APIs."""

from voicemover.config.settings import (
    AppSettings,
    DiscordSettings,
    MoverSettings,
    RuntimeSettings,
    SettingsError,
    load_settings,
    resolve_env_secret,
    settings_summary,
)

__all__ = [
    "AppSettings",
    "DiscordSettings",
    "MoverSettings",
    "RuntimeSettings",
    "SettingsError",
    "load_settings",
    "resolve_env_secret",
    "settings_summary",
]
