import json
from pathlib import Path
import sys
import tempfile
import unittest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from voicemover.config.settings import (
    SettingsError,
    load_settings,
    resolve_env_secret,
    settings_summary,
)


class SettingsLoaderTests(unittest.TestCase):
    def test_defaults_apply_without_config(self):
        settings = load_settings(environ={})

        self.assertEqual(settings.discord.command_prefix, "%")
        self.assertEqual(settings.discord.bot_token_env, "DISCORD_TOKEN")
        self.assertEqual(settings.mover.audit_reason, "Scheduled move command")
        self.assertEqual(settings.mover.pace_every, 5)
        self.assertEqual(settings.mover.pace_seconds, 0.25)
        self.assertEqual(settings.runtime.log_level, "INFO")

    def test_environment_overrides_config_file(self):
        config = {
            "discord": {"command_prefix": "!"},
            "mover": {"pace_every": 3, "audit_reason": "from file"},
        }

        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text(json.dumps(config), encoding="utf-8")

            settings = load_settings(
                config_path=config_path,
                environ={"VOICEMOVER_DISCORD_COMMAND_PREFIX": "?"},
            )

        self.assertEqual(settings.discord.command_prefix, "?")
        self.assertEqual(settings.mover.pace_every, 3)
        self.assertEqual(settings.mover.audit_reason, "from file")

    def test_environment_values_are_cast(self):
        settings = load_settings(
            environ={
                "VOICEMOVER_MOVER_PACE_EVERY": "10",
                "VOICEMOVER_MOVER_PACE_SECONDS": "0.5",
                "VOICEMOVER_RUNTIME_LOG_LEVEL": "debug",
            }
        )

        self.assertEqual(settings.mover.pace_every, 10)
        self.assertEqual(settings.mover.pace_seconds, 0.5)
        self.assertEqual(settings.runtime.log_level, "DEBUG")

    def test_rejects_invalid_values(self):
        invalid = (
            {"VOICEMOVER_MOVER_PACE_EVERY": "0"},
            {"VOICEMOVER_MOVER_PACE_EVERY": "many"},
            {"VOICEMOVER_MOVER_PACE_SECONDS": "-1"},
            {"VOICEMOVER_RUNTIME_LOG_LEVEL": "LOUD"},
            {"VOICEMOVER_DISCORD_COMMAND_PREFIX": "a b"},
        )
        for environ in invalid:
            with self.subTest(environ=environ):
                with self.assertRaises(SettingsError):
                    load_settings(environ=environ)

    def test_missing_config_file_is_an_error(self):
        with self.assertRaises(SettingsError):
            load_settings(config_path=Path("/nonexistent/voicemover.json"), environ={})

    def test_config_sections_must_be_objects(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.json"
            config_path.write_text(json.dumps({"mover": 5}), encoding="utf-8")

            with self.assertRaises(SettingsError):
                load_settings(config_path=config_path, environ={})

    def test_summary_does_not_include_token(self):
        summary = settings_summary(load_settings(environ={"DISCORD_TOKEN": "secret-token"}))

        self.assertEqual(summary["discord"]["bot_token_env"], "DISCORD_TOKEN")
        self.assertNotIn("secret-token", json.dumps(summary))


class ResolveEnvSecretTests(unittest.TestCase):
    def test_returns_value(self):
        self.assertEqual(resolve_env_secret("DISCORD_TOKEN", {"DISCORD_TOKEN": "abc"}), "abc")

    def test_missing_token_is_fatal(self):
        with self.assertRaises(SettingsError):
            resolve_env_secret("DISCORD_TOKEN", {})

    def test_blank_token_is_fatal(self):
        with self.assertRaises(SettingsError):
            resolve_env_secret("DISCORD_TOKEN", {"DISCORD_TOKEN": "   "})


if __name__ == "__main__":
    unittest.main()
