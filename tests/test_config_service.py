"""Tests for ConfigService."""

import json

from mentat.services.config_service import ConfigService


class TestConfigService:
    """Tests for loading and persisting config.json."""

    def test_missing_file_is_created_with_defaults(self, tmp_path):
        """A missing config file is created with defaults."""
        path = tmp_path / "nested" / "config.json"

        service = ConfigService(path, defaults={"prefix": "!"})

        assert path.exists()
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["prefix"] == "!"
        assert saved["plugins"] == {}
        assert service.prefix == "!"

    def test_file_values_override_defaults(self, tmp_path):
        """File values take precedence over defaults."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"prefix": "$", "theme": "atreides"}), encoding="utf-8")

        service = ConfigService(path)

        assert service.prefix == "$"
        assert service.theme == "atreides"
        assert service.get("plugins") == {}

    def test_invalid_json_falls_back_to_defaults(self, tmp_path):
        """Unparseable JSON falls back to defaults."""
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")

        service = ConfigService(path, defaults={"prefix": "!"})

        assert service.prefix == "!"

    def test_token_is_never_persisted(self, tmp_path):
        """The token is stripped on load and ignored on update."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"token": "abc", "prefix": "!"}), encoding="utf-8")

        service = ConfigService(path)
        service.update({"theme": "harkonnen", "token": "xyz"})

        saved = json.loads(path.read_text(encoding="utf-8"))
        assert "token" not in saved
        assert "token" not in service.as_dict()
        assert saved["theme"] == "harkonnen"

    def test_plugin_config_round_trip(self, tmp_path):
        """Plugin sections survive a reopen."""
        path = tmp_path / "config.json"
        service = ConfigService(path)

        service.set_plugin_config("Utility", {"greeting": "hi"})

        reopened = ConfigService(path)
        assert reopened.get_plugin_config("Utility") == {"greeting": "hi"}
        assert reopened.get_plugin_config("Unknown") == {}

    def test_write_leaves_no_temp_files(self, tmp_path):
        """Atomic writes leave only config.json behind."""
        path = tmp_path / "config.json"
        service = ConfigService(path)
        service.update({"prefix": "?"})
        service.set_plugin_config("A", {"x": 1})

        assert sorted(p.name for p in tmp_path.iterdir()) == ["config.json"]

    def test_as_dict_is_a_copy(self, tmp_path):
        """Mutating as_dict() does not touch the service state."""
        service = ConfigService(tmp_path / "config.json")
        data = service.as_dict()
        data["plugins"]["Injected"] = {}

        assert service.get_plugin_config("Injected") == {}
        assert "Injected" not in service.get("plugins")
