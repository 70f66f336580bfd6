"""Tests for the admin HTTP API."""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from conftest import GREETER_SOURCE, UTILITY_SOURCE

from mentat.web import create_app


@pytest.fixture
def api(framework, write_plugin):
    write_plugin("utility.py", UTILITY_SOURCE)
    write_plugin("greeter.py", GREETER_SOURCE)
    asyncio.run(framework.manager.load_all())
    return TestClient(create_app(framework, manage_lifecycle=False))


class TestPluginEndpoints:
    """Tests for /api/plugins."""

    def test_list_plugins(self, api):
        """Listing reports per-plugin counts, description and enabled flag."""
        response = api.get("/api/plugins")

        assert response.status_code == 200
        plugins = {p["name"]: p for p in response.json()}
        assert plugins["Utility"]["commandCount"] == 1
        assert plugins["Utility"]["eventCount"] == 0
        assert plugins["Greeter"]["commandCount"] == 2
        assert plugins["Greeter"]["eventCount"] == 1
        assert plugins["Greeter"]["description"] == "No description"
        assert plugins["Utility"]["enabled"] is True

    def test_get_plugin_detail(self, api):
        """Detail view includes version, events and owned commands."""
        response = api.get("/api/plugins/Greeter")

        assert response.status_code == 200
        body = response.json()
        assert body["version"] == "0.1.0"
        assert body["events"] == ["on_member_join"]
        assert {c["name"] for c in body["commands"]} == {"greet", "boom"}

    def test_get_unknown_plugin_is_404(self, api):
        """Unknown plugin name returns 404."""
        assert api.get("/api/plugins/Ghost").status_code == 404

    def test_toggle(self, api):
        """Toggle flips enabled and the listing reflects it."""
        response = api.post("/api/plugins/Utility/toggle")
        assert response.status_code == 200
        assert response.json() == {"enabled": False, "name": "Utility"}

        listed = {p["name"]: p for p in api.get("/api/plugins").json()}
        assert listed["Utility"]["enabled"] is False

    def test_toggle_unknown_is_404(self, api):
        """Toggling an unknown plugin returns 404."""
        assert api.post("/api/plugins/Ghost/toggle").status_code == 404

    def test_config_round_trip_is_persisted(self, api, config_file):
        """Posted plugin config is readable back and written to config.json."""
        response = api.post("/api/plugins/Utility/config", json={"greeting": "hi"})
        assert response.status_code == 200
        assert response.json() == {"success": True, "config": {"greeting": "hi"}}

        assert api.get("/api/plugins/Utility/config").json() == {"greeting": "hi"}

        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert saved["plugins"]["Utility"]["greeting"] == "hi"

    def test_config_post_merges(self, api):
        """Posting config merges with existing keys."""
        api.post("/api/plugins/Greeter/config", json={"channel": 7})

        assert api.get("/api/plugins/Greeter/config").json() == {"greeting": "hello", "channel": 7}

    def test_config_unknown_plugin_is_404(self, api):
        """Config endpoints return 404 for unknown plugins."""
        assert api.get("/api/plugins/Ghost/config").status_code == 404
        assert api.post("/api/plugins/Ghost/config", json={"a": 1}).status_code == 404

    def test_unload_and_load(self, api):
        """Unload removes commands; load brings the plugin back."""
        assert api.delete("/api/plugins/Utility").status_code == 200
        assert "ping" not in {c["name"] for c in api.get("/api/commands").json()}
        assert api.delete("/api/plugins/Utility").status_code == 404

        response = api.post("/api/plugins/load", json={"source": "utility.py"})
        assert response.status_code == 200
        assert response.json()["plugin"]["name"] == "Utility"

    def test_load_missing_is_404(self, api):
        """Loading a nonexistent file returns 404."""
        assert api.post("/api/plugins/load", json={"source": "nope.py"}).status_code == 404

    def test_load_outside_plugins_dir_is_404(self, api, tmp_path):
        """Absolute and parent-relative paths outside the plugins dir return 404."""
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "stray.py").write_text(UTILITY_SOURCE.replace('"Utility"', '"Stray"'), encoding="utf-8")

        absolute = api.post("/api/plugins/load", json={"source": str(outside / "stray.py")})
        dotdot = api.post("/api/plugins/load", json={"source": "../outside/stray.py"})

        assert absolute.status_code == 404
        assert dotdot.status_code == 404
        assert "Stray" not in {p["name"] for p in api.get("/api/plugins").json()}

    def test_load_invalid_is_400(self, api, write_plugin):
        """Loading a file that breaks the plugin contract returns 400."""
        write_plugin("bad.py", "def register(framework):\n    return object()\n")
        assert api.post("/api/plugins/load", json={"source": "bad.py"}).status_code == 400

    def test_reload(self, api, write_plugin):
        """Reload picks up the edited file; unknown names return 404."""
        write_plugin("utility.py", UTILITY_SOURCE.replace('"1.0.0"', '"2.0.0"'))

        response = api.post("/api/plugins/Utility/reload")

        assert response.status_code == 200
        assert response.json()["plugin"]["version"] == "2.0.0"
        assert api.post("/api/plugins/Ghost/reload").status_code == 404


class TestCommandEndpoints:
    """Tests for /api/commands."""

    def test_list_commands(self, api):
        """Commands are listed with their owning plugin."""
        commands = {c["name"]: c for c in api.get("/api/commands").json()}

        assert commands["ping"] == {
            "name": "ping",
            "description": "Check bot latency",
            "owningPlugin": "Utility",
        }
        assert commands["greet"]["owningPlugin"] == "Greeter"


class TestSystemEndpoints:
    """Tests for health, status, config and themes."""

    def test_health(self, api):
        """Health endpoint reports ok."""
        body = api.get("/api/health").json()
        assert body["status"] == "ok"

    def test_status(self, api):
        """Status reports offline client and registry counts."""
        body = api.get("/api/status").json()
        assert body["status"] == "offline"
        assert body["plugins"] == 2
        assert body["commands"] == 3

    def test_get_config_hides_token(self, api, config_service):
        """Bot config never exposes the token."""
        config_service.update({"token": "secret"})
        body = api.get("/api/config").json()
        assert "token" not in body
        assert body["prefix"] == "!"

    def test_update_config(self, api, config_file):
        """Config update persists the prefix and drops the token."""
        response = api.post("/api/config", json={"prefix": "?", "token": "stolen"})

        assert response.status_code == 200
        assert response.json()["config"]["prefix"] == "?"
        saved = json.loads(config_file.read_text(encoding="utf-8"))
        assert saved["prefix"] == "?"
        assert "token" not in saved

    def test_update_config_rejects_bad_port(self, api):
        """Out-of-range port returns 400."""
        assert api.post("/api/config", json={"port": 70000}).status_code == 400

    def test_update_config_rejects_unknown_theme(self, api):
        """Unknown theme returns 400."""
        assert api.post("/api/config", json={"theme": "ordos"}).status_code == 400

    def test_themes(self, api):
        """Available theme names are listed."""
        assert api.get("/api/themes").json() == ["default", "atreides", "harkonnen"]
