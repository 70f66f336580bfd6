"""Tests for CommandRegistry."""

from mentat.plugins.commands import CommandDescriptor, CommandRegistry


async def _noop(message, args, framework, plugin):
    return None


def _descriptor(name, plugin, description="desc"):
    return CommandDescriptor(name=name, description=description, execute=_noop, plugin=plugin)


class TestCommandRegistry:
    """Tests for command registration and owner tracking."""

    def test_register_and_resolve(self):
        """A registered command resolves by name."""
        registry = CommandRegistry()
        registry.register(_descriptor("ping", "Utility"))

        found = registry.resolve("ping")
        assert found is not None
        assert found.plugin == "Utility"
        assert registry.count() == 1

    def test_resolve_is_exact_match(self):
        """Resolution is exact and case-sensitive."""
        registry = CommandRegistry()
        registry.register(_descriptor("ping", "Utility"))

        assert registry.resolve("PING") is None
        assert registry.resolve("pin") is None

    def test_register_overwrites_last_write_wins(self):
        """Re-registering a name replaces the earlier descriptor."""
        registry = CommandRegistry()
        registry.register(_descriptor("help", "Utility", "first"))
        registry.register(_descriptor("help", "Other", "second"))

        found = registry.resolve("help")
        assert found.plugin == "Other"
        assert found.description == "second"
        assert registry.count() == 1

    def test_unregister_owned_by_only_removes_owner(self):
        """Unregistering an owner leaves other plugins' commands alone."""
        registry = CommandRegistry()
        registry.register(_descriptor("ping", "Utility"))
        registry.register(_descriptor("info", "Utility"))
        registry.register(_descriptor("kick", "Moderation"))

        removed = registry.unregister_owned_by("Utility")

        assert sorted(removed) == ["info", "ping"]
        assert registry.resolve("ping") is None
        assert registry.resolve("kick") is not None

    def test_unregister_keeps_command_taken_over_by_other_owner(self):
        """A command taken over by another plugin survives the first owner's removal."""
        registry = CommandRegistry()
        registry.register(_descriptor("help", "Utility"))
        registry.register(_descriptor("help", "Other"))

        registry.unregister_owned_by("Utility")

        assert registry.resolve("help").plugin == "Other"

    def test_unregister_unknown_owner_is_noop(self):
        """Unregistering an unknown owner changes nothing."""
        registry = CommandRegistry()
        registry.register(_descriptor("ping", "Utility"))

        assert registry.unregister_owned_by("Nobody") == []
        assert registry.count() == 1

    def test_to_dict_for_admin_listing(self):
        """Descriptors serialize with owningPlugin."""
        descriptor = _descriptor("ping", "Utility", "Check bot latency")
        assert descriptor.to_dict() == {
            "name": "ping",
            "description": "Check bot latency",
            "owningPlugin": "Utility",
        }
