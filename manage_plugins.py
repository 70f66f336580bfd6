#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

# Ensure project root is in path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from mentat.constants import CONFIG_FILE, PLUGINS_DIR
from mentat.plugins.discovery import PluginDiscovery
from mentat.plugins.errors import PluginError
from mentat.plugins.lifecycle import PluginLifecycle
from mentat.services.config_service import ConfigService

console = Console()


def get_discovery() -> PluginDiscovery:
    return PluginDiscovery(PLUGINS_DIR)


def get_config() -> ConfigService:
    return ConfigService(CONFIG_FILE)


def inspect_plugin(path: Path):
    """Construct a plugin without a framework, for inspection only."""
    lifecycle = PluginLifecycle()
    plugin, module_name = lifecycle.load(path, framework=None)
    lifecycle.evict(module_name)
    return plugin


def cmd_list(args):
    """List all plugin files and the plugins they define."""
    files = get_discovery().discover_all()
    if not files:
        console.print("No plugins found.")
        return

    config = get_config()
    table = Table(title=f"Plugins in {PLUGINS_DIR}")
    table.add_column("File")
    table.add_column("Name")
    table.add_column("Version")
    table.add_column("Commands", justify="right")
    table.add_column("Events", justify="right")
    table.add_column("Saved config")

    for path in files:
        try:
            plugin = inspect_plugin(path)
        except PluginError as e:
            table.add_row(path.name, "[red]invalid[/red]", "", "", "", str(e))
            continue
        saved = "yes" if config.get_plugin_config(plugin.name) else "no"
        table.add_row(
            path.name, plugin.name, plugin.version,
            str(len(plugin.commands)), str(len(plugin.events)), saved,
        )

    console.print(table)


def cmd_info(args):
    """Show detailed plugin information."""
    try:
        path = get_discovery().resolve(args.source)
        plugin = inspect_plugin(path)
    except PluginError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    console.print(f"Plugin: [bold]{plugin.name}[/bold]")
    console.print(f"  Version:     {plugin.version}")
    console.print(f"  Description: {plugin.description}")
    console.print(f"  Path:        {path}")

    table = Table(title="Commands")
    table.add_column("Name")
    table.add_column("Description")
    for command in plugin.commands:
        table.add_row(command.name.lower(), command.description)
    console.print(table)

    if plugin.events:
        console.print(f"  Listeners:   {', '.join(listener.name for listener in plugin.events)}")

    saved = get_config().get_plugin_config(plugin.name)
    if saved:
        console.print(f"  Config:      {json.dumps(saved, indent=4, ensure_ascii=False)}")


def cmd_config(args):
    """Show a plugin's saved configuration."""
    saved = get_config().get_plugin_config(args.name)
    if not saved:
        console.print(f"No saved configuration for plugin '{args.name}'.")
        return
    console.print_json(json.dumps(saved, ensure_ascii=False))


def cmd_doctor(args):
    """Run health checks on the plugin system."""
    issues = []

    if not PLUGINS_DIR.exists():
        issues.append(f"Plugins directory missing: {PLUGINS_DIR}")

    if not CONFIG_FILE.exists():
        issues.append(f"Config file missing: {CONFIG_FILE}")
    else:
        try:
            with open(CONFIG_FILE, encoding="utf-8") as f:
                json.load(f)
        except json.JSONDecodeError as e:
            issues.append(f"Config file has invalid JSON: {e}")

    files = get_discovery().discover_all()
    names = {}
    for path in files:
        try:
            plugin = inspect_plugin(path)
        except PluginError as e:
            issues.append(f"{path.name}: {e}")
            continue
        if plugin.name in names:
            issues.append(f"{path.name}: plugin name '{plugin.name}' also declared by {names[plugin.name]}")
        names[plugin.name] = path.name

    if issues:
        console.print(f"[red]Found {len(issues)} issue(s):[/red]")
        for i, issue in enumerate(issues, 1):
            console.print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        console.print(f"[green]All checks passed.[/green] {len(files)} plugin file(s) found.")


def main():
    parser = argparse.ArgumentParser(description="Mentat Plugin Manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("source", help="Plugin file (e.g. utility.py)")

    # config
    config_parser = subparsers.add_parser("config", help="Show a plugin's saved configuration")
    config_parser.add_argument("name", help="Plugin name")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "config": cmd_config,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
