#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Ensure project root is in path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

load_dotenv(project_root / ".env")

from launcher.constants import CORE_PLUGINS_DIR, PLUGIN_CACHE_DIR, PLUGIN_PYTHON, USER_PLUGINS_DIR
from launcher.dependencies import get_plugin_manager

console = Console()


def setup_logging():
    """Log everything to logs/ and only warnings to the console."""
    log_dir = project_root / "logs"
    log_dir.mkdir(exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)

    file_handler = logging.FileHandler(
        log_dir / f"plugins_{datetime.now().strftime('%Y%m%d')}.log",
        encoding='utf-8'
    )
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)


def _cell(value):
    return "" if value is None else str(value)


def load_manager():
    """Create the plugin manager and resolve all plugins."""
    manager = get_plugin_manager()
    asyncio.run(manager.load_all())
    return manager


def cmd_list(args):
    """List all discovered plugins."""
    manager = load_manager()
    plugins = manager.list_plugins()

    if not plugins:
        console.print("No plugins found.")
        return

    table = Table(title=f"{len(plugins)} plugin(s)")
    table.add_column("Name")
    table.add_column("Schema")
    table.add_column("Keyword")
    table.add_column("Action")
    table.add_column("Source")
    table.add_column("Status")

    for p in plugins:
        status = f"[yellow]{p['degradation']}[/yellow]" if p["degradation"] else "[green]ok[/green]"
        table.add_row(
            p["name"],
            p["schema"],
            p["keyword"] or "-",
            p["action"] or "-",
            "core" if p["is_core"] else "user",
            status,
        )
    console.print(table)

    themes = manager.list_themes()
    if themes:
        console.print(f"Themes skipped: {', '.join(t['name'] for t in themes)}")


def cmd_info(args):
    """Show detailed plugin information."""
    manager = load_manager()
    info = manager.get_plugin_info(args.name)
    if not info:
        console.print(f"[red]Plugin '{args.name}' not found.[/red]")
        sys.exit(1)

    console.print(Panel(json.dumps(info, indent=2, ensure_ascii=False), title=f"Plugin: {args.name}"))


def cmd_query(args):
    """Run a query the way the launcher would."""
    manager = load_manager()
    text = " ".join(args.text)

    if args.plugin:
        results = asyncio.run(manager.query_plugin(args.plugin, args.text))
        if results is None:
            console.print(f"[red]Plugin '{args.plugin}' not found.[/red]")
            sys.exit(1)
        results = [results]
    else:
        results = asyncio.run(manager.search(text)).results

    if not results:
        console.print("No plugin matched the query.")
        return

    for r in results:
        if r.error:
            console.print(f"[red]✗ {r.plugin}: {r.error}[/red]")
            continue
        table = Table(title=f"{r.plugin} ({len(r.items)} item(s))")
        table.add_column("Title")
        table.add_column("Subtitle")
        table.add_column("Icon")
        table.add_column("Action")
        for item in r.items:
            table.add_row(_cell(item.title), _cell(item.subtitle), item.icon.path, _cell(item.action))
        console.print(table)


def cmd_doctor(args):
    """Run health checks on the plugin system."""
    issues = []

    # Check directories
    if not CORE_PLUGINS_DIR.exists():
        issues.append(f"Core plugins directory missing: {CORE_PLUGINS_DIR}")
    if not USER_PLUGINS_DIR.exists():
        issues.append(f"User plugins directory missing: {USER_PLUGINS_DIR}")
    if PLUGIN_CACHE_DIR.exists() and not PLUGIN_CACHE_DIR.is_dir():
        issues.append(f"Plugin cache path is not a directory: {PLUGIN_CACHE_DIR}")
    if not Path(PLUGIN_PYTHON).exists():
        issues.append(f"Interpreter for external-tool plugins not found: {PLUGIN_PYTHON}")

    # Resolve plugins and report every degraded one
    manager = load_manager()
    plugins = manager.list_plugins()
    for p in plugins:
        if p["degradation"]:
            issues.append(f"Plugin '{p['name']}' resolved with defaults ({p['degradation']}): {p['detail']}")

    keywords = {}
    for p in plugins:
        if p["keyword"]:
            keywords.setdefault(p["keyword"], []).append(p["name"])
    for keyword, names in keywords.items():
        if len(names) > 1:
            issues.append(f"Keyword '{keyword}' is shared by: {', '.join(names)}")

    if issues:
        console.print(f"[red]Found {len(issues)} issue(s):[/red]")
        for i, issue in enumerate(issues, 1):
            console.print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        console.print(
            f"[green]All checks passed.[/green] {len(plugins)} plugin(s), "
            f"{len(manager.list_themes())} theme(s)."
        )


def main():
    parser = argparse.ArgumentParser(description="Launcher Plugin Manager")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("name", help="Plugin directory name")

    # query
    query_parser = subparsers.add_parser("query", help="Run a query")
    query_parser.add_argument("text", nargs="*", help="Query text, as typed in the launcher")
    query_parser.add_argument("--plugin", help="Query only this plugin (text is passed as its arguments)")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    setup_logging()

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "query": cmd_query,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
