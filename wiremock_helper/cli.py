"""CLI entry point for wiremock-helper.

Handles argument parsing and dispatches admin commands against a running
Wiremock server. Command output is JSON on stdout; logs go to stderr.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from wiremock_helper.client import WiremockClient, WiremockError
from wiremock_helper.config_loader import ConfigError, load_client_config, load_mapping_file
from wiremock_helper.logging_utils import LOG_FORMATS, configure_logging
from wiremock_helper.models import ClientConfig
from wiremock_helper.request_journal import RequestJournalHelper


SIMPLE_COMMANDS = ("list-mappings", "list-scenarios", "reset", "reset-scenarios", "journal")


@dataclass
class GlobalArgs:
    command: str
    config: Path | None
    base_url: str | None
    files_root: Path | None
    log_level: str
    log_format: str


@dataclass
class CommandArgs(GlobalArgs):
    """Arguments for commands that take no extra options."""


@dataclass
class LoadMappingsArgs(GlobalArgs):
    directory: Path


@dataclass
class CountRequestsArgs(GlobalArgs):
    pattern: Path
    browser: str | None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per admin action."""
    parser = argparse.ArgumentParser(
        prog="wiremock-helper",
        description="Manage stub mappings, files and the request journal of a Wiremock server.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to client config YAML")
    parser.add_argument("--base-url", type=str, default=None, help="Wiremock base URL (overrides config)")
    parser.add_argument(
        "--files-root",
        type=Path,
        default=None,
        help="Directory for resolving body file references (overrides config)",
    )
    parser.add_argument("--log-level", type=str, default="warning", help="Log level (default: warning)")
    parser.add_argument("--log-format", choices=LOG_FORMATS, default="console", help="Log rendering")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Admin action")

    subparsers.add_parser("list-mappings", help="Print all stub mappings")
    subparsers.add_parser("list-scenarios", help="Print all scenarios and their states")
    subparsers.add_parser("reset", help="Delete all files and mappings, then reset the request journal")
    subparsers.add_parser("reset-scenarios", help="Move every scenario back to its Started state")
    subparsers.add_parser("journal", help="Print the request journal")

    load_parser = subparsers.add_parser("load-mappings", help="Add every *.json mapping in a directory")
    load_parser.add_argument("directory", type=Path, help="Directory holding mapping files")

    count_parser = subparsers.add_parser("count-requests", help="Count journal entries matching a request pattern")
    count_parser.add_argument("--pattern", type=Path, required=True, help="JSON file holding the request pattern")
    count_parser.add_argument(
        "--browser",
        type=str,
        default=None,
        help="Only count requests whose User-Agent contains this browser name (overrides config)",
    )

    return parser


def parse_args(args: list[str] | None = None) -> CommandArgs | LoadMappingsArgs | CountRequestsArgs:
    """Parse command-line arguments and return a typed args dataclass.

    Raises:
        SystemExit: If arguments are invalid (argparse behavior).
    """
    parser = build_parser()
    namespace = parser.parse_args(args)
    common: dict[str, Any] = {
        "command": namespace.command,
        "config": namespace.config,
        "base_url": namespace.base_url,
        "files_root": namespace.files_root,
        "log_level": namespace.log_level,
        "log_format": namespace.log_format,
    }

    if namespace.command == "load-mappings":
        return LoadMappingsArgs(**common, directory=namespace.directory)
    elif namespace.command == "count-requests":
        return CountRequestsArgs(**common, pattern=namespace.pattern, browser=namespace.browser)
    elif namespace.command in SIMPLE_COMMANDS:
        return CommandArgs(**common)
    else:
        # Should not happen with required=True on subparsers
        parser.error(f"Unknown command: {namespace.command}")


def resolve_config(args: GlobalArgs) -> ClientConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_client_config(args.config) if args.config is not None else ClientConfig()
    overrides: dict[str, Any] = {}
    if args.base_url is not None:
        overrides["base_url"] = args.base_url
    if args.files_root is not None:
        overrides["files_root"] = args.files_root
    if isinstance(args, CountRequestsArgs) and args.browser is not None:
        overrides["browser_name"] = args.browser
    return config.model_copy(update=overrides)


def main() -> int:
    """Main entry point."""
    try:
        parsed = parse_args()
        log = configure_logging(parsed.log_level, parsed.log_format)
        try:
            config = resolve_config(parsed)
        except ConfigError as e:
            print(f"Error loading config: {e}", file=sys.stderr)
            return 1
        log.info("command_started", command=parsed.command, base_url=config.base_url)
        return asyncio.run(run_command(parsed, config))

    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 1


async def run_command(
    args: CommandArgs | LoadMappingsArgs | CountRequestsArgs,
    config: ClientConfig,
    client: WiremockClient | None = None,
) -> int:
    """Run one admin command and print its result.

    Args:
        args: Parsed command-line arguments.
        config: Resolved client configuration.
        client: Client to use; built from config when None. A client passed
                in is not closed.
    """
    owned = client is None
    if client is None:
        client = WiremockClient.from_config(config)

    try:
        result = await _dispatch(args, config, client)
    except (WiremockError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if owned:
            await client.aclose()

    if result is not None:
        print(json.dumps(result, indent=2))
    return 0


async def _dispatch(
    args: CommandArgs | LoadMappingsArgs | CountRequestsArgs,
    config: ClientConfig,
    client: WiremockClient,
) -> Any:
    if isinstance(args, LoadMappingsArgs):
        created = await client.add_mappings_from_dir(args.directory)
        return {"created": len(created)}
    if isinstance(args, CountRequestsArgs):
        journal = RequestJournalHelper(client, browser_name=config.browser_name)
        return {"count": await journal.get_request_count(load_mapping_pattern(args.pattern))}

    if args.command == "list-mappings":
        return await client.get_mappings()
    elif args.command == "list-scenarios":
        return await client.get_scenarios()
    elif args.command == "reset":
        await client.delete_all_mappings()
        return None
    elif args.command == "reset-scenarios":
        await client.reset_scenarios()
        return None
    else:
        return await client.get_request_journal()


def load_mapping_pattern(pattern_path: Path) -> dict[str, Any]:
    """Load a request pattern document, accepting a full mapping file too."""
    try:
        with open(pattern_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read request pattern {pattern_path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Request pattern must be a JSON object: {pattern_path}")
    if "request" in raw and "response" in raw:
        return load_mapping_file(pattern_path)["request"]
    return raw


if __name__ == "__main__":
    sys.exit(main())
