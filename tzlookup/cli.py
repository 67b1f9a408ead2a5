#!/usr/bin/env python3
"""
tzlookup CLI

Command-line access to a tzlookup document.

Usage:
    tzlookup [--data PATH ...] [--config FILE] <command> [options]

Commands:
    validate    Whole-document validation (exit 2 when invalid)
    version     IANA rules version recorded in the document
    zones       Default zone and zone ids for a country
    match       Zone matching an offset / DST state at an instant
    config      Configuration management

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

import yaml

from tzlookup import __version__
from tzlookup.config import ConfigError, get_config_manager
from tzlookup.errors import TimeZoneDataError
from tzlookup.finder import TimeZoneFinder
from tzlookup.observability import TzLayer, configure_logging, get_logger
from tzlookup.oracle import get_default_oracle

logger = get_logger("cli", TzLayer.CLI)


class OutputFormat(Enum):
    """Output format options."""
    JSON = "json"
    YAML = "yaml"
    TEXT = "text"


class CLIError(Exception):
    """CLI error with exit code."""
    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code


def format_output(data: Any, fmt: OutputFormat = OutputFormat.JSON) -> str:
    """Format data for output."""
    if fmt == OutputFormat.JSON:
        return json.dumps(data, indent=2, default=str)
    elif fmt == OutputFormat.YAML:
        return yaml.safe_dump(data, default_flow_style=False)
    elif isinstance(data, dict):
        return "\n".join(f"{k}: {v}" for k, v in data.items())
    return str(data)


def parse_when(value: str) -> datetime:
    """Parse an ISO 8601 instant; a trailing Z and naive values mean UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        raise CLIError(f"Invalid --when value: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class TzLookupCLI:
    """Main CLI application."""

    def __init__(self):
        self.parser = argparse.ArgumentParser(
            prog="tzlookup",
            description="Country time zone lookups over a tzlookup.xml document",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self.parser.add_argument(
            "--version", "-V",
            action="version",
            version=f"tzlookup {__version__}",
        )
        self.parser.add_argument(
            "--data", "-d",
            action="append",
            metavar="PATH",
            help="tzlookup.xml path; repeat for fallbacks, validate checks each (default: configured data.paths)",
        )
        self.parser.add_argument(
            "--config", "-c",
            metavar="FILE",
            help="YAML configuration file",
        )
        self.parser.add_argument(
            "--format", "-f",
            choices=["json", "yaml", "text"],
            default="json",
            help="Output format (default: json)",
        )
        self.parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress error messages",
        )

        self.subparsers = self.parser.add_subparsers(dest="command", help="Commands")
        self._register_commands()

    def _register_commands(self) -> None:
        self.subparsers.add_parser("validate", help="Validate the whole document")
        self.subparsers.add_parser("version", help="Show the document's IANA version")

        zones = self.subparsers.add_parser("zones", help="Zones used in a country")
        zones.add_argument("country", help="Country code, e.g. us")

        match = self.subparsers.add_parser("match", help="Find a zone by offset and DST state")
        match.add_argument("country", help="Country code, e.g. us")
        match.add_argument("--offset", "-o", type=int, required=True,
                           help="Total UTC offset in seconds")
        match.add_argument("--dst", action="store_true", help="DST is in effect")
        match.add_argument("--when", "-w", help="ISO 8601 instant (default: now)")
        match.add_argument("--bias", "-b", help="Preferred zone id when several match")

        config = self.subparsers.add_parser("config", help="Configuration management")
        config_sub = config.add_subparsers(dest="subcommand")
        config_sub.add_parser("show", help="Show effective configuration")
        get = config_sub.add_parser("get", help="Get a configuration value")
        get.add_argument("path", help="Dotted path, e.g. data.paths")
        config_sub.add_parser("validate", help="Validate configuration values")

    def run(self, args: Optional[List[str]] = None) -> int:
        """Run the CLI."""
        parsed = self.parser.parse_args(args)

        if not parsed.command:
            self.parser.print_help()
            return 0

        try:
            mgr = get_config_manager()
            if parsed.config:
                mgr.load_from_file(parsed.config)
            configure_logging(
                mgr.get("observability.log_level"),
                mgr.get("observability.log_format"),
            )

            fmt = OutputFormat(parsed.format)
            result = self._dispatch(parsed)

            if result is not None:
                print(format_output(result, fmt))

            return 0

        except CLIError as e:
            if not parsed.quiet:
                print(f"Error: {e}", file=sys.stderr)
            return e.exit_code

        except (ConfigError, TimeZoneDataError) as e:
            logger.error("Command failed", error_code=getattr(e, "error_code", ""),
                         command=parsed.command, error=str(e))
            if not parsed.quiet:
                print(f"Error: {e}", file=sys.stderr)
            return 1

    def _dispatch(self, args: argparse.Namespace) -> Any:
        """Dispatch command to handler."""
        cmd = args.command
        subcmd = getattr(args, "subcommand", None)

        handler_name = f"_handle_{cmd}_{subcmd}" if subcmd else f"_handle_{cmd}"
        handler = getattr(self, handler_name, None)

        if handler is None:
            raise CLIError(f"Unknown command: {cmd} {subcmd or ''}")

        return handler(args)

    def _finder(self, args: argparse.Namespace) -> TimeZoneFinder:
        paths = args.data or get_config_manager().get("data.paths")
        return TimeZoneFinder.create_instance_with_fallback(*paths)

    # Document handlers
    def _handle_validate(self, args: argparse.Namespace) -> Any:
        """
        Validate every --data path, or the first existing configured path.
        A missing document is a validation failure, never the empty fallback.
        """
        if args.data:
            paths = list(args.data)
        else:
            configured = get_config_manager().get("data.paths")
            paths = [p for p in configured if Path(p).is_file()][:1]
            if not paths:
                raise CLIError(
                    f"Validation failed: no data file found in {list(configured)}", exit_code=2,
                )

        sources = []
        for path in paths:
            try:
                finder = TimeZoneFinder.create_instance(path)
                finder.validate()
            except TimeZoneDataError as e:
                raise CLIError(f"Validation failed: {e}", exit_code=2) from e
            sources.append(finder.source.description)
        return {"valid": True, "sources": sources}

    def _handle_version(self, args: argparse.Namespace) -> Any:
        finder = self._finder(args)
        return {"ianaversion": finder.get_iana_version(), "source": finder.source.description}

    def _handle_zones(self, args: argparse.Namespace) -> Any:
        finder = self._finder(args)
        zone_ids = finder.lookup_time_zone_ids_by_country(args.country)
        if zone_ids is None:
            raise CLIError(f"Unknown country: {args.country}")
        return {
            "country": args.country.lower(),
            "default": finder.lookup_default_time_zone_id_by_country(args.country),
            "zones": list(zone_ids),
        }

    def _handle_match(self, args: argparse.Namespace) -> Any:
        finder = self._finder(args)
        when = parse_when(args.when) if args.when else datetime.now(timezone.utc)
        zone = finder.lookup_time_zone_by_country_and_offset(
            args.country, args.offset, args.dst, when, args.bias,
        )
        if zone is None:
            raise CLIError(
                f"No zone in {args.country} with offset {args.offset} (dst={args.dst}) at {when.isoformat()}"
            )
        return {"country": args.country.lower(), "zone": get_default_oracle().zone_id(zone),
                "when": when.isoformat()}

    # Config handlers
    def _handle_config_show(self, args: argparse.Namespace) -> Any:
        return get_config_manager().config.to_dict()

    def _handle_config_get(self, args: argparse.Namespace) -> Any:
        return {"path": args.path, "value": get_config_manager().get(args.path)}

    def _handle_config_validate(self, args: argparse.Namespace) -> Any:
        errors = get_config_manager().validate()
        return {"valid": len(errors) == 0, "errors": errors}


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    return TzLookupCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
