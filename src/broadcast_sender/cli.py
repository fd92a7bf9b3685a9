"""Command line interface for sending a broadcast message."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Sequence

import yaml
from dotenv import load_dotenv

from .config import ENV_URL, BroadcastOptions, credentials_from_env, load_settings, section
from .pipeline import send_broadcast_message
from .time_window import parse_start_time


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a broadcast message to an environment's AddMessage API")
    parser.add_argument("--settings", default="config/settings.yaml", help="Path to settings.yaml")
    parser.add_argument("--tenant", help="Tenant id (or env BROADCAST_TENANT_ID)")
    parser.add_argument("--url", help=f"Environment base URL (or env {ENV_URL})")
    parser.add_argument("--client-id", help="Application client id (or env BROADCAST_CLIENT_ID)")
    parser.add_argument("--client-secret", help="Application client secret (or env BROADCAST_CLIENT_SECRET)")
    parser.add_argument("--timezone", help="Target time zone name, e.g. Europe/Oslo (default: UTC)")
    parser.add_argument("--start-time", help="Local start time YYYY-MM-DD HH:MM[:SS] (default: now)")
    parser.add_argument("--ending-in-minutes", type=int, help="Window length in minutes (default: 60)")
    parser.add_argument("--dry-run", action="store_true", help="Compute and log the request without sending it")
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_settings(args.settings)
    except (yaml.YAMLError, OSError, ValueError) as exc:
        parser.error(f"Cannot read settings {args.settings}: {exc}")

    level_name = str(args.log_level or section(config, "logging").get("level") or "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        parser.error(f"Unknown log level: {level_name}")
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    url = args.url or os.getenv(ENV_URL)
    if not url:
        parser.error(f"--url is required (or set {ENV_URL})")

    start_time = None
    if args.start_time:
        try:
            start_time = parse_start_time(args.start_time)
        except ValueError as exc:
            parser.error(str(exc))

    try:
        options = BroadcastOptions.from_settings(
            config,
            url=url,
            timezone=args.timezone,
            start_time=start_time,
            ending_in_minutes=args.ending_in_minutes,
            dry_run=args.dry_run,
        )
    except (TypeError, ValueError) as exc:
        parser.error(str(exc))

    credentials = credentials_from_env(args.tenant, args.client_id, args.client_secret)
    result = send_broadcast_message(options, credentials)

    if not result.ok:
        print(f"Broadcast failed ({result.error_kind}): {result.error}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_output()))
    return 0
