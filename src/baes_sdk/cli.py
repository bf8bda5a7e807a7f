"""
Command line interface for the BAES SDK.

Usage:
    baes-checkpoint save OWNER APPLICATION --data '{"level": 1}'
    baes-checkpoint load OWNER APPLICATION [--timestamp MS]
    baes-checkpoint list OWNER APPLICATION
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from rich.console import Console

from .sdk import BaesSDK
from .store import LocalContentStore
from .utils.config import load_config
from .utils.errors import BaesError, ValidationError, error_context
from .utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="baes-checkpoint",
        description="Save, load and list application checkpoints"
    )
    parser.add_argument("--store", choices=["pinata", "local"], default="pinata",
                        help="Content store backend (default: pinata)")
    parser.add_argument("--path", type=Path, default=Path(".baes-store"),
                        help="Storage directory for the local backend")
    parser.add_argument("--config", type=Path, help="JSON, YAML or TOML config file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    save = subparsers.add_parser("save", help="Save a checkpoint")
    save.add_argument("owner", help="Owner account address")
    save.add_argument("application", help="Application identifier")
    save.add_argument("--data", required=True,
                      help="Payload as a JSON object, or @path to a JSON file")

    load = subparsers.add_parser("load", help="Load a checkpoint payload")
    load.add_argument("owner", help="Owner account address")
    load.add_argument("application", help="Application identifier")
    load.add_argument("--timestamp", type=int, help="createdAt of the checkpoint (default: latest)")

    list_cmd = subparsers.add_parser("list", help="List checkpoints, newest first")
    list_cmd.add_argument("owner", help="Owner account address")
    list_cmd.add_argument("application", help="Application identifier")

    return parser


def parse_payload(raw: str) -> Any:
    """Decode --data, reading from a file when prefixed with @"""
    text = Path(raw[1:]).read_text() if raw.startswith("@") else raw
    try:
        return json.loads(text)
    except ValueError as e:
        raise ValidationError(field="data", value=raw, constraint=f"data must be valid JSON ({e})") from e


async def run(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args.config, debug=True if args.debug else None)
    setup_logging(log_level=config.effective_log_level)

    store = LocalContentStore(args.path) if args.store == "local" else None

    async with BaesSDK(config, store=store) as sdk:
        if args.command == "save":
            await sdk.save_checkpoint(args.owner, args.application, parse_payload(args.data))
            console.print_json(data={"saved": True})

        elif args.command == "load":
            payload = await sdk.load_checkpoint(args.owner, args.application, timestamp=args.timestamp)
            console.print_json(data=payload)
            if payload is None:
                return 2

        elif args.command == "list":
            checkpoints = await sdk.list_checkpoints(args.owner, args.application)
            console.print_json(data=[
                {**cp.to_record(), "contentId": cp.content_id}
                for cp in checkpoints
            ])

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the baes-checkpoint script"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    console = Console()
    error_console = Console(stderr=True)

    try:
        with error_context("cli", args.command):
            return asyncio.run(run(args, console))
    except BaesError as e:
        error_console.print(f"[red]{e.code}[/red]: {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
