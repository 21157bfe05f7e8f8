#!/usr/bin/env python3
"""Live embedded messaging sync probe.

Runs one (or more) sync cycles against the API with configuration read
from ``EMBEDDED_*`` environment variables and prints what landed in the
local cache.

Examples:
    EMBEDDED_API_KEY=... EMBEDDED_EMAIL=me@example.com python scripts/sync_probe.py
    python scripts/sync_probe.py --cycles 2 --json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyembedded import EmbeddedClient, EmbeddedConfig, EmbeddedConfigError, EmbeddedManager  # noqa: E402


class _PrintingListener:
    def on_messages_updated(self) -> None:
        print("[listener] messages updated")

    def on_messaging_disabled(self) -> None:
        print("[listener] embedded messaging disabled")


def _cache_dump(manager: EmbeddedManager) -> dict[str, Any]:
    dump: dict[str, Any] = {}
    for placement_id in manager.get_placement_ids():
        messages = manager.get_messages(placement_id) or ()
        dump[str(placement_id)] = [
            {
                "messageId": message.message_id,
                "title": message.elements.title if message.elements else None,
                "buttons": [button.id for button in message.elements.buttons] if message.elements else [],
            }
            for message in messages
        ]
    return dump


async def _run(args: argparse.Namespace) -> int:
    overrides: dict[str, Any] = {}
    if args.email:
        overrides["email"] = args.email
    if args.user_id:
        overrides["user_id"] = args.user_id
    try:
        config = EmbeddedConfig.from_env(**overrides)
        config.validate()
    except EmbeddedConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    async with EmbeddedClient(config) as client:
        manager = EmbeddedManager(client, tracker=None if args.no_tracking else client)
        manager.add_listener(_PrintingListener())
        for cycle in range(1, args.cycles + 1):
            result = await manager.sync()
            if result is None:
                print(f"cycle {cycle}: aborted (state={manager.state})")
                continue
            print(
                f"cycle {cycle}: changed={result.changed} "
                f"received={list(result.received_message_ids)} "
                f"removed_placements={list(result.removed_placement_ids)}"
            )

        dump = _cache_dump(manager)
        if args.json:
            print(json.dumps(dump, indent=2))
        else:
            for placement_id, messages in dump.items():
                print(f"placement {placement_id}:")
                for message in messages:
                    print(f"  - {message['messageId']}: {message['title']!r} buttons={message['buttons']}")
        return 1 if manager.is_disabled else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Run embedded message sync cycles against the live API")
    parser.add_argument("--email", help="Override EMBEDDED_EMAIL")
    parser.add_argument("--user-id", help="Override EMBEDDED_USER_ID")
    parser.add_argument("--cycles", type=int, default=1, help="Number of sync cycles to run")
    parser.add_argument("--no-tracking", action="store_true", help="Do not report received events")
    parser.add_argument("--json", action="store_true", help="Print the cache as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
