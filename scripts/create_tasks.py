#!/usr/bin/env python3
"""
Create Todoist tasks for items exported from the reference manager.

Reads a JSON list of item metadata objects and creates one task per item,
sequentially, sharing one resource cache so new projects/labels/sections are
created only once.

Usage:
    python scripts/create_tasks.py ITEMS.json [--config settings.yaml]
                                              [--token TOKEN] [--dry-run]

Options:
    --config PATH   Settings YAML merged over config/defaults.yaml
    --token TOKEN   Todoist API token (default: settings / ZOTODO_TODOIST_TOKEN)
    --project NAME  Override the target project
    --dry-run       Print the composed tasks without calling Todoist
    --verbose       Debug logging

Item format:
    [{"key": "ABCD1234", "title": "...", "doi": "...",
      "creators": [{"first_name": "Ada", "last_name": "Lovelace"}],
      "collections": ["To read"],
      "attachments": [{"key": "PDF1", "content_type": "application/pdf",
                       "path": "/papers/a.pdf"}]}]

Exit codes: 0 all items handled, 1 some item failed, 2 invalid input.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import load_settings  # noqa: E402
from version import VERSION  # noqa: E402
from zotodo.errors import ConfigurationInvalid  # noqa: E402
from zotodo.items import ItemMetadata  # noqa: E402
from zotodo.service import ZotodoService  # noqa: E402

logger = logging.getLogger(__name__)


def load_items(path: str) -> list[ItemMetadata]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    return [ItemMetadata.from_dict(entry) for entry in data]


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Create Todoist tasks for library items",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("items", help="JSON file with item metadata")
    parser.add_argument("--config", type=str, help="Settings YAML file")
    parser.add_argument("--token", type=str, help="Todoist API token")
    parser.add_argument("--project", type=str, help="Target project name")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Compose tasks and print them without creating anything",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"zotodo {VERSION}")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    overrides = {"todoist_token": args.token, "project": args.project}
    if args.dry_run and not args.token:
        # Nothing is sent, so a token is not needed
        overrides["todoist_token"] = "dry-run"

    try:
        settings = load_settings(args.config, overrides=overrides)
    except ConfigurationInvalid as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        items = load_items(args.items)
    except (OSError, ValueError, TypeError) as e:
        logger.error(f"Failed to read items from {args.items}: {e}")
        return 2

    with ZotodoService(settings) as service:
        if args.dry_run:
            for item in items:
                if not item.is_regular:
                    continue
                draft = service.composer.compose(item)
                if draft is None:
                    print(f"{item.key}: skipped (ignored collection)")
                else:
                    print(json.dumps(draft.to_dict(), indent=2))
            return 0

        outcomes = service.make_tasks_for_items(items)

    for outcome in outcomes:
        line = f"[{outcome.status.value}] {outcome.item_key}: {outcome.message}"
        if outcome.error:
            line += f" ({outcome.error})"
        print(line)

    return 0 if all(o.success for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
