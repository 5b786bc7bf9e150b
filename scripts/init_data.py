"""Utility script to initialise, inspect or reset the JSON data directory."""

from __future__ import annotations

import argparse
import shutil
from pathlib import Path
import sys

import anyio

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from notifyhub.bootstrap import Container, build_container, seed_sample_data
from notifyhub.config import get_settings
from notifyhub.domain.exceptions import NotifyHubError


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for the data directory tool."""

    parser = argparse.ArgumentParser(
        description="Prepare the notification service data directory.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=("init", "stats", "reset"),
        default="init",
        help="init seeds missing documents, stats prints a summary, reset recreates the directory",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory holding the JSON documents (default: NOTIFYHUB_DATA_DIR or ./data)",
    )
    return parser.parse_args()


async def initialise(container: Container) -> None:
    await seed_sample_data(container)
    await container.settings_service.initialize()
    await container.notification_service.initialize()


async def print_stats(container: Container) -> None:
    stats = await container.notification_service.get_notification_stats()
    comments, total_comments = await container.comment_service.list_comments(limit=1)
    settings = (await container.settings_service.get_settings()).notifications

    print(f"Data directory: {container.settings.data_dir}")
    print("Notifications:")
    print(f"  Total: {stats.total}")
    print(f"  Unread: {stats.unread}")
    print(f"  Last 24h: {stats.recent_24h}")
    for notification_type, count in sorted(stats.type_stats.items()):
        print(f"  {notification_type}: {count}")
    print("Comments:")
    print(f"  Total: {total_comments}")
    if comments:
        print(f"  Latest: {comments[0].commenter_name} on \"{comments[0].post_title}\"")
    print("Settings:")
    print(f"  Enabled: {settings.enabled}")
    print(f"  Sound: {settings.sound}")
    print(f"  Desktop: {settings.desktop}")
    enabled_types = [name for name, enabled in settings.types.to_dict().items() if enabled]
    print(f"  Active types: {', '.join(enabled_types) or '-'}")


async def run(command: str, container: Container) -> None:
    if command == "reset" and container.settings.data_dir.exists():
        shutil.rmtree(container.settings.data_dir)
        print(f"Removed {container.settings.data_dir}")
    if command in ("init", "reset"):
        await initialise(container)
        print("Data directory ready.")
    await print_stats(container)


def main() -> None:
    """Run the requested command against the configured data directory."""

    args = parse_args()
    settings = get_settings()
    if args.data_dir is not None:
        settings = settings.model_copy(update={"data_dir": args.data_dir})

    try:
        anyio.run(run, args.command, build_container(settings))
    except (NotifyHubError, OSError) as exc:
        raise SystemExit(f"Could not prepare the data directory: {exc}") from exc


if __name__ == "__main__":
    main()
