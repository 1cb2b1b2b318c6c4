#!/usr/bin/env python3
"""Export the stored permission model to a replayable command script.

This script:
- Loads database and export settings from the environment (PERMSCRIPT_*)
- Loads all groups and tracks from the permission database
- Exports groups, tracks and (unless --no-users) every user to <file>
- Prints progress to the terminal while the user export runs

Usage:
    ./scripts/export_permissions.py export.txt
    ./scripts/export_permissions.py export.txt --no-users
    ./scripts/export_permissions.py export.txt --workers 64 --interval 2
"""

import argparse
import asyncio
import getpass
import socket
import sys
from pathlib import Path

from rich.console import Console

# Add src/exporter to path so we can run from a checkout
src_path = Path(__file__).parent.parent / "src" / "exporter"
sys.path.insert(0, str(src_path))

from backup.application.services import ExportService  # noqa: E402
from backup.application.value_objects import ExportOutcome  # noqa: E402
from backup.infrastructure.managers import GroupManager, TrackManager  # noqa: E402
from backup.infrastructure.observers import ConsoleObserver, LogObserver  # noqa: E402
from backup.infrastructure.permission_repository import (  # noqa: E402
    SqlPermissionStorage,
)
from backup.infrastructure.user_cache import UserCache  # noqa: E402
from infrastructure.database.engines import (  # noqa: E402
    create_read_engine,
    create_session_factory,
)
from infrastructure.logging import configure_logging  # noqa: E402
from infrastructure.settings import (  # noqa: E402
    get_database_settings,
    get_export_settings,
    get_settings,
)

console = Console(stderr=True)


def parse_args(argv=None):
    """Parse command line arguments."""
    export_settings = get_export_settings()
    parser = argparse.ArgumentParser(
        description="Export groups, tracks and users to a replayable command script",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s export.txt
  %(prog)s export.txt --no-users
  %(prog)s export.txt --workers 64 --interval 2
        """,
    )

    parser.add_argument("file", type=Path, help="File to write the script to")
    parser.add_argument(
        "--no-users",
        dest="include_users",
        action="store_false",
        default=export_settings.include_users,
        help="Only export groups and tracks",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=export_settings.worker_count,
        help=f"Users loaded concurrently (default: {export_settings.worker_count})",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=export_settings.progress_interval_seconds,
        help="Seconds between progress reports "
        f"(default: {export_settings.progress_interval_seconds})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=get_settings().debug,
        help="Log one event per exported user",
    )

    args = parser.parse_args(argv)
    if args.workers < 1:
        parser.error("--workers must be at least 1")
    if args.interval <= 0:
        parser.error("--interval must be greater than 0")
    return args


async def run_export(args) -> ExportOutcome:
    """Wire storage and listeners, then run the export."""
    export_settings = get_export_settings()
    engine = create_read_engine(get_database_settings())
    try:
        user_cache = UserCache()
        storage = SqlPermissionStorage(create_session_factory(engine), user_cache)

        group_manager = GroupManager(await storage.load_all_groups())
        track_manager = TrackManager(await storage.load_all_tracks())

        executor = ConsoleObserver(
            f"{getpass.getuser()}@{socket.gethostname()}", console=console
        )
        service = ExportService(
            storage=storage,
            user_cache=user_cache,
            group_manager=group_manager,
            track_manager=track_manager,
            executor=executor,
            output_path=export_settings.resolve_output(args.file),
            include_users=args.include_users,
            worker_count=args.workers,
            progress_interval=args.interval,
            notify_frequency=export_settings.notify_frequency,
            listeners=(LogObserver(),),
        )
        return await service.run()
    finally:
        await engine.dispose()


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(debug=args.debug)

    outcome = asyncio.run(run_export(args))
    if outcome.succeeded:
        console.print(
            f"[green]Exported {outcome.groups} groups, {outcome.tracks} tracks "
            f"and {outcome.users} users to {outcome.output_path}[/green]"
        )
        return 0

    console.print(f"[red]Export {outcome.status.value}[/red]")
    for error in outcome.errors:
        console.print(f"  [red]{error}[/red]")
    return 1


if __name__ == "__main__":
    sys.exit(main())
