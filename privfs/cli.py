from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from privfs.config.settings import settings
from privfs.container import DependencyContainer, container
from privfs.exceptions import BaseAppError, SessionTimeoutError, SessionUnavailableError

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_SESSION = 2


def _file_table(title: str, files: list[Any]) -> Table:
    tbl = Table(title=title, box=box.MINIMAL_DOUBLE_HEAD)
    tbl.add_column("Type", style="cyan")
    tbl.add_column("Size", justify="right")
    tbl.add_column("Modified")
    tbl.add_column("Name", style="bold")
    for f in files:
        details = f.get_details()
        tbl.add_row(
            details["type"],
            "" if f.is_directory() else str(details["size"]),
            details["modified_at"].strftime("%Y-%m-%d %H:%M"),
            details["name"],
        )
    return tbl


def _status(console: Console, ok: bool, message: str) -> int:
    if ok:
        console.print(f"[green]{message}[/green]")
        return EXIT_OK
    console.print(f"[red]{message} failed[/red]")
    return EXIT_FAILED


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="privfs",
        description="Browse and change files through a privileged shell session.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log every privileged command"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ls", help="List a directory")
    p.add_argument("path")
    p = sub.add_parser("stat", help="Describe one path")
    p.add_argument("path")
    p = sub.add_parser("mkdir", help="Create a directory")
    p.add_argument("path")
    p = sub.add_parser("rm", help="Remove a file or directory tree (recursive, forced)")
    p.add_argument("path")
    p = sub.add_parser("mv", help="Move or rename")
    p.add_argument("source")
    p.add_argument("destination")
    p = sub.add_parser("cat", help="Write a file's content to stdout")
    p.add_argument("path")
    p = sub.add_parser("put", help="Upload a local file")
    p.add_argument("local")
    p.add_argument("remote")
    return parser


def run(
    args: argparse.Namespace,
    deps: DependencyContainer,
    console: Console,
    out: Optional[Any] = None,
) -> int:
    """Run one parsed subcommand against the container's filesystem."""
    file_system = deps.get_file_system()

    if args.command == "ls":
        files = deps.get_list_files_use_case().execute(args.path)
        console.print(_file_table(args.path, files))
        return EXIT_OK

    if args.command == "stat":
        handle = file_system.get_file(args.path)
        if not handle.does_exist():
            console.print(f"[red]No such file or directory: {args.path}[/red]")
            return EXIT_FAILED
        console.print(_file_table(handle.get_absolute_path(), [handle]))
        return EXIT_OK

    if args.command == "mkdir":
        return _status(console, file_system.get_file(args.path).mkdir(), f"mkdir {args.path}")

    if args.command == "rm":
        return _status(console, file_system.get_file(args.path).delete(), f"rm {args.path}")

    if args.command == "mv":
        source = file_system.get_file(args.source)
        destination = file_system.get_file(args.destination)
        return _status(
            console, source.move(destination), f"mv {args.source} {args.destination}"
        )

    if args.command == "cat":
        if out is None:
            out = sys.stdout.buffer
        for chunk in deps.get_file_transfer_use_case().read_chunks(args.path):
            out.write(chunk)
        out.flush()
        return EXIT_OK

    if args.command == "put":
        with open(args.local, "rb") as f:
            written = deps.get_file_transfer_use_case().write(
                args.remote, iter(lambda: f.read(64 * 1024), b"")
            )
        console.print(f"[green]Wrote {written} bytes to {args.remote}[/green]")
        return EXIT_OK

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    console = Console(stderr=args.command == "cat")

    try:
        return run(args, container, console)
    except (SessionUnavailableError, SessionTimeoutError) as e:
        console.print(f"[red]Privileged session unavailable: {e}[/red]")
        return EXIT_SESSION
    except BaseAppError as e:
        console.print(f"[red]Error: {e}[/red]")
        return EXIT_FAILED
    finally:
        container.close()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
