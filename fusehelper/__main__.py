"""Command line entry point: ``python -m fusehelper [shell|serve|ingest]``."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
import sys

from rich.logging import RichHandler

from fusehelper.data.dataset import DatasetError

logger = logging.getLogger("fusehelper")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fusehelper", description="Item search and fusion planner")
    parser.add_argument("--data", type=Path, help="Path to the item dataset JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("shell", help="Interactive search and fusion shell (default)")

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    ingest = sub.add_parser("ingest", help="Convert a saved FAQ page into the item dataset")
    ingest.add_argument("source", type=Path)
    ingest.add_argument("output", type=Path)
    return parser


def _run_shell() -> None:
    from fusehelper.bootstrap import get_container
    from fusehelper.cli.shell import run_shell

    container = get_container()
    container.database.ensure_loaded()
    run_shell(container.fuse)


def _run_server(host: str, port: int) -> None:
    import uvicorn

    from fusehelper.bootstrap import get_container

    get_container().database.ensure_loaded()
    uvicorn.run("fusehelper.web.main:app", host=host, port=port, log_level="info")


def _run_ingest(source: Path, output: Path) -> None:
    from fusehelper.ingest import build_dataset, write_dataset

    write_dataset(build_dataset(source), output)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    command = args.command or "shell"
    level = logging.DEBUG if args.verbose else logging.WARNING if command == "shell" else logging.INFO

    if command == "shell":
        logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=[RichHandler()])
    else:
        logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if args.data is not None:
        os.environ["FUSE_DATA_PATH"] = str(args.data)

    try:
        if command == "serve":
            _run_server(args.host, args.port)
        elif command == "ingest":
            _run_ingest(args.source, args.output)
        else:
            _run_shell()
    except (DatasetError, OSError) as exc:
        logger.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
