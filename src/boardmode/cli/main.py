#!/usr/bin/env python3
"""Entry point for the boardmode CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import time
from pathlib import Path
from textwrap import dedent
from typing import Any, Dict

from boardmode import __version__
from boardmode.adapters.filesystem import FileSystemVault, YamlSettingsStore
from boardmode.app.documents import BoardDocuments
from boardmode.app.oracle import MetadataOracle
from boardmode.domain.views import BoardSettingsError, declares_board, parse_frontmatter
from boardmode.ports.host import HostOperationError
from boardmode.settings import SETTINGS
from boardmode.utils.telemetry import clear as telemetry_clear
from boardmode.utils.telemetry import iter_events as telemetry_iter
from boardmode.utils.telemetry import record_structured_event, summarize as telemetry_summarize

HELP_OVERVIEW = dedent(
    """
    Documents become boards when their leading annotation block carries
    `kanban-plugin: <variant>`.

      boardmode check NOTE.md...     - report which documents declare a board
      boardmode new [FOLDER]         - create a new board document
      boardmode convert NOTE.md      - turn an empty document into a board
      boardmode telemetry --summary  - inspect the local event log
    """
)


def _vault_root(args: argparse.Namespace) -> Path:
    root = getattr(args, "root", None)
    return Path(root).expanduser().resolve() if root else Path.cwd()


def _documents(vault: FileSystemVault) -> BoardDocuments:
    store = YamlSettingsStore(SETTINGS.config_file)
    return BoardDocuments(vault, store.load())


def _check_cmd(args: argparse.Namespace) -> int:
    results: list[Dict[str, Any]] = []
    missing = False
    for raw in args.paths:
        path = Path(raw).expanduser()
        if not path.is_file():
            results.append({"path": str(path), "exists": False, "board": False})
            missing = True
            continue
        text = path.read_text(encoding="utf-8", errors="replace")
        frontmatter = parse_frontmatter(text)
        results.append(
            {
                "path": str(path),
                "exists": True,
                "board": declares_board(frontmatter),
                "raw_marker": MetadataOracle.declares_structured_raw(text),
            }
        )
    if args.json:
        print(json.dumps({"documents": results}, ensure_ascii=False, indent=2))
    else:
        for entry in results:
            if not entry["exists"]:
                print(f"{entry['path']}: missing")
                continue
            verdict = "board" if entry["board"] else "markdown"
            if not entry["board"] and entry["raw_marker"]:
                verdict += " (marker present, annotation block not parseable)"
            print(f"{entry['path']}: {verdict}")
    return 1 if missing else 0


def _new_cmd(args: argparse.Namespace) -> int:
    vault = FileSystemVault(_vault_root(args))
    documents = _documents(vault)
    folder = vault.folder(args.folder or "")
    start = time.perf_counter()
    document = asyncio.run(documents.create_board(folder))
    record_structured_event(
        SETTINGS,
        "cli.new",
        status="ok",
        component="cli",
        payload={"path": document.path, "root": str(vault.root)},
        duration_ms=(time.perf_counter() - start) * 1000,
    )
    if args.json:
        print(json.dumps({"path": document.path, "absolute": str(document.absolute)}, ensure_ascii=False, indent=2))
    else:
        print(f"board created: {document.path}")
    return 0


def _convert_cmd(args: argparse.Namespace) -> int:
    vault = FileSystemVault(_vault_root(args))
    document = vault.get_file(args.path)
    if document is None:
        print(f"No such document: {args.path}", file=sys.stderr)
        return 1
    converted = asyncio.run(_documents(vault).convert_empty(document))
    record_structured_event(
        SETTINGS,
        "cli.convert",
        status="ok" if converted else "skipped",
        component="cli",
        payload={"path": document.path},
    )
    if not converted:
        print(f"{document.path} is not empty; refusing to convert", file=sys.stderr)
        return 1
    print(f"converted: {document.path}")
    return 0


def _telemetry_cmd(args: argparse.Namespace) -> int:
    if args.clear:
        telemetry_clear(SETTINGS)
        print("telemetry cleared")
        return 0
    events = list(telemetry_iter(SETTINGS))
    if args.summary:
        print(json.dumps(telemetry_summarize(events), ensure_ascii=False, indent=2))
        return 0
    for event in events[-args.limit:]:
        print(json.dumps(event, ensure_ascii=False))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boardmode",
        description="Board/markdown view arbitration utilities",
        epilog=HELP_OVERVIEW,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    check_cmd = sub.add_parser("check", help="Report whether documents declare a board")
    check_cmd.add_argument("paths", nargs="+", help="Documents to inspect")
    check_cmd.add_argument("--json", action="store_true", help="Emit machine-readable output")
    check_cmd.set_defaults(func=_check_cmd)

    new_cmd = sub.add_parser("new", help="Create a new board document")
    new_cmd.add_argument("folder", nargs="?", help="Folder inside the vault (default: vault root)")
    new_cmd.add_argument("--root", help="Vault root (default: current directory)")
    new_cmd.add_argument("--json", action="store_true", help="Emit machine-readable output")
    new_cmd.set_defaults(func=_new_cmd)

    convert_cmd = sub.add_parser("convert", help="Write the board annotation block into an empty document")
    convert_cmd.add_argument("path", help="Document path (relative to the vault root or absolute)")
    convert_cmd.add_argument("--root", help="Vault root (default: current directory)")
    convert_cmd.set_defaults(func=_convert_cmd)

    telemetry_cmd = sub.add_parser("telemetry", help="Inspect the local telemetry log")
    telemetry_cmd.add_argument("--summary", action="store_true", help="Aggregate events by name and level")
    telemetry_cmd.add_argument("--clear", action="store_true", help="Delete the telemetry log")
    telemetry_cmd.add_argument("--limit", type=int, default=20, help="Number of recent events to print")
    telemetry_cmd.set_defaults(func=_telemetry_cmd)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except BoardSettingsError as exc:
        print(f"{exc.message} ({exc.code})", file=sys.stderr)
        if exc.remediation:
            print(f"hint: {exc.remediation}", file=sys.stderr)
        return 1
    except (HostOperationError, OSError) as exc:
        print(str(exc), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
