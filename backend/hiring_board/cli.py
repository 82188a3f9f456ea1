#!/usr/bin/env python3
"""CLI for the hiring pipeline board. Usage: hpb <command> [args]"""

import asyncio
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from hiring_board.board import PipelineBoard
from hiring_board.bulk import TEMPLATES, BulkResult, NotifyAction, RejectAction, StatusChangeAction
from hiring_board.config import get_settings
from hiring_board.drag import DragOutcome
from hiring_board.statuses import PIPELINE, parse_status


def _parse_flags(args: list[str], flags: dict[str, type]) -> tuple[dict, list[str]]:
    """Parse --flag=value args. Returns (parsed_flags, remaining_args)."""
    parsed = {}
    remaining = []
    for arg in args:
        if arg.startswith("--") and "=" in arg:
            key, val = arg.split("=", 1)
            key = key[2:]  # strip --
            if key in flags:
                parsed[key] = flags[key](val)
            else:
                remaining.append(arg)
        elif arg.startswith("--"):
            key = arg[2:]
            if key in flags and flags[key] is bool:
                parsed[key] = True
            else:
                remaining.append(arg)
        else:
            remaining.append(arg)
    return parsed, remaining


HELP = """Usage: hpb <command> [args]

Board:
  board [--search=] [--job=]  Columns (id|candidate|job|rating)
  stats                       Pipeline summary
  jobs                        Job filter options
  statuses                    Pipeline stages

Move:
  move <id> <status>          Move one card (same as a drag)

Bulk:
  status <status> <id> [...]  Set status [--notes=]
  reject <id> [...]           Reject [--notes=]
  notify <template> <id> ...  Email candidates [--subject=] [--message=]
  templates                   List message templates
  export <id> [...]           Export [--format=csv|json] [--out=file]
"""


def _sanitize(s) -> str:
    """Replace pipe delimiters in source data."""
    return str(s or "").replace("|", "-")


def _fmt_app(app) -> str:
    return "|".join([
        app.id,
        _sanitize(app.candidate_name),
        _sanitize(app.job_title),
        str(app.rating) if app.rating else "-",
    ])


def _fmt_result(result: BulkResult) -> str:
    lines = [f"ok: {len(result.succeeded)} | failed: {len(result.failed)}"]
    for failure in result.failed:
        lines.append(f"  {failure.application_id}: {failure.error}")
    return "\n".join(lines)


async def _load(board: PipelineBoard, jobs: bool = False) -> bool:
    ok = await board.sync.refresh()
    if jobs:
        await board.sync.load_jobs()
    return ok


def _select(board: PipelineBoard, ids: list[str]) -> None:
    """Select each id once; repeats on the command line are ignored."""
    for application_id in ids:
        if application_id not in board.selection:
            board.selection.toggle(application_id)


async def _bulk(board: PipelineBoard, action, ids: list[str]) -> BulkResult:
    if not await _load(board):
        return BulkResult()
    _select(board, ids)
    return await board.bulk.apply_action(action)


async def _move(board: PipelineBoard, application_id: str, target: str) -> DragOutcome:
    if not await _load(board):
        return DragOutcome.REJECTED
    if not board.drag.begin_drag(application_id):
        return DragOutcome.REJECTED
    return await board.drag.commit_drag(application_id, target)


def _print_errors(board: PipelineBoard) -> None:
    for n in board.notifier.active():
        if n.level.value in ("error", "warning"):
            print(f"{n.level.value.upper()}: {n.message}", file=sys.stderr)


def main():
    args = sys.argv[1:]
    if not args or args[0] in ("-h", "--help", "help"):
        print(HELP.strip())
        return

    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    cmd = args[0]
    rest = args[1:]
    board = PipelineBoard(settings=settings)

    if cmd == "board":
        flags, _ = _parse_flags(rest, {"search": str, "job": str})
        if not asyncio.run(_load(board)):
            _print_errors(board)
            sys.exit(1)
        board.store.set_filters(search=flags.get("search"), job_id=flags.get("job"))
        for column in board.store.columns():
            print(f"## {column.title} ({column.count})")
            for app in column.applications:
                print(_fmt_app(app))
        _print_errors(board)

    elif cmd == "stats":
        if not asyncio.run(_load(board)):
            _print_errors(board)
            sys.exit(1)
        stats = board.store.stats()
        print(f"total: {stats.total} | in pipeline: {stats.in_pipeline} | hired: {stats.hired} | rejected: {stats.rejected}")
        print(" | ".join(f"{k}: {v}" for k, v in stats.by_status.items()))
        if stats.anomalies:
            print(f"unknown status: {stats.anomalies}")

    elif cmd == "jobs":
        ok = asyncio.run(board.sync.load_jobs())
        if not ok:
            _print_errors(board)
            sys.exit(1)
        for job in board.sync.jobs:
            print(f"{job.id}|{_sanitize(job.title)}")

    elif cmd == "statuses":
        for status in PIPELINE:
            print(status.value)

    elif cmd == "templates":
        for t in TEMPLATES.values():
            print(f"{t.id}|{t.name}")

    elif cmd == "move":
        if len(rest) != 2:
            print("Usage: hpb move <id> <status>")
            sys.exit(1)
        application_id, target = rest
        if parse_status(target) is None:
            print(f"Unknown status '{target}'. Use: {', '.join(s.value for s in PIPELINE)}")
            sys.exit(1)
        outcome = asyncio.run(_move(board, application_id, target))
        print(outcome.value)
        _print_errors(board)
        if outcome in (DragOutcome.ROLLED_BACK, DragOutcome.REJECTED):
            sys.exit(1)

    elif cmd in ("status", "reject", "notify"):
        flags, ids = _parse_flags(rest, {"notes": str, "subject": str, "message": str})
        try:
            if cmd == "status":
                if not ids:
                    raise ValueError("Usage: hpb status <status> <id> [...]")
                action = StatusChangeAction(status=ids.pop(0), notes=flags.get("notes"))
            elif cmd == "reject":
                action = RejectAction(notes=flags.get("notes"))
            else:
                if not ids:
                    raise ValueError("Usage: hpb notify <template> <id> [...]")
                action = NotifyAction(
                    template_id=ids.pop(0),
                    subject=flags.get("subject"),
                    message=flags.get("message"),
                )
        except (ValueError, ValidationError) as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        if not ids:
            print("No application ids given")
            sys.exit(1)
        result = asyncio.run(_bulk(board, action, ids))
        print(_fmt_result(result))
        _print_errors(board)
        if result.failed or not result.succeeded:
            sys.exit(1)

    elif cmd == "export":
        flags, ids = _parse_flags(rest, {"format": str, "out": str})
        fmt = flags.get("format", "csv")
        if not asyncio.run(_load(board)):
            _print_errors(board)
            sys.exit(1)
        _select(board, ids)
        try:
            content = board.export_selection(fmt)
        except ValueError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        if flags.get("out"):
            Path(flags["out"]).write_text(content)
            print(f"Exported {len(board.bulk.selected_applications())} to {flags['out']}")
        else:
            print(content, end="")

    else:
        print(f"Unknown command: {cmd}")
        print(HELP.strip())
        sys.exit(1)


if __name__ == "__main__":
    main()
