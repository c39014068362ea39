"""Command-line entry point for ``layoutgen``.

Subcommands:

- ``check``  parse and validate ``layout.yml``,
- ``up``     generate the layout on disk,
- ``sync``   bring ``layout.yml`` in line with the files on disk,
- ``rm``     delete a managed path from disk and from ``layout.yml``.
"""

from __future__ import annotations

import argparse
import shutil
import sys
from pathlib import Path
from typing import Callable, Optional

from layoutgen import __version__
from layoutgen.config import Config
from layoutgen.editor.modifier import EditError, remove_entry
from layoutgen.scaffolder.generator import GenerationError, generate
from layoutgen.spec.models import LayoutSpec
from layoutgen.spec.parser import SpecParseError, parse_string, spec_exists
from layoutgen.spec.paths import ManagedPath, collect_entries
from layoutgen.spec.validator import SpecValidationError, validate_spec
from layoutgen.sync.planner import SyncPlan, apply_sync, plan_sync
from layoutgen.utils import (
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
    read_text,
    write_text,
)


class CommandError(Exception):
    """Raised by a subcommand for a user-facing failure."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(config: Config) -> tuple[str, LayoutSpec]:
    path = config.spec_path
    if not spec_exists(path):
        raise CommandError(f"Specification not found: {path}")
    text = read_text(path)
    return text, parse_string(text)


def _find_entry(spec: LayoutSpec, display_path: str) -> Optional[ManagedPath]:
    wanted = display_path.strip()
    if wanted.startswith("./"):
        wanted = wanted[2:]
    for entry in collect_entries(spec):
        if entry.display_path in (wanted, f"{wanted.rstrip('/')}/"):
            return entry
    return None


def _print_plan(plan: SyncPlan) -> None:
    for entry in plan.removals:
        console.print(f"[red]- {entry.display_path}[/red]", highlight=False)
    for addition in plan.additions:
        console.print(f"[green]+ {addition.display_path}[/green]", highlight=False)
    for unresolved, reason in plan.unresolved:
        print_warning(f"Skipping {unresolved.display_path}: {reason}")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def cmd_check(args: argparse.Namespace, config: Config) -> int:
    _, spec = _load(config)
    validate_spec(spec)
    entries = collect_entries(spec)
    print_success(f"{config.spec_path} is valid")
    if config.verbose:
        print_summary_table(
            {
                "Projects": str(len(spec.projects)),
                "Directories": str(sum(1 for entry in entries if entry.is_directory)),
                "Files": str(sum(1 for entry in entries if not entry.is_directory)),
            },
            title="Specification",
        )
    return 0


def cmd_up(args: argparse.Namespace, config: Config) -> int:
    _, spec = _load(config)
    report = generate(config.base_dir, spec, config)
    if config.verbose:
        for path in report.created_directories + report.created_files:
            print_info(f"created {path}")
        for path in report.updated_manifests:
            print_info(f"updated {path}")
    print_summary_table(report.summary(), title="Generation")
    if report.changed:
        print_success("Layout generated")
    else:
        print_info("Layout already up to date")
    return 0


def cmd_sync(args: argparse.Namespace, config: Config) -> int:
    text, spec = _load(config)
    validate_spec(spec)
    plan = plan_sync(spec, text, config.base_dir, spec_filename=config.spec_filename)
    _print_plan(plan)

    if plan.is_empty:
        print_info(f"{config.spec_path} is in sync with the working tree")
        return 0
    if args.dry_run:
        print_info(
            f"Dry run: {len(plan.removals)} removal(s), {len(plan.additions)} addition(s)"
        )
        return 0

    updated = apply_sync(text, plan, config.base_dir, spec_filename=config.spec_filename)
    parse_string(updated)
    write_text(config.spec_path, updated)
    print_success(
        f"Updated {config.spec_path}: "
        f"{len(plan.removals)} removal(s), {len(plan.additions)} addition(s)"
    )
    return 0


def cmd_rm(args: argparse.Namespace, config: Config) -> int:
    text, spec = _load(config)
    validate_spec(spec)
    entry = _find_entry(spec, args.path)
    if entry is None:
        raise CommandError(f"'{args.path}' is not a managed path in {config.spec_path}")

    updated = remove_entry(text, entry)

    target = config.base_dir / entry.display_path.rstrip("/")
    if target.is_dir() and not target.is_symlink():
        shutil.rmtree(target)
    elif target.exists() or target.is_symlink():
        target.unlink()
    else:
        print_warning(f"{target} does not exist on disk")

    write_text(config.spec_path, updated)
    print_success(f"Removed {entry.display_path}")
    return 0


COMMANDS: dict[str, Callable[[argparse.Namespace, Config], int]] = {
    "check": cmd_check,
    "up": cmd_up,
    "sync": cmd_sync,
    "rm": cmd_rm,
}


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="layoutgen",
        description="layoutgen -- generate and maintain a project layout from layout.yml",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  layoutgen check\n"
            "  layoutgen up\n"
            "  layoutgen sync --dry-run\n"
            "  layoutgen rm src/domain/\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--spec", "-s",
        default=None,
        help="Specification file name (default: layout.yml)",
    )
    parser.add_argument(
        "--base-dir", "-C",
        default=None,
        help="Working directory holding the specification (default: .)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        default=None,
        help="Print every path that is created or updated",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("check", help="Validate the specification")
    subparsers.add_parser("up", help="Generate the layout on disk")

    sync = subparsers.add_parser("sync", help="Update the specification from the working tree")
    sync.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the changes without writing the specification",
    )

    rm = subparsers.add_parser("rm", help="Remove a managed file or directory")
    rm.add_argument("path", help="Display path of the entry, e.g. src/domain/ or src/main.rs")

    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``layoutgen`` and ``python -m layoutgen``."""
    args = build_parser().parse_args(argv)

    config = Config.from_env(
        spec_filename=args.spec,
        base_dir=Path(args.base_dir) if args.base_dir else None,
        verbose=args.verbose,
    )

    try:
        code = COMMANDS[args.command](args, config)
    except SpecParseError as exc:
        print_error(f"Failed to parse {config.spec_path}: {exc}")
        sys.exit(1)
    except SpecValidationError as exc:
        print_error(str(exc))
        sys.exit(1)
    except (GenerationError, EditError, CommandError) as exc:
        print_error(str(exc))
        sys.exit(1)
    except OSError as exc:
        print_error(f"I/O error: {exc}")
        sys.exit(1)

    if code:
        sys.exit(code)


if __name__ == "__main__":
    main()
