"""
cli_entry.py - CLI Entry Point

Supports:
- Command-line argument mode
- Interactive mode
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core import (
    ArchiveOptions, RenamePlan,
    load_listing, filter_entries, rename_entries, analyze_archive,
    check_plan, execute_rename, default_output_path,
    load_rule_file, load_template, template_names,
)
from .cli_interactive import interactive_mode

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="ziprename",
        description="Batch rename ZIP archive entries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  ziprename

  # Check an archive for cross-platform problems
  ziprename analyze photos.zip

  # Preview a built-in template
  ziprename preview photos.zip --template seo

  # Rename with a rule file
  ziprename rename photos.zip --rules rules.json --output clean.zip
"""
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--max-entries", type=int, default=ArchiveOptions().max_entries,
                        help="Refuse archives with more entries than this")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # list subcommand
    list_parser = subparsers.add_parser("list", help="List archive entries")
    list_parser.add_argument("archive", type=str, help="ZIP archive or JSON listing")
    list_parser.add_argument("--keyword", "-k", type=str, default="", help="Only entries containing keyword")
    list_parser.add_argument("--case-sensitive", "-c", action="store_true", help="Case-sensitive")

    # analyze subcommand
    analyze_parser = subparsers.add_parser("analyze", help="Check an archive for cross-platform problems")
    analyze_parser.add_argument("archive", type=str, help="ZIP archive or JSON listing")
    analyze_parser.add_argument("--json", action="store_true", help="Print the report as JSON")

    # preview subcommand
    preview_parser = subparsers.add_parser("preview", help="Show the renamed paths")
    _add_rule_arguments(preview_parser)
    preview_parser.add_argument("--json", action="store_true", help="Print the plan as JSON")

    # rename subcommand
    rename_parser = subparsers.add_parser("rename", help="Write a renamed copy of an archive")
    _add_rule_arguments(rename_parser)
    rename_parser.add_argument("--output", "-o", type=str, help="Output archive (default: <name>_renamed.zip)")
    rename_parser.add_argument("--dry-run", "-d", action="store_true", help="Preview only, do not execute")
    rename_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    rename_parser.add_argument("--log-dir", type=str, help="Save plan/result logs here")

    return parser


def _add_rule_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("archive", type=str, help="ZIP archive or JSON listing")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--rules", "-r", type=str, help="JSON rule group file")
    source.add_argument("--template", "-t", type=str, choices=template_names(), help="Built-in template")
    parser.add_argument("--rename-top-level", action="store_true",
                        help="Also rename top-level folders")


def _load_entries(args, options: ArchiveOptions):
    entries = load_listing(Path(args.archive).expanduser())
    options.check_entry_count(len(entries))
    return entries


def _build_plan(args, options: ArchiveOptions) -> RenamePlan:
    entries = _load_entries(args, options)
    notes: List[str] = []
    if args.rules:
        groups = load_rule_file(Path(args.rules).expanduser(), notes)
    else:
        groups = load_template(args.template)

    options.preserve_top_level = not args.rename_top_level
    plan = rename_entries(entries, groups, preserve_top_level=options.preserve_top_level)
    plan.notes[:0] = notes
    return plan


def print_plan(plan: RenamePlan, limit: int = 20) -> None:
    """Print the entries whose path changes"""
    print(f"Will rename {plan.total_count} of {len(plan.items)} entries:")
    print("-" * 80)
    for item in plan.changed[:limit]:
        print(f"  {item.original_path:<40} -> {item.final_path}")
    if plan.total_count > limit:
        print(f"  ... and {plan.total_count - limit} more entries")
    print("-" * 80)

    if plan.notes:
        print("Notes:")
        for note in plan.notes:
            print(f"  - {note}")


def cmd_list(args, options: ArchiveOptions):
    """Handle list command"""
    entries = _load_entries(args, options)
    shown = filter_entries(entries, args.keyword, args.case_sensitive)

    if not shown:
        print("No matching entries found")
        return 0

    print(f"Found {len(shown)} entries:")
    print("-" * 80)
    for entry in shown:
        size = "<dir>" if entry.is_directory else f"{entry.size / 1024:>10.1f} KB"
        print(f"  {entry.path:<55} {size}")
    print("-" * 80)

    return 0


def cmd_analyze(args, options: ArchiveOptions):
    """Handle analyze command"""
    entries = _load_entries(args, options)
    report = analyze_archive(entries)

    if args.json:
        print(json.dumps(report.to_dict(), ensure_ascii=False, indent=2))
        return 0

    print(report.summary())
    for conflict in report.warnings.rename_conflicts:
        print(f"  ! {conflict.directory}: {', '.join(conflict.conflicting_files)} -> {conflict.result_name}")
    for warning in report.warnings.invalid_chars[:10]:
        print(f"  ! {warning.path} ({warning.os}): {' '.join(warning.invalid_chars)}")
    for warning in report.warnings.path_too_long[:10]:
        print(f"  ! {warning.path} ({warning.os}): {warning.length} > {warning.limit} bytes")

    return 0


def cmd_preview(args, options: ArchiveOptions):
    """Handle preview command"""
    plan = _build_plan(args, options)
    errors = check_plan(plan, options.case_insensitive_detect)

    if args.json:
        print(json.dumps({"files": plan.to_list(), "notes": plan.notes, "errors": errors},
                         ensure_ascii=False, indent=2))
        return 0

    if not plan.changed:
        print("No entries need renaming")
    else:
        print_plan(plan)

    if errors:
        print("Errors:")
        for err in errors:
            print(f"  - {err}")
        return 1

    return 0


def cmd_rename(args, options: ArchiveOptions):
    """Handle rename command"""
    plan = _build_plan(args, options)

    if not plan.changed:
        print("No entries need renaming")
        return 0

    print_plan(plan)

    errors = check_plan(plan, options.case_insensitive_detect)
    if errors:
        print("Errors:")
        for err in errors:
            print(f"  - {err}")
        return 1

    archive = Path(args.archive).expanduser()
    if archive.suffix.lower() == ".json":
        print("Listing files can only be previewed")
        return 1
    output = Path(args.output).expanduser() if args.output else default_output_path(archive)

    # Confirmation
    if args.dry_run:
        print("\n[Preview mode] Will not actually execute")
        return 0

    if not args.yes:
        confirm = input(f"\nWrite {output}? (y/N): ").strip().lower()
        if confirm != 'y':
            print("Cancelled")
            return 0

    # Execute
    print("\nExecuting...")
    result = execute_rename(archive, plan, output, log_dir=Path(args.log_dir) if args.log_dir else None)
    print(result.summary())

    return 0 if result.failed_count == 0 else 1


COMMANDS = {
    "list": cmd_list,
    "analyze": cmd_analyze,
    "preview": cmd_preview,
    "rename": cmd_rename,
}


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        # No subcommand, enter interactive mode
        return interactive_mode()

    options = ArchiveOptions(max_entries=args.max_entries)
    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args, options)
    except (ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
