"""
cli_interactive.py - Interactive CLI

Provides a menu-style interactive interface
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core import (
    ArchiveEntry, ArchiveOptions, RenamePlan, RuleGroup,
    load_listing, filter_entries, list_suffixes,
    analyze_archive, rename_entries, check_plan, execute_rename,
    default_output_path, template_names, load_template, parse_rule_groups,
)


def clear_screen():
    """Clear screen"""
    os.system('cls' if os.name == 'nt' else 'clear')


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def input_archive(prompt: str = "Please enter archive path") -> Optional[Path]:
    """Input and validate archive file"""
    while True:
        path_str = input(f"{prompt} (q to return): ").strip()
        if path_str.lower() == 'q':
            return None

        path = Path(path_str).expanduser().resolve()
        if path.is_file():
            return path
        else:
            print(f"Error: File does not exist: {path}")


def input_choice(prompt: str, choices: List[str], default: Optional[str] = None) -> Optional[str]:
    """Input choice"""
    choices_str = "/".join(choices)
    default_str = f" [{default}]" if default else ""

    while True:
        value = input(f"{prompt} ({choices_str}){default_str}: ").strip()
        if not value and default:
            return default
        if value.lower() == 'q':
            return None
        if value in choices:
            return value
        print(f"Invalid choice, please enter: {choices_str}")


def input_bool(prompt: str, default: bool = False) -> bool:
    """Input boolean value"""
    default_str = "Y/n" if default else "y/N"
    value = input(f"{prompt} ({default_str}): ").strip().lower()
    if not value:
        return default
    return value == 'y'


def input_int(prompt: str, default: int = 0, min_val: int = 0) -> int:
    """Input integer"""
    while True:
        value = input(f"{prompt} [{default}]: ").strip()
        if not value:
            return default
        try:
            num = int(value)
            if num < min_val:
                print(f"Value cannot be less than {min_val}")
                continue
            return num
        except ValueError:
            print("Please enter a valid integer")


def _load(archive: Path, options: ArchiveOptions) -> Optional[List[ArchiveEntry]]:
    try:
        entries = load_listing(archive)
        options.check_entry_count(len(entries))
    except ValueError as e:
        print(f"Error: {e}")
        input("Press Enter to return...")
        return None
    return entries


def _confirm_and_execute(archive: Path, plan: RenamePlan, options: ArchiveOptions):
    """Show a plan, check it, and write the renamed archive on confirmation"""
    errors = check_plan(plan, options.case_insensitive_detect)
    if errors:
        print("\nErrors:")
        for err in errors:
            print(f"  - {err}")
        input("Press Enter to return...")
        return

    if not plan.changed:
        print("No entries need renaming")
        input("Press Enter to return...")
        return

    # Display plan
    print(f"\nWill rename {plan.total_count} entries:")
    print("-" * 70)
    for item in plan.changed[:15]:
        print(f"  {item.original_path:<35} -> {item.final_path}")
    if plan.total_count > 15:
        print(f"  ... and {plan.total_count - 15} more entries")
    print("-" * 70)

    for note in plan.notes:
        print(f"Note: {note}")

    if archive.suffix.lower() == ".json":
        print("Listing files can only be previewed")
        input("Press Enter to return...")
        return

    # Confirm execution
    output = default_output_path(archive)
    print()
    if not input_bool(f"Write {output.name}", default=False):
        print("Cancelled")
        input("Press Enter to return...")
        return

    # Execute
    print("\nExecuting...")
    result = execute_rename(archive, plan, output)
    print()
    print(result.summary())

    input("\nPress Enter to return...")


def menu_analyze():
    """Archive analysis menu"""
    print_header("Analyze Archive")

    archive = input_archive()
    if archive is None:
        return

    options = ArchiveOptions()
    entries = _load(archive, options)
    if entries is None:
        return

    report = analyze_archive(entries)
    print()
    print(report.summary())

    warnings = report.warnings
    for conflict in warnings.rename_conflicts:
        print(f"  ! Case conflict in {conflict.directory}: {', '.join(conflict.conflicting_files)}")
    for dup in warnings.duplicate_names[:10]:
        print(f"  ! Duplicate name in {dup.directory}: {dup.filename} x{dup.count}")
    for item in warnings.system_files:
        print(f"  - System file ({item.type}): {item.path}")

    input("\nPress Enter to return...")


def menu_template_rename():
    """Template rename menu"""
    print_header("Rename with Template")

    archive = input_archive()
    if archive is None:
        return

    options = ArchiveOptions()
    entries = _load(archive, options)
    if entries is None:
        return

    print(f"Found {len(entries)} entries")

    names = template_names()
    print("\nTemplates:")
    for i, name in enumerate(names, 1):
        print(f"  {i}. {name}")

    choice = input_choice("Select template", [str(i) for i in range(1, len(names) + 1)], "1")
    if choice is None:
        return

    groups = load_template(names[int(choice) - 1])
    plan = rename_entries(entries, groups, preserve_top_level=options.preserve_top_level)
    _confirm_and_execute(archive, plan, options)


def _quick_rules(entries: List[ArchiveEntry]) -> Optional[List[RuleGroup]]:
    """Build a single rule group from a few questions"""
    suffixes = list_suffixes(entries)
    if suffixes:
        print(f"\nAvailable file suffixes: {', '.join(suffixes)}")

    suffix_filter = input("File suffix filter (e.g., .jpg, leave empty for all): ").strip()

    rules: List[Dict[str, Any]] = []
    find = input("String to replace (leave empty to skip): ")
    if find:
        rules.append({
            "type": "replace",
            "find": find,
            "replace": input("Replace with (leave empty to delete): "),
            "caseSensitive": input_bool("Case sensitive", default=False),
        })

    if input_bool("Lowercase names", default=False):
        rules.append({"type": "lowercase"})

    prefix = input("Prefix (leave empty for no prefix): ").strip()
    if prefix:
        rules.append({"type": "prefix", "text": prefix})

    if input_bool("Add sequence numbers", default=False):
        rules.append({
            "type": "numbering",
            "start": input_int("Starting number", default=1, min_val=0),
            "padding": input_int("Zero-padding digits", default=1, min_val=1),
            "separator": "_",
            "position": "end",
        })

    if not rules:
        return None

    record = {
        "id": "quick",
        "scope": "extension" if suffix_filter else "global",
        "scopeValue": suffix_filter,
        "rules": rules,
    }
    return parse_rule_groups([record])


def menu_quick_rename():
    """Quick rule rename menu"""
    print_header("Quick Rename")

    archive = input_archive()
    if archive is None:
        return

    options = ArchiveOptions()
    entries = _load(archive, options)
    if entries is None:
        return

    groups = _quick_rules(entries)
    if not groups:
        print("No rules given")
        input("Press Enter to return...")
        return

    print("\nGenerating rename plan...")
    plan = rename_entries(entries, groups, preserve_top_level=options.preserve_top_level)
    _confirm_and_execute(archive, plan, options)


def menu_search_only():
    """Search only menu"""
    print_header("Search Entries")

    archive = input_archive()
    if archive is None:
        return

    options = ArchiveOptions()
    entries = _load(archive, options)
    if entries is None:
        return

    keyword = input("Search keyword (leave empty to match all): ").strip()
    case_sensitive = input_bool("Case sensitive", default=False)

    found = filter_entries(entries, keyword, case_sensitive)
    if not found:
        print("No matching entries found")
        input("Press Enter to return...")
        return

    # Display results
    print(f"\nFound {len(found)} entries:")
    print("-" * 80)
    for i, entry in enumerate(found):
        if i >= 50:
            print(f"... and {len(found) - 50} more entries")
            break
        size = "<dir>" if entry.is_directory else f"{entry.size / 1024:>10.1f} KB"
        print(f"  {entry.path:<55} {size}")
    print("-" * 80)
    print(f"Total: {len(found)} entries")

    input("\nPress Enter to return...")


def interactive_mode() -> int:
    """Interactive mode main loop"""
    while True:
        clear_screen()
        print_header("ZIP Rename Tool")

        print("Please select function:")
        print()
        print("  1. Search entries")
        print("  2. Analyze archive")
        print("  3. Rename with template")
        print("  4. Quick rename")
        print()
        print("  q. Exit")
        print()

        choice = input("Please select (1/2/3/4/q): ").strip().lower()

        if choice == 'q':
            print("Goodbye!")
            return 0
        elif choice == '1':
            menu_search_only()
        elif choice == '2':
            menu_analyze()
        elif choice == '3':
            menu_template_rename()
        elif choice == '4':
            menu_quick_rename()
        else:
            print("Invalid choice")
            input("Press Enter to continue...")


if __name__ == "__main__":
    sys.exit(interactive_mode())
