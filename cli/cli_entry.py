"""
cli_entry.py - CLI Entry Point

Supports:
- Command-line argument mode (list / preview / apply)
- Interactive mode
"""

import argparse
import fnmatch
import sys
from pathlib import Path
from typing import List, Optional

from core import (
    CaseType, ConfigError, ConflictPolicy, DatePosition, DateType, FileBrowser,
    InvalidPathError, MutationConfig, NumberingMode, PreviewSession, RenameOptions,
    execute_rename, load_mutation_config, plan_from_mapping, validate_plan,
)
from core.log import setup_logging

from .cli_interactive import input_bool, interactive_mode, print_plan


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser"""
    parser = argparse.ArgumentParser(
        prog="rename_tool",
        description="Batch Rename Preview Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Interactive mode
  python main.py -c

  # List a directory
  python main.py -c list ./photos

  # Preview: lowercase names, number them
  python main.py -c preview ./photos --case lower --number suffix --number-pad 3

  # Regex on the stem, then rename for real
  python main.py -c apply ./photos --select "*.jpg" --regex "IMG_(\\d+)" --sub "photo_$1"
"""
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    # list subcommand
    list_parser = subparsers.add_parser("list", help="List directory entries")
    list_parser.add_argument("directory", type=str, help="Directory")

    # preview subcommand
    preview_parser = subparsers.add_parser("preview", help="Preview new names")
    preview_parser.add_argument("directory", type=str, help="Directory")
    add_selection_arguments(preview_parser)
    add_mutation_arguments(preview_parser)

    # apply subcommand
    apply_parser = subparsers.add_parser("apply", help="Preview, then rename")
    apply_parser.add_argument("directory", type=str, help="Directory")
    add_selection_arguments(apply_parser)
    add_mutation_arguments(apply_parser)
    apply_parser.add_argument("--dry-run", "-d", action="store_true", help="Preview only, do not execute")
    apply_parser.add_argument("--yes", "-y", action="store_true", help="Skip confirmation")
    apply_parser.add_argument("--on-conflict", type=str, default="suffix",
                              choices=["suffix", "skip", "error"], help="Name collision policy")
    apply_parser.add_argument("--log-dir", type=str, default=None, help="Save JSON plan/result logs here")

    return parser


def add_selection_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--select", "-s", action="append", default=None, metavar="PATTERN",
                        help="Select entries whose name matches (glob, repeatable; default: all)")


def add_mutation_arguments(parser: argparse.ArgumentParser) -> None:
    """Mutation flags; anything left unset keeps the --config (or default) value"""
    parser.add_argument("--config", type=str, default=None, help="Mutation configuration JSON file")

    group = parser.add_argument_group("Regex")
    group.add_argument("--regex", type=str, default=None, help="Pattern")
    group.add_argument("--sub", type=str, default=None, help="Substitution ($1, ${name})")
    group.add_argument("--regex-ext", action="store_true", help="Include the extension in matching")

    group = parser.add_argument_group("Replace")
    group.add_argument("--find", type=str, default=None, help="Literal text to replace")
    group.add_argument("--replace-with", type=str, default=None, help="Replacement text")
    group.add_argument("--match-case", action="store_true", help="Case-sensitive find")
    group.add_argument("--first-only", action="store_true", help="Replace the first occurrence only")

    group = parser.add_argument_group("Case")
    group.add_argument("--case", type=str, default=None, choices=[c.value for c in CaseType],
                       help="Letter case conversion")

    group = parser.add_argument_group("Remove")
    group.add_argument("--remove-first", type=int, default=None, metavar="N")
    group.add_argument("--remove-last", type=int, default=None, metavar="N")
    group.add_argument("--remove-from", type=int, default=None, metavar="POS", help="1-based start")
    group.add_argument("--remove-to", type=int, default=None, metavar="POS", help="1-based end (inclusive)")
    group.add_argument("--remove-chars", type=str, default=None)
    group.add_argument("--remove-words", type=str, default=None, help="Space-separated words")
    group.add_argument("--remove-digits", action="store_true")
    group.add_argument("--remove-accents", action="store_true")
    group.add_argument("--trim", action="store_true")

    group = parser.add_argument_group("Add")
    group.add_argument("--prefix", type=str, default=None)
    group.add_argument("--suffix", type=str, default=None)
    group.add_argument("--insert", type=str, default=None)
    group.add_argument("--insert-at", type=int, default=None, metavar="POS")
    group.add_argument("--word-space", action="store_true", help="Space between prefix/suffix and name")

    group = parser.add_argument_group("Auto Date")
    group.add_argument("--date", type=str, default=None, choices=[d.value for d in DateType])
    group.add_argument("--date-format", type=str, default=None)
    group.add_argument("--date-position", type=str, default=None, choices=[p.value for p in DatePosition])
    group.add_argument("--date-sep", type=str, default=None)

    group = parser.add_argument_group("Numbering")
    group.add_argument("--number", type=str, default=None, choices=[m.value for m in NumberingMode])
    group.add_argument("--number-at", type=int, default=None, metavar="POS")
    group.add_argument("--number-start", type=int, default=None)
    group.add_argument("--number-step", type=int, default=None)
    group.add_argument("--number-pad", type=int, default=None)
    group.add_argument("--number-sep", type=str, default=None)
    group.add_argument("--number-break", type=int, default=None)
    group.add_argument("--number-base", type=int, default=None)
    group.add_argument("--number-upper", action="store_true")


def _given(**values) -> dict:
    return {k: v for k, v in values.items() if v is not None}


def config_from_args(args) -> MutationConfig:
    """
    Build mutation configuration from --config plus explicit flags

    Raises:
        ConfigError: Invalid file or option values
    """
    config = load_mutation_config(args.config) if args.config else MutationConfig()

    if args.regex is not None:
        config = config.with_section(
            "regex", enabled=True, pattern=args.regex,
            substitution=args.sub or "", including_extension=args.regex_ext,
        )

    if args.find is not None:
        config = config.with_section(
            "replace", enabled=True, match=args.find, replace_with=args.replace_with or "",
            case_sensitive=args.match_case, first_only=args.first_only,
        )

    if args.case is not None:
        config = config.with_section("case", enabled=True, case_type=args.case)

    remove = _given(
        first_n=args.remove_first, last_n=args.remove_last,
        from_pos=args.remove_from, to_pos=args.remove_to,
        chars=args.remove_chars,
        words=tuple(args.remove_words.split()) if args.remove_words is not None else None,
    )
    for flag, key in ((args.remove_digits, "digits"), (args.remove_accents, "accents"), (args.trim, "trim")):
        if flag:
            remove[key] = True
    if remove:
        config = config.with_section("remove", enabled=True, **remove)

    add = _given(prefix=args.prefix, suffix=args.suffix, insert=args.insert, at_position=args.insert_at)
    if args.word_space:
        add["word_space"] = True
    if add:
        config = config.with_section("add", enabled=True, **add)

    if args.date is not None:
        date = _given(date_format=args.date_format, separator=args.date_sep)
        if args.date_position is not None:
            date["position"] = args.date_position
        config = config.with_section(
            "auto_date", enabled=True, date_type=args.date, **date
        )

    if args.number is not None:
        numbering = _given(
            at_position=args.number_at, start=args.number_start, increment=args.number_step,
            pad=args.number_pad, separator=args.number_sep, break_after=args.number_break,
            base=args.number_base,
        )
        if args.number_upper:
            numbering["uppercase"] = True
        config = config.with_section(
            "numbering", enabled=True, mode=args.number, **numbering
        )

    return config


def select_matching(browser: FileBrowser, patterns: Optional[List[str]]) -> int:
    """
    Mark entries whose name matches any glob pattern (all entries when no patterns)

    Returns:
        Number of marked entries
    """
    if not patterns:
        browser.select_all()
    else:
        browser.set_marked(
            e.absolute_path for e in browser.snapshot
            if any(fnmatch.fnmatchcase(e.name, p) for p in patterns)
        )
    return len(browser.marked)


def print_preview(session: PreviewSession, limit: int = 50) -> int:
    """Print old -> new lines for the selection; returns the number of changed names"""
    names = session.proposed_names
    changed = 0
    print("-" * 80)
    for i, (path, new_name) in enumerate(names.items()):
        old_name = session.browser.selected_files[path]
        marker = "  " if new_name == old_name else "* "
        if new_name != old_name:
            changed += 1
        if i < limit:
            print(f"{marker}{old_name:<40} -> {new_name}")
    if len(names) > limit:
        print(f"  ... and {len(names) - limit} more entries")
    print("-" * 80)
    return changed


def _open_session(args) -> Optional[PreviewSession]:
    try:
        config = config_from_args(args)
    except ConfigError as e:
        print(f"Error: {e}")
        return None
    try:
        session = PreviewSession(args.directory, config)
    except InvalidPathError as e:
        print(f"Error: {e}")
        return None

    session.run_cycle()
    if session.last_error:
        print(f"Error: {session.last_error}")
        return None
    select_matching(session.browser, args.select)
    session.run_cycle()
    return session


def cmd_list(args):
    """Handle list command"""
    try:
        browser = FileBrowser(args.directory)
    except InvalidPathError as e:
        print(f"Error: {e}")
        return 1
    browser.refresh()
    if browser.last_error:
        print(f"Error: {browser.last_error}")
        return 1

    print(f"Directory: {browser.directory_path}")
    print("-" * 100)
    for row in browser.rows():
        print(f"{row.glyph} {row.name:<40} {row.size:>9}  {row.modified:<24} {row.kind}")
    print("-" * 100)
    print(f"Total: {len(browser.snapshot)} entries")
    return 0


def cmd_preview(args):
    """Handle preview command"""
    session = _open_session(args)
    if session is None:
        return 1

    print(f"Directory: {session.directory_path}")
    if not session.browser.selected_files:
        print("No matching entries")
        return 0
    changed = print_preview(session)
    print(f"{changed} of {len(session.browser.selected_files)} selected names would change")
    return 0


def cmd_apply(args):
    """Handle apply command"""
    session = _open_session(args)
    if session is None:
        return 1

    print(f"Directory: {session.directory_path}")
    if not session.browser.selected_files:
        print("No matching entries")
        return 0

    policy_map = {
        "suffix": ConflictPolicy.SUFFIX_NUMBER,
        "skip": ConflictPolicy.SKIP,
        "error": ConflictPolicy.ERROR,
    }
    options = RenameOptions(
        conflict_policy=policy_map[args.on_conflict],
        dry_run=args.dry_run,
        log_dir=Path(args.log_dir) if args.log_dir else None,
    )
    plan = plan_from_mapping(session.proposed_names, options)
    for err in validate_plan(plan):
        plan.add_error(err)

    if plan.errors:
        print("Errors:")
        for err in plan.errors:
            print(f"  - {err}")
        return 1

    if not plan.valid_ops:
        print("No files need renaming")
        return 0

    print()
    print_plan(plan)

    if args.dry_run:
        print("\nDry run, nothing renamed")
        return 0

    if not args.yes and not input_bool("\nRename now", default=False):
        print("Cancelled")
        return 0

    result = execute_rename(plan)
    print(result.summary())
    return 0 if result.failed_count == 0 else 1


def main(argv: Optional[List[str]] = None):
    """Main entry point"""
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    if args.command is None:
        # No subcommand, enter interactive mode
        return interactive_mode()

    # Handle subcommands
    if args.command == "list":
        return cmd_list(args)
    elif args.command == "preview":
        return cmd_preview(args)
    elif args.command == "apply":
        return cmd_apply(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
