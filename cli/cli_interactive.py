"""
cli_interactive.py - Interactive CLI

A paged directory listing with checkboxes; the right-hand column shows the
proposed name of every marked entry and follows the mutation settings.
"""

import os
from typing import List, Optional

from core import (
    CaseType, ConfigError, DatePosition, DateType, InvalidPathError, MutationConfig,
    NumberingMode, PreviewSession, RenameOptions, RenamePlan, execute_rename,
    parse_form_int, plan_from_mapping,
)
from core.browser import BrowserRow
from core.mutation_config import CASE_LABELS


PAGE_SIZE = 30
RULE = "-" * 100


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def print_header(title: str):
    print(f"\n== {title} " + "=" * max(0, 56 - len(title)) + "\n")


def pause():
    input("(Enter to continue) ")


def _ask(prompt: str, shown_default: str) -> str:
    suffix = f" [{shown_default}]" if shown_default else ""
    return input(f"{prompt}{suffix}: ").strip()


def input_choice(prompt: str, choices: List[str], default: Optional[str] = None) -> Optional[str]:
    """One of choices; 'q' backs out with None"""
    options = "|".join(choices)
    while True:
        answer = _ask(f"{prompt} <{options}>", default or "") or default
        if answer in choices:
            return answer
        if answer is not None and answer.lower() == 'q':
            return None
        print(f"Expected one of: {options}")


def input_bool(prompt: str, default: bool = False) -> bool:
    answer = _ask(prompt, "Y/n" if default else "y/N").lower()
    return default if not answer else answer in ("y", "yes")


def input_int(prompt: str, default: int = 0, min_val: Optional[int] = 0) -> int:
    while True:
        try:
            return parse_form_int(_ask(prompt, str(default)), prompt, default=default, minimum=min_val)
        except ConfigError as e:
            print(e)


def input_text(prompt: str, default: str = "") -> str:
    """Free text; Enter keeps the default, a single '-' clears it"""
    value = input(f"{prompt} [{default}]: ")
    if value == "-":
        return ""
    return value or default


def print_plan(plan: RenamePlan, limit: int = 20) -> None:
    """List the planned renames followed by the plan summary and warnings"""
    print(RULE)
    for op in plan.valid_ops[:limit]:
        marker = " (renumbered)" if op.conflict else ""
        print(f"  {op.src.name:<40} -> {op.dst.name}{marker}")
    hidden = plan.total_count - limit
    if hidden > 0:
        print(f"  ({hidden} more not shown)")
    print(RULE)
    print(plan.summary())
    for warning in plan.warnings:
        print(f"  skipped: {warning}")


def print_rows(session: PreviewSession, page: int = 0) -> None:
    """Print one page of the browser table"""
    rows = session.browser.rows()
    start = page * PAGE_SIZE
    print(f"Directory: {session.directory_path}")
    if session.last_error:
        print(f"Error: {session.last_error}")
    print(RULE)
    print(f"{'#':>4}   {'Name':<36} {'New Name':<36} {'Size':>9}  Kind")
    for i, row in enumerate(rows[start:start + PAGE_SIZE], start=start + 1):
        print(_format_row(i, row))
    if len(rows) > start + PAGE_SIZE:
        print(f"  ... {len(rows) - start - PAGE_SIZE} more entries (n = next page)")
    print(RULE)
    print(f"{len(session.browser.selected_files)} of {len(rows)} selected")


def _format_row(index: int, row: BrowserRow) -> str:
    mark = "[x]" if row.selected else "[ ]"
    new_name = row.new_name if row.selected and row.changed else ""
    return f"{index:>4} {mark} {row.glyph} {row.name:<34} {new_name:<36} {row.size:>9}  {row.kind}"


def _parse_index(session: PreviewSession, text: str) -> Optional[int]:
    try:
        index = int(text) - 1
    except ValueError:
        return None
    if 0 <= index < len(session.snapshot):
        return index
    return None


def menu_mutations(config: MutationConfig) -> MutationConfig:
    """Edit mutation settings, one section at a time"""
    sections = [
        ("1", "regex", "Regex"),
        ("2", "replace", "Replace"),
        ("3", "case", "Case"),
        ("4", "remove", "Remove"),
        ("5", "add", "Add"),
        ("6", "auto_date", "Auto Date"),
        ("7", "numbering", "Numbering"),
    ]
    while True:
        print_header("Mutation Settings")
        for key, name, label in sections:
            state = "on " if getattr(config, name).enabled else "off"
            print(f"  {key}. [{state}] {label}")
        print()
        print("  q. Back")
        print()

        choice = input_choice("Edit section", [k for k, _, _ in sections])
        if choice is None:
            return config
        name = next(n for k, n, _ in sections if k == choice)
        try:
            config = _edit_section(config, name)
        except ConfigError as e:
            print(f"Error: {e}")
            pause()


def _edit_section(config: MutationConfig, name: str) -> MutationConfig:
    current = getattr(config, name)
    enabled = input_bool("Enabled", default=current.enabled)
    if not enabled:
        return config.with_section(name, enabled=False)

    if name == "regex":
        return config.with_section(
            name, enabled=True,
            pattern=input_text("Pattern", current.pattern),
            substitution=input_text("Substitution ($1, ${name})", current.substitution),
            including_extension=input_bool("Include extension", current.including_extension),
        )
    if name == "replace":
        return config.with_section(
            name, enabled=True,
            match=input_text("Find", current.match),
            replace_with=input_text("Replace with", current.replace_with),
            case_sensitive=input_bool("Case sensitive", current.case_sensitive),
            first_only=input_bool("First occurrence only", current.first_only),
        )
    if name == "case":
        types = list(CaseType)
        for i, case_type in enumerate(types):
            print(f"  {i}. {CASE_LABELS[case_type]}")
        index = input_int("Case", default=types.index(current.case_type), min_val=0)
        return config.with_section(name, enabled=True, case_type=types[min(index, len(types) - 1)])
    if name == "remove":
        return config.with_section(
            name, enabled=True,
            first_n=input_int("Remove first N", current.first_n),
            last_n=input_int("Remove last N", current.last_n),
            from_pos=input_int("Range from (1-based, 0 = off)", current.from_pos),
            to_pos=input_int("Range to (0 = end)", current.to_pos),
            chars=input_text("Characters", current.chars),
            words=input_text("Words (space separated)", " ".join(current.words)),
            digits=input_bool("Digits", current.digits),
            accents=input_bool("Accents", current.accents),
            trim=input_bool("Trim whitespace", current.trim),
        )
    if name == "add":
        return config.with_section(
            name, enabled=True,
            prefix=input_text("Prefix", current.prefix),
            insert=input_text("Insert", current.insert),
            at_position=input_int("Insert at", current.at_position, min_val=None),
            suffix=input_text("Suffix", current.suffix),
            word_space=input_bool("Word space", current.word_space),
        )
    if name == "auto_date":
        date_type = input_choice("Date", [d.value for d in DateType], current.date_type.value)
        position = input_choice("Position", [p.value for p in DatePosition], current.position.value)
        return config.with_section(
            name, enabled=True,
            date_type=DateType(date_type or current.date_type.value),
            position=DatePosition(position or current.position.value),
            date_format=input_text("Format (strftime)", current.date_format),
            separator=input_text("Separator", current.separator),
        )
    # numbering
    mode = input_choice("Mode", [m.value for m in NumberingMode], current.mode.value)
    return config.with_section(
        name, enabled=True,
        mode=NumberingMode(mode or current.mode.value),
        at_position=input_int("Insert at", current.at_position, min_val=None),
        start=input_int("Start", current.start, min_val=None),
        increment=input_int("Increment", current.increment, min_val=None),
        pad=input_int("Zero padding", current.pad),
        separator=input_text("Separator", current.separator),
        break_after=input_int("Restart after N (0 = never)", current.break_after),
        base=input_int("Base (2-36)", current.base, min_val=2),
        uppercase=input_bool("Uppercase digits", current.uppercase),
    )


def menu_apply(session: PreviewSession) -> None:
    """Plan the previewed renames, confirm, execute"""
    print_header("Apply Renames")

    plan = plan_from_mapping(session.proposed_names, RenameOptions())
    if plan.errors:
        print("The plan cannot be executed:")
        for err in plan.errors:
            print(f"  {err}")
        pause()
        return
    if not plan.valid_ops:
        print("Nothing to rename")
        pause()
        return

    print_plan(plan, limit=15)
    if not input_bool("\nRename now", default=False):
        return

    print(execute_rename(plan).summary())
    # renamed entries have new paths; start from a fresh listing
    session.browser.clear_selection()
    session.browser.reload()
    pause()


def print_help():
    print("  <n>        Toggle selection of row n")
    print("  o <n>      Open folder n")
    print("  ..         Parent directory")
    print("  cd <path>  Go to path")
    print("  a / x      Select all / none")
    print("  n / p      Next / previous page")
    print("  m          Mutation settings")
    print("  r          Apply renames")
    print("  q          Exit")


def interactive_mode(directory: Optional[str] = None) -> int:
    """Interactive mode main loop"""
    try:
        session = PreviewSession(directory)
    except InvalidPathError as e:
        print(f"Error: {e}")
        return 1

    page = 0
    message = ""
    session.run_cycle()

    while True:
        clear_screen()
        print_header("Batch Rename Tool")
        print_rows(session, page)
        if message:
            print(message)
            message = ""
        print("(h for help)")

        command = input("> ").strip()
        browser = session.browser

        if command == 'q':
            print("Goodbye!")
            return 0
        elif command == 'h':
            print_help()
            pause()
        elif command == '..':
            if not browser.go_up():
                message = "Already at the top"
            page = 0
        elif command.startswith("cd "):
            if not browser.commit_path_edit(command[3:].strip()):
                message = f"Error: Directory does not exist: {command[3:].strip()}"
            page = 0
        elif command.startswith("o "):
            index = _parse_index(session, command[2:].strip())
            if index is None or not browser.activate(session.snapshot.entries[index]):
                message = "Not a folder"
            page = 0
        elif command == 'a':
            browser.select_all()
        elif command == 'x':
            browser.clear_selection()
        elif command == 'n':
            if (page + 1) * PAGE_SIZE < len(session.snapshot):
                page += 1
        elif command == 'p':
            page = max(0, page - 1)
        elif command == 'm':
            session.update_config(menu_mutations(session.config))
        elif command == 'r':
            menu_apply(session)
        elif command:
            index = _parse_index(session, command)
            if index is None:
                message = "Invalid command"
            else:
                browser.toggle(session.snapshot.entries[index].absolute_path)

        session.run_cycle()


if __name__ == "__main__":
    import sys
    sys.exit(interactive_mode())
