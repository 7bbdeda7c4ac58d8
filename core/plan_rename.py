"""
plan_rename.py - Commit Step Planning

Turns a preview mapping (absolute path -> proposed name) into a RenamePlan.
Renames never leave their directory, so every directory is planned on its
own against the names already on disk there.
"""

import os
from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

from loguru import logger

from .models_fs import (
    ConflictPolicy, RenameMapping, RenameOptions, RenamePlan, normalize_for_comparison,
)
from .safety_checks import check_rename_op
from .text_match import join_filename, split_hidden


MAX_SUFFIX = 10000


class ConflictResolver:
    """Names taken in one directory, compared case-insensitively if asked"""

    def __init__(self, names: Iterable[str] = (), case_insensitive: bool = True):
        self.case_insensitive = case_insensitive
        self._taken: Set[str] = {self.key(n) for n in names}

    def key(self, name: str) -> str:
        return normalize_for_comparison(name, self.case_insensitive)

    def is_taken(self, name: str) -> bool:
        return self.key(name) in self._taken

    def claim(self, name: str) -> None:
        self._taken.add(self.key(name))

    def release(self, names: Iterable[str]) -> None:
        self._taken.difference_update(self.key(n) for n in names)

    def resolve(self, desired: str) -> Tuple[str, bool]:
        """
        Claim desired, or the first free "stem_N.ext" variant of it

        Returns:
            (claimed name, whether desired itself was taken)
        """
        if not self.is_taken(desired):
            self.claim(desired)
            return desired, False

        dot, stem, ext = split_hidden(desired)
        for n in range(1, MAX_SUFFIX + 1):
            candidate = join_filename(f"{dot}{stem}_{n}", ext)
            if not self.is_taken(candidate):
                self.claim(candidate)
                return candidate, True
        raise RuntimeError(f"No free name for {desired} after {MAX_SUFFIX} attempts")


def get_existing_names(directory: Path) -> Set[str]:
    try:
        return set(os.listdir(directory))
    except OSError as e:
        logger.warning(f"Cannot list {directory} for conflict detection: {e}")
        return set()


def _changing_entries(
    items: List[Tuple[Path, str]],
    plan: RenamePlan,
) -> List[Tuple[Path, str]]:
    """Drop unchanged names and renames that fail the pre-flight checks"""
    changing = []
    for src, new_name in items:
        if new_name == src.name:
            continue
        ok, error = check_rename_op(src, src.parent / new_name)
        if not ok:
            plan.add_warning(f"Skip {src}: {error}")
            continue
        changing.append((src, new_name))
    return changing


def _plan_directory(
    directory: Path,
    items: List[Tuple[Path, str]],
    plan: RenamePlan,
) -> None:
    policy = plan.options.conflict_policy
    changing = _changing_entries(sorted(items, key=lambda item: str(item[0]).lower()), plan)
    if not changing:
        return

    names = ConflictResolver(get_existing_names(directory), plan.options.case_insensitive_detect)
    # sources being renamed free their current names
    names.release(src.name for src, _ in changing)

    # claimed name key -> source that claimed it
    claimed_by: Dict[str, Path] = {}
    for src, new_name in changing:
        if names.is_taken(new_name) and policy != ConflictPolicy.SUFFIX_NUMBER:
            if policy == ConflictPolicy.ERROR:
                plan.add_error(f"Name collision: {src.name} -> {new_name}")
                continue
            plan.add_warning(f"Skip {src}: {new_name} is already taken")
            # the skipped entry keeps its name, which an earlier op may have claimed
            holder = claimed_by.get(names.key(src.name))
            if holder is not None:
                plan.add_error(f"Cannot keep {src.name}: {holder.name} would be renamed onto it")
            names.claim(src.name)
            continue

        final_name, collided = names.resolve(new_name)
        claimed_by[names.key(final_name)] = src
        note = f"conflict resolved: {new_name} -> {final_name}" if collided else ""
        plan.add_op(src, directory / final_name, note, conflict=collided)


def plan_from_mapping(
    mapping: RenameMapping,
    options: Optional[RenameOptions] = None,
) -> RenamePlan:
    """
    Build the rename plan for a preview mapping

    Args:
        mapping: absolute_path -> proposed new name
        options: Conflict policy, case sensitivity, dry run and log directory

    Returns:
        The plan; collisions under ConflictPolicy.ERROR, and skips that would
        be overwritten, land in plan.errors and make it non-executable
    """
    plan = RenamePlan(options=options or RenameOptions())

    by_dir: Dict[Path, List[Tuple[Path, str]]] = defaultdict(list)
    for src_str, new_name in mapping.items():
        src = Path(src_str)
        by_dir[src.parent].append((src, new_name))

    for directory, items in by_dir.items():
        _plan_directory(directory, items, plan)

    logger.debug(f"Planned {plan.total_count} renames ({plan.conflict_count} conflicts, {len(plan.errors)} errors)")
    return plan


def validate_plan(plan: RenamePlan) -> List[str]:
    """Re-check a plan just before execution; returns error messages"""
    errors = [
        f"Source file does not exist: {op.src}"
        for op in plan.ops
        if not os.path.lexists(op.src)
    ]

    sources_by_dst: Dict[str, List[Path]] = defaultdict(list)
    for op in plan.ops:
        dst = str(op.dst)
        sources_by_dst[dst.lower() if plan.options.case_insensitive_detect else dst].append(op.src)
    errors.extend(
        f"Multiple files have the same destination: {[s.name for s in srcs]} -> {dst}"
        for dst, srcs in sources_by_dst.items()
        if len(srcs) > 1
    )
    return errors
