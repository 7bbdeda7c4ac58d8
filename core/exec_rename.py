"""
exec_rename.py - Commit Step Execution

Every entry in a plan is first parked under a temporary name in its own
directory, then moved to its final name. Parking first is what lets swaps
and rotations (a->b, b->a) go through. A failure in the second phase puts
that one entry back under its original name; successful moves stay done.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime
import uuid
import json
import os

from loguru import logger

from .models_fs import RenamePlan, RenameOp


TEMP_PREFIX = ".__tmp_rename__"

ProgressCallback = Callable[[int, int, str], None]


@dataclass
class RenameResult:
    """Outcome of executing a plan"""
    success: List[RenameOp] = field(default_factory=list)
    failed: List[Tuple[RenameOp, str]] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.success)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def summary(self, limit: int = 10) -> str:
        lines = [f"Renamed {self.success_count}, failed {self.failed_count}"]
        for op, error in self.failed[:limit]:
            lines.append(f"  ! {op.src.name} -> {op.dst.name}: {error}")
        hidden = self.failed_count - limit
        if hidden > 0:
            lines.append(f"  ({hidden} more failures not shown)")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_count": self.success_count,
            "failed_count": self.failed_count,
            "success": [_op_to_dict(op) for op in self.success],
            "failed": [dict(_op_to_dict(op), error=error) for op, error in self.failed],
        }


def _op_to_dict(op: RenameOp) -> Dict[str, str]:
    data = {"src": str(op.src), "dst": str(op.dst)}
    if op.note:
        data["note"] = op.note
    return data


def temp_path_for(path: Path) -> Path:
    """Parking name for path: .__tmp_rename__{8 hex}__{original name}"""
    return path.with_name(f"{TEMP_PREFIX}{uuid.uuid4().hex[:8]}__{path.name}")


def original_name_of(temp_name: str) -> Optional[str]:
    """Recover the original name from a parking name, or None if it is not one"""
    if not temp_name.startswith(TEMP_PREFIX):
        return None
    _, sep, original = temp_name[len(TEMP_PREFIX):].partition("__")
    return original if sep and original else None


def _lexists(path: Path) -> bool:
    # broken symlinks count as present
    return os.path.lexists(path)


def _park(
    ops: List[RenameOp],
    result: RenameResult,
    report: ProgressCallback,
    steps: int,
) -> List[Tuple[RenameOp, Path]]:
    parked: List[Tuple[RenameOp, Path]] = []
    for i, op in enumerate(ops, 1):
        report(i, steps, f"Moving aside {op.src.name}")
        if not _lexists(op.src):
            result.failed.append((op, "Source no longer exists"))
            continue
        temp = temp_path_for(op.src)
        try:
            os.rename(op.src, temp)
        except OSError as e:
            logger.warning(f"Could not move {op.src} aside: {e}")
            result.failed.append((op, f"Could not move aside: {e}"))
            continue
        parked.append((op, temp))
    return parked


def _land(
    parked: List[Tuple[RenameOp, Path]],
    result: RenameResult,
    report: ProgressCallback,
    offset: int,
    steps: int,
) -> None:
    for i, (op, temp) in enumerate(parked, offset + 1):
        report(i, steps, f"Renaming to {op.dst.name}")
        try:
            if _lexists(op.dst):
                raise FileExistsError(f"{op.dst.name} appeared during the rename")
            os.rename(temp, op.dst)
        except OSError as e:
            logger.warning(f"Could not rename {op.src} to {op.dst}: {e}")
            result.failed.append((op, _restore(op, temp, e)))
            continue
        result.success.append(op)


def _restore(op: RenameOp, temp: Path, cause: OSError) -> str:
    try:
        os.rename(temp, op.src)
    except OSError as e:
        logger.error(f"Entry left as {temp} (restoring {op.src} failed: {e})")
        return f"{cause}; left under temporary name {temp.name}: {e}"
    return f"{cause} (original name kept)"


def _ignore_progress(current: int, total: int, message: str) -> None:
    pass


def execute_rename(
    plan: RenamePlan,
    dry_run: bool = False,
    progress_callback: Optional[ProgressCallback] = None,
    log_dir: Optional[Path] = None
) -> RenameResult:
    """
    Apply a plan to the filesystem

    Args:
        plan: Plan from plan_from_mapping
        dry_run: Report what would happen without touching anything
            (also taken from plan.options)
        progress_callback: Called as (current, total, message)
        log_dir: Where to write the plan/result JSON logs
            (defaults to plan.options.log_dir)

    Raises:
        ValueError: The plan carries errors
    """
    if plan.errors:
        raise ValueError("Refusing to execute a plan with errors: " + "; ".join(plan.errors))

    report = progress_callback or _ignore_progress
    ops = plan.valid_ops
    result = RenameResult()
    if not ops:
        return result

    if dry_run or plan.options.dry_run:
        for i, op in enumerate(ops, 1):
            report(i, len(ops), f"Would rename {op.src.name} -> {op.dst.name}")
            result.success.append(op)
        return result

    log_dir = log_dir or plan.options.log_dir
    if log_dir:
        save_plan_log(plan, log_dir)

    steps = len(ops) * 2
    parked = _park(ops, result, report, steps)
    _land(parked, result, report, len(ops), steps)

    if log_dir:
        save_result_log(result, log_dir)

    logger.info(f"Renamed {result.success_count} entries, {result.failed_count} failed")
    return result


def _write_log(log_dir: Path, kind: str, data: Dict[str, Any]) -> Path:
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"rename_{kind}_{timestamp}.json"
    with open(log_file, "w", encoding="utf-8") as f:
        json.dump(dict(data, timestamp=timestamp), f, ensure_ascii=False, indent=2)
    return log_file


def save_plan_log(plan: RenamePlan, log_dir: Path) -> Path:
    return _write_log(log_dir, "plan", {
        "total_ops": len(plan.valid_ops),
        "operations": [_op_to_dict(op) for op in plan.valid_ops],
        "warnings": plan.warnings,
        "errors": plan.errors,
    })


def save_result_log(result: RenameResult, log_dir: Path) -> Path:
    return _write_log(log_dir, "result", result.to_dict())


def cleanup_temp_files(directory: Path) -> int:
    """Put entries stranded under parking names back; returns how many were restored"""
    restored = 0
    for item in Path(directory).iterdir():
        original = original_name_of(item.name)
        if original is None:
            continue
        target = item.with_name(original)
        if _lexists(target):
            logger.warning(f"Not restoring {item.name}: {original} exists")
            continue
        try:
            os.rename(item, target)
        except OSError as e:
            logger.warning(f"Not restoring {item.name}: {e}")
            continue
        restored += 1
    return restored
