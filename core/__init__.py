"""
core - Batch Rename Preview Core Module

Provides the mutation pipeline, directory snapshots, the browse/preview
refresh cycle, and the optional commit step (plan + execute).
"""

from .errors import (
    RenameToolError,
    ConfigError,
    InvalidPathError,
    SnapshotError,
)

from .models_fs import (
    Entry,
    EntryKind,
    DirectorySnapshot,
    SelectionSet,
    RenameMapping,
    RenameOp,
    RenamePlan,
    RenameOptions,
    ConflictPolicy,
)

from .mutation_config import (
    MutationConfig,
    RegexConfig,
    ReplaceConfig,
    CaseConfig,
    CaseType,
    RemoveConfig,
    AddConfig,
    AutoDateConfig,
    DateType,
    DatePosition,
    NumberingConfig,
    NumberingMode,
    load_mutation_config,
    parse_mutation_config,
    parse_form_int,
)

from .mutations import (
    Mutation,
    RegexMutation,
    ReplaceMutation,
    CaseMutation,
    RemoveMutation,
    AddMutation,
    AutoDateMutation,
    NumberingMutation,
)

from .mutation_pipeline import (
    MutationPipeline,
    build_pipeline,
    apply_to_selection,
)

from .scan_files import (
    build_snapshot,
    read_entry,
    directory_has_entries,
)

from .navigation import (
    NavigationState,
    canonicalize_directory,
    resolve_child,
    resolve_parent,
)

from .channels import SlotChannel

from .browser import FileBrowser, BrowserRow

from .preview import (
    compute_preview,
    PreviewOrchestrator,
    PreviewSession,
)

from .plan_rename import (
    plan_from_mapping,
    validate_plan,
    ConflictResolver,
)

from .exec_rename import (
    execute_rename,
    RenameResult,
    cleanup_temp_files,
)

from .safety_checks import (
    check_rename_op,
)

from .text_match import (
    split_filename,
    join_filename,
    is_valid_filename,
)

__all__ = [
    # Errors
    "RenameToolError",
    "ConfigError",
    "InvalidPathError",
    "SnapshotError",

    # Data models
    "Entry",
    "EntryKind",
    "DirectorySnapshot",
    "SelectionSet",
    "RenameMapping",
    "RenameOp",
    "RenamePlan",
    "RenameOptions",
    "ConflictPolicy",
    "RenameResult",

    # Configuration
    "MutationConfig",
    "RegexConfig",
    "ReplaceConfig",
    "CaseConfig",
    "CaseType",
    "RemoveConfig",
    "AddConfig",
    "AutoDateConfig",
    "DateType",
    "DatePosition",
    "NumberingConfig",
    "NumberingMode",
    "load_mutation_config",
    "parse_mutation_config",
    "parse_form_int",

    # Mutations
    "Mutation",
    "RegexMutation",
    "ReplaceMutation",
    "CaseMutation",
    "RemoveMutation",
    "AddMutation",
    "AutoDateMutation",
    "NumberingMutation",
    "MutationPipeline",
    "build_pipeline",
    "apply_to_selection",

    # Snapshot and navigation
    "build_snapshot",
    "read_entry",
    "directory_has_entries",
    "NavigationState",
    "canonicalize_directory",
    "resolve_child",
    "resolve_parent",

    # Refresh cycle
    "SlotChannel",
    "FileBrowser",
    "BrowserRow",
    "compute_preview",
    "PreviewOrchestrator",
    "PreviewSession",

    # Commit
    "plan_from_mapping",
    "validate_plan",
    "ConflictResolver",
    "execute_rename",
    "cleanup_temp_files",

    # Safety checks
    "check_rename_op",

    # Text
    "split_filename",
    "join_filename",
    "is_valid_filename",
]
