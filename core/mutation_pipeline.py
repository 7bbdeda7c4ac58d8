"""
mutation_pipeline.py - Mutation Pipeline

Ordered sequence of mutations folded over a filename, plus the builder that
binds a MutationConfig snapshot into a pipeline.
"""

from typing import Iterator, List, Optional

from loguru import logger

from .models_fs import DirectorySnapshot, Entry, RenameMapping, SelectionSet
from .mutation_config import MutationConfig
from .mutations import (
    AddMutation, AutoDateMutation, CaseMutation, Mutation, NumberingMutation,
    RegexMutation, RemoveMutation, ReplaceMutation,
)


class MutationPipeline:
    """Ordered collection of mutations applied left to right"""

    def __init__(self):
        self.mutations: List[Mutation] = []

    def add_mutation(self, mutation: Mutation) -> "MutationPipeline":
        """Append a stage (returns self for chaining)"""
        self.mutations.append(mutation)
        return self

    def apply_mutation(self, input: str, entry: Optional[Entry] = None) -> str:
        """
        Fold every stage over the input

        Args:
            input: Original name (accumulator seed)
            entry: Metadata of the entry being renamed, if known

        Returns:
            Name after the last stage
        """
        acc = input
        for mutation in self.mutations:
            acc = mutation.mutate(acc, entry)
        return acc

    def reset(self) -> None:
        """Reset stateful stages (numbering counters)"""
        for mutation in self.mutations:
            mutation.reset()

    @property
    def enabled_stages(self) -> List[str]:
        return [m.name for m in self.mutations if m.enabled]

    def __len__(self) -> int:
        return len(self.mutations)

    def __iter__(self) -> Iterator[Mutation]:
        return iter(self.mutations)


def build_pipeline(config: MutationConfig) -> MutationPipeline:
    """
    Build a fresh pipeline from a configuration snapshot

    Stage order: regex, replace, case, remove, add, auto date, numbering.
    Disabled stages are kept; they fold as identity.

    Args:
        config: Mutation configuration

    Returns:
        New pipeline
    """
    pipeline = (
        MutationPipeline()
        .add_mutation(RegexMutation(config.regex))
        .add_mutation(ReplaceMutation(config.replace))
        .add_mutation(CaseMutation(config.case))
        .add_mutation(RemoveMutation(config.remove))
        .add_mutation(AddMutation(config.add))
        .add_mutation(AutoDateMutation(config.auto_date))
        .add_mutation(NumberingMutation(config.numbering))
    )
    logger.debug(f"Built pipeline, enabled stages: {pipeline.enabled_stages}")
    return pipeline


def apply_to_selection(
    pipeline: MutationPipeline,
    selection: SelectionSet,
    snapshot: Optional[DirectorySnapshot] = None,
) -> RenameMapping:
    """
    Apply the pipeline to every selected name

    Args:
        pipeline: Pipeline to apply
        selection: absolute_path -> name; iteration order drives numbering
        snapshot: Snapshot used to look up entry metadata (timestamps)

    Returns:
        absolute_path -> proposed new name
    """
    entries = snapshot.by_path() if snapshot is not None else {}
    return {
        path: pipeline.apply_mutation(name, entries.get(path))
        for path, name in selection.items()
    }
