"""Pipeline folding and the config -> pipeline builder."""

import unittest

from core import (
    AddConfig, AddMutation, CaseConfig, CaseMutation, CaseType, MutationConfig,
    MutationPipeline, NumberingMode,
    apply_to_selection, build_pipeline,
)
from core.preview import compute_preview


class MutationPipelineTests(unittest.TestCase):
    def test_empty_pipeline_is_identity(self) -> None:
        self.assertEqual(MutationPipeline().apply_mutation("My File.txt"), "My File.txt")

    def test_stages_fold_left_to_right(self) -> None:
        pipeline = (
            MutationPipeline()
            .add_mutation(AddMutation(AddConfig(enabled=True, suffix="a")))
            .add_mutation(AddMutation(AddConfig(enabled=True, suffix="b")))
        )
        self.assertEqual(pipeline.apply_mutation("x"), "xab")
        self.assertEqual(len(pipeline), 2)

    def test_disabled_stage_is_skipped(self) -> None:
        stage = CaseMutation(CaseConfig(enabled=False, case_type=CaseType.UPPER))
        pipeline = MutationPipeline().add_mutation(stage)
        self.assertEqual(pipeline.apply_mutation("abc"), "abc")
        self.assertEqual(pipeline.enabled_stages, [])


class BuildPipelineTests(unittest.TestCase):
    def test_default_config_is_identity(self) -> None:
        pipeline = build_pipeline(MutationConfig())
        self.assertEqual(len(pipeline), 7)
        self.assertEqual(pipeline.apply_mutation("My File.txt"), "My File.txt")

    def test_stage_order(self) -> None:
        pipeline = build_pipeline(MutationConfig())
        self.assertEqual(
            [m.name for m in pipeline],
            ["regex", "replace", "case", "remove", "add", "auto_date", "numbering"],
        )

    def test_regex_with_disabled_case(self) -> None:
        config = (
            MutationConfig()
            .with_section("regex", pattern="report", substitution="X")
            .with_section("case", enabled=False, case_type=CaseType.UPPER)
        )
        self.assertEqual(build_pipeline(config).apply_mutation("report.txt"), "X.txt")

    def test_regex_runs_before_case(self) -> None:
        config = (
            MutationConfig()
            .with_section("regex", pattern="a", substitution="b")
            .with_section("case", enabled=True, case_type=CaseType.UPPER)
        )
        self.assertEqual(build_pipeline(config).apply_mutation("a.txt"), "B.TXT")

    def test_numbering_follows_selection_order(self) -> None:
        config = MutationConfig().with_section("numbering", enabled=True, mode=NumberingMode.SUFFIX)
        selection = {"/d/a.txt": "a.txt", "/d/b.txt": "b.txt"}
        mapping = apply_to_selection(build_pipeline(config), selection)
        self.assertEqual(mapping, {"/d/a.txt": "a_1.txt", "/d/b.txt": "b_2.txt"})

    def test_each_preview_starts_numbering_over(self) -> None:
        config = MutationConfig().with_section("numbering", enabled=True)
        selection = {"/d/a.txt": "a.txt"}
        self.assertEqual(compute_preview(selection, config), compute_preview(selection, config))


if __name__ == "__main__":
    unittest.main()
