"""Integration tests: lint corpora written to disk."""

from pathlib import Path

import pytest

from curriculum_lint.pipeline import LintPipeline
from curriculum_lint.reporting.renderers import render_json
from curriculum_lint.utils.config import LintConfig
from curriculum_lint.utils.exceptions import NotFoundError, StructureError

pytestmark = pytest.mark.integration

THREE_LEVELS = {"junior": 2, "mid": 2, "senior": 2}


class TestLintPipeline:
    """End-to-end pipeline behaviour on real files."""

    def test_clean_corpus_has_no_violations(self, builder, curriculum_root: Path) -> None:
        builder.build(THREE_LEVELS)

        report = LintPipeline(curriculum_root).run()

        assert report.violations == []
        assert report.unparsed == []
        assert report.modules_checked == 6
        assert report.exit_code == 0

    def test_missing_further_reading_reported_once(self, builder, curriculum_root: Path) -> None:
        target = builder.module_id("mid", 1)
        builder.build(THREE_LEVELS, overrides={target: {"omit": {"Further Reading"}}})

        report = LintPipeline(curriculum_root).run()

        assert len(report.violations) == 1
        violation = report.violations[0]
        assert violation.rule == "RequiredSections"
        assert violation.module == target
        assert "Further Reading" in violation.message

    def test_next_link_to_missing_module(self, builder, curriculum_root: Path) -> None:
        target = builder.module_id("junior", 2)
        builder.build({"junior": 4}, overrides={target: {"next_link": "./05-junior-lesson-5.md"}})

        report = LintPipeline(curriculum_root).run()

        broken = [v for v in report.violations if v.rule == "BrokenLinkError"]
        assert len(broken) == 1
        assert broken[0].module == target
        assert "05-junior-lesson-5.md" in broken[0].message
        assert report.exit_code == 1

    def test_chapter_count_outside_range(self, builder, curriculum_root: Path) -> None:
        target = builder.module_id("junior", 1)
        builder.build({"junior": 2}, overrides={target: {"chapters": 9}})

        report = LintPipeline(curriculum_root).run()

        assert [(v.rule, v.module) for v in report.violations] == [("ChapterCountRange", target)]
        assert "actual=9" in report.violations[0].message
        assert "max=8" in report.violations[0].message

    def test_unparsable_module_recorded_and_others_checked(
        self, builder, curriculum_root: Path
    ) -> None:
        order = builder.build({"junior": 3})
        builder.write(order[1], "No title in this document.\n\n## Exercises\n")

        report = LintPipeline(curriculum_root).run()

        assert [failure.module_id for failure in report.unparsed] == [order[1]]
        assert report.modules_checked == 2
        assert report.violations == []
        assert report.exit_code == 1

    def test_empty_level_is_vacuously_fine(self, builder, curriculum_root: Path) -> None:
        (curriculum_root / "junior").mkdir()
        builder.build({"mid": 2})

        report = LintPipeline(curriculum_root).run()

        assert report.violations == []

    def test_strict_turns_advisories_into_failure(self, builder, curriculum_root: Path) -> None:
        target = builder.module_id("junior", 2)
        builder.build(
            {"junior": 2},
            overrides={
                target: {
                    "extra": (
                        "We think our approach is what we like. Let's go, we said. "
                        "Our team and our code are ours. We ship, we test, we rest."
                    )
                }
            },
        )

        relaxed = LintPipeline(curriculum_root).run()
        strict = LintPipeline(curriculum_root, config=LintConfig(strict=True)).run()

        assert [v.rule for v in relaxed.violations] == ["ConsistentVoice"]
        assert relaxed.exit_code == 0
        assert strict.exit_code == 1

    def test_reports_are_byte_identical_across_runs(self, builder, curriculum_root: Path) -> None:
        order = builder.build(THREE_LEVELS, overrides={})
        builder.write(order[3], "# Broken module\n\n**Next:** [Nowhere](./09-nowhere.md)\n")

        first = render_json(LintPipeline(curriculum_root).run())
        second = render_json(LintPipeline(curriculum_root).run())

        assert first == second

    def test_parallel_parsing_preserves_order(self, builder, curriculum_root: Path) -> None:
        order = builder.build({"junior": 4, "mid": 3, "lead": 2})
        builder.write(order[4], "# Stub\n")

        sequential = LintPipeline(curriculum_root).run()
        parallel = LintPipeline(curriculum_root, config=LintConfig(workers=4)).run()

        assert render_json(sequential) == render_json(parallel)

    def test_build_corpus_groups_levels(self, builder, curriculum_root: Path) -> None:
        builder.build({"junior": 2, "senior": 1})

        corpus = LintPipeline(curriculum_root).build_corpus()

        assert [level.name for level in corpus.levels] == ["junior", "mid", "senior", "lead"]
        assert [len(level.modules) for level in corpus.levels] == [2, 0, 1, 0]
        for level in corpus.levels:
            assert [m.index for m in level.modules] == list(range(1, len(level.modules) + 1))

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        with pytest.raises(NotFoundError):
            LintPipeline(tmp_path / "missing").run()

    def test_structure_error_is_fatal(self, builder, curriculum_root: Path) -> None:
        builder.build({"junior": 2})
        (curriculum_root / "mid").mkdir()
        (curriculum_root / "mid" / "hooks.md").write_text("# Hooks\n", encoding="utf-8")

        with pytest.raises(StructureError):
            LintPipeline(curriculum_root).run()

    def test_wrongly_typed_frontmatter_is_unparsed(self, builder, curriculum_root: Path) -> None:
        order = builder.build({"junior": 3})
        path = curriculum_root / order[1]
        path.write_text(
            "---\nprerequisites: 5\n---\n" + path.read_text(encoding="utf-8"), encoding="utf-8"
        )

        report = LintPipeline(curriculum_root).run()

        assert [failure.module_id for failure in report.unparsed] == [order[1]]
        assert "prerequisites" in report.unparsed[0].message
        assert report.modules_checked == 2
        assert report.violations == []

    def test_undecodable_module_is_unparsed(self, builder, curriculum_root: Path) -> None:
        order = builder.build({"junior": 3})
        (curriculum_root / order[1]).write_bytes(b"# Title\n\xff\xfe bad byte\n")

        report = LintPipeline(curriculum_root).run()

        assert [failure.module_id for failure in report.unparsed] == [order[1]]
        assert report.modules_checked == 2
        assert report.exit_code == 1

    @pytest.mark.parametrize("nav_style", ["footer", "stacked"])
    def test_navigation_layouts_link_symmetrically(
        self, builder, curriculum_root: Path, nav_style: str
    ) -> None:
        layout = {"junior": 3, "mid": 1}
        overrides = {
            builder.module_id(level, index): {"nav_style": nav_style}
            for level, count in layout.items()
            for index in range(1, count + 1)
        }
        builder.build(layout, overrides=overrides)

        report = LintPipeline(curriculum_root).run()

        assert report.violations == []

    def test_statistics_count_skipped_files(self, builder, curriculum_root: Path) -> None:
        builder.build({"junior": 2})
        (curriculum_root / "junior" / "README.md").write_text("# Junior\n", encoding="utf-8")

        pipeline = LintPipeline(curriculum_root)
        pipeline.run()

        assert pipeline.stats.documents_loaded == 2
        assert pipeline.stats.files_skipped == 1
        assert pipeline.stats.modules_parsed == 2
