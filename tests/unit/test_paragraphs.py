"""
Unit tests for paragraph splitting and document segmentation.
"""

import pytest

from herald.contexts.annotation.categories import CategoryRegistry
from herald.contexts.annotation.paragraphs import is_blank_line, segment_document, split_paragraphs
from herald.contexts.annotation.segmenter import SegmentationBudget


@pytest.mark.unit
def test_split_keeps_blank_lines():
    assert split_paragraphs("First sentence.\n\n\nSecond sentence.") == [
        "First sentence.",
        "",
        "",
        "Second sentence.",
    ]


@pytest.mark.unit
def test_split_handles_all_line_endings():
    assert split_paragraphs("a\r\nb\rc\nd") == ["a", "b", "c", "d"]
    assert split_paragraphs("a\r\n\r\nb") == ["a", "", "b"]


@pytest.mark.unit
def test_split_does_not_strip_lines():
    assert split_paragraphs("  indented\ntrailing  ") == ["  indented", "trailing  "]


@pytest.mark.unit
def test_split_collapses_blank_runs():
    text = "One\n\n \n\t\nTwo\n\nThree"

    assert split_paragraphs(text, collapse_blank_lines=True) == ["One", "", "Two", "", "Three"]


@pytest.mark.unit
def test_whitespace_only_lines_are_blank():
    assert is_blank_line("")
    assert is_blank_line("   \t")
    assert not is_blank_line(" x ")


class TestSegmentDocument:
    """Tests for segment_document."""

    def test_blank_lines_become_spacers(self, small_registry):
        """Two blank lines between sentences give two spacers."""
        document = segment_document("Senior role.\n\n\nRemote python job.", small_registry)

        assert [p.is_blank for p in document.paragraphs] == [False, True, True, False]
        assert document.paragraphs[0].text == "Senior role."
        assert document.paragraphs[3].text == "Remote python job."
        assert document.paragraphs[1].segments == ()

    def test_collapsed_spacers(self, small_registry):
        document = segment_document(
            "Senior role.\n\n\nRemote python job.", small_registry, collapse_blank_lines=True
        )

        assert [p.is_blank for p in document.paragraphs] == [False, True, False]

    def test_each_paragraph_covers_its_line(self, small_registry):
        text = "Senior Python dev\n\nMail jobs@acme.io\nNothing here"
        document = segment_document(text, small_registry)

        for paragraph in document.paragraphs:
            assert "".join(s.text for s in paragraph.segments) == (
                "" if paragraph.is_blank else paragraph.text
            )

    def test_matches_never_cross_line_breaks(self, category_factory):
        registry = CategoryRegistry([category_factory("phrase", r"senior\s+python")])
        document = segment_document("senior\npython", registry)

        assert document.highlights() == []

    def test_document_helpers(self, small_registry):
        document = segment_document("python and go\njobs@acme.io\npython", small_registry)

        assert [s.text for s in document.highlights()] == ["python", "go", "jobs@acme.io", "python"]
        assert document.category_counts() == {"language": 3, "email": 1}
        assert list(document.category_counts()) == ["language", "email"]
        assert document.degraded_paragraphs == ()

    def test_empty_text(self, small_registry):
        document = segment_document("", small_registry)

        assert len(document.paragraphs) == 1
        assert document.paragraphs[0].is_blank
        assert document.segments() == []

    def test_budget_exceeded_degrades_only_that_paragraph(self, small_registry):
        budgets = iter([SegmentationBudget(), SegmentationBudget(max_steps=0), SegmentationBudget()])
        document = segment_document(
            "python first\npython second\npython third",
            small_registry,
            budget_factory=lambda: next(budgets),
        )

        first, second, third = document.paragraphs
        assert document.degraded_paragraphs == (1,)

        assert second.degraded
        assert len(second.segments) == 1
        assert second.segments[0].is_plain
        assert second.segments[0].text == "python second"

        assert [s.text for s in first.highlights] == ["python"]
        assert [s.text for s in third.highlights] == ["python"]

    def test_budget_is_built_per_paragraph(self, small_registry):
        built = []

        def factory():
            budget = SegmentationBudget()
            built.append(budget)
            return budget

        segment_document("python\n\ngo\njava", small_registry, budget_factory=factory)

        assert len(built) == 3
