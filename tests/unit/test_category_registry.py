"""Unit tests for Category and CategoryRegistry."""

import pytest
import regex

from herald.contexts.annotation.categories import (
    Category,
    CategoryRegistry,
    SpanKind,
    load_registry,
)
from herald.contexts.annotation.exceptions import CategoryConfigError
from herald.contexts.annotation.paragraphs import segment_document


@pytest.mark.unit
def test_registry_preserves_precedence_order(small_registry):
    """Registry order is precedence order."""
    assert small_registry.ids == ("seniority", "language", "email", "url")
    assert [c.id for c in small_registry] == list(small_registry.ids)
    assert small_registry.rank("seniority") == 0
    assert small_registry.rank("url") == 3


@pytest.mark.unit
def test_registry_lookup(small_registry):
    assert "email" in small_registry
    assert "salary" not in small_registry
    assert small_registry.get("email").kind is SpanKind.EMAIL

    with pytest.raises(KeyError):
        small_registry.get("salary")


@pytest.mark.unit
def test_duplicate_ids_fail_at_construction(category_factory):
    """Duplicate identifiers are rejected before any segmentation can happen."""
    categories = [
        category_factory("skills", terms=["python"]),
        category_factory("skills", terms=["java"]),
    ]

    with pytest.raises(CategoryConfigError) as excinfo:
        CategoryRegistry(categories)

    assert excinfo.value.category_ids == ["skills"]
    assert "duplicate" in str(excinfo.value)


@pytest.mark.unit
def test_validate_reports_deferred_problems(category_factory):
    """validate() fails on a registry built with validation deferred."""
    registry = CategoryRegistry(
        [
            category_factory("skills", terms=["python"]),
            category_factory("skills", terms=["java"]),
        ],
        validate=False,
    )

    with pytest.raises(CategoryConfigError):
        registry.validate()


@pytest.mark.unit
def test_validate_lists_every_offender(category_factory):
    registry = CategoryRegistry(
        [
            category_factory("ok", terms=["python"]),
            category_factory("broken", r"(unclosed"),
            category_factory("backtracking", r"(a+)+b"),
            Category(id="empty", label="Empty", kind=SpanKind.DECORATIVE, patterns=()),
        ],
        validate=False,
    )

    problems = registry.find_problems()
    assert {p.category_id for p in problems} == {"broken", "backtracking", "empty"}

    with pytest.raises(CategoryConfigError) as excinfo:
        registry.validate()
    assert set(excinfo.value.category_ids) == {"broken", "backtracking", "empty"}
    assert len(excinfo.value.problems) == 3


@pytest.mark.unit
def test_repeated_alternation_is_rejected(category_factory):
    """Overlapping alternatives under + would backtrack exponentially on a near miss."""
    with pytest.raises(CategoryConfigError) as excinfo:
        CategoryRegistry([category_factory("stutter", r"(?:a|a)+b")])

    assert excinfo.value.category_ids == ["stutter"]
    assert "backtrack" in str(excinfo.value)


@pytest.mark.unit
def test_unvalidated_malformed_pattern_raises_config_error(category_factory):
    registry = CategoryRegistry([category_factory("broken", r"(unclosed")], validate=False)

    with pytest.raises(CategoryConfigError) as excinfo:
        segment_document("some unclosed text", registry)

    assert excinfo.value.category_ids == ["broken"]


@pytest.mark.unit
def test_plain_kind_is_reserved(category_factory):
    with pytest.raises(CategoryConfigError) as excinfo:
        CategoryRegistry([category_factory("words", terms=["python"], kind=SpanKind.PLAIN)])

    assert excinfo.value.category_ids == ["words"]


@pytest.mark.unit
def test_validate_is_idempotent(small_registry):
    assert small_registry.validate() is small_registry
    assert small_registry.validate() is small_registry


@pytest.mark.unit
def test_extension_returns_new_registry(small_registry, category_factory):
    """Extending or trimming never changes the original registry."""
    extended = small_registry.extended(category_factory("salary", r"\$\d+"))

    assert extended is not small_registry
    assert extended.ids[-1] == "salary"
    assert "salary" not in small_registry

    trimmed = small_registry.without("language")
    assert trimmed.ids == ("seniority", "email", "url")
    assert "language" in small_registry

    with pytest.raises(KeyError):
        small_registry.without("salary")


@pytest.mark.unit
def test_extension_revalidates(small_registry, category_factory):
    with pytest.raises(CategoryConfigError):
        small_registry.extended(category_factory("email", terms=["contact"]))


@pytest.mark.unit
def test_span_kind_hrefs():
    assert SpanKind.EMAIL.href_for("hr@example.com") == "mailto:hr@example.com"
    assert SpanKind.LINK.href_for("https://example.com/a") == "https://example.com/a"
    assert SpanKind.DECORATIVE.href_for("Python") is None
    assert SpanKind.PLAIN.href_for("text") is None
    assert SpanKind.EMAIL.is_actionable and SpanKind.LINK.is_actionable
    assert not SpanKind.DECORATIVE.is_actionable


class TestCategoryFromConfig:
    """Tests for Category.from_config."""

    def test_patterns_then_terms(self):
        category = Category.from_config(
            {
                "id": "salary",
                "label": "Salary",
                "kind": "decorative",
                "patterns": [r"\$\d+"],
                "terms": ["negotiable", "doe"],
            }
        )

        assert category.patterns[0] == r"\$\d+"
        assert len(category.patterns) == 2
        assert category.matchers[1].search("Pay: DOE")
        assert category.flags == regex.IGNORECASE

    def test_case_sensitive_flag(self):
        category = Category.from_config(
            {"id": "acronyms", "terms": ["AI"], "case_sensitive": True}
        )

        assert category.flags == 0
        assert category.matchers[0].search("said") is None
        assert category.matchers[0].search("Applied AI team")

    def test_defaults(self):
        category = Category.from_config({"id": "tools", "terms": ["jira"]})

        assert category.kind is SpanKind.DECORATIVE
        assert category.label == "tools"
        assert category.css_class == ""

    def test_unknown_kind(self):
        with pytest.raises(CategoryConfigError) as excinfo:
            Category.from_config({"id": "phone", "kind": "telephone", "terms": ["call"]})

        assert excinfo.value.category_ids == ["phone"]

    def test_missing_id(self):
        with pytest.raises(CategoryConfigError):
            Category.from_config({"label": "Nameless", "terms": ["x"]})


class TestLoadRegistry:
    """Tests for loading registries from YAML."""

    def test_load_from_yaml(self, tmp_path):
        config = tmp_path / "categories.yaml"
        config.write_text(
            "categories:\n"
            "  - id: work_arrangement\n"
            "    label: Work Arrangement\n"
            "    terms: [remote, hybrid]\n"
            "  - id: email\n"
            "    kind: email\n"
            "    patterns: ['[\\w.-]+@[\\w.-]+\\.\\w{2,4}']\n"
        )

        registry = load_registry(config)

        assert registry.ids == ("work_arrangement", "email")
        assert registry.get("email").kind is SpanKind.EMAIL

    def test_duplicate_ids_in_yaml(self, tmp_path):
        config = tmp_path / "categories.yaml"
        config.write_text(
            "categories:\n"
            "  - id: skills\n"
            "    terms: [python]\n"
            "  - id: skills\n"
            "    terms: [java]\n"
        )

        with pytest.raises(CategoryConfigError):
            load_registry(config)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_registry(tmp_path / "nope.yaml")

    def test_empty_config(self, tmp_path):
        config = tmp_path / "categories.yaml"
        config.write_text("categories: []\n")

        with pytest.raises(CategoryConfigError):
            load_registry(config)
