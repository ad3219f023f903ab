"""Unit tests for the highlight legend."""

import pytest

from herald.contexts.annotation.exceptions import CategoryConfigError, LegendMismatchError
from herald.contexts.rendering.legend import Legend, LegendEntry, load_legend
from herald.contexts.rendering.renderer import HtmlRenderer


def entry(category_id, *examples):
    return LegendEntry(
        category_id=category_id,
        label=category_id.title(),
        examples=examples or (category_id,),
        color=f"bg-{category_id}",
    )


@pytest.fixture
def full_entries():
    return [
        entry("url", "https://acme.io"),
        entry("email", "jobs@acme.io"),
        entry("language", "Python", "Go"),
        entry("seniority", "Senior"),
    ]


@pytest.mark.unit
def test_legend_follows_registry_order(small_registry, full_entries):
    legend = Legend(full_entries, small_registry)

    assert [e.category_id for e in legend] == list(small_registry.ids)
    assert len(legend) == 4
    assert legend.get("language").examples == ("Python", "Go")

    with pytest.raises(KeyError):
        legend.get("salary")


@pytest.mark.unit
def test_missing_entry(small_registry, full_entries):
    with pytest.raises(LegendMismatchError) as excinfo:
        Legend(full_entries[1:], small_registry)

    assert excinfo.value.category_ids == ["url"]


@pytest.mark.unit
def test_unknown_entry(small_registry, full_entries):
    with pytest.raises(LegendMismatchError) as excinfo:
        Legend(full_entries + [entry("salary", "$120k")], small_registry)

    assert excinfo.value.category_ids == ["salary"]


@pytest.mark.unit
def test_duplicate_entry(small_registry, full_entries):
    with pytest.raises(LegendMismatchError) as excinfo:
        Legend(full_entries + [entry("email", "hr@acme.io")], small_registry)

    assert "email" in excinfo.value.category_ids


@pytest.mark.unit
def test_entry_without_examples(small_registry, full_entries):
    bare = LegendEntry(category_id="email", label="Email", examples=(), color="")
    entries = [e for e in full_entries if e.category_id != "email"] + [bare]

    with pytest.raises(LegendMismatchError):
        Legend(entries, small_registry)


@pytest.mark.unit
def test_mismatch_is_a_config_error(small_registry):
    with pytest.raises(CategoryConfigError):
        Legend([], small_registry)


@pytest.mark.unit
def test_extended_registry_needs_a_new_entry(small_registry, full_entries, category_factory):
    extended = small_registry.extended(category_factory("salary", r"\$\d+k"))

    with pytest.raises(LegendMismatchError):
        Legend(full_entries, extended)

    legend = Legend(full_entries + [entry("salary", "$120k")], extended)
    assert [e.category_id for e in legend][-1] == "salary"


class TestLoadLegend:
    """Tests for loading legends from YAML."""

    def test_load_from_yaml(self, tmp_path, small_registry):
        config = tmp_path / "legend.yaml"
        config.write_text(
            "entries:\n"
            "  - category_id: seniority\n"
            "    label: Seniority\n"
            "    examples: [Senior, Junior]\n"
            "    color: bg-amber-100\n"
            "  - category_id: language\n"
            "    label: Languages\n"
            "    examples: [Python]\n"
            "  - category_id: email\n"
            "    label: Email\n"
            "    examples: jobs@acme.io\n"
            "  - category_id: url\n"
            "    label: Links\n"
            "    examples: ['https://acme.io']\n"
        )

        legend = load_legend(config, small_registry)

        assert legend.get("seniority").color == "bg-amber-100"
        assert legend.get("email").examples == ("jobs@acme.io",)
        assert legend.get("language").color == ""

    def test_missing_file(self, tmp_path, small_registry):
        with pytest.raises(FileNotFoundError):
            load_legend(tmp_path / "nope.yaml", small_registry)

    def test_empty_file_lists_every_category(self, tmp_path, small_registry):
        config = tmp_path / "legend.yaml"
        config.write_text("entries: []\n")

        with pytest.raises(LegendMismatchError) as excinfo:
            load_legend(config, small_registry)

        assert excinfo.value.category_ids == list(small_registry.ids)


@pytest.mark.unit
def test_render_legend(small_registry, full_entries):
    legend = Legend(full_entries, small_registry)

    html = HtmlRenderer().render_legend(legend, title="Guide")

    assert "<h2>Guide</h2>" in html
    assert html.count("<li ") == 4
    assert "Python, Go" in html
    assert html.index('data-category="seniority"') < html.index('data-category="url"')
