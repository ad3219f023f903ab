"""
Shared pytest fixtures for HERALD tests.

Provides small hand-built registries so unit tests don't depend on the
shipped category config.
"""

import pytest

from herald.contexts.annotation.categories import Category, CategoryRegistry, SpanKind
from herald.contexts.annotation.patterns import build_keyword_pattern

EMAIL_PATTERN = r"(?<![\w.-])[\w.-]{1,64}@[\w-]{1,63}(?:\.[\w-]{1,63}){0,8}\.\w{2,4}\b"


def make_category(category_id, *patterns, kind=SpanKind.DECORATIVE, terms=None, css_class=""):
    """Build a Category from raw patterns and/or keyword terms."""
    sources = list(patterns)
    if terms:
        sources.append(build_keyword_pattern(terms))
    return Category(
        id=category_id,
        label=category_id.replace("_", " ").title(),
        kind=kind,
        patterns=tuple(sources),
        css_class=css_class or f"hl-{category_id}",
    )


@pytest.fixture
def small_registry():
    """Four-category registry: seniority, language, email, url (in that precedence)."""
    return CategoryRegistry(
        [
            make_category("seniority", terms=["senior python", "senior", "junior"]),
            make_category("language", terms=["python", "go", "c\\+\\+"]),
            make_category("email", EMAIL_PATTERN, kind=SpanKind.EMAIL),
            make_category("url", r"https?://[^\s]+", kind=SpanKind.LINK),
        ]
    )


@pytest.fixture
def category_factory():
    """The make_category helper, for tests that need their own registries."""
    return make_category
