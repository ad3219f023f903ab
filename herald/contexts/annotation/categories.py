"""
Category definitions and the ordered category registry.

A Category names one class of substrings to highlight (salary, benefits,
programming skills, emails, ...). The CategoryRegistry holds the categories in
precedence order: when two categories would claim overlapping text, the one
listed first wins.

The shipped categories are data, not code: they live in
config/categories.yaml and are loaded with OmegaConf by load_registry().
"""

import os
from dataclasses import dataclass
from enum import Enum
from functools import cached_property, lru_cache
from pathlib import Path
from typing import Iterable, Iterator, Optional

import regex
from dotenv import load_dotenv
from omegaconf import OmegaConf

from herald.contexts.annotation.exceptions import CategoryConfigError
from herald.contexts.annotation.logger import log_registry_invalid, log_registry_loaded
from herald.contexts.annotation.patterns import build_keyword_pattern, find_backtracking_groups

load_dotenv()
DEFAULT_CATEGORIES_PATH = Path(__file__).parent / "config" / "categories.yaml"
CATEGORIES_PATH = Path(os.getenv("HERALD_CATEGORIES_PATH", str(DEFAULT_CATEGORIES_PATH)))


class SpanKind(str, Enum):
    """
    How a segment is presented.

    PLAIN is reserved for untyped text. Categories are DECORATIVE (highlight
    only) or one of the actionable kinds, EMAIL and LINK, which carry a
    navigable target.
    """

    PLAIN = "plain"
    DECORATIVE = "decorative"
    EMAIL = "email"
    LINK = "link"

    @property
    def is_actionable(self) -> bool:
        return self in (SpanKind.EMAIL, SpanKind.LINK)

    def href_for(self, text: str) -> Optional[str]:
        """Derive the navigable target for text of this kind (None if not actionable)."""
        if self is SpanKind.EMAIL:
            return f"mailto:{text}"
        if self is SpanKind.LINK:
            return text
        return None


CATEGORY_KINDS = (SpanKind.DECORATIVE, SpanKind.EMAIL, SpanKind.LINK)


@dataclass(frozen=True)
class Category:
    """
    Immutable definition of one highlight category.

    Attributes:
        id: Stable identifier used by hosts for styling lookups
        label: Human-readable name
        kind: SpanKind of segments produced by this category
        patterns: Regex sources, applied one after another in listed order
        css_class: Default display class for the rendering context
        flags: Regex flags used to compile every pattern
    """

    id: str
    label: str
    kind: SpanKind
    patterns: tuple[str, ...]
    css_class: str = ""
    flags: int = regex.IGNORECASE

    @cached_property
    def matchers(self) -> tuple:
        """
        Patterns compiled with the `regex` package, in application order.

        Raises:
            CategoryConfigError: If a pattern is malformed (normally caught
                earlier by registry validation)
        """
        compiled = []
        for source in self.patterns:
            try:
                compiled.append(regex.compile(source, self.flags))
            except regex.error as e:
                raise CategoryConfigError(
                    f"Malformed pattern {source!r}: {e}", category_ids=[self.id]
                ) from e
        return tuple(compiled)

    @classmethod
    def from_config(cls, config: dict) -> "Category":
        """
        Build a Category from one entry of categories.yaml.

        Raw `patterns` are applied first, then the `terms` list compiled into
        a single whole-token alternation.

        Args:
            config: Dict with id, label, kind, and patterns and/or terms

        Returns:
            Category instance

        Raises:
            CategoryConfigError: If required fields are missing or the kind is unknown
        """
        category_id = config.get("id")
        if not category_id:
            raise CategoryConfigError(f"Category entry without an id: {config}")

        kind_value = config.get("kind", SpanKind.DECORATIVE.value)
        try:
            kind = SpanKind(kind_value)
        except ValueError:
            raise CategoryConfigError(
                f"Unknown span kind '{kind_value}'", category_ids=[category_id]
            ) from None

        patterns = [str(p) for p in config.get("patterns") or []]
        terms = config.get("terms") or []
        if terms:
            try:
                patterns.append(build_keyword_pattern(terms))
            except ValueError as e:
                raise CategoryConfigError(str(e), category_ids=[category_id]) from e

        flags = 0 if config.get("case_sensitive", False) else regex.IGNORECASE

        return cls(
            id=str(category_id),
            label=str(config.get("label", category_id)),
            kind=kind,
            patterns=tuple(patterns),
            css_class=str(config.get("css_class", "")),
            flags=flags,
        )


@dataclass(frozen=True)
class CategoryProblem:
    """One validation finding for a category."""

    category_id: str
    description: str

    def __str__(self) -> str:
        return f"{self.category_id}: {self.description}"


class CategoryRegistry:
    """
    Ordered, read-only collection of categories.

    Registry order is precedence order: the first category has the highest
    precedence. The registry validates itself on construction and exposes no
    mutation; extended() and without() return new registries.

    Example:
        registry = load_registry()
        for category in registry:
            print(registry.rank(category.id), category.label)
    """

    def __init__(self, categories: Iterable[Category], validate: bool = True):
        """
        Initialize the registry.

        Args:
            categories: Categories in precedence order
            validate: Run validate() immediately (fail fast). Only pass False
                to defer validation to an explicit startup check.

        Raises:
            CategoryConfigError: If validate is True and any category is invalid
        """
        self._categories: tuple[Category, ...] = tuple(categories)
        self._by_id = {}
        for category in self._categories:
            self._by_id.setdefault(category.id, category)

        if validate:
            self.validate()

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def find_problems(self) -> list[CategoryProblem]:
        """
        Collect every configuration problem without raising.

        Checks duplicate ids, kinds, empty matcher lists, regex compilation and
        catastrophic-backtracking shapes.

        Returns:
            List of CategoryProblem (empty when the registry is valid)
        """
        problems = []
        seen = set()

        for category in self._categories:
            if category.id in seen:
                problems.append(CategoryProblem(category.id, "duplicate category id"))
            seen.add(category.id)

            if not isinstance(category.kind, SpanKind) or category.kind not in CATEGORY_KINDS:
                problems.append(
                    CategoryProblem(category.id, f"invalid span kind '{category.kind}'")
                )

            if not category.patterns:
                problems.append(CategoryProblem(category.id, "no patterns defined"))

            for source in category.patterns:
                try:
                    regex.compile(source, category.flags)
                except regex.error as e:
                    problems.append(
                        CategoryProblem(category.id, f"malformed pattern {source!r}: {e}")
                    )
                    continue

                for offset in find_backtracking_groups(source):
                    problems.append(
                        CategoryProblem(
                            category.id,
                            f"repeated group at offset {offset} can backtrack "
                            f"catastrophically in {source!r}",
                        )
                    )

        return problems

    def validate(self) -> "CategoryRegistry":
        """
        Validate every category, failing loudly on the first inconsistent registry.

        Safe to call repeatedly. Hosts call this once at startup.

        Returns:
            self, for chaining

        Raises:
            CategoryConfigError: Listing every offending category id
        """
        problems = self.find_problems()
        if problems:
            raise CategoryConfigError(
                f"Invalid category registry ({len(problems)} problem(s))",
                category_ids=[p.category_id for p in problems],
                problems=[str(p) for p in problems],
            )
        return self

    # =========================================================================
    # READ ACCESS
    # =========================================================================

    def __iter__(self) -> Iterator[Category]:
        return iter(self._categories)

    def __len__(self) -> int:
        return len(self._categories)

    def __contains__(self, category_id: object) -> bool:
        return category_id in self._by_id

    def __repr__(self) -> str:
        return f"CategoryRegistry({list(self.ids)!r})"

    @property
    def categories(self) -> tuple[Category, ...]:
        return self._categories

    @property
    def ids(self) -> tuple[str, ...]:
        return tuple(category.id for category in self._categories)

    def get(self, category_id: str) -> Category:
        """
        Look up a category by id.

        Raises:
            KeyError: If no category has this id
        """
        try:
            return self._by_id[category_id]
        except KeyError:
            raise KeyError(f"Unknown category '{category_id}'") from None

    def rank(self, category_id: str) -> int:
        """Precedence rank of a category (0 = highest precedence)."""
        return self._categories.index(self.get(category_id))

    # =========================================================================
    # DERIVED REGISTRIES
    # =========================================================================

    def extended(self, *categories: Category) -> "CategoryRegistry":
        """Return a new registry with categories appended at the lowest precedence."""
        return CategoryRegistry(self._categories + tuple(categories))

    def without(self, *category_ids: str) -> "CategoryRegistry":
        """Return a new registry without the given categories."""
        for category_id in category_ids:
            self.get(category_id)
        return CategoryRegistry(c for c in self._categories if c.id not in category_ids)


# =============================================================================
# LOADING
# =============================================================================


def load_registry(config_path: Path = None) -> CategoryRegistry:
    """
    Load and validate a category registry from YAML.

    The file holds a top-level `categories` list in precedence order.

    Args:
        config_path: Path to categories YAML. Defaults to HERALD_CATEGORIES_PATH
                     from environment, or the shipped config/categories.yaml

    Returns:
        Validated CategoryRegistry

    Raises:
        FileNotFoundError: If the config file doesn't exist
        CategoryConfigError: If the config is malformed or any category is invalid
    """
    if config_path is None:
        config_path = CATEGORIES_PATH

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Category config not found at {config_path}")

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    entries = config.get("categories") if isinstance(config, dict) else None
    if not entries:
        raise CategoryConfigError(f"No categories defined in {config_path}")

    try:
        registry = CategoryRegistry(Category.from_config(entry) for entry in entries)
    except CategoryConfigError as e:
        log_registry_invalid(e, config_path)
        raise

    log_registry_loaded(registry, config_path)
    return registry


@lru_cache(maxsize=1)
def get_default_registry() -> CategoryRegistry:
    """
    Process-wide registry built from the configured categories file.

    Built once on first use and shared read-only afterwards.
    """
    return load_registry()
