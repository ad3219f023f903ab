"""
Legend/help model for the highlight scheme.

Each registry category has exactly one legend entry (label, examples and a
color token) explaining its highlight to end users. The correspondence is
checked when a Legend is built, so a category added to the registry without
a legend entry (or a stale entry for a removed category) fails at startup.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Iterator

from dotenv import load_dotenv
from omegaconf import OmegaConf

from herald.contexts.annotation.categories import CategoryRegistry, get_default_registry
from herald.contexts.annotation.exceptions import LegendMismatchError
from herald.contexts.rendering.logger import log_legend_loaded, log_legend_mismatch

load_dotenv()
DEFAULT_LEGEND_PATH = Path(__file__).parent / "config" / "legend.yaml"
LEGEND_PATH = Path(os.getenv("HERALD_LEGEND_PATH", str(DEFAULT_LEGEND_PATH)))


@dataclass(frozen=True)
class LegendEntry:
    """
    Help text for one category.

    Attributes:
        category_id: Registry category this entry explains
        label: Display label
        examples: Representative strings highlighted by the category
        color: Display color token (host class names)
    """

    category_id: str
    label: str
    examples: tuple[str, ...]
    color: str

    @classmethod
    def from_config(cls, config: dict) -> "LegendEntry":
        examples = config.get("examples") or []
        if isinstance(examples, str):
            examples = [examples]
        return cls(
            category_id=str(config.get("category_id", "")),
            label=str(config.get("label", "")),
            examples=tuple(str(example) for example in examples),
            color=str(config.get("color", "")),
        )


class Legend:
    """
    Legend entries in registry precedence order.

    Raises LegendMismatchError on construction unless every registry category
    has exactly one entry and every entry names a registry category.
    """

    def __init__(self, entries: Iterable[LegendEntry], registry: CategoryRegistry):
        entries = list(entries)
        self._check_correspondence(entries, registry)

        by_id = {entry.category_id: entry for entry in entries}
        self._entries: tuple[LegendEntry, ...] = tuple(by_id[cid] for cid in registry.ids)

    @staticmethod
    def _check_correspondence(entries: list[LegendEntry], registry: CategoryRegistry) -> None:
        problems = []
        offenders = []
        seen = set()

        for entry in entries:
            if entry.category_id in seen:
                problems.append(f"{entry.category_id}: more than one legend entry")
                offenders.append(entry.category_id)
            seen.add(entry.category_id)

            if entry.category_id not in registry:
                problems.append(f"{entry.category_id}: no such category in the registry")
                offenders.append(entry.category_id)
            elif not entry.examples:
                problems.append(f"{entry.category_id}: legend entry has no examples")
                offenders.append(entry.category_id)

        for category_id in registry.ids:
            if category_id not in seen:
                problems.append(f"{category_id}: category has no legend entry")
                offenders.append(category_id)

        if problems:
            raise LegendMismatchError(
                "Legend does not match the category registry",
                category_ids=offenders,
                problems=problems,
            )

    def __iter__(self) -> Iterator[LegendEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, category_id: str) -> LegendEntry:
        for entry in self._entries:
            if entry.category_id == category_id:
                return entry
        raise KeyError(f"No legend entry for category '{category_id}'")


def load_legend(config_path: Path = None, registry: CategoryRegistry = None) -> Legend:
    """
    Load a legend from YAML and check it against a registry.

    Args:
        config_path: Path to legend YAML (top-level `entries` list). Defaults to
                     HERALD_LEGEND_PATH from environment, or the shipped config
        registry: Registry to check against. Defaults to the process-wide registry

    Returns:
        Legend ordered like the registry

    Raises:
        FileNotFoundError: If the config file doesn't exist
        LegendMismatchError: If entries and categories are not 1:1
    """
    if config_path is None:
        config_path = LEGEND_PATH
    if registry is None:
        registry = get_default_registry()

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Legend config not found at {config_path}")

    config = OmegaConf.to_container(OmegaConf.load(config_path), resolve=True)
    entries = config.get("entries") if isinstance(config, dict) else None
    if entries is None:
        entries = []

    try:
        legend = Legend((LegendEntry.from_config(entry) for entry in entries), registry)
    except LegendMismatchError as e:
        log_legend_mismatch(e, config_path)
        raise

    log_legend_loaded(legend, config_path)
    return legend


@lru_cache(maxsize=1)
def get_default_legend() -> Legend:
    """Process-wide legend for the default registry."""
    return load_legend()
