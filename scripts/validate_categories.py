#!/usr/bin/env python3
"""
Validate the highlight category registry and legend before deploying.

Runs the same checks the host runs at startup: matcher compilation, duplicate
ids, catastrophic-backtracking shapes, and legend/registry correspondence.

Usage:
    python scripts/validate_categories.py
    python scripts/validate_categories.py --categories my_categories.yaml --legend my_legend.yaml
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv

from herald.contexts.annotation import CategoryConfigError, load_registry
from herald.contexts.rendering import load_legend

load_dotenv()

app = typer.Typer(help="Validate highlight categories and legend.")


@app.command()
def main(
    categories: Optional[Path] = typer.Option(
        None, "--categories", "-c", help="Category config YAML", exists=True, dir_okay=False
    ),
    legend: Optional[Path] = typer.Option(
        None, "--legend", "-l", help="Legend config YAML", exists=True, dir_okay=False
    ),
):
    """Validate the category registry and legend, listing every problem found."""
    try:
        registry = load_registry(categories)
    except CategoryConfigError as e:
        typer.secho("✗ Category registry is invalid", fg=typer.colors.RED, bold=True, err=True)
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    typer.secho(f"✓ {len(registry)} categories", fg=typer.colors.GREEN)
    for rank, category in enumerate(registry):
        patterns = len(category.patterns)
        typer.echo(f"  {rank:>2}. {category.id:<20} {category.kind.value:<11} {patterns} pattern(s)")

    try:
        legend_model = load_legend(legend, registry)
    except CategoryConfigError as e:
        typer.secho("✗ Legend does not match the registry", fg=typer.colors.RED, bold=True, err=True)
        typer.echo(str(e), err=True)
        raise typer.Exit(1)

    typer.secho(f"✓ {len(legend_model)} legend entries match the registry", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
