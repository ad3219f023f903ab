#!/usr/bin/env python3
"""
Job Description Highlighting CLI

Runs the annotation engine over a job description file and shows what the
job board would highlight.

Commands:
    segments - Print the typed segments of each paragraph
    html     - Render highlighted HTML for a job description
    legend   - Render the highlight legend help surface

Examples:\n

    highlight_job.py segments data/jobs/MLEng_AcmeCorp.md            # Show highlights

    highlight_job.py segments data/jobs/MLEng_AcmeCorp.md --all      # Include plain text

    highlight_job.py html data/jobs/MLEng_AcmeCorp.md -o outs/job.html

    highlight_job.py legend -o outs/legend.html
"""

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from herald.contexts.annotation import get_default_registry, load_registry, segment_document
from herald.contexts.annotation.categories import CATEGORIES_PATH
from herald.contexts.annotation.logger import setup_annotation_logger
from herald.contexts.rendering import HtmlRenderer, RenderContext, load_legend
from herald.contexts.rendering.logger import setup_rendering_logger
from herald.contexts.rendering.renderer import TEMPLATES_PATH

load_dotenv()

app = typer.Typer(
    help="Highlight job descriptions with the annotation engine",
    add_completion=False,
    invoke_without_command=True,
)

CategoriesOption = Annotated[
    Optional[Path],
    typer.Option(
        "--categories",
        "-c",
        help="Category config YAML (default: HERALD_CATEGORIES_PATH or the shipped config)",
        exists=True,
        dir_okay=False,
    ),
]


def _load(categories: Optional[Path]):
    setup_annotation_logger(categories_path=categories or CATEGORIES_PATH)
    if categories is None:
        return get_default_registry()
    return load_registry(categories)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("segments")
def segments_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Job description text or markdown file", exists=True, dir_okay=False),
    ],
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Also print plain (unhighlighted) segments"),
    ] = False,
    categories: CategoriesOption = None,
):
    """
    Print the typed segments of each paragraph.

    Examples:\n

        $ highlight_job.py segments data/jobs/MLEng_AcmeCorp.md
    """
    registry = _load(categories)
    document = segment_document(job_file.read_text(encoding="utf-8"), registry)

    typer.secho(f"\nHighlights: {job_file.name}", fg=typer.colors.BLUE, bold=True)

    for index, paragraph in enumerate(document.paragraphs):
        if paragraph.is_blank:
            continue

        shown = paragraph.segments if show_all else paragraph.highlights
        if not shown:
            continue

        marker = " (degraded)" if paragraph.degraded else ""
        typer.echo(f"\n[{index}]{marker} {paragraph.text[:80]}")
        for segment in shown:
            label = segment.category_id or "plain"
            href = f" -> {segment.href}" if segment.href else ""
            typer.echo(f"  {label:<20} {segment.text!r}{href}")

    typer.echo("\n=== Category counts ===")
    for category_id, count in document.category_counts().items():
        typer.echo(f"  {category_id}: {count}")

    if document.degraded_paragraphs:
        typer.secho(
            f"\n{len(document.degraded_paragraphs)} paragraph(s) exceeded the segmentation budget",
            fg=typer.colors.YELLOW,
        )
    typer.echo("")


@app.command("html")
def html_command(
    job_file: Annotated[
        Path,
        typer.Argument(help="Job description text or markdown file", exists=True, dir_okay=False),
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write HTML here instead of stdout"),
    ] = None,
    collapse_blank_lines: Annotated[
        bool,
        typer.Option("--collapse-blank-lines", help="Merge runs of blank lines into one spacer"),
    ] = False,
    no_indicator: Annotated[
        bool,
        typer.Option("--no-indicator", help="Omit the external-link glyph after URLs"),
    ] = False,
    categories: CategoriesOption = None,
):
    """
    Render highlighted HTML for a job description.

    Examples:\n

        $ highlight_job.py html data/jobs/MLEng_AcmeCorp.md -o outs/job.html
    """
    registry = _load(categories)
    document = segment_document(
        job_file.read_text(encoding="utf-8"),
        registry,
        collapse_blank_lines=collapse_blank_lines,
    )

    overrides = {"external_indicator": None} if no_indicator else {}
    renderer = HtmlRenderer(RenderContext.from_registry(registry, **overrides))
    html = renderer.render_document(document)

    if output is None:
        typer.echo(html)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


@app.command("legend")
def legend_command(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write HTML here instead of stdout"),
    ] = None,
    legend_file: Annotated[
        Optional[Path],
        typer.Option("--legend", "-l", help="Legend config YAML", exists=True, dir_okay=False),
    ] = None,
    categories: CategoriesOption = None,
):
    """Render the highlight legend help surface."""
    setup_rendering_logger(templates_path=TEMPLATES_PATH)
    registry = load_registry(categories) if categories else get_default_registry()
    legend = load_legend(legend_file, registry)
    html = HtmlRenderer(RenderContext.from_registry(registry)).render_legend(legend)

    if output is None:
        typer.echo(html)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
