"""
Renderer adapter: typed segments to display output.

to_primitive() maps one Segment to a host-neutral DisplayPrimitive (plain
text, styled span, mail-to link or hyperlink) without re-deriving any
classification. HtmlRenderer turns primitives and whole documents into HTML
fragments with Jinja2 templates, one template per span kind.

The visible label of every primitive is exactly the segment text.
"""

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from markupsafe import Markup

from herald.contexts.annotation.categories import CategoryRegistry, SpanKind
from herald.contexts.annotation.segment_data_structures import Document, Paragraph, Segment
from herald.contexts.rendering.logger import log_document_rendered, log_missing_category_class

load_dotenv()
DEFAULT_TEMPLATES_PATH = Path(__file__).parent / "templates"
TEMPLATES_PATH = Path(os.getenv("HERALD_TEMPLATES_PATH", str(DEFAULT_TEMPLATES_PATH)))

EXTERNAL_INDICATOR = "↗"


# =============================================================================
# DISPLAY PRIMITIVES
# =============================================================================


@dataclass(frozen=True)
class DisplayPrimitive:
    """
    Host-neutral description of how to display one segment.

    Attributes:
        kind: Span kind the primitive was built from
        label: Visible text (always the segment text)
        css_class: Display class ("" for plain text)
        category_id: Category of the segment (None for plain text)
        href: Navigation target for email and link primitives
        opens_externally: Whether the target should open outside the page
        indicator: Trailing glyph shown after external links, if any
    """

    kind: SpanKind
    label: str
    css_class: str = ""
    category_id: Optional[str] = None
    href: Optional[str] = None
    opens_externally: bool = False
    indicator: Optional[str] = None


@dataclass(frozen=True)
class RenderContext:
    """
    Styling supplied by the host UI.

    Attributes:
        category_classes: Display class per category id
        container_class: Class of the element wrapping a whole document
        paragraph_class: Class of each text paragraph
        spacer_class: Class of each blank-line spacer
        external_indicator: Glyph appended after links (None to omit)
    """

    category_classes: Mapping[str, str] = field(default_factory=dict)
    container_class: str = "space-y-4"
    paragraph_class: str = "leading-relaxed text-gray-600 dark:text-gray-300"
    spacer_class: str = "h-2"
    external_indicator: Optional[str] = EXTERNAL_INDICATOR

    @classmethod
    def from_registry(cls, registry: CategoryRegistry, **overrides) -> "RenderContext":
        """
        Build a context using each category's default css_class.

        Args:
            registry: Category registry providing default classes
            **overrides: Any RenderContext field. category_classes given here
                         are merged over the registry defaults.
        """
        classes = {category.id: category.css_class for category in registry}
        classes.update(overrides.pop("category_classes", {}))
        return cls(category_classes=classes, **overrides)

    def class_for(self, category_id: str) -> str:
        css_class = self.category_classes.get(category_id)
        if css_class is None:
            css_class = f"highlight-{category_id}"
            log_missing_category_class(category_id, css_class)
        return css_class


def _plain_text(segment: Segment, context: RenderContext) -> DisplayPrimitive:
    return DisplayPrimitive(kind=SpanKind.PLAIN, label=segment.text)


def _styled_span(segment: Segment, context: RenderContext) -> DisplayPrimitive:
    return DisplayPrimitive(
        kind=SpanKind.DECORATIVE,
        label=segment.text,
        css_class=context.class_for(segment.category_id),
        category_id=segment.category_id,
    )


def _mailto_link(segment: Segment, context: RenderContext) -> DisplayPrimitive:
    return DisplayPrimitive(
        kind=SpanKind.EMAIL,
        label=segment.text,
        css_class=context.class_for(segment.category_id),
        category_id=segment.category_id,
        href=segment.href,
    )


def _hyperlink(segment: Segment, context: RenderContext) -> DisplayPrimitive:
    return DisplayPrimitive(
        kind=SpanKind.LINK,
        label=segment.text,
        css_class=context.class_for(segment.category_id),
        category_id=segment.category_id,
        href=segment.href,
        opens_externally=True,
        indicator=context.external_indicator,
    )


# One builder per span kind; tests check this covers every SpanKind
PRIMITIVE_BUILDERS: Dict[SpanKind, Callable[[Segment, RenderContext], DisplayPrimitive]] = {
    SpanKind.PLAIN: _plain_text,
    SpanKind.DECORATIVE: _styled_span,
    SpanKind.EMAIL: _mailto_link,
    SpanKind.LINK: _hyperlink,
}


def to_primitive(segment: Segment, context: Optional[RenderContext] = None) -> DisplayPrimitive:
    """
    Map a segment to its display primitive.

    Args:
        segment: Segment produced by the segmenter
        context: Host styling (defaults to an empty RenderContext)

    Returns:
        DisplayPrimitive whose label equals segment.text

    Example:
        to_primitive(Segment("hr@acme.io", 0, SpanKind.EMAIL, "email", "mailto:hr@acme.io"))
        # DisplayPrimitive(kind=<SpanKind.EMAIL: 'email'>, label='hr@acme.io',
        #                  href='mailto:hr@acme.io', ...)
    """
    if context is None:
        context = RenderContext()
    return PRIMITIVE_BUILDERS[segment.kind](segment, context)


# =============================================================================
# TEMPLATES
# =============================================================================


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for HTML output.

    Templates are stored as {name}.html.jinja in the templates directory:
    one per span kind (plain, decorative, email, link) plus document and legend.
    Autoescaping is always on; segment text is user-supplied.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Template directory. Defaults to HERALD_TEMPLATES_PATH
                            from environment, or the packaged templates
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=True,
            keep_trailing_newline=False,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Args:
            name: Template name without extension (e.g., 'link', 'document')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        try:
            template = self.env.get_template(f"{name}.html.jinja")
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for '{name}' at {self.get_template_path(name)}"
            ) from e

        self._cache[name] = template
        return template

    def get_template_path(self, name: str) -> Path:
        return self.templates_path / f"{name}.html.jinja"


# =============================================================================
# HTML RENDERER
# =============================================================================


class HtmlRenderer:
    """
    Renders documents, segments and legends to HTML fragments.

    Example:
        registry = get_default_registry()
        renderer = HtmlRenderer(RenderContext.from_registry(registry))
        html = renderer.render_document(segment_document(text, registry))
    """

    def __init__(
        self, context: Optional[RenderContext] = None, templates: TemplateRegistry = None
    ):
        self.context = context if context is not None else RenderContext()
        self.templates = templates if templates is not None else TemplateRegistry()

    def render_segment(self, segment: Segment) -> Markup:
        primitive = to_primitive(segment, self.context)
        template = self.templates.get_template(primitive.kind.value)
        return Markup(template.render(primitive=primitive))

    def render_paragraph(self, paragraph: Paragraph) -> Markup:
        """Render the inline content of a text paragraph (empty for spacers)."""
        return Markup("").join(self.render_segment(segment) for segment in paragraph.segments)

    def render_document(self, document: Document) -> Markup:
        """
        Render a whole document: one <p> per text paragraph, one spacer per blank line.

        Returns:
            HTML fragment as Markup
        """
        started = time.perf_counter()

        paragraphs = [
            {"is_blank": paragraph.is_blank, "html": self.render_paragraph(paragraph)}
            for paragraph in document.paragraphs
        ]
        html = self.templates.get_template("document").render(
            paragraphs=paragraphs, context=self.context
        )

        log_document_rendered(document, len(html), time.perf_counter() - started)
        return Markup(html)

    def render_legend(
        self,
        legend,
        title: str = "Smart Highlight Guide",
        subtitle: str = "Important keywords are automatically highlighted to help you scan faster.",
    ) -> Markup:
        """Render the highlight legend help surface."""
        html = self.templates.get_template("legend").render(
            entries=list(legend), title=title, subtitle=subtitle
        )
        return Markup(html)
