"""
Rendering Context

Responsibilities:
- Maps typed segments to display primitives (plain text, styled span,
  mail-to link, external hyperlink)
- Renders documents and the highlight legend to HTML with Jinja2 templates
- Owns the legend/help model and its 1:1 correspondence with the registry

Owns: Display mapping, HTML templates, legend data
Never: Classifies text or alters segment text
"""

from herald.contexts.rendering.legend import (
    Legend,
    LegendEntry,
    get_default_legend,
    load_legend,
)
from herald.contexts.rendering.renderer import (
    DisplayPrimitive,
    HtmlRenderer,
    RenderContext,
    TemplateRegistry,
    to_primitive,
)

__all__ = [
    "DisplayPrimitive",
    "RenderContext",
    "to_primitive",
    "HtmlRenderer",
    "TemplateRegistry",
    "Legend",
    "LegendEntry",
    "load_legend",
    "get_default_legend",
]
