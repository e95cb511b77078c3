"""
Rich-text formatter: annotated text runs → inline HTML.

Runs are rendered independently and concatenated (never merged). Each run's
text is escaped first, then wrapped innermost → outermost in
code, bold, italic, strikethrough, underline, and finally a link.
"""

from __future__ import annotations

import html
from typing import Iterable, List, Optional, Tuple

from tinyhtml import h, raw

from ..models.blocks import Annotations, RichTextRun
from .options import RenderConfig

# (annotation attribute, tag) in nesting order, innermost first
_WRAP_ORDER: Tuple[Tuple[str, str], ...] = (
    ("code", "code"),
    ("bold", "strong"),
    ("italic", "em"),
    ("strikethrough", "s"),
    ("underline", "u"),
)


def escape_text(text: str) -> str:
    """Escape &, < and > only; quotes are left alone in text content."""
    return html.escape(text, quote=False)


def plain_text(runs: Iterable[RichTextRun]) -> str:
    return "".join(r.plain_text for r in runs)


def _wrap_annotations(text_html: str, annotations: Annotations) -> str:
    out = text_html
    for attr, tag in _WRAP_ORDER:
        if getattr(annotations, attr, False):
            out = f"<{tag}>{out}</{tag}>"
    return out


def format_run(run: RichTextRun, config: Optional[RenderConfig] = None) -> str:
    out = _wrap_annotations(escape_text(run.plain_text), run.annotations)
    if run.href:
        conf = config or RenderConfig()
        out = h("a", href=run.href, target=conf.link_target, rel=conf.link_rel)(
            raw(out)
        ).render()
    return out


def _as_bullets(text_html: str) -> Optional[str]:
    # Multi-line text fields are used as ad-hoc bullet lists in the source
    # workspace; a single line is returned untouched.
    if "\n" not in text_html:
        return None
    lines: List[str] = [ln.strip() for ln in text_html.split("\n") if ln.strip()]
    if len(lines) <= 1:
        return None
    return "<ul>" + "".join(f"<li>{ln}</li>" for ln in lines) + "</ul>"


def format_rich_text(
    runs: Iterable[RichTextRun], config: Optional[RenderConfig] = None
) -> str:
    """Render a block's rich-text runs to an inline HTML string."""
    joined = "".join(format_run(r, config) for r in runs)
    bullets = _as_bullets(joined)
    return joined if bullets is None else bullets
