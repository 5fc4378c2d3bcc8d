# diagrams/markdown/postprocessors/sanitizer.py

import logging
from functools import lru_cache

import bleach

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _get_bleach_config():
    """Cache bleach configuration for better performance."""
    allowed_tags = set(bleach.sanitizer.ALLOWED_TAGS).union(
        {
            # text
            "p",
            "br",
            "div",
            "span",
            "section",
            "mark",
            "del",
            "sup",  # superscript (for footnotes)
            "sub",  # subscript
            # headings
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            # lists
            "ul",
            "ol",
            "li",
            "hr",
            "blockquote",
            "dl",
            "dt",
            "dd",
            # code
            "pre",
            "code",
            "kbd",
            "samp",
            # tables
            "table",
            "thead",
            "tbody",
            "tr",
            "th",
            "td",
            "caption",
            "colgroup",
            "col",
            # media
            "img",
            "figure",
            "figcaption",
            # forms (for task lists)
            "input",
            "label",
        }
    )

    allowed_attrs = {
        "*": ["class", "id", "title"],
        "a": ["href", "title", "rel", "target"],
        "img": ["src", "alt", "title", "width", "height"],
        "code": ["class"],
        "pre": ["class"],
        "th": ["colspan", "rowspan", "scope", "style"],
        "td": ["colspan", "rowspan", "style"],
        "input": ["type", "checked", "disabled"],
        "ol": ["start", "type", "class"],
        "li": ["class"],
        "div": ["class"],
        "span": ["class"],
    }

    allowed_protocols = ["http", "https", "mailto"]

    return allowed_tags, allowed_attrs, allowed_protocols


def sanitize_html(html, context):
    """
    Sanitize HTML output using bleach.
    This is the FIRST post-processor and runs before diagram markup is restored,
    so only the Pandoc output is sanitized.
    """
    allowed_tags, allowed_attrs, allowed_protocols = _get_bleach_config()

    try:
        return bleach.clean(
            html,
            tags=allowed_tags,
            attributes=allowed_attrs,
            protocols=allowed_protocols,
            strip=False,  # Escape disallowed tags instead of dropping them
        )
    except Exception as e:
        logger.error(f"Bleach sanitization failed: {e}", exc_info=True)
        return html
