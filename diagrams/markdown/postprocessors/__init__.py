# diagrams/markdown/postprocessors/__init__.py

from .diagram_restorer import diagram_restorer_default
from .sanitizer import sanitize_html

POSTPROCESSORS = [
    sanitize_html,
    diagram_restorer_default,  # Swap diagram placeholders for generated markup
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
