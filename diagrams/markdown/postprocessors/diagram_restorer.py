# diagrams/markdown/postprocessors/diagram_restorer.py
"""
Postprocessor that puts generated diagram markup back in place.

The diagram_blocks preprocessor leaves one placeholder paragraph per diagram
block. Pandoc renders it as:
    <p>DIAGRAMBLOCK0PLACEHOLDER</p>

This postprocessor replaces the whole paragraph with the stashed markup:
    <div class="imageblock plantuml">...</div>
"""

import logging

from bs4 import BeautifulSoup

from ..stash import PLACEHOLDER_RE, get_stashed_blocks

logger = logging.getLogger(__name__)


def restore_diagram_blocks(html: str, context: dict) -> str:
    """
    Replace diagram placeholders with the markup stashed in the context.

    Args:
        html: HTML string to process
        context: Context dictionary holding the stash filled by the preprocessor

    Returns:
        HTML with diagram blocks restored
    """
    blocks = get_stashed_blocks(context)
    if not blocks:
        return html

    soup = BeautifulSoup(html, "html.parser")

    for string in list(soup.find_all(string=PLACEHOLDER_RE)):
        match = PLACEHOLDER_RE.fullmatch(string.strip())
        if not match:
            continue

        index = int(match.group("index"))
        if index >= len(blocks):
            logger.warning(f"No stashed diagram block for placeholder {match.group(0)}")
            continue

        # Replace the wrapping paragraph, not just its text
        target = string
        parent = string.parent
        if parent is not None and parent.name == "p" and parent.get_text(strip=True) == match.group(0):
            target = parent

        target.replace_with(BeautifulSoup(blocks[index], "html.parser"))

    return str(soup)


def diagram_restorer_default(html: str, context: dict) -> str:
    """
    Default configuration for diagram_restorer.

    This is the function that should be registered in POSTPROCESSORS.
    """
    return restore_diagram_blocks(html, context)
