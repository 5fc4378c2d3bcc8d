"""Hand-off of generated block markup from preprocessors to postprocessors.

Markup produced before the Pandoc conversion cannot go through Pandoc
untouched, so preprocessors leave a placeholder paragraph in the markdown and
keep the markup in the rendering context. The restore postprocessor swaps the
placeholders back once Pandoc has produced HTML.
"""

from __future__ import annotations

import re

_STASH_KEY = "__diagram_block_stash"

PLACEHOLDER_TEMPLATE = "DIAGRAMBLOCK{index}PLACEHOLDER"
PLACEHOLDER_RE = re.compile(r"DIAGRAMBLOCK(?P<index>\d+)PLACEHOLDER")


def stash_block(context: dict, markup: str) -> str:
    """Store markup in the context and return the placeholder standing in for it."""
    stash = context.setdefault(_STASH_KEY, [])
    stash.append(markup)
    return PLACEHOLDER_TEMPLATE.format(index=len(stash) - 1)


def get_stashed_blocks(context: dict) -> list[str]:
    return context.get(_STASH_KEY, [])


def clear_stash(context: dict) -> None:
    context.pop(_STASH_KEY, None)
