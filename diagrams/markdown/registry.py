# diagrams/markdown/registry.py
"""
Registry of block processors, keyed by (block style name, block context).

The diagram preprocessor asks the registry whether a block style is handled
for the block's context; extensions populate it through register().
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .blocks import BlockContext

logger = logging.getLogger(__name__)


class BlockRegistry:
    def __init__(self):
        self._processors: Dict[Tuple[str, BlockContext], object] = {}

    def register_block(self, name: str, processor, contexts: Iterable[BlockContext]):
        """
        Register a processor for a block style in each of the given contexts.

        Registering the same name and context again replaces the previous
        processor. Returns the registry for chaining.
        """
        for context in contexts:
            key = (name, BlockContext(context))
            if key in self._processors:
                logger.debug(f"Replacing block processor for {name} ({key[1].value})")
            self._processors[key] = processor
        return self

    def registered_for_block(self, name: str, context) -> Optional[object]:
        try:
            return self._processors.get((name, BlockContext(context)))
        except ValueError:
            return None

    def __len__(self) -> int:
        return len(self._processors)
