# diagrams/markdown/extensions/__init__.py

from functools import lru_cache

from ..registry import BlockRegistry
from .plantuml import register


@lru_cache(maxsize=1)
def get_default_registry() -> BlockRegistry:
    """Registry with all built-in diagram extensions, built once per process."""
    return register(BlockRegistry())


__all__ = ("get_default_registry", "register")
