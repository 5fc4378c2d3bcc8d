# diagrams/markdown/preprocessors/__init__.py

from .diagram_blocks import diagram_blocks_default

PREPROCESSORS = [
    diagram_blocks_default,
    # Order matters - they run sequentially
]


def apply_preprocessors(text, context):
    """Apply all preprocessors in order"""
    for processor in PREPROCESSORS:
        text = processor(text, context)
    return text
