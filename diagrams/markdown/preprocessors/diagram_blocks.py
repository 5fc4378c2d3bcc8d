"""
Preprocessor that replaces diagram blocks with placeholders for generated markup.

Recognized forms:

    [plantuml#myId.sequence, myFile, svg]      listing block
    ----
    alice -> bob
    ----

    [ditaa]                                   literal block
    ....
    +---+
    ....

    ```graphviz, , svg                        fenced code, backticks = listing
    digraph { a -> b }
    ```

    ~~~plantuml                               fenced code, tildes = literal
    alice -> bob
    ~~~

An optional block title line (.Title) may precede the attribute line.

Document attributes are set by entries on lines of their own, in the header
or between blocks:

    :plantuml-server-url: http://localhost:8080
    :some-attribute!:                         (unset)

An entry applies to the blocks that follow it and is removed from the output.
A line inside a paragraph is text, not an entry. The "attributes" key of the
rendering context seeds the document attributes.
"""

import logging
import re
from typing import List, Optional, Tuple

from ..blocks import AttributeList, BlockContext, DiagramBlock, StyleShorthand
from ..extensions import get_default_registry
from ..stash import stash_block

logger = logging.getLogger(__name__)

_ATTRIBUTE_ENTRY_RE = re.compile(
    r"^:(?P<name>[A-Za-z0-9_][A-Za-z0-9_-]*)(?P<unset>!)?:(?:[ \t]+(?P<value>.*?))?[ \t]*$"
)
_BLOCK_TITLE_RE = re.compile(r"^\.(?P<title>[^\s.].*?)\s*$")
_BLOCK_ATTRS_RE = re.compile(r"^\[(?P<attrlist>[^\]]+)\]\s*$")
_DELIMITER_RE = re.compile(r"^(?P<delimiter>-{4,}|\.{4,})\s*$")
_FENCE_OPEN_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*(?P<info>[^`]*?)\s*$")
_FENCE_CLOSE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})\s*$")


def _delimiter_context(delimiter: str) -> BlockContext:
    return BlockContext.LISTING if delimiter.startswith("-") else BlockContext.LITERAL


def _fence_context(fence: str) -> BlockContext:
    return BlockContext.LISTING if fence.startswith("`") else BlockContext.LITERAL


def _find_fence_end(lines: List[str], start: int, fence: str) -> int:
    """Index of the closing fence line, or len(lines) for an unterminated block."""
    for index in range(start, len(lines)):
        match = _FENCE_CLOSE_RE.match(lines[index])
        if match:
            closing = match.group("fence")
            if closing[0] == fence[0] and len(closing) >= len(fence):
                return index
    return len(lines)


def _find_delimiter_end(lines: List[str], start: int, delimiter: str) -> int:
    for index in range(start, len(lines)):
        if lines[index].rstrip() == delimiter:
            return index
    return len(lines)


def _apply_attribute_entry(entry, attributes: dict):
    name = entry.group("name")
    if entry.group("unset"):
        attributes.pop(name, None)
    else:
        attributes[name] = entry.group("value") or ""


def _match_delimited_block(
    lines: List[str], index: int
) -> Optional[Tuple[Optional[str], AttributeList, str, int]]:
    """
    Match [.Title] / [attrlist] / delimiter starting at index.

    Returns (title, attributes, delimiter, index of first content line).
    """
    title = None
    title_match = _BLOCK_TITLE_RE.match(lines[index])
    if title_match:
        title = title_match.group("title")
        index += 1

    if index + 1 >= len(lines):
        return None
    attrs_match = _BLOCK_ATTRS_RE.match(lines[index])
    if not attrs_match:
        return None
    delimiter_match = _DELIMITER_RE.match(lines[index + 1])
    if not delimiter_match:
        return None

    return (
        title,
        AttributeList.parse(attrs_match.group("attrlist")),
        delimiter_match.group("delimiter"),
        index + 2,
    )


def process_diagram_blocks(text: str, context: dict) -> str:
    """
    Replace registered diagram blocks with placeholders.

    Args:
        text: Markdown text
        context: Rendering context. Optional keys:
            "registry": BlockRegistry to use instead of the default one
            "attributes": dict of document attributes

    Returns:
        Markdown with one placeholder paragraph per diagram block
    """
    registry = context.get("registry")
    if registry is None:
        registry = get_default_registry()
    attributes = dict(context.get("attributes") or {})

    lines = text.split("\n")
    output = []

    def substitute(processor, block: DiagramBlock):
        markup = processor.process(block, attributes)
        output.extend(["", stash_block(context, markup), ""])

    count = 0
    index = 0
    # Entries are only read at the start of a line group, never mid-paragraph
    at_line_group_start = True
    while index < len(lines):
        line = lines[index]

        if not line.strip():
            output.append(line)
            at_line_group_start = True
            index += 1
            continue

        entry = _ATTRIBUTE_ENTRY_RE.match(line) if at_line_group_start else None
        if entry:
            _apply_attribute_entry(entry, attributes)
            index += 1
            continue

        fence = _FENCE_OPEN_RE.match(line)
        if fence:
            end = _find_fence_end(lines, index + 1, fence.group("fence"))
            block_context = _fence_context(fence.group("fence"))
            block_attrs = AttributeList.parse(fence.group("info"))
            name = StyleShorthand.parse(block_attrs.style).name
            processor = registry.registered_for_block(name, block_context) if name else None

            if processor is None:
                # Not a diagram: copy the code block untouched
                output.extend(lines[index : end + 1])
            else:
                if end == len(lines):
                    logger.warning(f"Unterminated {name} block starting at line {index + 1}")
                block = DiagramBlock(
                    name=name,
                    source="\n".join(lines[index + 1 : end]),
                    context=block_context,
                    attributes=block_attrs,
                )
                substitute(processor, block)
                count += 1
            at_line_group_start = True
            index = end + 1
            continue

        delimited = _match_delimited_block(lines, index)
        if delimited:
            title, block_attrs, delimiter, content_start = delimited
            block_context = _delimiter_context(delimiter)
            name = StyleShorthand.parse(block_attrs.style).name
            processor = registry.registered_for_block(name, block_context)
            if processor is not None:
                end = _find_delimiter_end(lines, content_start, delimiter)
                if end == len(lines):
                    logger.warning(f"Unterminated {name} block starting at line {index + 1}")
                block = DiagramBlock(
                    name=name,
                    source="\n".join(lines[content_start:end]),
                    context=block_context,
                    attributes=block_attrs,
                    title=title,
                )
                substitute(processor, block)
                count += 1
                at_line_group_start = True
                index = end + 1
                continue

        output.append(line)
        at_line_group_start = False
        index += 1

    if count:
        logger.debug(f"Replaced {count} diagram block(s) with placeholders")
    return "\n".join(output)


def diagram_blocks_default(text: str, context: dict) -> str:
    """
    Default configuration for diagram_blocks.

    Register this in PREPROCESSORS.
    """
    return process_diagram_blocks(text, context)
