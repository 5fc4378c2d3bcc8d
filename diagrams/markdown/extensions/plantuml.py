# diagrams/markdown/extensions/plantuml.py
"""
Diagram block extension: PlantUML, Ditaa and Graphviz.

Each diagram type has a block processor registered for the "listing" and
"literal" contexts. A processor turns a DiagramBlock into:

Image block, when a server URL and a supported format resolve:
    <div id="myId" class="imageblock sequence plantuml">
      <div class="content">
        <img src="{server}/{png|svg}/{encoded source}" alt="diagram">
      </div>
      <div class="title">Title</div>
    </div>

Error block otherwise, echoing the source so the reader sees what failed:
    <div class="listingblock plantuml-error">
      <div class="content"><pre>@startuml ...</pre></div>
    </div>
"""

import logging
from typing import Mapping, Optional

from bs4 import BeautifulSoup

from .. import encoding
from ..blocks import (
    BlockContext,
    DiagramBlock,
    DiagramError,
    RenderRequest,
    resolve_output_format,
    resolve_server_url,
)
from ..config import get_default_server_url
from ..registry import BlockRegistry

logger = logging.getLogger(__name__)

DEFAULT_ALT = "diagram"
ERROR_ROLE = "plantuml-error"


class DiagramBlockProcessor:
    """Base block processor for diagrams rendered by a PlantUML server."""

    name = None
    # Directive kind, as in @start<kind> / @end<kind>
    directive = None
    contexts = (BlockContext.LISTING, BlockContext.LITERAL)

    def prepare_source(self, source: str) -> str:
        """Wrap the source in @start/@end directives unless it already has them."""
        if encoding.has_directives(source, self.directive):
            return source
        return encoding.wrap_directives(source, self.directive)

    def encode(self, source: str) -> str:
        return encoding.encode(self.prepare_source(source))

    def build_request(
        self,
        block: DiagramBlock,
        document_attributes: Optional[Mapping[str, str]] = None,
    ) -> RenderRequest:
        """Raises FormatError or ServerUrlMissingError."""
        output_format = resolve_output_format(block)
        server_url = resolve_server_url(
            block, document_attributes, default=get_default_server_url()
        )
        return RenderRequest(
            server_url=server_url,
            output_format=output_format,
            payload=self.encode(block.source),
        )

    def process(
        self,
        block: DiagramBlock,
        document_attributes: Optional[Mapping[str, str]] = None,
    ) -> str:
        try:
            request = self.build_request(block, document_attributes)
        except DiagramError as exc:
            logger.warning(f"Cannot render {self.name} block: {exc}")
            return self.error_block(block)

        logger.debug(f"{self.name} block rendered as {request.url}")
        return self.image_block(block, request)

    def image_block(self, block: DiagramBlock, request: RenderRequest) -> str:
        soup = BeautifulSoup("", "html.parser")

        container = soup.new_tag("div")
        if block.id:
            container["id"] = block.id
        container["class"] = list(dict.fromkeys(["imageblock", *block.roles, self.name]))

        content = soup.new_tag("div")
        content["class"] = ["content"]
        img = soup.new_tag("img")
        img["src"] = request.url
        img["alt"] = block.target or DEFAULT_ALT
        for dimension in ("width", "height"):
            value = block.attributes.named.get(dimension)
            if value:
                img[dimension] = value
        content.append(img)
        container.append(content)

        self._append_title(soup, container, block)
        return str(container)

    def error_block(self, block: DiagramBlock) -> str:
        soup = BeautifulSoup("", "html.parser")

        container = soup.new_tag("div")
        if block.id:
            container["id"] = block.id
        container["class"] = [f"{BlockContext(block.context).value}block", ERROR_ROLE]

        self._append_title(soup, container, block, before=True)

        content = soup.new_tag("div")
        content["class"] = ["content"]
        pre = soup.new_tag("pre")
        pre.string = block.source
        content.append(pre)
        container.append(content)
        return str(container)

    @staticmethod
    def _append_title(soup, container, block: DiagramBlock, before: bool = False):
        title = block.block_title
        if not title:
            return
        title_div = soup.new_tag("div")
        title_div["class"] = ["title"]
        title_div.string = title
        if before:
            container.insert(0, title_div)
        else:
            container.append(title_div)


class PlantUMLBlockProcessor(DiagramBlockProcessor):
    name = "plantuml"
    directive = "uml"

    def prepare_source(self, source: str) -> str:
        # Any @start<kind> pair is a complete PlantUML diagram (mindmap, gantt, ...)
        if encoding.has_directives(source):
            return source
        return encoding.wrap_directives(source, self.directive)


class DitaaBlockProcessor(DiagramBlockProcessor):
    name = "ditaa"
    directive = "ditaa"


class GraphvizBlockProcessor(DiagramBlockProcessor):
    name = "graphviz"
    directive = "dot"


PROCESSORS = [
    PlantUMLBlockProcessor,
    DitaaBlockProcessor,
    GraphvizBlockProcessor,
]


def register(registry: Optional[BlockRegistry] = None) -> BlockRegistry:
    """
    Register every diagram block processor for listing and literal blocks.

    Safe to call more than once on the same registry.
    """
    registry = registry if registry is not None else BlockRegistry()
    for processor_class in PROCESSORS:
        processor = processor_class()
        registry.register_block(processor.name, processor, processor.contexts)
    return registry
