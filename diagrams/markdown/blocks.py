# diagrams/markdown/blocks.py
"""
Block model shared by the diagram preprocessor and the diagram extensions.

A diagram block is written as an attribute list followed by a delimited block:

    .Optional title
    [plantuml#diagram-id.role, target, format, name=value]
    ----
    @startuml
    alice -> bob
    @enduml
    ----

The first positional attribute is the block style. It names the diagram type
and may carry shorthands: #id and .role (repeatable).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional

SERVER_URL_ATTRIBUTE = "plantuml-server-url"
SUPPORTED_FORMATS = ("png", "svg")
DEFAULT_FORMAT = "png"

TARGET_INDEX = 1
FORMAT_INDEX = 2


class BlockContext(str, Enum):
    LISTING = "listing"
    LITERAL = "literal"


class DiagramError(ValueError):
    """A diagram block cannot be turned into an image reference."""


class FormatError(DiagramError):
    def __init__(self, output_format: str):
        self.output_format = output_format
        super().__init__(
            f"Unsupported output format '{output_format}', "
            f"expected one of: {', '.join(SUPPORTED_FORMATS)}"
        )


class ServerUrlMissingError(DiagramError):
    def __init__(self):
        super().__init__(
            f"No PlantUML server URL: set :{SERVER_URL_ATTRIBUTE}: on the block or "
            f"document, or configure PLANTUML_SERVER_URL"
        )


def _split_attrlist(text: str) -> List[str]:
    """Split on commas that are not inside single or double quotes."""
    items = []
    current = []
    quote = None
    for char in text:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
            current.append(char)
        elif char == ",":
            items.append("".join(current))
            current = []
        else:
            current.append(char)
    items.append("".join(current))
    return [item.strip() for item in items]


def _unquote(value: str) -> str:
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


@dataclass
class AttributeList:
    positional: List[str] = field(default_factory=list)
    named: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def parse(cls, text: str) -> "AttributeList":
        """
        Parse "style, positional, name=value, name='quoted, value'".

        Empty items keep their slot so "plantuml,,svg" puts svg in slot 3.
        """
        attrs = cls()
        if not text or not text.strip():
            return attrs

        for item in _split_attrlist(text):
            if item[:1] not in ("'", '"') and "=" in item:
                name, value = item.split("=", 1)
                name = name.strip()
                if name:
                    attrs.named[name] = _unquote(value)
                    continue
            attrs.positional.append(_unquote(item))
        return attrs

    def get(self, name: str, index: Optional[int] = None, default=None):
        """Named value first, then the positional slot (0-based index)."""
        if name in self.named:
            return self.named[name]
        if index is not None and index < len(self.positional):
            return self.positional[index]
        return default

    @property
    def style(self) -> str:
        return self.positional[0] if self.positional else ""


@dataclass(frozen=True)
class StyleShorthand:
    name: str
    id: Optional[str] = None
    roles: tuple = ()

    @classmethod
    def parse(cls, style: str) -> "StyleShorthand":
        """Split "plantuml#myId.sequence" into its parts."""
        name_end = len(style)
        for marker in "#.":
            pos = style.find(marker)
            if pos != -1:
                name_end = min(name_end, pos)

        block_id = None
        roles = []
        marker = None
        value = []

        def flush():
            nonlocal block_id
            text = "".join(value).strip()
            if not marker or not text:
                return
            if marker == "#":
                block_id = text
            else:
                roles.append(text)

        for char in style[name_end:]:
            if char in "#.":
                flush()
                marker = char
                value = []
            else:
                value.append(char)
        flush()

        return cls(
            name=style[:name_end].strip(),
            id=block_id,
            roles=tuple(roles),
        )


@dataclass
class DiagramBlock:
    """A diagram block as recognized in the source document."""

    name: str
    source: str
    context: BlockContext = BlockContext.LISTING
    attributes: AttributeList = field(default_factory=AttributeList)
    title: Optional[str] = None

    @property
    def shorthand(self) -> StyleShorthand:
        return StyleShorthand.parse(self.attributes.style)

    @property
    def id(self) -> Optional[str]:
        return self.attributes.named.get("id") or self.shorthand.id

    @property
    def roles(self) -> List[str]:
        roles = list(self.shorthand.roles)
        roles.extend(self.attributes.named.get("role", "").split())
        return list(dict.fromkeys(roles))

    @property
    def target(self) -> Optional[str]:
        return self.attributes.get("target", TARGET_INDEX) or None

    @property
    def block_title(self) -> Optional[str]:
        return self.attributes.named.get("title") or self.title

    @property
    def output_format(self) -> str:
        """
        Requested output format, png when none is given.

        Not validated here, see resolve_output_format().
        """
        return self.attributes.get("format", FORMAT_INDEX) or DEFAULT_FORMAT


@dataclass(frozen=True)
class RenderRequest:
    server_url: str
    output_format: str
    payload: str

    @property
    def url(self) -> str:
        return f"{self.server_url}/{self.output_format}/{self.payload}"


def resolve_output_format(block: DiagramBlock) -> str:
    output_format = block.output_format
    if output_format not in SUPPORTED_FORMATS:
        raise FormatError(output_format)
    return output_format


def resolve_server_url(
    block: DiagramBlock,
    document_attributes: Optional[Mapping[str, str]] = None,
    default: Optional[str] = None,
) -> str:
    """
    Server URL precedence: block attribute > document attribute > default.

    Blank values are skipped. A trailing slash is dropped so the URL joins
    cleanly with the format path.
    """
    document_attributes = document_attributes or {}
    candidates = (
        block.attributes.named.get(SERVER_URL_ATTRIBUTE),
        document_attributes.get(SERVER_URL_ATTRIBUTE),
        default,
    )
    for server_url in candidates:
        server_url = (server_url or "").strip()
        if server_url:
            return server_url.rstrip("/")
    raise ServerUrlMissingError()
