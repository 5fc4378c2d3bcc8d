# diagrams/markdown/encoding.py
"""
PlantUML text encoding used in rendering server URLs.

The server expects the diagram source as:
    UTF-8 bytes → raw deflate (no zlib header or checksum) → base64 variant
    using the alphabet 0-9 A-Z a-z - _

Every 3 bytes become 4 characters. A trailing group of 1 or 2 bytes is
zero-padded to 3 bytes, so the payload length is always a multiple of 4.
"""

import re
import zlib
from typing import Optional

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz-_"
_ALPHABET_INDEX = {char: index for index, char in enumerate(ALPHABET)}

# "@startuml ... @enduml" style pair around the whole source
_DIRECTIVE_PAIR_RE = re.compile(
    r"\A\s*@start(?P<kind>[a-z]+)\b[^\n]*\n(?:.*\n)?[ \t]*@end(?P=kind)\s*\Z",
    re.DOTALL,
)


def _append_3_bytes(b1: int, b2: int, b3: int) -> str:
    return (
        ALPHABET[b1 >> 2]
        + ALPHABET[((b1 & 0x3) << 4) | (b2 >> 4)]
        + ALPHABET[((b2 & 0xF) << 2) | (b3 >> 6)]
        + ALPHABET[b3 & 0x3F]
    )


def deflate(source: str) -> bytes:
    """Raw deflate of the UTF-8 source at maximum compression."""
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(source.encode("utf-8")) + compressor.flush()


def encode64(data: bytes) -> str:
    result = []
    for i in range(0, len(data), 3):
        chunk = data[i : i + 3].ljust(3, b"\x00")
        result.append(_append_3_bytes(chunk[0], chunk[1], chunk[2]))
    return "".join(result)


def decode64(payload: str) -> bytes:
    if len(payload) % 4:
        raise ValueError(f"Encoded payload length {len(payload)} is not a multiple of 4")

    data = bytearray()
    for i in range(0, len(payload), 4):
        try:
            c1, c2, c3, c4 = (_ALPHABET_INDEX[c] for c in payload[i : i + 4])
        except KeyError as exc:
            raise ValueError(f"Invalid character in encoded payload: {exc.args[0]!r}") from exc
        data.append(((c1 << 2) | (c2 >> 4)) & 0xFF)
        data.append(((c2 << 4) | (c3 >> 2)) & 0xFF)
        data.append(((c3 << 6) | c4) & 0xFF)
    return bytes(data)


def encode(source: str) -> str:
    """
    Encode diagram source for a PlantUML server URL.

    The result is deterministic: the same source always gives the same payload.
    """
    return encode64(deflate(source))


def decode(payload: str) -> str:
    """
    Reverse of encode().

    Padding bytes added by encode64 sit after the end of the deflate stream
    and are ignored by the decompressor.
    """
    decompressor = zlib.decompressobj(-15)
    return decompressor.decompress(decode64(payload)).decode("utf-8")


def has_directives(source: str, kind: Optional[str] = None) -> bool:
    """
    Check whether the source is enclosed in an @start<kind> / @end<kind> pair.

    Without a kind, any matching pair counts (@startmindmap/@endmindmap, ...).
    """
    match = _DIRECTIVE_PAIR_RE.match(source)
    if not match:
        return False
    return kind is None or match.group("kind") == kind


def wrap_directives(source: str, kind: str) -> str:
    return f"@start{kind}\n{source}\n@end{kind}"
