"""Tests for the PlantUML text encoding and directive handling."""

import zlib

import pytest

from diagrams.markdown import encoding

from conftest import DIAGRAM_SRC


# ---------------------------------------------------------------------------
# encode / decode
# ---------------------------------------------------------------------------


class TestEncode:
    @pytest.mark.parametrize(
        "source, expected",
        [
            ("Bob -> Alice : hello", "SyfFKj2rKt3CoKnELR1Io4ZDoSa70000"),
            ("", "0m00"),
        ],
    )
    def test_known_server_payloads(self, source, expected):
        assert encoding.encode(source) == expected

    def test_deterministic(self):
        assert encoding.encode(DIAGRAM_SRC) == encoding.encode(DIAGRAM_SRC)

    def test_different_sources_differ(self):
        assert encoding.encode(DIAGRAM_SRC) != encoding.encode(DIAGRAM_SRC.replace("bob", "carol"))

    def test_uses_url_safe_alphabet(self):
        payload = encoding.encode(DIAGRAM_SRC)
        assert payload
        assert set(payload) <= set(encoding.ALPHABET)

    def test_length_multiple_of_four(self):
        for source in ["", "a", "ab", DIAGRAM_SRC]:
            assert len(encoding.encode(source)) % 4 == 0

    def test_raw_deflate_without_zlib_header(self):
        data = encoding.deflate(DIAGRAM_SRC)
        assert zlib.decompress(data, -15).decode("utf-8") == DIAGRAM_SRC

    def test_decode_reverses_encode(self):
        source = "@startuml\nAlice -> Bob : héllo ✓\n@enduml"
        assert encoding.decode(encoding.encode(source)) == source

    def test_encode64_groups_of_three_bytes(self):
        # 0x00 0x10 0x83 -> 000000 000001 000010 000011
        assert encoding.encode64(b"\x00\x10\x83") == "0123"

    def test_encode64_pads_partial_group(self):
        assert encoding.encode64(b"\xff") == "_m00"

    def test_decode64_rejects_bad_length(self):
        with pytest.raises(ValueError, match="multiple of 4"):
            encoding.decode64("abc")

    def test_decode64_rejects_unknown_character(self):
        with pytest.raises(ValueError, match="Invalid character"):
            encoding.decode64("ab+/")


# ---------------------------------------------------------------------------
# directives
# ---------------------------------------------------------------------------


class TestDirectives:
    def test_detects_uml_pair(self):
        assert encoding.has_directives(DIAGRAM_SRC) is True
        assert encoding.has_directives(DIAGRAM_SRC, "uml") is True

    def test_wrong_kind(self):
        assert encoding.has_directives(DIAGRAM_SRC, "dot") is False

    def test_plain_source(self):
        assert encoding.has_directives("alice -> bob") is False

    def test_start_without_end(self):
        assert encoding.has_directives("@startuml\nalice -> bob") is False

    def test_mismatched_pair(self):
        assert encoding.has_directives("@startuml\nalice -> bob\n@enddot") is False

    def test_surrounding_whitespace_allowed(self):
        assert encoding.has_directives("\n@startdot\ndigraph { a -> b }\n@enddot\n", "dot") is True

    def test_start_directive_with_name(self):
        assert encoding.has_directives("@startuml(id=first)\nA -> B\n@enduml") is True

    def test_empty_diagram(self):
        assert encoding.has_directives("@startditaa\n@endditaa", "ditaa") is True

    def test_directives_in_the_middle_do_not_count(self):
        source = "title demo\n@startuml\nalice -> bob\n@enduml"
        assert encoding.has_directives(source) is False

    def test_wrap(self):
        assert encoding.wrap_directives("a -> b", "dot") == "@startdot\na -> b\n@enddot"
