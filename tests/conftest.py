"""Shared test fixtures for the diagram block pipeline."""

import django
import pypandoc
import pytest
from bs4 import BeautifulSoup
from django.conf import settings

if not settings.configured:
    settings.configure(
        INSTALLED_APPS=["diagrams"],
        TEMPLATES=[
            {
                "BACKEND": "django.template.backends.django.DjangoTemplates",
                "APP_DIRS": True,
            }
        ],
    )
    django.setup()

from diagrams.markdown import encoding  # noqa: E402
from diagrams.markdown.blocks import AttributeList, BlockContext, DiagramBlock, StyleShorthand  # noqa: E402

DIAGRAM_SRC = """@startuml
alice -> bob
@enduml"""
LOCAL_URL = "http://localhost:8080"
ENCODED_DIAGRAM = encoding.encode(DIAGRAM_SRC)


def _pandoc_available():
    try:
        pypandoc.get_pandoc_version()
    except OSError:
        return False
    return True


requires_pandoc = pytest.mark.skipif(not _pandoc_available(), reason="pandoc binary not installed")


def diagram_document(doc_attrs=(), block_attrs=(), style_modifiers="", delimiter="----"):
    """Markdown document holding a single PlantUML block."""
    attrlist = ",".join(["plantuml" + style_modifiers, *block_attrs])
    return "\n".join(["", *doc_attrs, f"[{attrlist}]", delimiter, DIAGRAM_SRC, delimiter, ""])


def make_block(attrlist="plantuml", source=DIAGRAM_SRC, context=BlockContext.LISTING, title=None):
    attributes = AttributeList.parse(attrlist)
    return DiagramBlock(
        name=StyleShorthand.parse(attributes.style).name,
        source=source,
        context=context,
        attributes=attributes,
        title=title,
    )


def to_soup(html):
    return BeautifulSoup(html, "html.parser")


@pytest.fixture(autouse=True)
def no_server_url_env(monkeypatch):
    """Keep the process-wide default server URL out of every test unless set explicitly."""
    monkeypatch.delenv("PLANTUML_SERVER_URL", raising=False)
