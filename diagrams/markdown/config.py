import os

from django.conf import settings

SERVER_URL_SETTING = "PLANTUML_SERVER_URL"


def get_pandoc_config():
    """
    Configuration for pypandoc/Pandoc markdown rendering.

    Diagram blocks never reach Pandoc: the diagram preprocessor swaps them for
    placeholder paragraphs and the restore postprocessor puts the generated
    markup back into Pandoc's HTML output.
    """
    return {
        "extra_args": [
            # Enable Pandoc markdown extensions (all in --from argument)
            "--from=markdown+autolink_bare_uris+strikeout+superscript+subscript+task_lists+smart+pipe_tables+definition_lists+footnotes+fenced_code_blocks+fenced_code_attributes+raw_html+header_attributes",
            # Math rendering with MathJax
            "--mathjax",
        ],
        "filters": [],
    }


def get_default_server_url():
    """
    Process-wide default PlantUML server URL.

    The PLANTUML_SERVER_URL Django setting wins over the environment variable
    of the same name. Returns None when neither is set.
    """
    url = None
    if settings.configured:
        url = getattr(settings, SERVER_URL_SETTING, None)
    return url or os.environ.get(SERVER_URL_SETTING) or None
