"""Markdown + LaTeX rendering for question text shown in the player and creator preview.

Question text is converted to HTML with markdown-it and math is typeset by
MathJax inside the ``QWebEngineView`` at display time, so stored quizzes keep
plain markup and never embed rendered output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import html

from markdown_it import MarkdownIt

from quizzer.constants.about import APP_NAME

_MATHJAX_SCRIPT = (
    "https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-mml-chtml.js"
)

_LIGHT_TEXT = "#1b1b1b"
_DARK_TEXT = "#f5f7ff"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a markdown string into an HTML fragment."""

        sanitized = (markdown_text or "").strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def wrap_with_mathjax(
        self,
        body_html: str,
        title: str = APP_NAME,
        font_size: int = 14,
        dark_mode: bool = False,
        image_url: str | None = None,
    ) -> str:
        """Wrap a fragment inside a minimal HTML document that loads MathJax."""

        text_color = _DARK_TEXT if dark_mode else _LIGHT_TEXT
        image_html = ""
        if image_url:
            image_html = f'<img class="question-image" src="{html.escape(image_url, quote=True)}" alt="" />'
        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>{html.escape(title)}</title>
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 1rem; background: transparent; color: {text_color}; }}
      .question-html {{ font-size: {font_size}pt; line-height: 1.5; }}
      .question-image {{ display: block; max-width: 100%; max-height: 16rem; margin: 0 auto 1rem auto; border-radius: 0.5rem; }}
    </style>
    <script>
      window.MathJax = {{ tex: {{ inlineMath: [['$','$']], displayMath: [['$$','$$']] }}, svg: {{ fontCache: 'global' }} }};
    </script>
    <script defer src=\"{_MATHJAX_SCRIPT}\"></script>
  </head>
  <body>
    {image_html}
    <div class=\"question-html\">{body_html}</div>
  </body>
</html>"""

    def render_full_document(
        self,
        markdown_text: str,
        title: str = APP_NAME,
        font_size: int = 14,
        dark_mode: bool = False,
        image_url: str | None = None,
    ) -> str:
        """Convenience wrapper to render markdown and embed MathJax."""

        fragment = self.render_fragment(markdown_text)
        return self.wrap_with_mathjax(
            fragment,
            title=title,
            font_size=font_size,
            dark_mode=dark_mode,
            image_url=image_url,
        )


# Shared instance; only the Qt thread renders.
renderer = MarkdownMathRenderer()
