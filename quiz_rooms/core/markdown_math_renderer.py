"""Markdown rendering for question prompts and options.

Prompts may carry Markdown and ``$...$`` LaTeX. The server turns them into
HTML once per request and the room page typesets the math with MathJax, so
the stored documents stay plain text.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from markdown_it import MarkdownIt

EMPTY_PROMPT_HTML = "<p><em>No question text.</em></p>"


@dataclass(slots=True)
class MarkdownMathRenderer:
    """Converts markdown-with-math into HTML fragments."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Raw HTML in prompts is escaped unless enable_html is set.
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        """Render a prompt into a block-level HTML fragment."""
        sanitized = markdown_text.strip()
        if not sanitized:
            return EMPTY_PROMPT_HTML
        return self._markdown.render(sanitized)

    def render_inline(self, markdown_text: str) -> str:
        """Render an option label without wrapping paragraphs."""
        return self._markdown.renderInline(markdown_text.strip())


renderer = MarkdownMathRenderer()
