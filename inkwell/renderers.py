"""Markdown rendering for Inkwell.

Converts post bodies to HTML with mistune. Raw HTML passes through, bare
URLs are linked, footnotes get their own section, and text receives
typographic quotes and dashes. Code fences are highlighted with Pygments,
except the site's custom language, which goes to an external Highlighter.

Key classes:
- _PostHTMLRenderer: mistune renderer with heading ids and code highlighting.
- MarkdownRenderer: Renders a Markdown body to an HTML fragment.
"""

from __future__ import annotations

import re

import mistune
import smartypants
from mistune.util import escape, unescape
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .highlight import NullHighlighter
from .protocols import Highlighter
from .utils import escape_html

MARKDOWN_PLUGINS = ["strikethrough", "footnotes", "table", "url"]

# Quotes, backticks, "--" en dash, "---" em dash, ellipses; Unicode output.
SMARTYPANTS_ATTR = smartypants.Attr.set2 | smartypants.Attr.u


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text, possibly containing inline HTML.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


def _plain_code_block(code: str, lang: str | None) -> str:
    lang_class = f' class="language-{escape_html(lang)}"' if lang else ""
    return f"<pre><code{lang_class}>{escape_html(code)}</code></pre>\n"


class _PostHTMLRenderer(mistune.HTMLRenderer):
    """mistune renderer with typography, heading ids and code highlighting.

    Attributes:
        highlighter: Collaborator for the custom language.
        highlight_language: Code fence tag routed to the highlighter.
    """

    def __init__(self, highlighter: Highlighter, highlight_language: str):
        super().__init__(escape=False)
        self.highlighter = highlighter
        self.highlight_language = highlight_language
        self._heading_id_counts: dict[str, int] = {}

    def text(self, text: str) -> str:
        # Escape first so a literal "<" is not mistaken for a tag. Quotes stay
        # unescaped for smartypants to educate.
        escaped = escape(unescape(text), quote=False)
        return smartypants.smartypants(escaped, SMARTYPANTS_ATTR)

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading with a unique auto-generated id."""
        base_id = _generate_heading_id(text)

        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id

        if not heading_id:
            return f"<h{level}>{text}</h{level}>\n"
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block.

        Args:
            code: The code content.
            info: Fence info string; its first word is the language tag.

        Returns:
            Highlighted HTML, or an escaped plain block if no highlighting
            applies or highlighting fails.
        """
        lang = info.split(None, 1)[0] if info and info.strip() else None

        if lang and lang == self.highlight_language:
            markup = self.highlighter.highlight(code)
            if markup is not None:
                return f"<pre>{markup}</pre>\n"
            return _plain_code_block(code, lang)

        if lang:
            try:
                lexer = get_lexer_by_name(lang)
            except ClassNotFound:
                return _plain_code_block(code, lang)
            try:
                formatter = HtmlFormatter(cssclass="highlight")
                return highlight(code, lexer, formatter)
            except Exception as exc:
                print(f"Highlighting {lang} code failed ({exc}); leaving code plain.")
        return _plain_code_block(code, lang)


class MarkdownRenderer:
    """Renders Markdown post bodies to HTML fragments.

    Attributes:
        highlighter: Collaborator for the custom language.
        highlight_language: Code fence tag routed to the highlighter.
    """

    def __init__(
        self,
        highlighter: Highlighter | None = None,
        highlight_language: str = "typ",
    ):
        self.highlighter = highlighter or NullHighlighter()
        self.highlight_language = highlight_language

    def render(self, content: str) -> str:
        """Render Markdown content to HTML.

        Args:
            content: Markdown source.

        Returns:
            Rendered HTML fragment.
        """
        renderer = _PostHTMLRenderer(self.highlighter, self.highlight_language)
        markdown = mistune.create_markdown(renderer=renderer, plugins=MARKDOWN_PLUGINS)
        return markdown(content)
