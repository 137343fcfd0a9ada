"""Page rendering for Inkwell.

This module uses Jinja2 to turn posts into standalone HTML documents. Both
page kinds extend one skeleton (``base.html.jinja``) that is assembled from
small partials: feed links in the head, the header, the footer and the
live reload client.

Templates are looked up first in the project's ``templates/`` directory
and then in the templates bundled with the package, so a site can override
any of them by name.

Key class:
- TemplateEngine: Renders the index page and post pages.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

from .collections import PostCollection
from .config import SiteConfig
from .content import Post
from .errors import RenderError
from .utils import format_iso_instant, format_readable_date

BUNDLED_TEMPLATES_DIR = Path(__file__).parent / "templates"
INDEX_TEMPLATE = "index.html.jinja"
POST_TEMPLATE = "post.html.jinja"


def _format_error_message(exc: Exception) -> str:
    """Format a template exception into a user-friendly message."""
    error_type = type(exc).__name__
    lineno = getattr(exc, "lineno", None)
    if error_type == "TemplateSyntaxError" and lineno:
        return f"Template syntax error on line {lineno}: {exc}"
    if error_type == "UndefinedError":
        return f"Undefined variable: {exc}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {exc}"
    return f"{error_type}: {exc}"


class TemplateEngine:
    """Template rendering engine using Jinja2.

    Attributes:
        config: Site configuration exposed to templates as ``config``.
        env: Jinja2 environment.
    """

    def __init__(self, config: SiteConfig, templates_dir: Path | None = None):
        """Initialize the template engine.

        Args:
            config: Site configuration.
            templates_dir: Optional directory whose templates override the
                bundled ones.
        """
        self.config = config
        search_path = [BUNDLED_TEMPLATES_DIR]
        if templates_dir is not None and templates_dir.is_dir():
            search_path.insert(0, templates_dir)
        self.env = Environment(
            loader=FileSystemLoader(search_path),
            autoescape=select_autoescape(["html", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self.env.filters["date_iso"] = format_iso_instant
        self.env.filters["date_readable"] = format_readable_date
        self.env.globals["config"] = config

    def render_index(self, posts: Iterable[Post]) -> str:
        """Render the site index.

        Args:
            posts: All posts, oldest first; hidden ones are left out.

        Returns:
            Complete HTML document listing visible posts, newest first.
        """
        visible = PostCollection(posts).published().newest_first()
        return self.render(
            INDEX_TEMPLATE,
            og_type="website",
            title=self.config.title,
            description=self.config.description,
            url="/",
            posts=visible,
        )

    def render_post(self, post: Post) -> str:
        """Render the page for a single post.

        Args:
            post: Post to render.

        Returns:
            Complete HTML document for the post.

        Raises:
            RenderError: If the template fails.
        """
        return self.render(
            POST_TEMPLATE,
            source_path=post.path,
            og_type="article",
            title=f"{post.title} | {self.config.title}",
            description=post.description,
            url=post.url,
            post=post,
        )

    def render(
        self, template_name: str, source_path: Path | None = None, **context: Any
    ) -> str:
        """Render a named template with the skeleton's context.

        Args:
            template_name: Template to render.
            source_path: Source file blamed if rendering fails.
            **context: Template variables; ``url`` decides whether the page
                is the site root.

        Returns:
            Rendered document text.

        Raises:
            RenderError: If the template is missing or fails.
        """
        context.setdefault("is_root", context.get("url") == "/")
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except TemplateError as exc:
            raise RenderError(source_path, _format_error_message(exc), exc) from exc
