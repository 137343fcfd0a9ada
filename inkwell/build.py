"""Site building functionality for Inkwell.

This module contains the core logic for building the blog from its source
directories. It reads and renders every post, renders the index page and
feeds, copies passthrough files and writes everything to the output
directory.

Every build recomputes everything from the sources; nothing is cached
between builds. Any malformed post aborts the build before the output
directory is touched.

Key functions:
- build_site: Main function to build the entire site.
- create_highlighter: Highlighter for the site's custom code language.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from .assets import AssetPipeline
from .collections import PostCollection
from .config import SiteConfig, load_config
from .content import ContentProcessor, Post, PostBuilder
from .feeds import FeedBuilder
from .highlight import NullHighlighter, SubprocessHighlighter
from .protocols import Highlighter
from .renderers import MarkdownRenderer
from .templates import TemplateEngine
from .utils import ensure_clean_dir, ensure_dir

HEALTH_FILENAME = "health"
HEALTH_CONTENT = "OK"


@dataclass
class BuildResult:
    """Result of a site build operation.

    Attributes:
        posts: All posts, oldest first, hidden ones included.
        output_dir: Directory where the site was built.
        files: Every file written, in write order.
    """

    posts: PostCollection
    output_dir: Path
    files: list[Path] = field(default_factory=list)


def create_highlighter(project_root: Path, config: SiteConfig) -> Highlighter:
    """Return the highlighter configured for the site."""
    if not config.highlight_command:
        return NullHighlighter()
    return SubprocessHighlighter(config.highlight_command, project_root=project_root)


def build_site(
    project_root: Path,
    config: SiteConfig | None = None,
    clean_output: bool = False,
    output_dir_override: Path | None = None,
    highlighter: Highlighter | None = None,
    now: datetime | None = None,
) -> BuildResult:
    """Build the entire static site.

    Args:
        project_root: Root directory of the project.
        config: Site configuration; loaded from the project when omitted.
        clean_output: Whether to wipe the output directory before writing.
            Otherwise files are overwritten in place.
        output_dir_override: Optional path to write the build output instead
            of the configured output directory.
        highlighter: Optional highlighter for the custom code language.
        now: Build time, used for the feed copyright year.

    Returns:
        BuildResult containing all posts, the output directory and the
        files written.

    Raises:
        ParseError: If a post's front matter is malformed.
        ValidationError: If a post lacks required metadata.
        RenderError: If a page template fails.
        OSError: If reading sources or writing output fails.
    """
    config = config or load_config(project_root)
    output_dir = output_dir_override or (project_root / config.output_dir)

    renderer = MarkdownRenderer(
        highlighter or create_highlighter(project_root, config),
        highlight_language=config.highlight_language,
    )
    posts = ContentProcessor(
        project_root / config.posts_dir, builder=PostBuilder(renderer)
    ).load()

    engine = TemplateEngine(config, project_root / config.templates_dir)
    pages = {post.name: engine.render_post(post) for post in posts}
    index_html = engine.render_index(posts)

    stylesheet = project_root / config.stylesheet
    if not stylesheet.is_file():
        raise FileNotFoundError(f"Expected stylesheet at {stylesheet}")

    if clean_output:
        ensure_clean_dir(output_dir)
    else:
        ensure_dir(output_dir)

    files: list[Path] = []
    files.append(_write_verification(output_dir, config))
    files.extend(AssetPipeline(project_root, output_dir, config).run())

    posts_root = output_dir / "posts"
    ensure_dir(posts_root)
    for post in posts:
        files.append(_write_post(posts_root, post, pages[post.name]))

    files.extend(FeedBuilder(config, now=now).write(output_dir, posts))

    index_path = output_dir / "index.html"
    index_path.write_text(index_html, encoding="utf-8")
    files.append(index_path)

    health_path = output_dir / HEALTH_FILENAME
    health_path.write_text(HEALTH_CONTENT, encoding="utf-8")
    files.append(health_path)

    return BuildResult(posts=posts, output_dir=output_dir, files=files)


def _write_verification(output_dir: Path, config: SiteConfig) -> Path:
    """Write the site verification marker file."""
    token = config.ahrefs_token
    path = output_dir / f"ahrefs_{token}"
    path.write_text(f"ahrefs-site-verification_{token}", encoding="utf-8")
    return path


def _write_post(posts_root: Path, post: Post, rendered: str) -> Path:
    """Write a rendered post page to ``posts/{name}/index.html``."""
    target_dir = posts_root / post.name
    ensure_dir(target_dir)
    html_path = target_dir / "index.html"
    html_path.write_text(rendered, encoding="utf-8")
    return html_path
