"""Post loading for Inkwell.

This module turns the files in the posts directory into Post records:
each file is split into front matter and body, the body is rendered to
HTML, and the results are sorted by date.

Key classes:
- Post: Immutable record for one blog post.
- PostFileLoader: Discovers post source files.
- PostBuilder: Builds a Post from one source file.
- ContentProcessor: Loads and sorts every post of a site.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .collections import PostCollection
from .errors import ParseError, ValidationError
from .frontmatter import parse_front_matter
from .protocols import ContentRenderer
from .renderers import MarkdownRenderer
from .utils import to_utc


@dataclass(frozen=True)
class Post:
    """One blog post.

    Attributes:
        name: Source file name without extension; unique per site.
        url: Canonical path, ``/posts/{name}``.
        content: Rendered HTML body.
        title: Post title.
        date: Publication instant in UTC.
        description: Short summary for meta tags and feeds.
        hidden: Whether the post is left out of the index and feeds.
        path: Source file, if the post was read from disk.
    """

    name: str
    url: str
    content: str
    title: str
    date: datetime
    description: str
    hidden: bool = False
    path: Path | None = None


def post_url(name: str) -> str:
    """Return the canonical URL path for a post name."""
    return f"/posts/{name}"


class PostFileLoader:
    """Discovers post source files in a directory.

    Every regular file counts as a post except dotfiles. Files are
    returned in name order so that builds are reproducible.

    Attributes:
        posts_dir: Directory containing post sources.
    """

    def __init__(self, posts_dir: Path):
        self.posts_dir = posts_dir

    def iter_files(self) -> list[Path]:
        """List post source files.

        Raises:
            FileNotFoundError: If the posts directory does not exist.
        """
        if not self.posts_dir.is_dir():
            raise FileNotFoundError(f"Expected posts directory at {self.posts_dir}")
        return [
            path
            for path in sorted(self.posts_dir.iterdir())
            if path.is_file() and not path.name.startswith(".")
        ]


class PostBuilder:
    """Builds Post objects from source files.

    Attributes:
        renderer: Renders post bodies to HTML.
    """

    def __init__(self, renderer: ContentRenderer | None = None):
        self.renderer = renderer or MarkdownRenderer()

    def build(self, path: Path) -> Post:
        """Build a Post from a source file.

        Args:
            path: Path to the post file.

        Returns:
            Post with rendered content and a UTC date.

        Raises:
            ParseError: If the file is not UTF-8 or the front matter is
                malformed.
            ValidationError: If required metadata is missing or invalid.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(path, "Post is not valid UTF-8", exc) from exc
        return self.build_from_text(path.stem, text, path)

    def build_from_text(self, name: str, text: str, path: Path | None = None) -> Post:
        """Build a Post from raw file text."""
        meta, body = parse_front_matter(text, path)
        try:
            date = to_utc(meta.date)
        except (TypeError, ValueError) as exc:
            raise ValidationError(path, f"Invalid date {meta.date!r}: {exc}", exc) from exc

        return Post(
            name=name,
            url=post_url(name),
            content=self.renderer.render(body),
            title=meta.title,
            date=date,
            description=meta.description,
            hidden=meta.hidden,
            path=path,
        )


class ContentProcessor:
    """Loads every post of a site into a sorted collection.

    Attributes:
        posts_dir: Directory containing post sources.
    """

    def __init__(
        self,
        posts_dir: Path,
        loader: PostFileLoader | None = None,
        builder: PostBuilder | None = None,
    ):
        self.posts_dir = posts_dir
        self._loader = loader or PostFileLoader(posts_dir)
        self._builder = builder or PostBuilder()

    def load(self) -> PostCollection:
        """Load all posts, oldest first.

        The first malformed post aborts loading; nothing is skipped.

        Returns:
            PostCollection sorted ascending by date. Posts with equal dates
            keep their file name order.
        """
        posts = [self._builder.build(path) for path in self._loader.iter_files()]
        return PostCollection(posts).chronological()
