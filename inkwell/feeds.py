"""Feed generation for Inkwell.

Both syndication formats are rendered from one feedgen model built from the
visible posts: site title, description, canonical link, language,
copyright and author, plus one entry per post. Each format only differs in
its self link and its serialisation.

Classes:
    FeedFormat: Base class for a serialised feed format.
    RSSFeed: RSS 2.0 output.
    AtomFeed: Atom 1.0 output.
    FeedBuilder: Builds the shared model and writes every format.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from feedgen.feed import FeedGenerator

from . import __version__
from .collections import PostCollection
from .config import SiteConfig
from .content import Post
from .utils import join_root_url


class FeedFormat(ABC):
    """Abstract base class for feed formats.

    Subclasses name their output path and serialise a prepared model.
    """

    mime_type: str = ""

    @abstractmethod
    def path(self, config: SiteConfig) -> str:
        """Return the site path of this feed, e.g. '/rss.xml'."""
        ...

    @abstractmethod
    def serialize(self, feed: FeedGenerator) -> bytes:
        """Serialise the feed model in this format."""
        ...

    def render(self, feed: FeedGenerator, config: SiteConfig) -> str:
        """Point the model's self link at this format and serialise it.

        Args:
            feed: Shared feed model.
            config: Site configuration.

        Returns:
            Feed document text.
        """
        # feedgen takes the RSS channel link from the last entry.
        feed.link(
            [
                {
                    "href": join_root_url(config.base_url, self.path(config)),
                    "rel": "self",
                    "type": self.mime_type,
                },
                {"href": config.base_url, "rel": "alternate"},
            ],
            replace=True,
        )
        return self.serialize(feed).decode("utf-8")


class RSSFeed(FeedFormat):
    """RSS 2.0 feed."""

    mime_type = "application/rss+xml"

    def path(self, config: SiteConfig) -> str:
        return config.rss_path

    def serialize(self, feed: FeedGenerator) -> bytes:
        return feed.rss_str(pretty=True)


class AtomFeed(FeedFormat):
    """Atom 1.0 feed."""

    mime_type = "application/atom+xml"

    def path(self, config: SiteConfig) -> str:
        return config.atom_path

    def serialize(self, feed: FeedGenerator) -> bytes:
        return feed.atom_str(pretty=True)


class FeedBuilder:
    """Builds the feed model and renders it in every registered format.

    Attributes:
        config: Site configuration.
        formats: Feed formats to render.
        now: Build time; supplies the copyright year.
    """

    def __init__(
        self,
        config: SiteConfig,
        formats: Iterable[FeedFormat] | None = None,
        now: datetime | None = None,
    ):
        self.config = config
        self.formats = list(formats) if formats is not None else [RSSFeed(), AtomFeed()]
        self.now = now or datetime.now(timezone.utc)

    def author(self) -> dict[str, str]:
        return {
            "name": self.config.author,
            "email": self.config.email,
            "uri": self.config.base_url,
        }

    def build(self, posts: Iterable[Post]) -> FeedGenerator:
        """Build the shared feed model.

        Args:
            posts: Posts oldest first; hidden posts are skipped.

        Returns:
            feedgen model with one entry per visible post.
        """
        config = self.config
        visible = PostCollection(posts).published()

        feed = FeedGenerator()
        feed.id(config.base_url)
        feed.title(config.title)
        feed.description(config.description)
        feed.link(href=config.base_url, rel="alternate")
        feed.language(config.language)
        feed.copyright(f"All rights reserved {self.now.year}, {config.author}")
        feed.author(self.author())
        feed.generator("inkwell", version=__version__)

        latest = visible.latest()
        if latest is not None:
            # Pin the feed timestamp so unchanged posts give identical feeds.
            feed.updated(latest.date)

        for post in visible:
            entry = feed.add_entry(order="append")
            entry.id(post.url)
            entry.title(post.title)
            entry.link(href=post.url)
            entry.description(post.description, isSummary=True)
            entry.content(post.content, type="html")
            entry.author(self.author())
            entry.published(post.date)
            entry.updated(post.date)
        return feed

    def render_all(self, posts: Iterable[Post]) -> dict[str, str]:
        """Render every format.

        Returns:
            Mapping of site path (e.g. '/rss.xml') to feed document text.
        """
        feed = self.build(posts)
        return {fmt.path(self.config): fmt.render(feed, self.config) for fmt in self.formats}

    def rss(self, posts: Iterable[Post]) -> str:
        return RSSFeed().render(self.build(posts), self.config)

    def atom(self, posts: Iterable[Post]) -> str:
        return AtomFeed().render(self.build(posts), self.config)

    def write(self, output_dir: Path, posts: Iterable[Post]) -> list[Path]:
        """Render every format and write it below the output directory.

        Returns:
            Paths of the written feed files.
        """
        written = []
        for site_path, document in self.render_all(posts).items():
            target = output_dir / site_path.lstrip("/")
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(document, encoding="utf-8")
            written.append(target)
        return written
