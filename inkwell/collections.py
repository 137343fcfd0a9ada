from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .content import Post


class PostCollection(Sequence["Post"]):
    """Ordered, read-only sequence of Posts with view helpers.

    Views return new collections; the underlying order is never changed.
    """

    def __init__(self, posts: Iterable[Post]):
        self._posts = tuple(posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __getitem__(self, item):
        if isinstance(item, slice):
            return PostCollection(self._posts[item])
        return self._posts[item]

    def chronological(self) -> PostCollection:
        """Oldest first; stable, so ties keep their current order."""
        return PostCollection(sorted(self._posts, key=lambda p: p.date))

    def published(self) -> PostCollection:
        return PostCollection(p for p in self._posts if not p.hidden)

    def hidden(self) -> PostCollection:
        return PostCollection(p for p in self._posts if p.hidden)

    def newest_first(self) -> PostCollection:
        return PostCollection(reversed(self._posts))

    def latest(self) -> Post | None:
        """Most recent post by date, or None when empty."""
        return max(self._posts, key=lambda p: p.date, default=None)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"PostCollection({len(self._posts)} posts)"
