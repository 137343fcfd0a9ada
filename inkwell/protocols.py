"""Protocol definitions for Inkwell.

These are the seams where an implementation can be swapped without touching
the code that uses it, e.g. a stub highlighter in tests.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable


@runtime_checkable
class Highlighter(Protocol):
    """Protocol for rendering code of the site's custom language.

    Implementations may shell out, call a library, or do nothing at all.
    """

    @abstractmethod
    def highlight(self, code: str) -> str | None:
        """Render a code block to HTML.

        Args:
            code: Raw code block text.

        Returns:
            Highlighted markup, or None when highlighting is unavailable.
        """
        ...


@runtime_checkable
class ContentRenderer(Protocol):
    """Protocol for turning a post body into an HTML fragment."""

    @abstractmethod
    def render(self, content: str) -> str:
        """Render body text to HTML.

        Args:
            content: Source text of the post body.

        Returns:
            HTML fragment (no enclosing document).
        """
        ...
