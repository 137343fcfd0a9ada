"""Inkwell static blog generator.

Inkwell reads Markdown posts with YAML front matter and builds a static blog:
one HTML page per post, an index page, RSS and Atom feeds, and copies of
the site's static files. A development server rebuilds on change and
reloads connected browsers.

The main entry point is the CLI module, which provides commands for building
the site, running the development server and starting new posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
