"""Site configuration for Inkwell.

The whole build is parameterised by one immutable SiteConfig. Defaults
describe the blog as published; a project can override any of them in an
``inkwell.yaml`` file at its root.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .utils import join_root_url

CONFIG_FILENAME = "inkwell.yaml"


@dataclass(frozen=True)
class SiteConfig:
    """Build-wide constants threaded into rendering, feeds and output.

    Attributes:
        title: Site title, used for the index page and feeds.
        description: Site description, used for meta tags and feeds.
        author: Author name for feeds and copyright.
        email: Author email for feeds.
        base_url: Canonical site URL without trailing slash.
        language: Feed and document language.
        social_url: Target of the header's social profile icon.
        social_name: Alt text for the social profile icon.
        social_icon: Image shown for the social profile link.
        thesis_title: Label of the external document footer link.
        thesis_url: External document linked from the index footer; empty
            to leave the link out.
        ahrefs_token: Token for the site verification marker file.
        rss_path: Output path of the RSS feed.
        atom_path: Output path of the Atom feed.
        output_dir: Build output directory, relative to the project root.
        posts_dir: Directory holding post sources.
        assets_dir: Directory copied to ``{output}/assets``.
        public_dir: Directory copied to the output root.
        stylesheet: Stylesheet copied to ``{output}/styles.css``.
        templates_dir: Optional directory of template overrides.
        highlight_language: Code fence tag handled by the external highlighter.
        highlight_command: Command line of the external highlighter.
        port: Dev server HTTP port.
        ws_port: Dev server live reload websocket port.
        dev: Whether pages carry the live reload client.
    """

    title: str = "Laurenz's Blog"
    description: str = "Blog about my coding projects."
    author: str = "Laurenz Mädje"
    email: str = "laurmaedje@gmail.com"
    base_url: str = "https://laurmaedje.github.io"
    language: str = "en"
    social_url: str = "https://github.com/laurmaedje"
    social_name: str = "GitHub"
    social_icon: str = "/assets/github.png"
    thesis_title: str = "My Thesis"
    thesis_url: str = "/programmable-markup-language-for-typesetting.pdf"
    ahrefs_token: str = (
        "ab196c32b430cd534174470f3bfc67da55eb94fc3c0b88a09f58dc62f75ec411"
    )
    rss_path: str = "/rss.xml"
    atom_path: str = "/atom.xml"
    output_dir: str = "dist"
    posts_dir: str = "posts"
    assets_dir: str = "assets"
    public_dir: str = "public"
    stylesheet: str = "src/styles.css"
    templates_dir: str = "templates"
    highlight_language: str = "typ"
    highlight_command: tuple[str, ...] = field(
        default=(
            "cargo",
            "run",
            "--quiet",
            "--manifest-path",
            "highlight/Cargo.toml",
        )
    )
    port: int = 3000
    ws_port: int = 35729
    dev: bool = False

    @property
    def rss_url(self) -> str:
        return join_root_url(self.base_url, self.rss_path)

    @property
    def atom_url(self) -> str:
        return join_root_url(self.base_url, self.atom_path)

    def with_overrides(self, **changes: Any) -> SiteConfig:
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)


DEFAULT_CONFIG = SiteConfig()


def load_config(project_root: Path, **overrides: Any) -> SiteConfig:
    """Load site configuration from inkwell.yaml.

    Args:
        project_root: Root directory of the project.
        **overrides: Field values that win over both defaults and the file.

    Returns:
        SiteConfig with defaults, file values and overrides applied in order.
    """
    known = {f.name for f in dataclasses.fields(SiteConfig)}
    values: dict[str, Any] = {}
    config_path = project_root / CONFIG_FILENAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            values.update({k: v for k, v in loaded.items() if k in known})
    if "highlight_command" in values:
        command = values["highlight_command"]
        values["highlight_command"] = (
            tuple(command.split()) if isinstance(command, str) else tuple(command)
        )
    if "base_url" in values:
        values["base_url"] = str(values["base_url"]).rstrip("/")
    values.update({k: v for k, v in overrides.items() if v is not None})
    return DEFAULT_CONFIG.with_overrides(**values)
