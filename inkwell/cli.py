"""Command-line interface for Inkwell.

This module defines the CLI commands using the Click framework.

Commands:
- build: Build the site into the output directory.
- serve: Run the development server with live reload.
- post: Create a new post interactively.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import click
import questionary
import yaml

from . import __version__
from .config import load_config
from .errors import BuildError
from .frontmatter import DELIMITER
from .utils import slugify


@click.group()
@click.version_option(version=__version__, prog_name="inkwell")
def cli():
    """Inkwell static blog generator."""


@cli.command()
@click.option(
    "--dev",
    is_flag=True,
    envvar="INKWELL_DEV",
    help="Include live reload and serve the site after building",
)
@click.option("--clean", is_flag=True, help="Empty the output directory first")
def build(dev: bool, clean: bool):
    """Build the site into the output directory."""
    project_root = Path.cwd()
    if dev:
        _serve(project_root, None, None)
        return

    from .build import build_site

    click.echo("Building.")
    try:
        result = build_site(project_root, clean_output=clean)
    except BuildError as exc:
        _report_build_error(project_root, exc)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.posts)} posts into {result.output_dir}")


@cli.command()
@click.option(
    "--port",
    type=int,
    required=False,
    help="Port to run the dev server (overrides inkwell.yaml)",
)
@click.option(
    "--ws-port",
    type=int,
    required=False,
    help="Port for the live reload websocket server (overrides inkwell.yaml)",
)
def serve(port: int | None, ws_port: int | None):
    """Run dev server with live reload."""
    _serve(Path.cwd(), port, ws_port)


def _serve(project_root: Path, port: int | None, ws_port: int | None) -> None:
    from .server import DevServer

    server = DevServer(project_root, http_port=port, ws_port=ws_port)
    click.echo("Building.")
    try:
        server.start()
    except BuildError as exc:
        _report_build_error(project_root, exc)
        raise SystemExit(1) from None


@cli.command()
def post():
    """Create a new post interactively."""
    project_root = Path.cwd()
    config = load_config(project_root)
    posts_dir = project_root / config.posts_dir

    title = questionary.text(
        "Title:",
        validate=lambda x: len(x.strip()) > 0 or "Title cannot be empty",
        style=_questionary_style(),
    ).ask()
    if title is None:
        raise click.Abort()
    title = title.strip()

    name = questionary.text(
        "File name (without .md extension):",
        default=slugify(title),
        validate=lambda x: len(slugify(x)) > 0 or "File name cannot be empty",
        style=_questionary_style(),
    ).ask()
    if name is None:
        raise click.Abort()
    name = slugify(name)

    description = questionary.text(
        "Description:",
        validate=lambda x: len(x.strip()) > 0 or "Description cannot be empty",
        style=_questionary_style(),
    ).ask()
    if description is None:
        raise click.Abort()

    hidden = questionary.confirm(
        "Hide from index and feeds?",
        default=False,
        style=_questionary_style(),
    ).ask()
    if hidden is None:
        raise click.Abort()

    # Post names must be unique whatever the extension.
    existing = {p.stem for p in posts_dir.iterdir()} if posts_dir.exists() else set()
    if name in existing:
        raise click.ClickException(f"A post named '{name}' already exists")

    target_path = posts_dir / f"{name}.md"
    posts_dir.mkdir(parents=True, exist_ok=True)
    target_path.write_text(
        render_post_skeleton(title, description.strip(), date.today(), hidden),
        encoding="utf-8",
    )
    click.echo(f"Created {target_path.relative_to(project_root)}")


def render_post_skeleton(title: str, description: str, day: date, hidden: bool) -> str:
    """Return the text of a new post file with its front matter filled in."""
    meta = {"title": title, "date": day, "description": description}
    if hidden:
        meta["hidden"] = True
    head = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"{DELIMITER}\n{head}{DELIMITER}\n\n"


def _report_build_error(project_root: Path, exc: BuildError) -> None:
    """Display a user-friendly build error."""
    click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
    if exc.source_path is not None:
        try:
            shown = exc.source_path.relative_to(project_root)
        except ValueError:
            shown = exc.source_path
        click.echo(click.style(f"  File: {shown}", fg="yellow"), err=True)
    click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)


def _questionary_style():
    """Return consistent questionary style."""
    return questionary.Style(
        [
            ("qmark", "fg:cyan bold"),
            ("question", "bold"),
            ("answer", "fg:cyan"),
            ("pointer", "fg:cyan bold"),
            ("highlighted", "fg:cyan bold"),
            ("selected", "fg:cyan"),
        ]
    )


def main():
    """Entry point for the CLI application."""
    cli()
