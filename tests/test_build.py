import re
from datetime import datetime, timezone

import pytest

from inkwell.build import HEALTH_CONTENT, build_site, create_highlighter
from inkwell.config import SiteConfig
from inkwell.errors import ParseError, ValidationError
from inkwell.highlight import NullHighlighter, SubprocessHighlighter

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def write_post(project, name, title, date, description="A test", hidden=False, body=None):
    posts = project / "posts"
    posts.mkdir(parents=True, exist_ok=True)
    extra = "hidden: true\n" if hidden else ""
    (posts / f"{name}.md").write_text(
        f"---\ntitle: {title}\ndate: {date}\ndescription: {description}\n{extra}---\n"
        + (body if body is not None else f"Text of {title}.\n"),
        encoding="utf-8",
    )


def make_project(root):
    (root / "posts").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "src" / "styles.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (root / "assets" / "img").mkdir(parents=True)
    (root / "assets" / "github.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\xff")
    (root / "assets" / "img" / "photo.jpg").write_bytes(bytes(range(256)))
    (root / "public").mkdir()
    (root / "public" / "robots.txt").write_text("User-agent: *\n", encoding="utf-8")
    return root


def build(project, **kwargs):
    kwargs.setdefault("highlighter", NullHighlighter())
    kwargs.setdefault("now", NOW)
    return build_site(project, **kwargs)


def snapshot(directory):
    return {
        str(p.relative_to(directory)): p.read_bytes()
        for p in sorted(directory.rglob("*"))
        if p.is_file()
    }


def test_build_writes_complete_site(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "hello-world", "Hello", "2024-01-01")

    result = build(project)
    out = project / "dist"
    assert result.output_dir == out
    assert [p.name for p in result.posts] == ["hello-world"]

    page = (out / "posts" / "hello-world" / "index.html").read_text(encoding="utf-8")
    assert "<h1>Hello</h1>" in page
    assert "January 1, 2024" in page
    assert '<meta name="description" content="A test">' in page

    index = (out / "index.html").read_text(encoding="utf-8")
    assert '<a href="/posts/hello-world">Hello</a>' in index

    assert "/posts/hello-world" in (out / "rss.xml").read_text(encoding="utf-8")
    assert "/posts/hello-world" in (out / "atom.xml").read_text(encoding="utf-8")
    assert (out / "health").read_text(encoding="utf-8") == HEALTH_CONTENT
    token = SiteConfig().ahrefs_token
    assert (out / f"ahrefs_{token}").read_text(encoding="utf-8") == (
        f"ahrefs-site-verification_{token}"
    )
    assert (out / "styles.css").read_text(encoding="utf-8") == "body { margin: 0; }\n"
    assert (out / "assets" / "github.png").read_bytes() == b"\x89PNG\r\n\x1a\n\x00\xff"
    assert (out / "assets" / "img" / "photo.jpg").read_bytes() == bytes(range(256))
    assert (out / "robots.txt").read_text(encoding="utf-8") == "User-agent: *\n"
    assert set(result.files) == {p for p in out.rglob("*") if p.is_file()}


def test_build_is_idempotent(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "a", "A", "2024-01-01")
    write_post(project, "b", "B", "2024-02-01T12:30:00+01:00")
    build(project)
    first = snapshot(project / "dist")
    build(project)
    assert snapshot(project / "dist") == first


def test_hidden_post_page_is_built_but_not_listed(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "public", "Public", "2024-01-01")
    write_post(project, "secret", "Secret", "2024-01-02", hidden=True)
    build(project)
    out = project / "dist"
    assert (out / "posts" / "secret" / "index.html").exists()
    assert "/posts/secret" not in (out / "index.html").read_text(encoding="utf-8")
    assert "/posts/secret" not in (out / "rss.xml").read_text(encoding="utf-8")
    assert "/posts/secret" not in (out / "atom.xml").read_text(encoding="utf-8")


def test_index_lists_posts_newest_first(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "jan", "Jan", "2024-01-01")
    write_post(project, "mar", "Mar", "2024-03-01")
    write_post(project, "feb", "Feb", "2024-02-01")
    build(project)
    index = (project / "dist" / "index.html").read_text(encoding="utf-8")
    assert re.findall(r'<h2><a href="/posts/(\w+)">', index) == ["mar", "feb", "jan"]


def test_empty_posts_directory_builds(tmp_path):
    project = make_project(tmp_path)
    result = build(project)
    out = project / "dist"
    assert len(result.posts) == 0
    assert '<ul class="posts">' in (out / "index.html").read_text(encoding="utf-8")
    assert "<item>" not in (out / "rss.xml").read_text(encoding="utf-8")
    assert "<entry>" not in (out / "atom.xml").read_text(encoding="utf-8")


def test_malformed_post_aborts_before_writing(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "good", "Good", "2024-01-01")
    (project / "posts" / "bad.md").write_text("---\ntitle: [unclosed\n---\nx", encoding="utf-8")
    with pytest.raises(ParseError):
        build(project)
    assert not (project / "dist").exists()


def test_missing_metadata_aborts(tmp_path):
    project = make_project(tmp_path)
    (project / "posts" / "bad.md").write_text("---\ntitle: Only\n---\nx", encoding="utf-8")
    with pytest.raises(ValidationError, match="date, description"):
        build(project)


def test_missing_stylesheet_is_fatal(tmp_path):
    project = make_project(tmp_path)
    (project / "src" / "styles.css").unlink()
    with pytest.raises(FileNotFoundError, match="stylesheet"):
        build(project)
    assert not (project / "dist").exists()


def test_missing_posts_directory_is_fatal(tmp_path):
    project = make_project(tmp_path)
    (project / "posts").rmdir()
    with pytest.raises(FileNotFoundError):
        build(project)


def test_optional_asset_directories(tmp_path):
    project = make_project(tmp_path)
    for name in ("github.png", "img/photo.jpg"):
        (project / "assets" / name).unlink()
    (project / "assets" / "img").rmdir()
    (project / "assets").rmdir()
    (project / "public" / "robots.txt").unlink()
    (project / "public").rmdir()
    build(project)
    assert (project / "dist" / "index.html").exists()


def test_in_place_build_keeps_stray_files_unless_clean(tmp_path):
    project = make_project(tmp_path)
    stray = project / "dist" / "stray.txt"
    stray.parent.mkdir()
    stray.write_text("old", encoding="utf-8")
    build(project)
    assert stray.exists()
    build(project, clean_output=True)
    assert not stray.exists()
    assert (project / "dist" / "index.html").exists()


def test_output_dir_override_and_config(tmp_path):
    project = make_project(tmp_path)
    write_post(project, "a", "A", "2024-01-01")
    target = tmp_path / "elsewhere"
    config = SiteConfig(title="Other Site", dev=True)
    result = build(project, config=config, output_dir_override=target)
    assert result.output_dir == target
    index = (target / "index.html").read_text(encoding="utf-8")
    assert "<title>Other Site</title>" in index
    assert "WebSocket" in index
    assert not (project / "dist").exists()


def test_custom_language_blocks_use_highlighter(tmp_path):
    class Marker:
        def highlight(self, code):
            return f"<b>{code.strip()}</b>"

    project = make_project(tmp_path)
    write_post(project, "code", "Code", "2024-01-01", body="```typ\n#set page\n```\n")
    build(project, highlighter=Marker())
    page = (project / "dist" / "posts" / "code" / "index.html").read_text(encoding="utf-8")
    assert "<pre><b>#set page</b></pre>" in page


def test_config_file_is_applied(tmp_path):
    project = make_project(tmp_path)
    (project / "inkwell.yaml").write_text("title: From File\noutput_dir: site\n", encoding="utf-8")
    build(project)
    assert "<title>From File</title>" in (project / "site" / "index.html").read_text(
        encoding="utf-8"
    )


def test_create_highlighter(tmp_path):
    assert isinstance(create_highlighter(tmp_path, SiteConfig()), SubprocessHighlighter)
    assert isinstance(
        create_highlighter(tmp_path, SiteConfig(highlight_command=())), NullHighlighter
    )
