import pytest

from inkwell.config import DEFAULT_CONFIG, SiteConfig, load_config


def test_default_config():
    config = SiteConfig()
    assert config == DEFAULT_CONFIG
    assert config.rss_url == "https://laurmaedje.github.io/rss.xml"
    assert config.atom_url == "https://laurmaedje.github.io/atom.xml"
    assert config.dev is False


def test_config_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.title = "changed"


def test_load_config_without_file(tmp_path):
    assert load_config(tmp_path) == DEFAULT_CONFIG


def test_load_config_from_file(tmp_path):
    (tmp_path / "inkwell.yaml").write_text(
        "title: My Site\n"
        "base_url: https://example.com/\n"
        "highlight_command: typst-highlight --html\n"
        "unknown_key: ignored\n",
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    assert config.title == "My Site"
    assert config.base_url == "https://example.com"
    assert config.rss_url == "https://example.com/rss.xml"
    assert config.highlight_command == ("typst-highlight", "--html")
    assert config.author == DEFAULT_CONFIG.author


def test_load_config_list_command_and_overrides(tmp_path):
    (tmp_path / "inkwell.yaml").write_text(
        "port: 4000\nhighlight_command: [hl, -x]\n", encoding="utf-8"
    )
    config = load_config(tmp_path, port=5000, ws_port=None)
    assert config.port == 5000
    assert config.ws_port == DEFAULT_CONFIG.ws_port
    assert config.highlight_command == ("hl", "-x")


def test_load_config_ignores_non_mapping(tmp_path):
    (tmp_path / "inkwell.yaml").write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(tmp_path) == DEFAULT_CONFIG
