from pathlib import Path

from inkwell.errors import BuildError, InkwellError, ParseError, RenderError, ValidationError


def test_error_hierarchy():
    assert issubclass(BuildError, InkwellError)
    assert issubclass(ValidationError, ParseError)
    assert issubclass(ParseError, BuildError)
    assert issubclass(RenderError, BuildError)


def test_build_error_message_names_file():
    cause = ValueError("bad")
    exc = BuildError(Path("posts/a.md"), "broken", cause)
    assert str(exc) == "posts/a.md: broken"
    assert exc.message == "broken"
    assert exc.original_error is cause
    assert str(BuildError(None, "plain")) == "plain"
