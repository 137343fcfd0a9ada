from datetime import datetime, timezone

from inkwell.collections import PostCollection
from inkwell.content import Post, post_url


def make_post(name, day, hidden=False):
    return Post(
        name=name,
        url=post_url(name),
        content="",
        title=name,
        date=datetime(2024, 1, day, tzinfo=timezone.utc),
        description=name,
        hidden=hidden,
    )


def make_collection():
    return PostCollection(
        [
            make_post("first", 1),
            make_post("secret", 2, hidden=True),
            make_post("third", 3),
        ]
    )


def test_collection_sequence_behaviour():
    posts = make_collection()
    assert len(posts) == 3
    assert posts[0].name == "first"
    assert isinstance(posts[1:], PostCollection)
    assert [p.name for p in posts[1:]] == ["secret", "third"]


def test_published_and_hidden_views():
    posts = make_collection()
    assert [p.name for p in posts.published()] == ["first", "third"]
    assert [p.name for p in posts.hidden()] == ["secret"]


def test_views_do_not_mutate_original():
    posts = make_collection()
    newest = posts.published().newest_first()
    assert [p.name for p in newest] == ["third", "first"]
    assert [p.name for p in posts] == ["first", "secret", "third"]


def test_chronological_and_latest():
    shuffled = PostCollection([make_post("c", 3), make_post("a", 1), make_post("b", 2)])
    assert [p.name for p in shuffled.chronological()] == ["a", "b", "c"]
    assert shuffled.latest().name == "c"
    assert PostCollection([]).latest() is None
