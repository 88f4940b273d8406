import pytest


@pytest.fixture
def target():
    from ..utils import JSONPointer

    return JSONPointer


def test_root(target):
    assert target("/") == target("")
    assert target().tokens == ()
    assert str(target("")) == "/"


def test_child(target):
    p = target("/data") / "relationships" / 0
    assert p == target("/data/relationships/0")
    assert p == "/data/relationships/0"
    assert str(p) == "/data/relationships/0"
    assert hash(p) == hash(target("/data/relationships/0"))


def test_escaping(target):
    p = target("/") / "a/b" / "c~d"
    assert str(p) == "/a~1b/c~0d"
    assert target("/a~1b/c~0d").tokens == ("a/b", "c~d")


def test_invalid(target):
    with pytest.raises(ValueError):
        target("data")


def test_resolve(target):
    document = {"data": [{"id": "1"}, {"id": "2"}]}
    assert target("/data/1/id").resolve(document) == "2"
    assert target("/").resolve(document) is document
    with pytest.raises(KeyError):
        target("/data/2").resolve(document)
    with pytest.raises(KeyError):
        target("/included").resolve(document)
