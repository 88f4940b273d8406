import pytest

from ..models import (
    CollectionDocumentRepr,
    LinkageRepr,
    LinksRepr,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)
from ..utils import JSONPointer


@pytest.fixture
def target():
    from ..deserializer import ReprDeserializer

    return ReprDeserializer


def test_basic(target):
    deser = target()

    result = deser(
        SingletonDocumentRepr,
        {
            "data": {
                "type": "foos",
                "id": "1",
                "attributes": {
                    "a": 1,
                    "b": 2,
                },
            },
        },
    )

    assert result == SingletonDocumentRepr(
        data=ResourceRepr(
            type="foos",
            id="1",
            attributes=(
                ("a", 1),
                ("b", 2),
            ),
            _source_=JSONPointer("/data"),
        ),
        _source_=JSONPointer("/"),
    )


def test_relationships_and_included(target):
    deser = target()

    result = deser(
        SingletonDocumentRepr,
        {
            "links": {
                "self": "/foos/1",
            },
            "data": {
                "type": "foos",
                "id": "1",
                "relationships": {
                    "items": {
                        "links": {
                            "related": {"href": "/foos/1/items"},
                        },
                        "data": [
                            {"type": "bars", "id": "1"},
                            {"type": "bars", "id": "2"},
                        ],
                    },
                    "owner": {
                        "data": None,
                    },
                },
            },
            "included": [
                {"type": "bars", "id": "1"},
            ],
        },
    )

    assert result == SingletonDocumentRepr(
        links=LinksRepr(
            self_="/foos/1",
            _source_=JSONPointer("/links"),
        ),
        data=ResourceRepr(
            type="foos",
            id="1",
            relationships=(
                (
                    "items",
                    LinkageRepr(
                        links=LinksRepr(
                            related="/foos/1/items",
                            _source_=JSONPointer("/data/relationships/items/links"),
                        ),
                        data=[
                            ResourceIdRepr(
                                type="bars",
                                id="1",
                                _source_=JSONPointer("/data/relationships/items/data/0"),
                            ),
                            ResourceIdRepr(
                                type="bars",
                                id="2",
                                _source_=JSONPointer("/data/relationships/items/data/1"),
                            ),
                        ],
                        _source_=JSONPointer("/data/relationships/items"),
                    ),
                ),
                (
                    "owner",
                    LinkageRepr(
                        data=None,
                        _source_=JSONPointer("/data/relationships/owner"),
                    ),
                ),
            ),
            _source_=JSONPointer("/data"),
        ),
        included=[
            ResourceRepr(
                type="bars",
                id="1",
                _source_=JSONPointer("/included/0"),
            ),
        ],
        _source_=JSONPointer("/"),
    )


def test_linkage_without_data(target):
    result = target()(
        SingletonDocumentRepr,
        {
            "data": {
                "type": "foos",
                "id": "1",
                "relationships": {"items": {"links": {"related": "/foos/1/items"}}},
            },
        },
    )
    linkage = result.data.relationships["items"]
    assert linkage.data is None
    assert not linkage.data_present
    assert linkage.stubs() == ()


def test_collection(target):
    result = target()(
        CollectionDocumentRepr,
        {
            "data": [
                {"type": "foos", "id": "1"},
                {"type": "foos", "id": "2"},
            ],
            "meta": {"total": 2},
        },
    )
    assert [r.id for r in result.data] == ["1", "2"]
    assert result.meta == {"total": 2}
    assert result.primary_resources() == result.data

    result = target()(CollectionDocumentRepr, {"data": None})
    assert result.data == ()


def test_null_singleton(target):
    result = target()(SingletonDocumentRepr, {"data": None})
    assert result.data is None
    assert result.primary_resources() == ()


def test_validation_error(target):
    from ..exceptions import DeserializationError

    deser = target()

    with pytest.raises(DeserializationError):
        deser(SingletonDocumentRepr, {})

    with pytest.raises(DeserializationError):
        deser(SingletonDocumentRepr, [])

    with pytest.raises(DeserializationError):
        deser(SingletonDocumentRepr, {"data": {}})

    with pytest.raises(DeserializationError):
        deser(SingletonDocumentRepr, {"data": [{"type": "foos", "id": "1"}]})

    with pytest.raises(DeserializationError):
        deser(CollectionDocumentRepr, {"data": {"type": "foos", "id": "1"}})


def test_validation_error_pointers(target):
    from ..exceptions import DeserializationError

    with pytest.raises(DeserializationError) as excinfo:
        target()(
            CollectionDocumentRepr,
            {
                "data": [
                    {"type": "foos", "id": 1},
                    {
                        "type": "foos",
                        "id": "2",
                        "relationships": {"bar": {"data": {"type": "bars"}}},
                    },
                ],
                "included": [{"id": "3"}],
            },
        )

    pointers = [error.pointer for error in excinfo.value.errors]
    assert pointers == [
        JSONPointer("/data/0/id"),
        JSONPointer("/data/1/relationships/bar/data/id"),
        JSONPointer("/included/0/type"),
    ]
    assert "(at /data/0/id)" in str(excinfo.value)


def test_max_errors(target):
    from ..exceptions import DeserializationError

    with pytest.raises(DeserializationError) as excinfo:
        target(max_errors=1)(
            CollectionDocumentRepr,
            {"data": [{"id": "1"}, {"id": "2"}, {"id": "3"}]},
        )
    assert len(excinfo.value.errors) == 1


@pytest.mark.parametrize(
    ("document", "expected"),
    [
        ({"data": []}, CollectionDocumentRepr),
        ({"data": [{"type": "foos", "id": "1"}]}, CollectionDocumentRepr),
        ({"data": {"type": "foos", "id": "1"}}, SingletonDocumentRepr),
        ({"data": None}, SingletonDocumentRepr),
        ({"meta": {}}, SingletonDocumentRepr),
    ],
)
def test_infer_document_type(target, document, expected):
    assert target.infer_document_type(document) is expected
