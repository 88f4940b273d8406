import pytest

from ..exceptions import ConsistencyError
from ..index import ModelIndex
from ..serde.models import ResourceRepr
from .testing import Node


@pytest.fixture
def target():
    from ..assembler import ResultAssembler

    return ResultAssembler


@pytest.fixture
def model_index():
    index = ModelIndex()
    for id_ in ("1", "2", "3"):
        node = Node()
        node.populate_from_resource(ResourceRepr(type="nodes", id=id_))
        index.set("nodes", id_, node)
    return index


def docs(*ids):
    return [ResourceRepr(type="nodes", id=id_) for id_ in ids]


def test_included_order(target, model_index):
    result = target(model_index).make_included_array(docs("3", "1", "3"))
    assert [m.id for m in result] == ["3", "1", "3"]
    assert result[0] is result[2]


def test_data_order(target, model_index):
    result = target(model_index).make_data_array(docs("2", "1"))
    assert [m.id for m in result] == ["2", "1"]


def test_empty(target, model_index):
    assert target(model_index).make_included_array([]) == []


def test_consistency_error(target, model_index):
    with pytest.raises(ConsistencyError) as excinfo:
        target(model_index).make_included_array(docs("1", "4"))
    assert excinfo.value.key == ("nodes", "4")
    assert str(excinfo.value) == 'no model has been materialized for "nodes" resource 4'
