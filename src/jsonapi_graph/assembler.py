import typing

from .exceptions import ConsistencyError
from .index import ModelIndex
from .models import Model
from .serde.models import ResourceRepr


class ResultAssembler:
    """
    Reads the materialized models back out of a :py:class:`ModelIndex` in document order.
    Every document handed in must have been materialized beforehand.
    """

    model_index: ModelIndex

    def model_for(self, doc: ResourceRepr) -> Model:
        model = None
        if doc.id is not None:
            model = self.model_index.get(doc.type, doc.id)
        if model is None:
            raise ConsistencyError((doc.type, str(doc.id)))
        return model

    def make_data_array(self, primary_docs: typing.Iterable[ResourceRepr]) -> typing.List[Model]:
        return [self.model_for(doc) for doc in primary_docs]

    def make_included_array(
        self, included_docs: typing.Iterable[ResourceRepr]
    ) -> typing.List[Model]:
        return [self.model_for(doc) for doc in included_docs]

    def __init__(self, model_index: ModelIndex):
        self.model_index = model_index
