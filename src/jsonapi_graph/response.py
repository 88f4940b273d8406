"""
:py:mod:`jsonapi_graph.response` puts the pieces together.

Synopsis
--------

.. code-block:: python

   from jsonapi_graph.response import RetrievalResponse

   response = RetrievalResponse.collection(Article, json.loads(body))
   for article in response.get_data():
       print(article.title, article.author.name)

The whole graph is built in the constructor. If any part of the document cannot be
materialized the constructor raises and no response object is produced.
"""

import abc
import logging
import typing

from .assembler import ResultAssembler
from .exceptions import InvalidStructureError, UnknownResourceTypeError
from .graph import GraphBuilder, GraphBuilderOptions
from .index import ModelIndex, ResourceIndex
from .models import Model, ModelRegistry, ModelType
from .serde.deserializer import ReprDeserializer
from .serde.models import (
    CollectionDocumentRepr,
    DocumentReprBase,
    LinksRepr,
    SingletonDocumentRepr,
)
from .serde.types import JSONObject
from .utils import assert_not_none

logger = logging.getLogger(__name__)


class ResponseShape(metaclass=abc.ABCMeta):
    """
    Tells how the primary ``data`` section of a response is laid out, and how the
    models built from it are handed back.
    """

    document_type: typing.ClassVar[typing.Type[DocumentReprBase]]

    @abc.abstractmethod
    def data_view(self, models: typing.Sequence[Model]) -> typing.Any:
        ...  # pragma: nocover

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SingletonShape(ResponseShape):
    document_type = SingletonDocumentRepr

    def data_view(self, models: typing.Sequence[Model]) -> typing.Optional[Model]:
        return models[0] if models else None


class CollectionShape(ResponseShape):
    document_type = CollectionDocumentRepr

    def data_view(self, models: typing.Sequence[Model]) -> typing.List[Model]:
        return list(models)


SINGLETON = SingletonShape()
COLLECTION = CollectionShape()


Body = typing.Union[JSONObject, DocumentReprBase]


class RetrievalResponse:
    """
    A :py:class:`RetrievalResponse` holds the models materialized from one JSON:API
    response document.

    :param model_type: the model class primary resources are materialized as.
    :param body: the parsed response body, or an already deserialized document.
    :param ResponseShape shape: :py:data:`SINGLETON` or :py:data:`COLLECTION`.
    :param models: extra model classes for included resources that no relationship
                   declaration reaches.
    :param Optional[GraphBuilderOptions] options: options for the graph builder.
    :param Optional[ReprDeserializer] deserializer: the deserializer for raw bodies.
    """

    model_type: ModelType
    shape: ResponseShape
    document: DocumentReprBase
    _model_index: ModelIndex
    _data: typing.Any
    _included: typing.List[Model]

    @property
    def links(self) -> typing.Optional[LinksRepr]:
        return self.document.links

    @property
    def meta(self) -> typing.Dict[str, typing.Any]:
        return self.document.meta

    def get_data(self) -> typing.Any:
        """
        Returns the model for the primary resource (or :py:const:`None` for ``"data": null``)
        of a singleton response, or the list of models for a collection response.
        """
        return self._data

    def get_included(self) -> typing.List[Model]:
        """
        Returns one model per entry of ``included``, in the same order.
        """
        return self._included

    def get_model(self, type_: str, id_: str) -> typing.Optional[Model]:
        return self._model_index.get(type_, id_)

    @staticmethod
    def _deserialize(
        body: Body, shape: ResponseShape, deserializer: typing.Optional[ReprDeserializer]
    ) -> DocumentReprBase:
        if isinstance(body, DocumentReprBase):
            if not isinstance(body, shape.document_type):
                raise InvalidStructureError(
                    f"{type(body).__name__} given where {shape.document_type.__name__} expected",
                    body._source_,
                )
            return body
        if deserializer is None:
            deserializer = ReprDeserializer()
        return deserializer(shape.document_type, body)

    def __init__(
        self,
        model_type: ModelType,
        body: Body,
        shape: ResponseShape,
        *,
        models: typing.Iterable[ModelType] = (),
        options: typing.Optional[GraphBuilderOptions] = None,
        deserializer: typing.Optional[ReprDeserializer] = None,
    ):
        self.model_type = model_type
        self.shape = shape
        self.document = document = self._deserialize(body, shape, deserializer)

        registry = ModelRegistry(models)
        registry.register_reachable(model_type)

        primary = document.primary_resources()
        resource_index = ResourceIndex.build(document.included, primary)
        model_index = ModelIndex()
        builder = GraphBuilder(resource_index, model_index, options, registry)

        # a key given more than once is built from the copy the index kept
        for doc in primary:
            builder.materialize(assert_not_none(resource_index.lookup(*doc.key)), model_type)

        # included resources no relationship led to
        for doc in document.included:
            if doc.key in model_index:
                continue
            included_type = registry.lookup(doc.type)
            if included_type is None:
                raise UnknownResourceTypeError(doc.type, doc._source_)
            builder.materialize(assert_not_none(resource_index.lookup(*doc.key)), included_type)

        assembler = ResultAssembler(model_index)
        self._data = shape.data_view(assembler.make_data_array(primary))
        self._included = assembler.make_included_array(document.included)
        self._model_index = model_index

        logger.debug(
            "materialized %d models from %d primary and %d included resources",
            len(model_index),
            len(primary),
            len(document.included),
        )

    @classmethod
    def singleton(cls, model_type: ModelType, body: Body, **kwargs) -> "RetrievalResponse":
        return cls(model_type, body, SINGLETON, **kwargs)

    @classmethod
    def collection(cls, model_type: ModelType, body: Body, **kwargs) -> "RetrievalResponse":
        return cls(model_type, body, COLLECTION, **kwargs)

    @classmethod
    def from_body(cls, model_type: ModelType, body: Body, **kwargs) -> "RetrievalResponse":
        """
        Builds a response whose shape follows the body: a collection if ``data`` is an array,
        a singleton otherwise.
        """
        if isinstance(body, DocumentReprBase):
            document_type: typing.Type[DocumentReprBase] = type(body)
        else:
            document_type = ReprDeserializer.infer_document_type(body)
        shape = COLLECTION if issubclass(document_type, CollectionDocumentRepr) else SINGLETON
        return cls(model_type, body, shape, **kwargs)
