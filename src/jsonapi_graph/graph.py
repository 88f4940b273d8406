import dataclasses
import logging
import typing

from .exceptions import InvalidStructureError, MissingResourceError, UnknownRelationKindError
from .index import ModelIndex, ResourceIndex
from .models import Model, ModelRegistry, ModelType, RelationDescriptor, RelationshipType
from .serde.models import LinkageRepr, ResourceIdRepr, ResourceRepr

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class GraphBuilderOptions:
    strict_linkage: bool = False
    """
    Raise :py:class:`MissingResourceError` for a relationship stub whose resource is not
    in the document, instead of leaving it out.
    """


class GraphBuilder:
    """
    :py:class:`GraphBuilder` turns resource documents into models and wires their
    relationships, through a :py:class:`ResourceIndex` to find related documents and
    a :py:class:`ModelIndex` that guarantees one model per ``(type, id)``.

    The traversal keeps a work-list of models whose relationships still have to be
    resolved instead of recursing, so neither cycles nor long chains grow the stack.
    A model is registered in the model index before any of its relationships is
    looked at, which is what makes a relationship pointing back to it resolve to the
    same instance.
    """

    resource_index: ResourceIndex
    model_index: ModelIndex
    options: GraphBuilderOptions
    registry: typing.Optional[ModelRegistry]
    _pending: typing.List[typing.Tuple[Model, ResourceRepr]]

    def materialize(self, doc: ResourceRepr, model_type: ModelType) -> Model:
        """
        Returns the model for ``doc``, building it and everything reachable from it
        if it is not in the model index yet.

        :raises UnknownRelationKindError: if a relationship in the graph is not declared as to-one or to-many.
        :raises InvalidStructureError: if a linkage does not match the shape its relationship declares.
        """
        try:
            model = self._obtain(doc, model_type)
            while self._pending:
                _model, _doc = self._pending.pop()
                self._traverse_relationships(_model, _doc)
        finally:
            # leftovers of a failed traversal
            self._pending.clear()
        return model

    def _obtain(self, doc: ResourceRepr, model_type: ModelType) -> Model:
        if doc.id is None:
            raise InvalidStructureError(f'resource of type "{doc.type}" has no id', doc._source_)
        model = self.model_index.get(doc.type, doc.id)
        if model is not None:
            if not isinstance(model, model_type):
                logger.debug(
                    "%s/%s was already materialized as %s, not as %s",
                    doc.type,
                    doc.id,
                    type(model).__name__,
                    model_type.__name__,
                )
            return model
        model = model_type()
        model.populate_from_resource(doc)
        self.model_index.set(doc.type, doc.id, model)
        self._pending.append((model, doc))
        return model

    def _lookup(self, name: str, stub: ResourceIdRepr) -> typing.Optional[ResourceRepr]:
        doc = self.resource_index.lookup(stub.type, stub.id)
        if doc is None:
            if self.options.strict_linkage:
                raise MissingResourceError(name, stub)
            logger.debug(
                "relationship (%s) refers to %s/%s, which is not in the document",
                name,
                stub.type,
                stub.id,
            )
        return doc

    def _traverse_relationships(self, model: Model, doc: ResourceRepr) -> None:
        for name, linkage in doc.relationships.items():
            descr = model.relationship_descriptor(name)
            kind = descr.type if descr is not None else None
            if kind is RelationshipType.TO_MANY:
                assert descr is not None
                self.to_many_relationship_visited(model, name, descr, linkage)
            elif kind is RelationshipType.TO_ONE:
                assert descr is not None
                self.to_one_relationship_visited(model, name, descr, linkage)
            else:
                raise UnknownRelationKindError(type(model), name, kind, linkage._source_)

    def to_one_relationship_visited(
        self, model: Model, name: str, descr: RelationDescriptor, linkage: LinkageRepr
    ) -> None:
        if linkage.is_to_many:
            raise InvalidStructureError(
                f"relationship ({name}) is to-one but its linkage is an array", linkage._source_
            )
        stub = linkage.data
        if stub is None:
            return
        assert isinstance(stub, ResourceIdRepr)
        related_doc = self._lookup(name, stub)
        if related_doc is None:
            return
        destination = descr.resolve_destination(self.registry)
        model.set_relation(name, self._obtain(related_doc, destination))

    def to_many_relationship_visited(
        self, model: Model, name: str, descr: RelationDescriptor, linkage: LinkageRepr
    ) -> None:
        if isinstance(linkage.data, ResourceIdRepr):
            raise InvalidStructureError(
                f"relationship ({name}) is to-many but its linkage is not an array",
                linkage._source_,
            )
        destination = descr.resolve_destination(self.registry)
        related: typing.List[Model] = []
        for stub in linkage.stubs():
            related_doc = self._lookup(name, stub)
            if related_doc is None:
                continue
            related.append(self._obtain(related_doc, destination))
        model.set_relation(name, related)

    def __init__(
        self,
        resource_index: ResourceIndex,
        model_index: ModelIndex,
        options: typing.Optional[GraphBuilderOptions] = None,
        registry: typing.Optional[ModelRegistry] = None,
    ):
        self.resource_index = resource_index
        self.model_index = model_index
        self.options = options if options is not None else GraphBuilderOptions()
        self.registry = registry
        self._pending = []
