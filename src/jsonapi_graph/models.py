"""
Domain models materialized from JSON:API resources.

A model class declares the attributes it picks up from a resource and the relationships
it resolves, in an inner ``Meta`` class:

.. code-block:: python

   class Person(Model):
       type_name = "people"

       class Meta:
           attributes = ("name",)


   class Article(Model):
       type_name = "articles"

       class Meta:
           attributes = ("title", "body")
           relationships = {
               "author": ToOne(Person),
               "comments": ToMany(Deferred(lambda: Comment)),
           }
"""

import enum
import typing
from collections import OrderedDict

from .deferred import Deferred, resolve
from .exceptions import InvalidDeclarationError
from .serde.models import LinksRepr, ResourceRepr
from .serde.types import ResourceKey
from .utils import assert_not_none

ModelType = typing.Type["Model"]
Destination = typing.Union[ModelType, str, Deferred[ModelType], Deferred[str]]


class RelationshipType(enum.Enum):
    TO_ONE = "to_one"
    TO_MANY = "to_many"


class RelationDescriptor:
    """
    A :py:class:`RelationDescriptor` describes one relationship slot of a model class.
    :py:attr:`type` is the discriminator the graph builder dispatches on.
    """

    type: typing.ClassVar[typing.Any] = None
    name: typing.Optional[str] = None
    parent: typing.Optional[ModelType] = None
    _destination: Destination

    @property
    def destination_name(self) -> typing.Optional[str]:
        """
        The type name the destination was declared by, if it was not declared as a class.
        """
        dest = resolve(self._destination)
        return dest if isinstance(dest, str) else None

    @property
    def destination(self) -> ModelType:
        """
        The model class the related resources are materialized as.
        """
        return self.resolve_destination()

    def resolve_destination(self, registry: typing.Optional["ModelRegistry"] = None) -> ModelType:
        """
        Returns the destination model class. A destination declared by type name is
        looked up in ``registry``.

        :raises InvalidDeclarationError: if the destination is neither a model class nor a registered type name.
        """
        dest = resolve(self._destination)
        if isinstance(dest, str):
            found = registry.lookup(dest) if registry is not None else None
            if found is None:
                raise InvalidDeclarationError(
                    f'destination of relationship ({self.name}) refers to "{dest}", which is not registered'
                )
            dest = found
        if not (isinstance(dest, type) and issubclass(dest, Model)):
            raise InvalidDeclarationError(
                f"destination of relationship ({self.name}) is not a model class: {dest!r}"
            )
        return dest

    def bind(self, parent: ModelType, name: str) -> "RelationDescriptor":
        self.parent = parent
        self.name = name
        return self

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._destination!r}, name={self.name!r})"

    def __init__(self, destination: Destination):
        self._destination = destination


class ToOne(RelationDescriptor):
    type = RelationshipType.TO_ONE


class ToMany(RelationDescriptor):
    type = RelationshipType.TO_MANY


class Model:
    """
    The base class of materialized models.

    Instances are built with no arguments, filled by :py:meth:`populate_from_resource`
    and wired by :py:meth:`set_relation`. Relationships are not set until the graph
    builder resolves them, and a relationship whose target is absent from the document
    stays unset.
    """

    type_name: typing.ClassVar[typing.Optional[str]] = None
    attribute_names: typing.ClassVar[typing.Tuple[str, ...]] = ()
    relationships: typing.ClassVar[typing.Mapping[str, RelationDescriptor]] = OrderedDict()

    resource_type: typing.Optional[str]
    id: typing.Optional[str]
    attributes: typing.Dict[str, typing.Any]
    links: typing.Optional[LinksRepr]
    meta: typing.Dict[str, typing.Any]
    _relations: typing.Dict[str, typing.Any]

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        meta = cls.__dict__.get("Meta")
        attribute_names = list(cls.attribute_names)
        relationships: typing.MutableMapping[str, RelationDescriptor] = OrderedDict(
            cls.relationships
        )
        if meta is not None:
            for name in getattr(meta, "attributes", ()):
                if name in RESERVED_NAMES:
                    raise InvalidDeclarationError(f'attribute name "{name}" is reserved')
                if name not in attribute_names:
                    attribute_names.append(name)
            for name, descr in getattr(meta, "relationships", {}).items():
                if not isinstance(descr, RelationDescriptor):
                    raise InvalidDeclarationError(
                        f"relationship ({name}) must be declared with ToOne or ToMany, got {descr!r}"
                    )
                if name in RESERVED_NAMES:
                    raise InvalidDeclarationError(f'relationship name "{name}" is reserved')
                relationships[name] = descr.bind(cls, name)
        clashes = set(attribute_names) & set(relationships)
        if clashes:
            raise InvalidDeclarationError(
                f"{cls.__name__} declares both an attribute and a relationship named {', '.join(sorted(clashes))}"
            )
        cls.attribute_names = tuple(attribute_names)
        cls.relationships = relationships

    @property
    def key(self) -> ResourceKey:
        return (assert_not_none(self.resource_type), assert_not_none(self.id))

    def populate_from_resource(self, doc: ResourceRepr) -> None:
        self.resource_type = doc.type
        self.id = doc.id
        self.attributes = OrderedDict(doc.attributes)
        self.links = doc.links
        self.meta = dict(doc.meta)
        for name in self.attribute_names:
            setattr(self, name, self.attributes.get(name))

    def relationship_descriptor(self, name: str) -> typing.Optional[RelationDescriptor]:
        return self.relationships.get(name)

    def set_relation(self, name: str, value: typing.Any) -> None:
        self._relations[name] = value
        setattr(self, name, value)

    def related(self, name: str, default: typing.Any = None) -> typing.Any:
        return self._relations.get(name, default)

    def has_relation(self, name: str) -> bool:
        return name in self._relations

    def __getitem__(self, name: str) -> typing.Any:
        return self.attributes[name]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.resource_type!r} id={self.id!r}>"

    def __init__(self):
        self.resource_type = None
        self.id = None
        self.attributes = OrderedDict()
        self.links = None
        self.meta = {}
        self._relations = {}


RESERVED_NAMES = frozenset(dir(Model)) | {
    "resource_type",
    "id",
    "attributes",
    "links",
    "meta",
    "_relations",
}


class ModelRegistry:
    """
    Maps resource type names to the model classes their resources are materialized as.
    Only classes with a :py:attr:`Model.type_name` can be registered.
    """

    _models: typing.Dict[str, ModelType]

    def register(self, model_type: ModelType) -> None:
        if model_type.type_name is None:
            raise InvalidDeclarationError(f"{model_type.__name__} has no type_name")
        existing = self._models.get(model_type.type_name)
        if existing is not None and existing is not model_type:
            raise InvalidDeclarationError(
                f'both {existing.__name__} and {model_type.__name__} are registered as "{model_type.type_name}"'
            )
        self._models[model_type.type_name] = model_type

    def register_reachable(self, model_type: ModelType) -> None:
        """
        Registers ``model_type`` along with every model class reachable from it
        through relationship declarations. Classes without a type name are traversed
        but not registered.

        A destination declared by type name is followed once some class registered
        under that name has been seen.

        :raises InvalidDeclarationError: if a type name destination never gets registered.
        """
        seen: typing.Set[ModelType] = set()
        pending = [model_type]
        named: typing.List[RelationDescriptor] = []
        while True:
            while pending:
                m = pending.pop()
                if m in seen:
                    continue
                seen.add(m)
                if m.type_name is not None:
                    self.register(m)
                for descr in m.relationships.values():
                    if descr.destination_name is not None:
                        named.append(descr)
                    else:
                        pending.append(descr.destination)
            resolvable = [descr for descr in named if descr.destination_name in self]
            if not resolvable:
                break
            named = [descr for descr in named if descr.destination_name not in self]
            pending.extend(descr.resolve_destination(self) for descr in resolvable)
        if named:
            # the first unregistered name raises
            named[0].resolve_destination(self)

    def lookup(self, name: str) -> typing.Optional[ModelType]:
        return self._models.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __init__(self, models: typing.Iterable[ModelType] = ()):
        self._models = {}
        for model_type in models:
            self.register(model_type)
