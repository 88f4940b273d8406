"""
Classes in :py:mod:`jsonapi_graph.serde.models` represent the elements of a JSON:API
response document as they arrive on the wire, before any model is materialized from them.
"""

import dataclasses
import typing
from collections import OrderedDict

from .types import ResourceKey
from .utils import JSONPointer

Source = typing.Union[JSONPointer, str]


@dataclasses.dataclass
class Repr:
    """
    The base class for any wire representation.
    """

    _source_: typing.Optional[Source] = None


@dataclasses.dataclass
class LinksRepr(Repr):
    """
    :py:class:`LinksRepr` represents a ``links`` node.
    Only the members meaningful on a retrieval response are kept.
    """

    self_: typing.Optional[str] = None
    related: typing.Optional[str] = None
    next: typing.Optional[str] = None
    prev: typing.Optional[str] = None
    first: typing.Optional[str] = None
    last: typing.Optional[str] = None


@dataclasses.dataclass(init=False)
class NodeRepr(Repr):
    """
    :py:class:`NodeRepr` is an abstract base for nodes that may carry ``links`` and ``meta``.
    """

    links: typing.Optional[LinksRepr] = None
    meta: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)

    def __init__(
        self,
        *,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(_source_=_source_)
        self.links = links
        self.meta = meta if meta is not None else {}


@dataclasses.dataclass(init=False)
class ResourceIdRepr(NodeRepr):
    """
    A resource identifier object, found inside relationship linkage.
    Throughout this package it is also called a stub.
    """

    type: str  # type: ignore
    id: str  # type: ignore

    @property
    def key(self) -> ResourceKey:
        return (self.type, self.id)

    def __init__(
        self,
        *,
        type: str,
        id: str,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(meta=meta, _source_=_source_)
        self.type = type
        self.id = id


Linkage = typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]]


@dataclasses.dataclass(init=False)
class LinkageRepr(NodeRepr):
    """
    :py:class:`LinkageRepr` represents a relationship object.

    ``data`` is :py:const:`None` either when the linkage is explicitly ``null`` or when the
    relationship object carries no ``data`` member at all; :py:attr:`data_present`
    tells the two apart.
    """

    data: Linkage = None
    data_present: bool = True

    @property
    def is_to_many(self) -> bool:
        return self.data is not None and not isinstance(self.data, ResourceIdRepr)

    def stubs(self) -> typing.Sequence[ResourceIdRepr]:
        if self.data is None:
            return ()
        elif isinstance(self.data, ResourceIdRepr):
            return (self.data,)
        else:
            return self.data

    def __init__(
        self,
        *,
        data: Linkage,
        data_present: bool = True,
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.data = data
        self.data_present = data_present


AttributeValue = typing.Any


@dataclasses.dataclass(init=False)
class ResourceRepr(NodeRepr):
    """
    :py:class:`ResourceRepr` represents a `Resource Object <https://jsonapi.org/format/#document-resource-objects>`_.
    """

    type: str  # type: ignore
    id: typing.Optional[str]  # type: ignore
    attributes: typing.Mapping[str, AttributeValue] = dataclasses.field(default_factory=OrderedDict)  # type: ignore
    relationships: typing.Mapping[str, LinkageRepr] = dataclasses.field(default_factory=OrderedDict)  # type: ignore

    @property
    def key(self) -> ResourceKey:
        if self.id is None:
            raise ValueError(f'resource of type "{self.type}" has no id')
        return (self.type, self.id)

    def __getitem__(self, name):
        return self.attributes[name]

    def __init__(
        self,
        *,
        type: str,
        id: typing.Optional[str],
        attributes: typing.Union[
            typing.Iterable[typing.Tuple[str, AttributeValue]],
            typing.Mapping[str, AttributeValue],
        ] = (),
        relationships: typing.Union[
            typing.Iterable[typing.Tuple[str, LinkageRepr]],
            typing.Mapping[str, LinkageRepr],
        ] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        """
        :param str type: a value for ``type`` property.
        :param Optional[str] id: a value for ``id`` property.
        :param attributes: the attributes, either as a mapping or as key-value pairs.
        :param relationships: the relationships, either as a mapping or as key-value pairs.
        :param Optional[LinksRepr] links: a value for ``links`` property.
        :param Optional[Dict[str, Any]] meta: a dictionary containing user-defined information.
        :param Union[JSONPointer, str, None] _source_: an object that describes the source of the node.
        """
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.type = type
        self.id = id
        self.attributes = OrderedDict(attributes)
        self.relationships = OrderedDict(relationships)


@dataclasses.dataclass(init=False)
class DocumentReprBase(NodeRepr):
    jsonapi: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
    included: typing.Sequence[ResourceRepr] = ()

    def primary_resources(self) -> typing.Sequence[ResourceRepr]:
        """
        Returns the resources of the primary ``data`` section as a sequence, whatever its shape.
        """
        raise NotImplementedError()

    def __init__(
        self,
        *,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        super().__init__(links=links, meta=meta, _source_=_source_)
        self.jsonapi = jsonapi if jsonapi is not None else {}
        self.included = tuple(included)


class MissingType:
    def __bool__(self):
        return False

    def __init__(self):
        raise TypeError("Not directly instantiable")


Missing = object.__new__(MissingType)


@dataclasses.dataclass(init=False)
class SingletonDocumentRepr(DocumentReprBase):
    data: typing.Optional[ResourceRepr] = None

    def primary_resources(self) -> typing.Sequence[ResourceRepr]:
        return (self.data,) if self.data is not None else ()

    def __init__(
        self,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        data: typing.Union[ResourceRepr, None, MissingType] = Missing,
        _source_: typing.Optional[Source] = None,
    ):
        """
        Either data or meta must be given; ``data=None`` stands for ``"data": null``.
        """
        if data is Missing and meta is None:
            raise ValueError("either data or meta must be specified")
        super().__init__(
            jsonapi=jsonapi,
            included=included,
            links=links,
            meta=meta,
            _source_=_source_,
        )
        self.data = (
            typing.cast(typing.Optional[ResourceRepr], data) if data is not Missing else None
        )


@dataclasses.dataclass(init=False)
class CollectionDocumentRepr(DocumentReprBase):
    data: typing.Sequence[ResourceRepr] = ()

    def primary_resources(self) -> typing.Sequence[ResourceRepr]:
        return self.data

    def __init__(
        self,
        jsonapi: typing.Optional[typing.Dict[str, typing.Any]] = None,
        included: typing.Sequence[ResourceRepr] = (),
        links: typing.Optional[LinksRepr] = None,
        meta: typing.Optional[typing.Dict[str, typing.Any]] = None,
        data: typing.Optional[typing.Sequence[ResourceRepr]] = None,
        _source_: typing.Optional[Source] = None,
    ):
        """
        Either data or meta must be given; an empty sequence is a valid ``data``.
        """
        if data is None and meta is None:
            raise ValueError("either data or meta must be specified")
        super().__init__(
            jsonapi=jsonapi,
            included=included,
            links=links,
            meta=meta,
            _source_=_source_,
        )
        self.data = tuple(data or ())
