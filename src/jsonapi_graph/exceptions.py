import abc
import typing

from .serde.models import ResourceIdRepr, Source
from .serde.types import ResourceKey


class JSONAPIGraphException(Exception, metaclass=abc.ABCMeta):
    message: str

    def __str__(self):
        return self.message


class InvalidDeclarationError(JSONAPIGraphException):
    def __init__(self, message: str):
        self.message = message


class MaterializationError(JSONAPIGraphException, metaclass=abc.ABCMeta):
    """
    Raised while a response document is being turned into a model graph.
    Any such error aborts the construction of the response.
    """

    @property
    @abc.abstractmethod
    def sources(self) -> typing.Sequence[Source]:
        ...  # pragma: nocover


class UnknownRelationKindError(MaterializationError):
    """
    Raised when the descriptor a model returns for a relationship is neither
    to-one nor to-many, or when the model declares no relationship by that name
    (``kind`` is :py:const:`None` then).
    """

    model_type: typing.Type
    name: str
    kind: typing.Any
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    def message(self):
        if self.kind is None:
            return f'relationship ({self.name}) is not declared in "{self.model_type.__name__}"'
        return f'relationship ({self.name}) in "{self.model_type.__name__}" is of unknown kind: {self.kind!r}'

    def __init__(
        self,
        model_type: typing.Type,
        name: str,
        kind: typing.Any,
        source: typing.Optional[Source] = None,
    ):
        self.model_type = model_type
        self.name = name
        self.kind = kind
        self._source = source


class InvalidStructureError(MaterializationError):
    message: str
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    def __init__(self, message: str, source: typing.Optional[Source] = None):
        self.message = message
        self._source = source


class MissingResourceError(MaterializationError):
    """
    Raised for a relationship stub whose resource is absent from the response,
    only when strict linkage is requested.
    """

    name: str
    stub: ResourceIdRepr

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self.stub._source_ is None:
            return []
        else:
            return [self.stub._source_]

    @property
    def message(self):
        return f'relationship ({self.name}) refers to "{self.stub.type}" resource {self.stub.id} which is not in the document'

    def __init__(self, name: str, stub: ResourceIdRepr):
        self.name = name
        self.stub = stub


class UnknownResourceTypeError(MaterializationError):
    name: str
    _source: typing.Optional[Source]

    @property
    def sources(self) -> typing.Sequence[Source]:
        if self._source is None:
            return []
        else:
            return [self._source]

    @property
    def message(self):
        return f'no model known as "{self.name}"'

    def __init__(self, name: str, source: typing.Optional[Source] = None):
        self.name = name
        self._source = source


class ConsistencyError(JSONAPIGraphException):
    """
    Signals a broken internal invariant: a resource that should have been materialized
    has no model. This never results from the payload itself.
    """

    key: ResourceKey

    @property
    def message(self):
        type_, id_ = self.key
        return f'no model has been materialized for "{type_}" resource {id_}'

    def __init__(self, key: ResourceKey):
        self.key = key
