import typing

from .exceptions import InvalidStructureError
from .models import Model
from .serde.models import ResourceRepr
from .serde.types import ResourceKey

T = typing.TypeVar("T")


class _TypedIndex(typing.Generic[T]):
    _buckets: typing.Dict[str, typing.Dict[str, T]]

    def get(self, type_: str, id_: str) -> typing.Optional[T]:
        bucket = self._buckets.get(type_)
        if bucket is None:
            return None
        return bucket.get(id_)

    def has_type(self, type_: str) -> bool:
        return type_ in self._buckets

    def _put(self, type_: str, id_: str, value: T) -> None:
        self._buckets.setdefault(type_, {})[id_] = value

    def __contains__(self, key: ResourceKey) -> bool:
        type_, id_ = key
        return id_ in self._buckets.get(type_, ())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __iter__(self) -> typing.Iterator[T]:
        for bucket in self._buckets.values():
            yield from bucket.values()

    def __init__(self):
        self._buckets = {}


class ResourceIndex(_TypedIndex[ResourceRepr]):
    """
    A :py:class:`ResourceIndex` looks resource documents up by ``(type, id)``.

    It is filled through :py:meth:`build`, which indexes the ``included`` documents
    before the primary ones, and is frozen afterwards.
    """

    _frozen: bool = False

    def index_doc(self, doc: ResourceRepr) -> None:
        """
        Adds a document. A later document with the same ``(type, id)`` replaces the earlier one.
        """
        if self._frozen:
            raise RuntimeError("resource index is frozen")
        if doc.id is None:
            raise InvalidStructureError(
                f'resource of type "{doc.type}" has no id and cannot be referenced',
                doc._source_,
            )
        self._put(doc.type, doc.id, doc)

    def lookup(self, type_: str, id_: str) -> typing.Optional[ResourceRepr]:
        return self.get(type_, id_)

    def freeze(self) -> None:
        self._frozen = True

    @classmethod
    def build(
        cls,
        included: typing.Iterable[ResourceRepr],
        primary: typing.Iterable[ResourceRepr],
    ) -> "ResourceIndex":
        index = cls()
        for doc in included:
            index.index_doc(doc)
        for doc in primary:
            index.index_doc(doc)
        index.freeze()
        return index


class ModelIndex(_TypedIndex[Model]):
    """
    A :py:class:`ModelIndex` holds the one model instance materialized for each ``(type, id)``.
    Entries are never replaced.
    """

    def set(self, type_: str, id_: str, model: Model) -> Model:
        """
        Registers ``model`` unless a model is already registered under the same key.

        :return: the model registered under the key after the call.
        """
        existing = self.get(type_, id_)
        if existing is not None:
            return existing
        self._put(type_, id_, model)
        return model
