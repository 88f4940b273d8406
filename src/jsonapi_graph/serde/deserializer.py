import collections.abc
import dataclasses
import json
import typing

from .exceptions import DeserializationError
from .models import (
    CollectionDocumentRepr,
    DocumentReprBase,
    LinkageRepr,
    LinksRepr,
    Missing,
    MissingType,
    ResourceIdRepr,
    ResourceRepr,
    SingletonDocumentRepr,
)
from .types import JSONObject, JSONValue
from .utils import JSONPointer

LINK_MEMBERS = {
    "self": "self_",
    "related": "related",
    "next": "next",
    "prev": "prev",
    "first": "first",
    "last": "last",
}


def json_type_repr(value: JSONValue) -> str:
    if value is None:
        return "null"
    elif isinstance(value, bool):
        return "boolean"
    elif isinstance(value, (int, float)):
        return "number"
    elif isinstance(value, str):
        return "string"
    elif isinstance(value, collections.abc.Mapping):
        return "object"
    elif isinstance(value, collections.abc.Sequence):
        return "array"
    else:
        return type(value).__name__


@dataclasses.dataclass
class JsonicDataValidationError:
    pointer: JSONPointer
    message: str


class ErrorCollectingContext:
    errors: typing.List[JsonicDataValidationError]
    max_errors: typing.Optional[int]

    @property
    def stopped(self) -> bool:
        return self.max_errors is not None and len(self.errors) >= self.max_errors

    def validation_error_occurred(self, pointer: JSONPointer, message: str) -> None:
        if not self.stopped:
            self.errors.append(JsonicDataValidationError(pointer, message))

    def __init__(self, max_errors: typing.Optional[int] = None):
        self.errors = []
        self.max_errors = max_errors


class ReprDeserializer:
    """
    :py:class:`ReprDeserializer` turns an already parsed JSON:API response body into
    a :py:class:`SingletonDocumentRepr` or a :py:class:`CollectionDocumentRepr`.

    Every validation problem found in the payload is collected together with the pointer
    to the offending node, and they are raised at once as a :py:class:`DeserializationError`.

    :param Optional[int] max_errors: stop collecting after this many errors.
    """

    max_errors: typing.Optional[int]

    def _expect_object(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue, what: str
    ) -> typing.Optional[JSONObject]:
        if not isinstance(value, collections.abc.Mapping):
            ctx.validation_error_occurred(
                pointer,
                f"value has type {json_type_repr(value)} ({json.dumps(value, default=repr)}) where {what} expected",
            )
            return None
        return value

    def _expect_string(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject, key: str
    ) -> typing.Optional[str]:
        if key not in value:
            ctx.validation_error_occurred(pointer / key, f'value must have a property "{key}"')
            return None
        v = value[key]
        if not isinstance(v, str):
            ctx.validation_error_occurred(
                pointer / key, f"value has type {json_type_repr(v)} where string expected"
            )
            return None
        return v

    def _convert_meta(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject
    ) -> typing.Optional[typing.Dict[str, typing.Any]]:
        if "meta" not in value:
            return None
        meta = self._expect_object(ctx, pointer / "meta", value["meta"], "object")
        return dict(meta) if meta is not None else None

    def _convert_links(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONObject
    ) -> typing.Optional[LinksRepr]:
        if "links" not in value:
            return None
        pointer = pointer / "links"
        links = self._expect_object(ctx, pointer, value["links"], "links object")
        if links is None:
            return None
        kwargs: typing.Dict[str, typing.Optional[str]] = {}
        for k, v in links.items():
            name = LINK_MEMBERS.get(k)
            if name is None:
                continue
            if isinstance(v, collections.abc.Mapping):
                # link object
                v = v.get("href")
            if v is not None and not isinstance(v, str):
                ctx.validation_error_occurred(
                    pointer / k, f"value has type {json_type_repr(v)} where URL expected"
                )
                continue
            kwargs[name] = v
        return LinksRepr(_source_=pointer, **kwargs)

    def _convert_resource_id(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceIdRepr]:
        obj = self._expect_object(ctx, pointer, value, "resource identifier")
        if obj is None:
            return None
        type_ = self._expect_string(ctx, pointer, obj, "type")
        id_ = self._expect_string(ctx, pointer, obj, "id")
        if type_ is None or id_ is None:
            return None
        return ResourceIdRepr(
            type=type_,
            id=id_,
            meta=self._convert_meta(ctx, pointer, obj),
            _source_=pointer,
        )

    def _convert_linkage(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[LinkageRepr]:
        obj = self._expect_object(ctx, pointer, value, "relationship object")
        if obj is None:
            return None
        data: typing.Union[None, ResourceIdRepr, typing.Sequence[ResourceIdRepr]] = None
        data_present = "data" in obj
        if data_present:
            _data = obj["data"]
            if isinstance(_data, collections.abc.Mapping):
                data = self._convert_resource_id(ctx, pointer / "data", _data)
            elif isinstance(_data, collections.abc.Sequence) and not isinstance(_data, str):
                stubs = [
                    self._convert_resource_id(ctx, pointer / "data" / i, v)
                    for i, v in enumerate(_data)
                ]
                data = [stub for stub in stubs if stub is not None]
            elif _data is not None:
                ctx.validation_error_occurred(
                    pointer / "data",
                    f"value has type {json_type_repr(_data)} where resource linkage expected",
                )
        return LinkageRepr(
            data=data,
            data_present=data_present,
            links=self._convert_links(ctx, pointer, obj),
            meta=self._convert_meta(ctx, pointer, obj),
            _source_=pointer,
        )

    def _convert_resource(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Optional[ResourceRepr]:
        obj = self._expect_object(ctx, pointer, value, "resource")
        if obj is None:
            return None
        type_ = self._expect_string(ctx, pointer, obj, "type")

        id_: typing.Optional[str] = None
        if obj.get("id") is not None:
            id_ = self._expect_string(ctx, pointer, obj, "id")

        attributes: typing.Mapping[str, typing.Any] = {}
        if "attributes" in obj:
            attributes = (
                self._expect_object(ctx, pointer / "attributes", obj["attributes"], "object")
                or {}
            )

        relationships: typing.List[typing.Tuple[str, LinkageRepr]] = []
        if "relationships" in obj:
            _relationships = self._expect_object(
                ctx, pointer / "relationships", obj["relationships"], "object"
            )
            for k, v in (_relationships or {}).items():
                linkage = self._convert_linkage(ctx, pointer / "relationships" / k, v)
                if linkage is not None:
                    relationships.append((k, linkage))
                if ctx.stopped:
                    break

        if type_ is None:
            return None

        return ResourceRepr(
            type=type_,
            id=id_,
            attributes=attributes.items(),
            relationships=relationships,
            links=self._convert_links(ctx, pointer, obj),
            meta=self._convert_meta(ctx, pointer, obj),
            _source_=pointer,
        )

    def _convert_resources(
        self, ctx: ErrorCollectingContext, pointer: JSONPointer, value: JSONValue
    ) -> typing.Sequence[ResourceRepr]:
        if value is None:
            return ()
        if not isinstance(value, collections.abc.Sequence) or isinstance(value, str):
            ctx.validation_error_occurred(
                pointer, f"value has type {json_type_repr(value)} where array expected"
            )
            return ()
        resources = []
        for i, v in enumerate(value):
            resource = self._convert_resource(ctx, pointer / i, v)
            if resource is not None:
                resources.append(resource)
            if ctx.stopped:
                break
        return resources

    def _convert_document(
        self,
        ctx: ErrorCollectingContext,
        result_type: typing.Type[DocumentReprBase],
        document: JSONValue,
    ) -> typing.Optional[DocumentReprBase]:
        pointer = JSONPointer("/")
        obj = self._expect_object(ctx, pointer, document, "document")
        if obj is None:
            return None

        meta = self._convert_meta(ctx, pointer, obj)
        if "data" not in obj and meta is None:
            ctx.validation_error_occurred(pointer / "data", 'value must have a property "data"')
            return None

        data: typing.Any
        if issubclass(result_type, CollectionDocumentRepr):
            data = self._convert_resources(ctx, pointer / "data", obj.get("data"))
        else:
            data = Missing
            if "data" in obj:
                _data = obj["data"]
                if _data is None:
                    data = None
                elif isinstance(_data, collections.abc.Mapping):
                    data = self._convert_resource(ctx, pointer / "data", _data)
                else:
                    ctx.validation_error_occurred(
                        pointer / "data",
                        f"value has type {json_type_repr(_data)} where resource expected",
                    )
            if isinstance(data, MissingType) and meta is None:
                return None

        included = self._convert_resources(ctx, pointer / "included", obj.get("included"))

        jsonapi: typing.Optional[JSONObject] = None
        if "jsonapi" in obj:
            jsonapi = self._expect_object(ctx, pointer / "jsonapi", obj["jsonapi"], "object")

        return result_type(
            jsonapi=dict(jsonapi) if jsonapi is not None else None,
            included=included,
            links=self._convert_links(ctx, pointer, obj),
            meta=meta,
            data=data,
            _source_=pointer,
        )

    @staticmethod
    def infer_document_type(document: JSONValue) -> typing.Type[DocumentReprBase]:
        """
        Tells which document representation suits ``document`` judging from its ``data`` member.
        """
        if isinstance(document, collections.abc.Mapping):
            data = document.get("data")
            if isinstance(data, collections.abc.Sequence) and not isinstance(data, str):
                return CollectionDocumentRepr
        return SingletonDocumentRepr

    T = typing.TypeVar("T", bound=DocumentReprBase)

    def __call__(self, result_type: typing.Type[T], document: JSONValue) -> T:
        ctx = ErrorCollectingContext(self.max_errors)
        retval = self._convert_document(ctx, result_type, document)
        if ctx.errors:
            raise DeserializationError(document, ctx.errors)
        assert retval is not None
        return typing.cast(typing.Any, retval)

    def __init__(self, max_errors: typing.Optional[int] = None):
        self.max_errors = max_errors
