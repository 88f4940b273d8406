import typing

JSONScalar = typing.Union[bool, int, float, str]
JSONArray = typing.Sequence[typing.Any]
JSONObject = typing.Mapping[str, typing.Any]
JSONValue = typing.Union[JSONScalar, JSONArray, JSONObject, None]

ResourceKey = typing.Tuple[str, str]
"""
The ``(type, id)`` pair that identifies a resource within a single document.
"""
