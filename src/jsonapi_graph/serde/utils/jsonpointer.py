import typing


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def _unescape(token: str) -> str:
    return token.replace("~1", "/").replace("~0", "~")


class JSONPointer:
    """
    A :py:class:`JSONPointer` identifies a node inside a JSON document
    (`RFC 6901 <https://tools.ietf.org/html/rfc6901>`_).

    Both ``""`` and ``"/"`` denote the document root, and the root renders as ``"/"``.
    A child pointer is derived with the ``/`` operator:

    .. code-block:: python

       JSONPointer("/data") / "relationships" / 0  # JSONPointer("/data/relationships/0")
    """

    tokens: typing.Tuple[str, ...]

    def __truediv__(self, token: typing.Union[str, int]) -> "JSONPointer":
        return type(self)(self.tokens + (str(token),))

    def __eq__(self, that: typing.Any) -> bool:
        if isinstance(that, str):
            try:
                that = type(self)(that)
            except ValueError:
                return False
        elif not isinstance(that, JSONPointer):
            return NotImplemented
        return self.tokens == that.tokens

    def __hash__(self) -> int:
        return hash(self.tokens)

    def __str__(self) -> str:
        return "/" + "/".join(_escape(token) for token in self.tokens)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"

    def resolve(self, document: typing.Any) -> typing.Any:
        """
        Returns the node the pointer refers to in ``document``.

        :raises KeyError: if the node does not exist.
        """
        node = document
        for token in self.tokens:
            if isinstance(node, (list, tuple)):
                try:
                    node = node[int(token)]
                except (ValueError, IndexError):
                    raise KeyError(str(self))
            else:
                node = node[token]
        return node

    def __init__(self, pointer: typing.Union[str, typing.Iterable[str]] = "/"):
        if isinstance(pointer, str):
            if pointer in ("", "/"):
                self.tokens = ()
            elif not pointer.startswith("/"):
                raise ValueError(f"invalid JSON pointer: {pointer!r}")
            else:
                self.tokens = tuple(_unescape(token) for token in pointer[1:].split("/"))
        else:
            self.tokens = tuple(pointer)
