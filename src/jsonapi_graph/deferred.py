import typing

T = typing.TypeVar("T")


class Deferred(typing.Generic[T]):
    """
    A deferred object wraps a value that cannot be computed yet, typically a model class
    referred to before its own ``class`` statement has finished.
    The yielder is invoked on the first call and its result is kept.

    .. code-block:: python

       class Category(Model):
           class Meta:
               relationships = {"parent": ToOne(Deferred(lambda: Category))}

    :param Callable[..., T] yielder: a callable that resolves the value.
    :param args: positional arguments for the yielder.
    :param kwargs: keyword arguments for the yielder.
    """

    _yielder: typing.Callable[..., T]
    _value_yielded: bool = False
    _value: typing.Optional[T] = None
    _args: typing.Sequence[typing.Any]
    _kwargs: typing.Mapping[str, typing.Any]

    def __init__(self, yielder: typing.Callable[..., T], *args, **kwargs) -> None:
        self._yielder = yielder
        self._args = args
        self._kwargs = kwargs

    def __call__(self) -> T:
        if not self._value_yielded:
            self._value = self._yielder(*self._args, **self._kwargs)
            self._value_yielded = True
        return typing.cast(T, self._value)


def resolve(value: typing.Union[T, Deferred[T]]) -> T:
    if isinstance(value, Deferred):
        return value()
    else:
        return value
