"""
Read-only views over a scoped context.

with_ref operations receive read_only(context). Immutable values
(numbers, strings, bytes, tuples, frozensets, None) cannot be rebound in
place and are handed over unchanged. Anything else is wrapped in a
ReadOnlyView, which forwards reads (attributes, method calls, indexing,
iteration, operators, formatting, the context-manager protocol) to the
wrapped object and rejects rebinding: attribute assignment and deletion,
item assignment and deletion.

The guard is shallow. Methods of the wrapped object are forwarded as-is,
so a method that mutates internally (list.append, file.write) still
runs. The view protects the context's bindings, not its internals.

A view is revoked once cleanup has run; any later use raises
ContextReleasedError.
"""

import operator
from typing import Any, Generic, Iterator, TypeVar

from .errors import ContextReleasedError, ReadOnlyContextError

C = TypeVar("C")

_TARGET = "_ReadOnlyView__target"
_REVOKED = object()

IMMUTABLE_TYPES = (
    int, float, complex, bool, str, bytes, tuple, frozenset, range, type(None),
)


def _target(view: "ReadOnlyView") -> Any:
    target = object.__getattribute__(view, _TARGET)
    if target is _REVOKED:
        raise ContextReleasedError("context was used after cleanup released it")
    return target


def _forward(op):
    def method(self, *args):
        return op(_target(self), *(unwrap_view(a) for a in args))
    return method


def _reflect(op):
    def method(self, other):
        return op(unwrap_view(other), _target(self))
    return method


class ReadOnlyView(Generic[C]):
    """Shallow read-only proxy for a context object."""

    __slots__ = ("__target",)

    def __init__(self, target: C):
        object.__setattr__(self, _TARGET, target)

    def __getattr__(self, name: str) -> Any:
        return getattr(_target(self), name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise ReadOnlyContextError(f"cannot set attribute {name!r} on a read-only context")

    def __delattr__(self, name: str) -> None:
        raise ReadOnlyContextError(f"cannot delete attribute {name!r} on a read-only context")

    def __setitem__(self, key: Any, value: Any) -> None:
        raise ReadOnlyContextError(f"cannot assign item {key!r} on a read-only context")

    def __delitem__(self, key: Any) -> None:
        raise ReadOnlyContextError(f"cannot delete item {key!r} on a read-only context")

    def __iter__(self) -> Iterator[Any]:
        return iter(_target(self))

    def __reversed__(self) -> Iterator[Any]:
        return reversed(_target(self))

    def __len__(self) -> int:
        return len(_target(self))

    def __contains__(self, item: Any) -> bool:
        return item in _target(self)

    def __bool__(self) -> bool:
        return bool(_target(self))

    def __hash__(self) -> int:
        return hash(_target(self))

    def __str__(self) -> str:
        return str(_target(self))

    def __format__(self, spec: str) -> str:
        return format(_target(self), spec)

    def __repr__(self) -> str:
        if object.__getattribute__(self, _TARGET) is _REVOKED:
            return "ReadOnlyView(<released>)"
        return f"ReadOnlyView({_target(self)!r})"

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return _target(self)(*args, **kwargs)

    def __enter__(self) -> Any:
        return _target(self).__enter__()

    def __exit__(self, exc_type, exc_value, traceback) -> Any:
        return _target(self).__exit__(exc_type, exc_value, traceback)

    def __int__(self) -> int:
        return int(_target(self))

    def __float__(self) -> float:
        return float(_target(self))

    def __index__(self) -> int:
        return operator.index(_target(self))

    # Slices are plain keys here, so indexing covers both.
    __getitem__ = _forward(operator.getitem)

    __eq__ = _forward(operator.eq)
    __ne__ = _forward(operator.ne)
    __lt__ = _forward(operator.lt)
    __le__ = _forward(operator.le)
    __gt__ = _forward(operator.gt)
    __ge__ = _forward(operator.ge)

    __add__ = _forward(operator.add)
    __sub__ = _forward(operator.sub)
    __mul__ = _forward(operator.mul)
    __matmul__ = _forward(operator.matmul)
    __truediv__ = _forward(operator.truediv)
    __floordiv__ = _forward(operator.floordiv)
    __mod__ = _forward(operator.mod)
    __pow__ = _forward(operator.pow)
    __lshift__ = _forward(operator.lshift)
    __rshift__ = _forward(operator.rshift)
    __and__ = _forward(operator.and_)
    __or__ = _forward(operator.or_)
    __xor__ = _forward(operator.xor)

    __radd__ = _reflect(operator.add)
    __rsub__ = _reflect(operator.sub)
    __rmul__ = _reflect(operator.mul)
    __rmatmul__ = _reflect(operator.matmul)
    __rtruediv__ = _reflect(operator.truediv)
    __rfloordiv__ = _reflect(operator.floordiv)
    __rmod__ = _reflect(operator.mod)
    __rpow__ = _reflect(operator.pow)
    __rlshift__ = _reflect(operator.lshift)
    __rrshift__ = _reflect(operator.rshift)
    __rand__ = _reflect(operator.and_)
    __ror__ = _reflect(operator.or_)
    __rxor__ = _reflect(operator.xor)

    __neg__ = _forward(operator.neg)
    __pos__ = _forward(operator.pos)
    __abs__ = _forward(operator.abs)
    __invert__ = _forward(operator.invert)


def read_only(context: C) -> Any:
    """Return context itself if it is immutable, else a ReadOnlyView over it."""
    if isinstance(context, IMMUTABLE_TYPES):
        return context
    return ReadOnlyView(context)


def unwrap_view(value: Any) -> Any:
    """Return the object behind a ReadOnlyView, or value unchanged."""
    if isinstance(value, ReadOnlyView):
        return _target(value)
    return value


def revoke(value: Any) -> None:
    """Detach a ReadOnlyView from its target; other values are ignored."""
    if isinstance(value, ReadOnlyView):
        object.__setattr__(value, _TARGET, _REVOKED)
