from __future__ import annotations

import copy
import types
from typing import Any, Callable, Generic, Protocol, TypeVar, runtime_checkable

V = TypeVar("V")
V_co = TypeVar("V_co", covariant=True)


@runtime_checkable
class DefaultFn(Protocol[V_co]):
    """Produces a value for a key that is not yet stored."""

    def __call__(self) -> V_co:
        ...

    def clone(self) -> DefaultFn[V_co]:
        ...


def _clone_cell(cell: types.CellType, memo: dict[int, Any]) -> types.CellType:
    try:
        contents = cell.cell_contents
    except ValueError:  # unbound
        return types.CellType()
    return types.CellType(copy.deepcopy(contents, memo))


def clone_callable(f: Callable[[], V]) -> Callable[[], V]:
    """Copy `f` together with any state it carries.

    `copy.deepcopy` treats functions and builtin methods as atomic, so closures
    are rebuilt over copied cells and builtin methods are rebound to a copy of
    their instance.

    """
    if isinstance(f, types.FunctionType):
        if not f.__closure__:
            return f
        memo: dict[int, Any] = {}
        out = types.FunctionType(
            f.__code__,
            f.__globals__,
            f.__name__,
            f.__defaults__,
            tuple(_clone_cell(c, memo) for c in f.__closure__),
        )
        out.__kwdefaults__ = f.__kwdefaults__
        out.__qualname__ = f.__qualname__
        out.__dict__.update(f.__dict__)
        return out
    if isinstance(f, (types.BuiltinMethodType, types.MethodWrapperType)):
        bound = f.__self__
        if bound is None or isinstance(bound, (types.ModuleType, type)):
            return f
        rebound: Callable[[], V] = getattr(copy.deepcopy(bound), f.__name__)
        return rebound
    return copy.deepcopy(f)


class FnDefault(Generic[V]):
    """Calls `f` anew on every miss, so each key may get a different value."""

    __slots__ = ("f",)

    f: Callable[[], V]

    def __init__(self, f: Callable[[], V]) -> None:
        if not callable(f):
            raise TypeError(f"Default function must be callable, got: {f!r}")
        self.f = f

    def __call__(self) -> V:
        return self.f()

    def clone(self) -> FnDefault[V]:
        return FnDefault(clone_callable(self.f))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, FnDefault):
            return False
        return self.f == other.f  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return f"FnDefault({self.f!r})"


class ConstantDefault(Generic[V]):
    __slots__ = ("value",)

    value: V

    def __init__(self, value: V) -> None:
        self.value = value

    def __call__(self) -> V:
        return copy.deepcopy(self.value)

    def clone(self) -> ConstantDefault[V]:
        return ConstantDefault(copy.deepcopy(self.value))

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ConstantDefault):
            return False
        return self.value == other.value  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        return f"ConstantDefault({self.value!r})"


class TypeDefault(Generic[V]):
    """The zero/empty value of a type, `int` -> 0, `list` -> []."""

    __slots__ = ("t",)

    t: type[V]

    def __init__(self, t: type[V]) -> None:
        if not callable(t):
            raise TypeError(f"Default type must be callable, got: {t!r}")
        self.t = t

    def __call__(self) -> V:
        return self.t()

    def clone(self) -> TypeDefault[V]:
        return TypeDefault(self.t)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, TypeDefault):
            return False
        return self.t is other.t

    def __repr__(self) -> str:
        return f"TypeDefault({getattr(self.t, '__name__', self.t)})"


def is_default_fn(o: object) -> bool:
    return isinstance(o, DefaultFn)


def as_default_fn(default: Any) -> DefaultFn[Any]:
    """Interpret `default` the way the literal constructors do.

    DefaultFn -> as is
    type      -> TypeDefault
    other     -> ConstantDefault

    """
    if isinstance(default, type):
        return TypeDefault(default)
    if is_default_fn(default):
        return default  # type: ignore[no-any-return]
    return ConstantDefault(default)
