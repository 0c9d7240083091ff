from __future__ import annotations

import copy
import logging
from typing import (
    Any,
    Callable,
    Final,
    Generic,
    Iterable,
    Iterator,
    Mapping,
    Self,
    TypeVar,
)

import immutables

from defaultmap.config import get_config
from defaultmap.default_fn import (
    ConstantDefault,
    DefaultFn,
    FnDefault,
    TypeDefault,
    as_default_fn,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

Entries = Mapping[K, V] | Iterable[tuple[K, V]]

_MISSING: Final = object()


def _pairs(data: Entries[K, V] | None) -> Iterable[tuple[K, V]]:
    if data is None:
        return ()
    if hasattr(data, "items"):
        return data.items()  # type: ignore[no-any-return]
    return data  # type: ignore[return-value]


class DefaultHashMap(Generic[K, V]):
    """A hash map that returns a default when keys are accessed that are not present.

    The entries live in an `immutables.Map` that is rebound on every mutation,
    so iterators and copies always see a consistent snapshot.

    """

    __slots__ = ("default_fn", "d")

    default_fn: DefaultFn[V]
    d: immutables.Map[K, V]

    def __init__(
        self, default_fn: DefaultFn[V], data: Entries[K, V] | None = None
    ) -> None:
        self.default_fn = default_fn
        self._replace(immutables.Map(_pairs(data)))

    # Constructors

    @classmethod
    def new(cls, t: type[V]) -> Self:
        """Empty map using `t()` (0, "", [] etc.) as the default for missing keys."""
        return cls(TypeDefault(t))

    @classmethod
    def from_map(cls, data: Entries[K, V], t: type[V]) -> Self:
        return cls(TypeDefault(t), data)

    @classmethod
    def with_default(cls, default: V) -> Self:
        """Empty map with a copy of `default` as the default for missing keys."""
        return cls(ConstantDefault(default))

    @classmethod
    def from_map_with_default(cls, data: Entries[K, V], default: V) -> Self:
        """Takes over the entries of `data`, `data` itself is left untouched."""
        return cls(ConstantDefault(default), data)

    @classmethod
    def with_fn(cls, f: Callable[[], V]) -> Self:
        """Empty map calling `f()` for every missing key."""
        return cls(FnDefault(f))

    @classmethod
    def from_map_with_fn(cls, data: Entries[K, V], f: Callable[[], V]) -> Self:
        return cls(FnDefault(f), data)

    @classmethod
    def from_iter(cls, pairs: Iterable[tuple[K, V]], default: Any) -> Self:
        """Later pairs win for repeated keys, like `dict(pairs)`.

        `default` may be a DefaultFn, a type or a constant value.

        """
        return cls(as_default_fn(default), pairs)

    # Storage, every mutation goes through these

    def _set(self, k: K, v: V) -> None:
        self.d = self.d.set(k, v)

    def _delete(self, k: K) -> None:
        self.d = self.d.delete(k)

    def _replace(self, d: immutables.Map[K, V]) -> None:
        self.d = d

    # Default handling

    def get(self, k: K) -> V:
        """Return the value stored for `k`.

        This is not a side effect free read, when `k` is missing the default
        is generated, stored under `k` and the stored instance is returned.
        Use `contains_key` to check for a key without inserting it.

        """
        if k in self.d:
            return self.d[k]
        v = self.default_fn()
        if get_config().LOG_GENERATED:
            logger.debug("Generated default %r for missing key %r", v, k)
        self._set(k, v)
        return v

    def get_default(self) -> V:
        """Return a freshly generated default without storing it."""
        return self.default_fn()

    def set_default(self, default: V) -> None:
        """Change the default for keys that are not yet stored."""
        self.set_default_fn(ConstantDefault(default))

    def set_default_fn(self, default_fn: DefaultFn[V] | Callable[[], V]) -> None:
        if not isinstance(default_fn, DefaultFn):
            default_fn = FnDefault(default_fn)
        logger.debug("Replacing default %r with %r", self.default_fn, default_fn)
        self.default_fn = default_fn  # type: ignore[assignment]

    def __getitem__(self, k: K) -> V:
        return self.get(k)

    def __setitem__(self, k: K, v: V) -> None:
        # A miss always materializes the default first, even when it is
        # immediately overwritten.
        if k not in self.d:
            self.get(k)
        self._set(k, v)

    def __delitem__(self, k: K) -> None:
        self._delete(k)

    # Pass through to the underlying map

    def insert(self, k: K, v: V) -> V | None:
        """Store `v` without generating a default, return the previous value."""
        previous = self.d.get(k)
        self._set(k, v)
        return previous

    def remove(self, k: K) -> V | None:
        if k not in self.d:
            return None
        v = self.d[k]
        self._delete(k)
        return v

    def remove_entry(self, k: K) -> tuple[K, V] | None:
        if k not in self.d:
            return None
        v = self.d[k]
        self._delete(k)
        return k, v

    def pop(self, k: K, default: Any = _MISSING) -> Any:
        if k not in self.d:
            if default is _MISSING:
                raise KeyError(k)
            return default
        v = self.d[k]
        self._delete(k)
        return v

    def contains_key(self, k: K) -> bool:
        return k in self.d

    def __contains__(self, other: object) -> bool:
        return other in self.d

    def keys(self) -> Iterator[K]:
        yield from self.d.keys()

    def values(self) -> Iterator[V]:
        yield from self.d.values()

    def items(self) -> Iterator[tuple[K, V]]:
        for k, v in self.d.items():
            yield k, v

    def __iter__(self) -> Iterator[K]:
        return self.keys()

    def __len__(self) -> int:
        return len(self.d)

    def is_empty(self) -> bool:
        return len(self.d) == 0

    def __bool__(self) -> bool:
        return bool(self.d)

    def clear(self) -> None:
        self._replace(immutables.Map())

    def drain(self) -> Iterator[tuple[K, V]]:
        """Remove every entry, returning an iterator over the removed entries."""
        drained = list(self.items())
        self.clear()
        return iter(drained)

    def retain(self, f: Callable[[K, V], bool]) -> None:
        for k, v in list(self.items()):
            if not f(k, v):
                self._delete(k)

    def update(self, data: Entries[K, V]) -> None:
        for k, v in _pairs(data):
            self._set(k, v)

    def into_dict(self) -> dict[K, V]:
        return dict(self.items())

    def clone(self) -> Self:
        return copy.deepcopy(self)

    def __copy__(self) -> Self:
        return type(self)(self.default_fn.clone(), self.d)

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        entries = [
            (copy.deepcopy(k, memo), copy.deepcopy(v, memo)) for k, v in self.items()
        ]
        return type(self)(self.default_fn.clone(), entries)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return False
        return self.d == other.d  # type: ignore[no-any-return]

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name}({self.into_dict()!r}, default={self.default_fn!r})"


def defaulthashmap(
    entries: Entries[K, V] | None = None, /, default: Any = int
) -> DefaultHashMap[K, V]:
    """Literal style constructor.

        defaulthashmap()                        # int, missing keys are 0
        defaulthashmap(default=5)
        defaulthashmap({1: 10, 5: 20}, default=list)

    """
    return DefaultHashMap(as_default_fn(default), entries)
