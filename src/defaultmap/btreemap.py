from __future__ import annotations

import logging
from typing import Any, Final, Iterator

import immutables

from defaultmap import _btree
from defaultmap.default_fn import as_default_fn
from defaultmap.hashmap import DefaultHashMap, Entries, K, V

logger = logging.getLogger(__name__)

# Stale keys tolerated in the index before it is rebuilt.
MIN_STALE: Final = 32


class DefaultBTreeMap(DefaultHashMap[K, V]):
    """A `DefaultHashMap` that iterates in ascending key order.

    Keys must be orderable against each other. Removed keys stay in the
    B-tree until enough of them pile up, iteration skips them.

    """

    __slots__ = ("btree", "indexed")

    btree: _btree.Node[K]
    indexed: immutables.Map[K, None]

    def _set(self, k: K, v: V) -> None:
        if k not in self.indexed:
            self.btree = _btree.add(self.btree, k)
            self.indexed = self.indexed.set(k, None)
        self.d = self.d.set(k, v)

    def _delete(self, k: K) -> None:
        self.d = self.d.delete(k)
        stale = len(self.indexed) - len(self.d)
        if stale > MIN_STALE and stale > len(self.d):
            logger.debug(
                "Compacting key index, %s of %s stale", stale, len(self.indexed)
            )
            self._replace(self.d)

    def _replace(self, d: immutables.Map[K, V]) -> None:
        keys = sorted(d.keys())  # type: ignore[type-var]
        self.btree = _btree.from_keys(keys)
        self.indexed = immutables.Map((k, None) for k in keys)
        self.d = d

    def keys(self) -> Iterator[K]:
        d = self.d
        for k in _btree.yield_sorted(self.btree):
            if k in d:
                yield k

    def values(self) -> Iterator[V]:
        for _, v in self.items():
            yield v

    def items(self) -> Iterator[tuple[K, V]]:
        d = self.d
        for k in _btree.yield_sorted(self.btree):
            if k in d:
                yield k, d[k]



def defaultbtreemap(
    entries: Entries[K, V] | None = None, /, default: Any = int
) -> DefaultBTreeMap[K, V]:
    """Literal style constructor, see `defaulthashmap`."""
    return DefaultBTreeMap(as_default_fn(default), entries)
