# This is a version of https://gist.github.com/natekupp/1763661 without
# using mutation and with some other simplifications.
from __future__ import annotations

from bisect import bisect_right
from typing import Final, Generic, Iterable, Iterator, TypeVar

K = TypeVar("K")

MAX_KEYS: Final = 15
J: Final = MAX_KEYS // 2  # the index of the middle element


class Node(Generic[K]):
    __slots__ = ("keys", "children")

    def __init__(self, keys: tuple[K, ...], children: tuple[Node[K], ...]) -> None:
        self.keys: tuple[K, ...] = keys
        self.children: tuple[Node[K], ...] = children


def _split(node: Node[K], i: int) -> Node[K]:
    child = node.children[i]
    keys_before, key, keys_after = child.keys[:J], child.keys[J], child.keys[J + 1 :]
    children_before, children_after = child.children[: J + 1], child.children[J + 1 :]

    return Node(
        node.keys[:i] + (key,) + node.keys[i:],
        node.children[:i]
        + (
            Node(keys_before, children_before),
            Node(keys_after, children_after),
        )
        + node.children[i + 1 :],
    )


def add(node: Node[K], key: K) -> Node[K]:
    """Return a new tree with `key` added, `key` must not already be present."""
    if len(node.keys) == MAX_KEYS:
        node = _split(Node((), (node,)), 0)
    return _insert(node, key)


def _insert(node: Node[K], key: K) -> Node[K]:
    i = bisect_right(node.keys, key)  # type: ignore[type-var]

    if not node.children:  # i.e. is a leaf
        return Node(node.keys[:i] + (key,) + node.keys[i:], node.children)

    if len(node.children[i].keys) == MAX_KEYS:
        node = _split(node, i)
        i = i + 1 if node.keys[i] < key else i  # type: ignore[operator]

    new_child = _insert(node.children[i], key)
    return Node(node.keys, node.children[:i] + (new_child,) + node.children[i + 1 :])


def from_keys(keys: Iterable[K]) -> Node[K]:
    node = Node[K]((), ())
    for key in keys:
        node = add(node, key)
    return node


def yield_sorted(node: Node[K]) -> Iterator[K]:
    if not node.children:
        yield from node.keys
        return

    for child, key in zip(node.children, node.keys):
        yield from yield_sorted(child)
        yield key

    yield from yield_sorted(node.children[-1])
