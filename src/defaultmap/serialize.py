"""Wire codecs, a default map serializes exactly like a plain dict of its entries.

The default is never written, so loading needs a freshly supplied one.

"""
from __future__ import annotations

import json
from typing import Any, Mapping, TypeVar

import ormsgpack

from defaultmap.config import get_config
from defaultmap.hashmap import DefaultHashMap

M = TypeVar("M", bound=DefaultHashMap[Any, Any])


def _entries(m: DefaultHashMap[Any, Any] | Mapping[Any, Any]) -> dict[Any, Any]:
    if isinstance(m, DefaultHashMap):
        return m.into_dict()
    return dict(m)


def _option() -> int | None:
    if get_config().SERIALIZE_NON_STR_KEYS:
        return ormsgpack.OPT_NON_STR_KEYS
    return None


def _wrap(t: type[M], o: Any, default: Any) -> M:
    if not isinstance(o, dict):
        raise RuntimeError(f"Expected a serialized map, got: {type(o).__name__}")
    return t.from_iter(o.items(), default)


def dump(m: DefaultHashMap[Any, Any] | Mapping[Any, Any]) -> bytes:
    return ormsgpack.packb(_entries(m), option=_option())


def load(
    raw: bytes,
    default: Any,
    t: type[M] = DefaultHashMap,  # type: ignore[assignment]
) -> M:
    """Load msgpack bytes written by `dump` (or by packing a plain dict).

    `default` may be a DefaultFn, a type or a constant value.

    """
    return _wrap(t, ormsgpack.unpackb(raw, option=_option()), default)


def dump_json(m: DefaultHashMap[Any, Any] | Mapping[Any, Any]) -> str:
    # As with a dict, non str keys come back as strings.
    return json.dumps(_entries(m), separators=(",", ":"))


def load_json(
    raw: str | bytes,
    default: Any,
    t: type[M] = DefaultHashMap,  # type: ignore[assignment]
) -> M:
    return _wrap(t, json.loads(raw), default)
