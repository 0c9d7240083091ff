from typing import Any, Iterator

import icdiff
import pytest
from prettyprinter import install_extras, pformat

from defaultmap.config import get_config

install_extras(warn_on_error=False)


class Counter:
    """Stateful default: 0, 1, 2, ..."""

    def __init__(self) -> None:
        self.n = -1

    def __call__(self) -> int:
        self.n += 1
        return self.n


@pytest.fixture
def counter() -> Counter:
    return Counter()


@pytest.fixture
def fresh_config() -> Iterator[None]:
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def pytest_assertrepr_compare(
    config: Any, op: Any, left: Any, right: Any
) -> list[str] | None:
    return pretty_compare(config, op, left, right)


def pretty_compare(config: Any, op: str, left: Any, right: Any) -> list[str] | None:
    """Heavily influenced by https://github.com/hjwp/pytest-icdiff."""
    very_verbose = config.option.verbose >= 2
    if not very_verbose:
        return None

    if op != "==":
        return None

    try:
        if abs(left + right) < 100:
            return None
    except TypeError:
        pass

    try:
        if hasattr(left, "into_dict") and hasattr(right, "into_dict"):
            left, right = left.into_dict(), right.into_dict()
        pretty_left = pformat(
            left, indent=4, width=79, sort_dict_keys=True
        ).splitlines()
        pretty_right = pformat(
            right, indent=4, width=79, sort_dict_keys=True
        ).splitlines()
        differ = icdiff.ConsoleDiff(cols=160, tabsize=4)
        icdiff_lines = list(differ.make_table(pretty_left, pretty_right, context=False))

        return (
            ["equals failed"]
            + ["<left>".center(79) + "|" + "<right>".center(80)]
            + ["-" * 160]
            + [icdiff.color_codes["none"] + l for l in icdiff_lines]
        )
    except Exception:
        return None
