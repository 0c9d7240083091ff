import os
from dataclasses import dataclass
from functools import cache


@dataclass
class Config:
    LOG_GENERATED: bool
    SERIALIZE_NON_STR_KEYS: bool


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


@cache
def get_config() -> Config:
    return Config(
        LOG_GENERATED=_flag("DEFAULTMAP_LOG_GENERATED", "0"),
        SERIALIZE_NON_STR_KEYS=_flag("DEFAULTMAP_SERIALIZE_NON_STR_KEYS", "1"),
    )
