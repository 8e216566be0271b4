from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from .bytes_encoding import BytesEncoding
from .const import CONF_BYTES_ENCODING, CONF_MAX_DEPTH, DEFAULT_MAX_DEPTH, MAX_DEPTH_LIMIT


class ConfigError(ValueError):
    pass


_MAX_DEPTH_VALIDATOR = vol.All(int, vol.Range(min=1, max=MAX_DEPTH_LIMIT))


@dataclass(frozen=True)
class ParserConfig:
    bytes_encoding: BytesEncoding = BytesEncoding.AUTO
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        try:
            _MAX_DEPTH_VALIDATOR(self.max_depth)
        except vol.Invalid as e:
            raise ConfigError(f"invalid max_depth {self.max_depth!r}: {e}") from e


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_BYTES_ENCODING, default=BytesEncoding.AUTO): vol.Coerce(BytesEncoding),
        vol.Optional(CONF_MAX_DEPTH, default=DEFAULT_MAX_DEPTH): _MAX_DEPTH_VALIDATOR,
    }
)


def config_from_dict(data: Mapping[str, Any] | None = None) -> ParserConfig:
    try:
        validated = CONFIG_SCHEMA(dict(data or {}))
    except vol.Invalid as e:
        raise ConfigError(f"invalid parser config: {e}") from e
    return ParserConfig(
        bytes_encoding=validated[CONF_BYTES_ENCODING],
        max_depth=validated[CONF_MAX_DEPTH],
    )
