from __future__ import annotations

import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, FilePath, field_validator
from ruamel import yaml
from typing_extensions import Any, Self

from ndformat.flavors import Flavor, flavor_for_spec, render
from ndformat.utils.custom_logger import set_all_loggers_level

yaml = yaml.YAML(typ="safe")

ENV_PREFIX = "NDFORMAT_"


class FormatConfig(BaseModel):
    """Flavor and element spec for :meth:`render`, and the log level set by :meth:`apply`.

    The truncation limit is fixed and not part of the config.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", use_enum_values=False)

    flavor: Flavor = Flavor.PLAIN
    spec: str = Field(default="", description="Format spec applied to every element, without the flavor type char.")
    log_level: str = "WARNING"

    @field_validator("spec")
    @classmethod
    def _spec_has_no_type_char(cls, v: str) -> str:
        flavor, _ = flavor_for_spec(v)
        if flavor is not Flavor.PLAIN:
            msg = f"Element spec {v!r} ends in the type char of the {flavor.value} flavor; set `flavor` instead"
            raise ValueError(msg)
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            msg = f"Unknown log level: {v}"
            raise ValueError(msg)
        return v

    @classmethod
    def from_yaml(cls, path: FilePath | str) -> Self:
        data = yaml.load(Path(path).read_text()) or {}
        if not isinstance(data, dict):
            msg = f"Expected a mapping in {path}, got {type(data).__name__}"
            raise ValueError(msg)
        return cls.model_validate(data)

    @classmethod
    def from_env(cls) -> Self:
        """Read ``NDFORMAT_FLAVOR``, ``NDFORMAT_SPEC`` and ``NDFORMAT_LOG_LEVEL``."""
        data: dict[str, Any] = {}
        for name in cls.model_fields:
            value = os.getenv(f"{ENV_PREFIX}{name.upper()}")
            if value is not None:
                data[name] = value
        return cls.model_validate(data)

    @property
    def level(self) -> int:
        return logging.getLevelName(self.log_level)

    def render(self, array: Any) -> str:
        return render(array, self.flavor, self.spec)

    def apply(self) -> None:
        """Set the configured log level on every ``ndformat`` logger."""
        set_all_loggers_level(self.level, prefix="ndformat")
