"""Translation options.

Options can come from keyword arguments, CLI flags, or a YAML file.
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field


class TranslationOptions(BaseModel):
    """Settings for one translation run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    source_name: str = "api"
    custom_scalars: bool = True  # DateTime / Byte / BigInt instead of String
    body_argument_name: str = "input"
    prefer_operation_id: bool = True
    include_unreferenced_schemas: bool = False
    collision_policy: Literal["suffix", "error"] = "suffix"
    max_name_suffix: int = Field(default=1000, ge=2)


def load_options(config_path: Path | None = None, **overrides) -> TranslationOptions:
    """Build options from an optional YAML file plus explicit overrides.

    Overrides set to None are ignored so unset CLI flags keep the file's value.
    """
    data: dict = {}
    if config_path is not None:
        loaded = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if loaded is not None:
            if not isinstance(loaded, dict):
                raise ValueError(f"{config_path}: expected a mapping of options")
            data.update(loaded)

    data.update({key: value for key, value in overrides.items() if value is not None})
    return TranslationOptions(**data)
