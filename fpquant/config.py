"""Codec configuration loaded from ``fpquant.toml``.

Lookup order: the ``FPQUANT_CONFIG`` environment variable, an explicit path,
``./fpquant.toml``, ``~/fpquant.toml``. The file is optional; without one the
defaults below apply.

Example file:

    [codec]
    precision = "ten_thousandths"   # member name or decimal places
    dtype = "float64"               # float32 | float64
    lane_bytes = 32768
"""

from __future__ import annotations

import os
from typing import Any, Literal, cast

from pydantic import BaseModel, Field, field_validator

# TOML loading for Python 3.11+ and older
try:
    import tomllib  # type: ignore[import-not-found, unused-ignore]
except ImportError:
    import tomli as tomllib  # type: ignore[import-not-found, no-redef, unused-ignore]

from fpquant.components.precision import Precision
from fpquant.core.codec import DEFAULT_LANE_BYTES

CONFIG_ENV_VAR = "FPQUANT_CONFIG"
CONFIG_FILENAME = "fpquant.toml"


class CodecConfig(BaseModel):
    """Defaults used by the high-level API and the command line.

    Attributes:
        precision: Default precision level
        dtype: Default float kind for decompression
        lane_bytes: Batch width in bytes
    """

    model_config = {"frozen": True}

    precision: Precision = Precision.TEN_THOUSANDTHS
    dtype: Literal["float32", "float64"] = "float64"
    lane_bytes: int = Field(default=DEFAULT_LANE_BYTES, ge=1)

    @field_validator("precision", mode="before")
    @classmethod
    def _parse_precision(cls, value: Any) -> Any:
        if isinstance(value, (str, int)) and not isinstance(value, bool):
            return Precision.parse(value)
        return value


def _resolve_config_path(config_path: str | None) -> str | None:
    """Resolve configuration path from env, explicit path, or defaults."""
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        return env_config
    if config_path:
        return config_path
    candidates = [
        CONFIG_FILENAME,
        os.path.expanduser(f"~/{CONFIG_FILENAME}"),
    ]
    for candidate in candidates:
        if os.path.exists(candidate):
            return candidate
    return None


def load_config(config_path: str | os.PathLike[str] | None = None) -> CodecConfig:
    """Load the ``[codec]`` table, falling back to defaults.

    Raises:
        FileNotFoundError: If an explicit or env-provided path does not exist
        ValueError: If the file contains invalid settings
    """
    resolved_path = _resolve_config_path(
        os.fspath(config_path) if config_path is not None else None
    )
    if resolved_path is None:
        return CodecConfig()
    if not os.path.exists(resolved_path):
        raise FileNotFoundError(
            f"Config file not found at {resolved_path}. Set {CONFIG_ENV_VAR} or create {CONFIG_FILENAME}"
        )
    with open(resolved_path, "rb") as f:
        config = cast(dict[str, Any], tomllib.load(f))
    codec_cfg = cast(dict[str, Any], config.get("codec", {}))
    return CodecConfig(**codec_cfg)
