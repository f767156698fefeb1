"""File helpers for value arrays and raw payloads.

Value files are plain text: numbers separated by commas and/or newlines.
Payload files hold the compressed bytes unchanged.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import numpy as np

from fpquant.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[,\r\n]+")


def read_values_from_file(path: str | os.PathLike[str], dtype: Any = np.float64) -> np.ndarray:
    """Read a 1-D array from a comma- or newline-separated text file.

    Empty tokens are skipped, so trailing commas and blank lines are fine.

    Raises:
        FileNotFoundError: If the file does not exist
        InvalidArgumentError: If a token is not a number
    """
    text = Path(path).read_text(encoding="utf-8")
    tokens = [token.strip() for token in _SEPARATORS.split(text)]
    try:
        values = [float(token) for token in tokens if token]
    except ValueError as e:
        raise InvalidArgumentError(f"Failed to parse values from {path}: {e}") from e
    logger.info("Read %d values from %s", len(values), path)
    return np.array(values, dtype=dtype)


def write_values_to_file(path: str | os.PathLike[str], values: Any) -> None:
    """Write one value per line using the shortest repr that round-trips."""
    array = np.asarray(values)
    lines = [repr(float(v)) for v in array.ravel()]
    Path(path).write_text("\n".join(lines) + ("\n" if lines else ""), encoding="utf-8")
    logger.info("Wrote %d values to %s", len(lines), path)


def save_payload(path: str | os.PathLike[str], data: bytes) -> None:
    Path(path).write_bytes(bytes(data))
    logger.info("Wrote %d byte payload to %s", len(data), path)


def load_payload(path: str | os.PathLike[str]) -> bytes:
    data = Path(path).read_bytes()
    logger.info("Read %d byte payload from %s", len(data), path)
    return data
