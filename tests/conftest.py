"""Shared fixtures."""

import numpy as np
import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep config lookup away from any real fpquant.toml."""
    monkeypatch.delenv("FPQUANT_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def scenario_values() -> np.ndarray:
    """Three single-precision readings."""
    return np.array([1.2354878, -4.6659936, 7.3111189], dtype=np.float32)


@pytest.fixture
def scientific_values() -> np.ndarray:
    """Mixed-magnitude double-precision values."""
    return np.array(
        [
            5.54500008,
            -7.55112505,
            123456.789,
            -98765.4297,
            3.1415925,
            -2.71828175,
            1.61803389,
            -0.577215672,
            299792.469,
        ],
        dtype=np.float64,
    )
