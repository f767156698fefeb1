"""Tests for the high-level API."""

from pathlib import Path

import numpy as np
import pytest

from fpquant import (
    FloatCompressor,
    IntegerQuantization,
    Precision,
    compress,
    compress_with_precision,
    decompress,
    decompress_double_with_precision,
    decompress_float_with_precision,
    get_compression_info,
    get_compression_ratio,
)
from fpquant.components.header import parse_header
from fpquant.errors import InvalidArgumentError


class TestCompressBasics:
    """Test compress() / decompress()."""

    def test_roundtrip(self) -> None:
        """Test the three-value example at four decimal places."""
        values = np.array([1.23, 4.56, 7.89])
        data = compress(values, Precision.TEN_THOUSANDTHS)
        restored = decompress(data)
        assert restored.dtype == np.float64
        assert np.allclose(restored, values, atol=1e-4)

    def test_default_precision(self) -> None:
        """Test that the default precision is four decimal places."""
        data = compress([0.5, 1.5])
        assert parse_header(data).scale == 10_000

    def test_float32_input_quantized_as_float32(self, scenario_values: np.ndarray) -> None:
        """Test that float32 arrays go through float32 arithmetic."""
        data = compress(scenario_values, Precision.TEN_THOUSANDTHS)
        expected = IntegerQuantization(np.float32).compress(
            scenario_values, Precision.TEN_THOUSANDTHS
        )
        assert data == expected

        restored = decompress(data, 3, Precision.TEN_THOUSANDTHS, dtype=np.float32)
        assert restored.dtype == np.float32
        assert np.all(np.abs(restored - scenario_values) <= 0.0001 + 1e-6)

    def test_empty(self) -> None:
        """Test empty input and empty payload."""
        assert compress([], Precision.TENTHS) == b""
        assert decompress(b"").size == 0

    def test_none_rejected(self) -> None:
        """Test that None is an invalid argument."""
        with pytest.raises(InvalidArgumentError):
            compress(None)

    def test_pinned_count_mismatch(self) -> None:
        """Test that decompress forwards the pinned count."""
        data = compress([1.0, 2.0], Precision.TENTHS)
        with pytest.raises(InvalidArgumentError, match="Value count mismatch"):
            decompress(data, value_count=3)

    def test_config_precision(self, tmp_path: Path) -> None:
        """Test that the config file supplies the default precision."""
        config = tmp_path / "custom.toml"
        config.write_text('[codec]\nprecision = "hundredths"\n')
        data = compress([1.0, 2.0], config_path=str(config))
        assert parse_header(data).scale == 100

    def test_config_dtype(self, tmp_path: Path) -> None:
        """Test that the config file supplies the default output dtype."""
        config = tmp_path / "custom.toml"
        config.write_text('[codec]\ndtype = "float32"\n')
        data = compress([1.0, 2.0], Precision.TENTHS)
        assert decompress(data, config_path=str(config)).dtype == np.float32


class TestCompressionInfo:
    """Test get_compression_info() / get_compression_ratio()."""

    def test_info(self, scenario_values: np.ndarray) -> None:
        """Test header fields without decompressing."""
        data = compress(scenario_values, Precision.TEN_THOUSANDTHS)
        info = get_compression_info(data)
        assert info["version"] == 1
        assert info["flags"] == 0
        assert info["value_count"] == 3
        assert info["bits_per_value"] == 18
        assert info["scale"] == 10_000
        assert info["tolerance"] == pytest.approx(0.0001)
        assert info["payload_size"] == len(data)

    def test_info_empty(self) -> None:
        """Test info for an empty payload."""
        info = get_compression_info(b"")
        assert info["value_count"] == 0
        assert info["payload_size"] == 0

    def test_ratio(self) -> None:
        """Test ratio for 1000 zeros (8000 bytes -> 140 bytes)."""
        values = np.zeros(1000)
        data = compress(values, Precision.MILLIONTHS)
        assert len(data) == 140
        assert get_compression_ratio(values, data) == pytest.approx(8000 / 140)

    def test_ratio_empty(self) -> None:
        """Test that an empty payload has ratio 0."""
        assert get_compression_ratio(np.zeros(0), b"") == 0.0


class TestFloatCompressor:
    """Test the wrapper class and helper functions."""

    def test_roundtrip(self, scientific_values: np.ndarray) -> None:
        """Test compress then decompress through the wrapper."""
        compressor = FloatCompressor(scientific_values, Precision.THOUSANDTHS)
        restored = compressor.decompress(compressor.compress())
        assert np.all(np.abs(restored - scientific_values) <= 0.001)

    def test_wrapper_pins_length(self, scientific_values: np.ndarray) -> None:
        """Test that a payload of another length is rejected."""
        other = compress(scientific_values[:3], Precision.THOUSANDTHS)
        compressor = FloatCompressor(scientific_values, Precision.THOUSANDTHS)
        with pytest.raises(InvalidArgumentError, match="Value count mismatch"):
            compressor.decompress(other)

    def test_wrapper_pins_precision(self, scientific_values: np.ndarray) -> None:
        """Test that a payload of another precision is rejected."""
        other = compress(scientific_values, Precision.HUNDREDTHS)
        compressor = FloatCompressor(scientific_values, Precision.THOUSANDTHS)
        with pytest.raises(InvalidArgumentError, match="Precision mismatch"):
            compressor.decompress(other)

    def test_custom_strategy(self, scientific_values: np.ndarray) -> None:
        """Test passing an explicit strategy."""
        strategy = IntegerQuantization(np.float64, lane_width=2)
        compressor = FloatCompressor(scientific_values, 0.01, strategy)
        assert compressor.strategy is strategy
        assert compressor.compress() == compress(scientific_values, 0.01)

    def test_none_rejected(self) -> None:
        """Test that the wrapper requires values."""
        with pytest.raises(InvalidArgumentError):
            FloatCompressor(None, Precision.TENTHS)

    def test_double_helpers(self, scientific_values: np.ndarray) -> None:
        """Test compress_with_precision / decompress_double_with_precision."""
        data = compress_with_precision(scientific_values, Precision.MILLIONTHS)
        restored = decompress_double_with_precision(
            data, len(scientific_values), Precision.MILLIONTHS
        )
        assert restored.dtype == np.float64
        assert np.all(np.abs(restored - scientific_values) <= 1e-6)

    def test_float_helpers(self, scenario_values: np.ndarray) -> None:
        """Test decompress_float_with_precision."""
        data = compress_with_precision(scenario_values, Precision.TEN_THOUSANDTHS)
        restored = decompress_float_with_precision(data, 3, Precision.TEN_THOUSANDTHS)
        assert restored.dtype == np.float32
        assert np.all(np.abs(restored - scenario_values) <= 0.0001 + 1e-6)

    def test_helper_strategy_dtype_mismatch(self, scenario_values: np.ndarray) -> None:
        """Test that a float64 strategy cannot back the float32 helper."""
        data = compress_with_precision(scenario_values, Precision.TEN_THOUSANDTHS)
        with pytest.raises(InvalidArgumentError, match="Strategy produces"):
            decompress_float_with_precision(
                data, 3, Precision.TEN_THOUSANDTHS, IntegerQuantization(np.float64)
            )
