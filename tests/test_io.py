"""Tests for value and payload file helpers."""

from pathlib import Path

import numpy as np
import pytest

from fpquant.errors import InvalidArgumentError
from fpquant.io import load_payload, read_values_from_file, save_payload, write_values_to_file


class TestValueFiles:
    """Test reading and writing value files."""

    def test_read_commas_and_newlines(self, tmp_path: Path) -> None:
        """Test mixed separators, blank lines and trailing commas."""
        path = tmp_path / "values.csv"
        path.write_text("1.5,2.5\r\n-3.25,\n\n4e-3,\n")
        values = read_values_from_file(path)
        assert values.dtype == np.float64
        assert values.tolist() == [1.5, 2.5, -3.25, 0.004]

    def test_read_as_float32(self, tmp_path: Path) -> None:
        """Test reading into float32."""
        path = tmp_path / "values.csv"
        path.write_text("1.2354878, -4.6659936, 7.3111189")
        values = read_values_from_file(path, dtype=np.float32)
        assert values.dtype == np.float32
        assert values.shape == (3,)

    def test_read_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file gives an empty array."""
        path = tmp_path / "empty.csv"
        path.write_text("")
        assert read_values_from_file(path).size == 0

    def test_read_invalid_token(self, tmp_path: Path) -> None:
        """Test that a non-number is rejected."""
        path = tmp_path / "bad.csv"
        path.write_text("1.0,abc\n")
        with pytest.raises(InvalidArgumentError, match="Failed to parse"):
            read_values_from_file(path)

    def test_read_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            read_values_from_file(tmp_path / "missing.csv")

    def test_write_read_roundtrip(self, tmp_path: Path) -> None:
        """Test that written values read back exactly."""
        values = np.array([0.1, -2.0 / 3.0, 1e-13, 123456.789])
        path = tmp_path / "out.csv"
        write_values_to_file(path, values)
        assert np.array_equal(read_values_from_file(path), values)


class TestPayloadFiles:
    """Test raw payload files."""

    def test_roundtrip(self, tmp_path: Path) -> None:
        """Test that bytes are stored unchanged."""
        data = bytes(range(256))
        path = tmp_path / "data.fpq"
        save_payload(path, data)
        assert path.read_bytes() == data
        assert load_payload(path) == data
