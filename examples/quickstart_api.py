#!/usr/bin/env python3
"""Quickstart example using the high-level compress/decompress API.

This example demonstrates the simplest way to use the package:
- Load values from a CSV file (or generate random ones)
- Compress them to a fixed number of decimal places using compress()
- Decompress them back using decompress()
- Report size and reconstruction error
"""

from __future__ import annotations

import argparse
from pathlib import Path

import numpy as np

from fpquant import Precision
from fpquant.api import (
    compress,
    decompress,
    get_compression_info,
    get_compression_ratio,
)
from fpquant.io import read_values_from_file, save_payload
from fpquant.metrics import max_abs_error, mean_error


def main() -> None:
    parser = argparse.ArgumentParser(description="Quickstart API example")
    parser.add_argument(
        "--input",
        type=Path,
        default=None,
        help="CSV of values (random values are generated if omitted)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path for the raw payload",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=10_000,
        help="Number of random values if no input is given",
    )
    parser.add_argument(
        "--precision",
        type=Precision.parse,
        default=Precision.TEN_THOUSANDTHS,
        help="Level name or decimal places (default: 4)",
    )
    parser.add_argument(
        "--float32",
        action="store_true",
        help="Quantize in single precision",
    )
    args = parser.parse_args()

    dtype = np.float32 if args.float32 else np.float64
    if args.input is not None:
        values = read_values_from_file(args.input, dtype=dtype)
        print(f"Loaded {len(values)} values from {args.input}")
    else:
        print("No input given; generating random values instead")
        rng = np.random.default_rng(0)
        values = (rng.normal(size=args.size) * 100).astype(dtype)

    print("Compressing...")
    compressed = compress(values, args.precision)

    info = get_compression_info(compressed)
    ratio = get_compression_ratio(values, compressed)
    print(f"Compressed size: {len(compressed)} bytes")
    print(f"Compression ratio: {ratio:.2f}x")
    print(
        f"Header: bits_per_value={info['bits_per_value']} "
        f"value_count={info['value_count']} scale={info['scale']}"
    )

    print("Decompressing...")
    restored = decompress(compressed, len(values), args.precision, dtype=dtype)

    print(f"Max abs error: {max_abs_error(values, restored):.3e}")
    print(f"Mean error:    {mean_error(values, restored):.3e}")
    print(f"Tolerance:     {args.precision.tolerance:.0e}")

    if args.output is not None:
        save_payload(args.output, compressed)
        print(f"Payload saved to: {args.output}")


if __name__ == "__main__":
    main()
