"""Command line interface: ``fpquant compress | decompress | info``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import numpy as np

from fpquant.api import compress, decompress, get_compression_info, get_compression_ratio
from fpquant.components.precision import Precision
from fpquant.config import load_config
from fpquant.errors import FpQuantError
from fpquant.io import load_payload, read_values_from_file, save_payload, write_values_to_file
from fpquant.metrics import max_abs_error

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpquant",
        description="Lossy fixed-precision compression of float arrays",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Compress a CSV of readings to four decimal places
  fpquant compress readings.csv readings.fpq --precision 4

  # Restore as float32, checking the expected length
  fpquant decompress readings.fpq restored.csv --count 1000 --dtype float32

  # Show the payload header
  fpquant info readings.fpq
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to fpquant.toml (auto-detected if omitted)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_compress = subparsers.add_parser("compress", help="Compress a text/CSV value file")
    p_compress.add_argument("input", type=Path, help="Comma or newline separated values")
    p_compress.add_argument("output", type=Path, help="Output payload file")
    p_compress.add_argument(
        "-p",
        "--precision",
        type=Precision.parse,
        default=None,
        help="Level name or decimal places (default: from config)",
    )
    p_compress.add_argument(
        "--dtype",
        choices=["float32", "float64"],
        default=None,
        help="Float kind to quantize in (default: from config)",
    )

    p_decompress = subparsers.add_parser("decompress", help="Restore a payload to a value file")
    p_decompress.add_argument("input", type=Path, help="Payload file")
    p_decompress.add_argument("output", type=Path, help="Output value file")
    p_decompress.add_argument(
        "-n", "--count", type=int, default=None, help="Expected number of values"
    )
    p_decompress.add_argument(
        "-p",
        "--precision",
        type=Precision.parse,
        default=None,
        help="Expected precision level",
    )
    p_decompress.add_argument(
        "--dtype",
        choices=["float32", "float64"],
        default=None,
        help="Float kind to reconstruct (default: from config)",
    )

    p_info = subparsers.add_parser("info", help="Print payload header as JSON")
    p_info.add_argument("input", type=Path, help="Payload file")
    return parser


def _run_compress(args: argparse.Namespace) -> None:
    config = load_config(args.config)
    dtype = args.dtype or config.dtype
    values = read_values_from_file(args.input, dtype=np.dtype(dtype))
    data = compress(values, args.precision, config_path=args.config)
    save_payload(args.output, data)

    restored = decompress(data, dtype=dtype, config_path=args.config)
    print(f"Values:            {len(values):,}")
    print(f"Original size:     {values.nbytes:,} bytes")
    print(f"Compressed size:   {len(data):,} bytes")
    print(f"Compression ratio: {get_compression_ratio(values, data):.2f}x")
    print(f"Max abs error:     {max_abs_error(values, restored):.3e}")


def _run_decompress(args: argparse.Namespace) -> None:
    data = load_payload(args.input)
    values = decompress(
        data,
        value_count=args.count,
        precision=args.precision,
        dtype=args.dtype,
        config_path=args.config,
    )
    write_values_to_file(args.output, values)
    print(f"Restored {len(values):,} values to {args.output}")


def _run_info(args: argparse.Namespace) -> None:
    info = get_compression_info(load_payload(args.input))
    print(json.dumps(info, indent=2))


_COMMANDS = {
    "compress": _run_compress,
    "decompress": _run_decompress,
    "info": _run_info,
}


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        _COMMANDS[args.command](args)
    except (FpQuantError, FileNotFoundError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
