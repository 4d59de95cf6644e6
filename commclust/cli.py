"""Command line entry point: convert CSV edge shards into a binary graph file."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from .shards import load_file_shards
from .utils import Timer, WeightType

_SHARD_ARGS_HELP = (
    "Expected arguments to '-x' (in this order): "
    "<num-files> <start-chunk> <end-chunk> <shard-count>"
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="commclust-convert",
        description="Read sharded CSV edge files and write a binary CSR graph.",
    )
    parser.add_argument(
        "-f", dest="input", required=True, help="directory holding the shard files"
    )
    parser.add_argument(
        "-o", dest="output", required=True, help="path of the binary file to write"
    )
    parser.add_argument(
        "-x",
        dest="shard_args",
        required=True,
        help="'<num-files> <start-chunk> <end-chunk> <shard-count>'",
    )
    parser.add_argument(
        "-n",
        dest="aggregators",
        type=int,
        default=1,
        help="number of aggregating processes",
    )
    parser.add_argument(
        "-z",
        dest="index_one_based",
        action="store_true",
        help="vertex ids in the shards start at 1",
    )
    parser.add_argument(
        "-w",
        dest="weights_one",
        action="store_true",
        help="ignore weights in the files and make every weight 1.0",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments; exits with a usage message on bad input."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    fields = args.shard_args.split()
    if len(fields) != 4:
        parser.error(_SHARD_ARGS_HELP)
    try:
        num_files, start_chunk, end_chunk, shard_count = (int(f) for f in fields)
    except ValueError:
        parser.error(_SHARD_ARGS_HELP)

    args.num_files = num_files
    args.start_chunk = start_chunk
    args.end_chunk = end_chunk
    args.shard_count = shard_count
    args.wtype = WeightType.ONE_WEIGHT if args.weights_one else WeightType.ABS_WEIGHT
    return args


def main(argv: Sequence[str] | None = None) -> int:
    """Run the shard conversion and report the time it took."""
    args = parse_args(argv)

    timer = Timer()
    print(f"Start reading {args.num_files} files.")
    try:
        load_file_shards(
            args.input,
            args.output,
            args.start_chunk,
            args.end_chunk,
            args.index_one_based,
            args.wtype,
            args.shard_count,
        )
    except (ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    elapsed = timer.elapsed()
    print(
        f"Average time reading {args.num_files} sharded files and writing "
        f"binary file (in secs): {elapsed}"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())