"""Convert a directory of CSV edge shards into one binary CSR graph file.

Shards are named ``<ci>__<cj>.csv`` and hold the upper triangle of an
adjacency matrix, one edge per line as ``ai, aj, common[, weight]`` after a
header line. Vertex ids in a shard are local to it. The shard's row block
``(ci - 1) * shard_count`` is added to ``ai`` and its column block
``(cj - 1) * shard_count`` to ``aj``. Each edge is stored in both directions;
a self-loop is stored once.

The binary layout is little-endian: the vertex count and edge count as
64-bit integers, then ``num_vertices + 1`` 64-bit edge offsets, then one
``(int64 tail, float64 weight)`` record per edge.
"""

from __future__ import annotations

import logging
import os
import re
import struct
from collections.abc import Iterable, Sequence
from pathlib import Path

from .graph import Edge, Graph
from .utils import (
    RANDOM_MAX_WEIGHT,
    RANDOM_MIN_WEIGHT,
    EdgeTriple,
    WeightType,
    gen_random,
    process_graph_data,
)

log = logging.getLogger(__name__)

_HEADER = struct.Struct("<qq")
_ELEM = struct.Struct("<q")
_EDGE = struct.Struct("<qd")

_LINE = re.compile(
    r"\s*([+-]?\d+)\s*\S\s*([+-]?\d+)\s*\S\s*([+-]?\d+)(?:\s*\S\s*(\S+))?"
)


def shard_file_name(ci: int, cj: int) -> str:
    """Return the file name of the shard in row block ``ci`` and column block ``cj``."""
    return f"{ci}__{cj}.csv"


def shard_offsets(path: str | os.PathLike[str], shard_count: int) -> tuple[int, int]:
    """Return the vertex offsets ``(v_lo, v_hi)`` encoded in a shard's file name."""
    name = Path(path).name
    stem = name.split(".", 1)[0]
    left, sep, right = stem.partition("__")
    if not sep:
        raise ValueError(f"shard file name {name!r} lacks the '__' separator")
    try:
        row, column = int(left), int(right)
    except ValueError:
        raise ValueError(f"shard file name {name!r} does not hold two block numbers") from None
    return (row - 1) * shard_count, (column - 1) * shard_count


def parse_shard_line(line: str, wtype: WeightType) -> tuple[int, int, float]:
    """Parse one shard line into ``(v0, v1, weight)`` according to ``wtype``.

    ``ORG_WEIGHT`` keeps the fourth field, ``ABS_WEIGHT`` takes its absolute
    value, ``ONE_WEIGHT`` gives 1.0 and ``RND_WEIGHT`` draws a random weight.
    """
    match = _LINE.match(line)
    if match is None:
        raise ValueError(f"malformed shard line: {line!r}")
    v0, v1 = int(match.group(1)), int(match.group(2))
    raw_weight = match.group(4)

    if wtype in (WeightType.ORG_WEIGHT, WeightType.ABS_WEIGHT):
        if raw_weight is None:
            raise ValueError(f"shard line has no weight field: {line!r}")
        try:
            weight = float(raw_weight)
        except ValueError:
            raise ValueError(f"invalid weight {raw_weight!r} in shard line") from None
        if wtype is WeightType.ABS_WEIGHT:
            weight = abs(weight)
    elif wtype is WeightType.ONE_WEIGHT:
        weight = 1.0
    else:
        weight = gen_random(RANDOM_MIN_WEIGHT, RANDOM_MAX_WEIGHT)
    return v0, v1, weight


def discover_shards(directory: str | os.PathLike[str], start: int, end: int) -> list[Path]:
    """List the existing shard files for every block pair in ``start..end``."""
    if start < 0 or end < 0:
        raise ValueError("shard indices must be non-negative")
    if end < start:
        raise ValueError(f"end shard {end} precedes start shard {start}")
    base = Path(directory)
    found = []
    for ci in range(start, end + 1):
        for cj in range(start, end + 1):
            candidate = base / shard_file_name(ci, cj)
            if candidate.is_file():
                found.append(candidate)
    return found


def _as_edge(item: Edge | tuple[int, float]) -> tuple[int, float]:
    if isinstance(item, Edge):
        return item.tail, item.weight
    tail, weight = item
    return tail, weight


def write_binary_graph(
    path: str | os.PathLike[str],
    num_vertices: int,
    num_edges: int,
    edge_prefix: Sequence[int],
    edges: Iterable[Edge | tuple[int, float]],
) -> None:
    """Write a CSR graph in the binary layout described in the module docstring."""
    if len(edge_prefix) != num_vertices + 1:
        raise ValueError(
            f"expected {num_vertices + 1} edge offsets, got {len(edge_prefix)}"
        )
    records = [_as_edge(item) for item in edges]
    if len(records) != num_edges:
        raise ValueError(f"expected {num_edges} edges, got {len(records)}")
    with open(path, "wb") as out:
        out.write(_HEADER.pack(num_vertices, num_edges))
        out.write(struct.pack(f"<{len(edge_prefix)}q", *edge_prefix))
        for tail, weight in records:
            out.write(_EDGE.pack(tail, weight))


def read_binary_graph(path: str | os.PathLike[str]) -> Graph:
    """Read a binary CSR graph file back into a :class:`Graph`."""
    data = Path(path).read_bytes()
    if len(data) < _HEADER.size:
        raise ValueError("binary graph file is too short for its header")
    num_vertices, num_edges = _HEADER.unpack_from(data, 0)
    if num_vertices < 0 or num_edges < 0:
        raise ValueError("binary graph header holds negative counts")
    prefix_size = (num_vertices + 1) * _ELEM.size
    expected = _HEADER.size + prefix_size + num_edges * _EDGE.size
    if len(data) != expected:
        raise ValueError(f"binary graph file holds {len(data)} bytes, expected {expected}")
    offsets = list(struct.unpack_from(f"<{num_vertices + 1}q", data, _HEADER.size))
    edge_bytes = data[_HEADER.size + prefix_size:]

    graph = Graph(num_vertices, num_edges)
    graph.offsets = offsets
    graph.edges = [Edge(tail, weight) for tail, weight in _EDGE.iter_unpack(edge_bytes)]
    return graph


def _read_shard(
    path: Path, index_one_based: bool, wtype: WeightType, shard_count: int
) -> Iterable[tuple[int, int, float]]:
    v_lo, v_hi = shard_offsets(path, shard_count)
    with open(path, encoding="utf-8") as handle:
        next(handle, None)  # header line
        for line in handle:
            if not line.strip():
                continue
            v0, v1, weight = parse_shard_line(line, wtype)
            if index_one_based:
                v0 -= 1
                v1 -= 1
            v0 += v_lo
            v1 += v_hi
            if v0 < 0 or v1 < 0:
                raise ValueError(f"negative vertex id in {path.name}: {line.strip()!r}")
            yield v0, v1, weight


def load_file_shards(
    directory: str | os.PathLike[str],
    output_path: str | os.PathLike[str],
    start: int,
    end: int,
    index_one_based: bool = False,
    wtype: WeightType = WeightType.ORG_WEIGHT,
    shard_count: int = 1000000,
) -> Graph:
    """Read the shards in ``start..end``, write the binary graph and return it.

    The vertex count is one more than the largest vertex id seen. Edges are
    ordered by source and then target.
    """
    shards = discover_shards(directory, start, end)
    log.info("Start reading %d files.", len(shards))

    triples: list[EdgeTriple] = []
    max_vertex = -1
    for shard in shards:
        for v0, v1, weight in _read_shard(shard, index_one_based, wtype, shard_count):
            max_vertex = max(max_vertex, v0, v1)
            triples.append(EdgeTriple(v0, v1, weight))
            if v0 != v1:
                triples.append(EdgeTriple(v1, v0, weight))

    num_vertices = max_vertex + 1
    num_edges = len(triples)
    log.info("Graph #nvertices: %d, #edges: %d", num_vertices, num_edges)

    edge_count = [0] * (num_vertices + 1)
    for triple in triples:
        edge_count[triple.i + 1] += 1

    triples.sort(key=lambda t: (t.i, t.j))
    graph = process_graph_data(Graph(num_vertices, num_edges), edge_count, triples)

    write_binary_graph(output_path, num_vertices, num_edges, graph.offsets, graph.edges)
    log.info("Completed writing the binary file: %s", output_path)
    return graph