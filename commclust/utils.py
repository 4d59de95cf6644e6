"""Edge triples, weight policies, timing and CSR construction helpers."""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass
from itertools import accumulate

from .graph import Graph

log = logging.getLogger(__name__)

RANDOM_MAX_WEIGHT = 1.0
RANDOM_MIN_WEIGHT = 0.01
TERMINATION_PHASE_COUNT = 200

# Linear congruential generator parameters (Park-Miller minimal standard).
MLCG = 2147483647
ALCG = 16807
BLCG = 0


@dataclass
class EdgeTriple:
    """An edge ``i -> j`` with weight ``w``; ordered by ``(i, j)`` only."""

    i: int = -1
    j: int = -1
    w: float = 1.0

    def __lt__(self, other: EdgeTriple) -> bool:
        if not isinstance(other, EdgeTriple):
            return NotImplemented
        return (self.i, self.j) < (other.i, other.j)


class WeightType(enum.Enum):
    """How edge weights are obtained when converting input data."""

    RND_WEIGHT = enum.auto()  # random real weight between 0 and 1
    ONE_WEIGHT = enum.auto()  # weight = 1
    ORG_WEIGHT = enum.auto()  # original weights of the graph
    ABS_WEIGHT = enum.auto()  # absolute value of the original weights


class Timer:
    """Wall-clock seconds elapsed since the timer was created."""

    def __init__(self) -> None:
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self._start


_rng = random.Random(5489)


def gen_random(low: float, high: float) -> float:
    """Return a uniform real number in ``[low, high)`` from a shared generator."""
    if low > high:
        raise ValueError(f"invalid range: low {low} exceeds high {high}")
    return low + (high - low) * _rng.random()


def _edge_key(triple: EdgeTriple) -> tuple[int, int]:
    return triple.i, triple.j


def process_graph_data(
    graph: Graph, edge_count: list[int], edge_list: list[EdgeTriple]
) -> Graph:
    """Fill ``graph`` in CSR form from per-vertex edge counts and an edge list.

    ``edge_count[v + 1]`` holds the number of edges of vertex ``v``. The edge
    list is sorted in place by ``(i, j)`` if it is not already sorted.
    """
    nv = graph.num_vertices
    if len(edge_count) != nv + 1:
        raise ValueError(f"expected {nv + 1} edge counts, got {len(edge_count)}")

    prefix = list(accumulate(edge_count))
    graph.set_edge_start(0, 0)
    for vertex, start in enumerate(prefix[1:], start=1):
        graph.set_edge_start(vertex, start)

    if any(b < a for a, b in zip(edge_list, edge_list[1:])):
        log.debug("Edge list is not sorted")
        edge_list.sort(key=_edge_key)

    triples = iter(edge_list)
    for vertex in range(nv):
        start, stop = graph.edge_range(vertex)
        if vertex % 100000 == 0:
            log.info("Processing edges for vertex: %d, range(%d, %d)", vertex, start, stop)
        for index in range(start, stop):
            triple = next(triples, None)
            if triple is None:
                raise ValueError("edge list is shorter than the edge counts require")
            if triple.i != vertex:
                raise ValueError(
                    f"edge {triple.i}->{triple.j} found where vertex {vertex} was expected"
                )
            edge = graph.edge(index)
            edge.tail = triple.j
            edge.weight = triple.w
    return graph