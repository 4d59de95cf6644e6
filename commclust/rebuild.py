"""Collapse a clustered graph into its next-level graph of communities.

Every community becomes one vertex of the new graph. The weights of all
edges running between two communities are summed into one edge, and edges
inside a community become a self-loop.
"""

from __future__ import annotations

from bisect import bisect_right
from collections.abc import Mapping, Sequence
from itertools import accumulate

from .graph import Edge, Graph


def partition_ranges(num_vertices: int, nprocs: int) -> list[int]:
    """Split ``num_vertices`` into ``nprocs`` contiguous blocks.

    Returns ``nprocs + 1`` boundaries; block ``p`` holds the vertices
    ``parts[p] <= v < parts[p + 1]``.
    """
    if nprocs < 1:
        raise ValueError(f"number of processes must be positive, got {nprocs}")
    if num_vertices < 0:
        raise ValueError(f"number of vertices must be non-negative, got {num_vertices}")
    return [num_vertices * p // nprocs for p in range(nprocs + 1)]


def owner_of(vertex: int, parts: Sequence[int]) -> int:
    """Return the index of the block in ``parts`` that holds ``vertex``."""
    if len(parts) < 2:
        raise ValueError("a partition needs at least two boundaries")
    if not parts[0] <= vertex < parts[-1]:
        raise IndexError(f"vertex {vertex} outside {parts[0]}..{parts[-1] - 1}")
    return bisect_right(parts, vertex) - 1


def renumber_communities(communities: Sequence[int]) -> dict[int, int]:
    """Map each community id to a dense id, in order of first appearance."""
    lookup: dict[int, int] = {}
    for community in communities:
        lookup.setdefault(community, len(lookup))
    return lookup


def aggregate_edges(
    graph: Graph, communities: Sequence[int], lookup: Mapping[int, int]
) -> dict[int, dict[int, float]]:
    """Sum edge weights between communities, keyed by their renumbered ids.

    The result maps a source community to a mapping of target community to
    the total weight of the edges joining them.
    """
    nv = graph.num_vertices
    if len(communities) != nv:
        raise ValueError(f"expected {nv} community labels, got {len(communities)}")

    def dense(community: int) -> int:
        try:
            return lookup[community]
        except KeyError:
            raise ValueError(f"community {community} has no renumbered id") from None

    aggregated: dict[int, dict[int, float]] = {}
    for vertex in range(nv):
        row = aggregated.setdefault(dense(communities[vertex]), {})
        for edge in graph.neighbors(vertex):
            if not 0 <= edge.tail < nv:
                raise IndexError(f"edge tail {edge.tail} outside 0..{nv - 1}")
            target = dense(communities[edge.tail])
            row[target] = row.get(target, 0.0) + edge.weight
    return aggregated


def build_next_level_graph(graph: Graph, communities: Sequence[int]) -> Graph:
    """Return the graph whose vertices are the communities of ``graph``.

    Community ids are renumbered densely in order of first appearance; the
    edges of each new vertex are ordered by target.
    """
    lookup = renumber_communities(communities)
    aggregated = aggregate_edges(graph, communities, lookup)
    num_vertices = len(lookup)
    rows = [sorted(aggregated.get(v, {}).items()) for v in range(num_vertices)]

    next_graph = Graph(num_vertices, sum(len(row) for row in rows))
    for vertex, start in enumerate(accumulate((len(row) for row in rows), initial=0)):
        next_graph.set_edge_start(vertex, start)
    next_graph.edges = [Edge(tail, weight) for row in rows for tail, weight in row]
    return next_graph