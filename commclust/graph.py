"""Compressed sparse row graph used as the local piece of a distributed graph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(slots=True)
class Edge:
    """An outgoing edge: the vertex it points to and its weight."""

    tail: int = -1
    weight: float = 0.0


class Graph:
    """A graph stored as vertex offsets into a flat list of edges.

    ``offsets`` has ``num_vertices + 1`` entries; the edges of vertex ``v``
    are ``edges[offsets[v]:offsets[v + 1]]``.
    """

    def __init__(self, num_vertices: int, num_edges: int) -> None:
        if num_vertices < 0 or num_edges < 0:
            raise ValueError("vertex and edge counts must be non-negative")
        self._num_vertices = num_vertices
        self._num_edges = num_edges
        self.offsets: list[int] = [0] * (num_vertices + 1)
        self.edges: list[Edge] = [Edge() for _ in range(num_edges)]

    @property
    def num_vertices(self) -> int:
        return self._num_vertices

    @property
    def num_edges(self) -> int:
        return self._num_edges

    def set_edge_weights_to_one(self) -> None:
        """Give every edge a weight of 1.0."""
        for edge in self.edges:
            edge.weight = 1.0

    def set_num_edges(self, num_edges: int) -> None:
        """Resize the edge list, keeping existing edges and padding with blanks."""
        if num_edges < 0:
            raise ValueError("edge count must be non-negative")
        if num_edges < len(self.edges):
            del self.edges[num_edges:]
        else:
            self.edges.extend(Edge() for _ in range(num_edges - len(self.edges)))
        self._num_edges = num_edges

    def edge_range(self, vertex: int) -> tuple[int, int]:
        """Return the half-open range of edge indices belonging to ``vertex``."""
        if not 0 <= vertex < self._num_vertices:
            raise IndexError(f"vertex {vertex} out of range 0..{self._num_vertices - 1}")
        return self.offsets[vertex], self.offsets[vertex + 1]

    def edge(self, index: int) -> Edge:
        """Return the edge stored at ``index`` (the object itself, not a copy)."""
        if not 0 <= index < self._num_edges:
            raise IndexError(f"out of bounds access: {index}, max: {self._num_edges}")
        return self.edges[index]

    def set_edge_start(self, vertex: int, start: int) -> None:
        """Set the offset at which the edges of ``vertex`` begin."""
        if not 0 <= vertex <= self._num_vertices:
            raise IndexError(f"vertex {vertex} out of range 0..{self._num_vertices}")
        if not 0 <= start <= self._num_edges:
            raise ValueError(f"edge offset {start} out of range 0..{self._num_edges}")
        self.offsets[vertex] = start

    def neighbors(self, vertex: int) -> Iterator[Edge]:
        """Yield the outgoing edges of ``vertex``."""
        start, stop = self.edge_range(vertex)
        yield from self.edges[start:stop]

    def copy(self) -> Graph:
        """Return an independent copy of this graph."""
        other = Graph(self._num_vertices, 0)
        other._num_edges = self._num_edges
        other.offsets = list(self.offsets)
        other.edges = [Edge(e.tail, e.weight) for e in self.edges]
        return other

    def __repr__(self) -> str:
        return f"Graph(num_vertices={self._num_vertices}, num_edges={self._num_edges})"

    def __str__(self) -> str:
        lines = [f"Number of vertices: {self._num_vertices}, number of edges: {self._num_edges}"]
        for vertex in range(self._num_vertices):
            start, stop = self.edge_range(vertex)
            lines.append(f"Vertex: {vertex}, number of neighbors: {stop - start}")
            lines.extend(
                f"Edge to: {e.tail}, weight: {e.weight}" for e in self.edges[start:stop]
            )
        return "\n".join(lines)