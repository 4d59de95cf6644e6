import pytest

from commclust.graph import Graph
from commclust.rebuild import (
    aggregate_edges,
    build_next_level_graph,
    owner_of,
    partition_ranges,
    renumber_communities,
)


def make_graph(adjacency):
    """Build a CSR graph from a list of per-vertex (tail, weight) lists."""
    total = sum(len(row) for row in adjacency)
    graph = Graph(len(adjacency), total)
    index = 0
    for vertex, row in enumerate(adjacency):
        graph.set_edge_start(vertex, index)
        for tail, weight in row:
            edge = graph.edge(index)
            edge.tail = tail
            edge.weight = weight
            index += 1
    graph.set_edge_start(len(adjacency), index)
    return graph


def undirected(nv, edges):
    adjacency = [[] for _ in range(nv)]
    for u, v, w in edges:
        adjacency[u].append((v, w))
        if u != v:
            adjacency[v].append((u, w))
    for row in adjacency:
        row.sort()
    return make_graph(adjacency)


def total_weight(graph):
    return sum(e.weight for e in graph.edges)


def as_dict(graph):
    return {
        v: {e.tail: e.weight for e in graph.neighbors(v)}
        for v in range(graph.num_vertices)
    }


@pytest.fixture
def two_pairs():
    return undirected(4, [(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0)])


@pytest.mark.parametrize("nv,nprocs", [(10, 3), (7, 7), (3, 5), (0, 2), (100, 8)])
def test_partition_ranges_invariants(nv, nprocs):
    parts = partition_ranges(nv, nprocs)
    assert len(parts) == nprocs + 1
    assert parts[0] == 0
    assert parts[-1] == nv
    sizes = [b - a for a, b in zip(parts, parts[1:])]
    assert all(s >= 0 for s in sizes)
    assert max(sizes) - min(sizes) <= 1


def test_partition_ranges_rejects_bad_input():
    with pytest.raises(ValueError):
        partition_ranges(10, 0)
    with pytest.raises(ValueError):
        partition_ranges(-1, 2)


@pytest.mark.parametrize("nv,nprocs", [(10, 3), (3, 5), (16, 4)])
def test_owner_of_matches_ranges(nv, nprocs):
    parts = partition_ranges(nv, nprocs)
    for vertex in range(nv):
        owner = owner_of(vertex, parts)
        assert parts[owner] <= vertex < parts[owner + 1]


def test_owner_of_out_of_range():
    parts = partition_ranges(10, 3)
    with pytest.raises(IndexError):
        owner_of(10, parts)
    with pytest.raises(IndexError):
        owner_of(-1, parts)
    with pytest.raises(ValueError):
        owner_of(0, [0])


def test_renumber_first_appearance():
    assert renumber_communities([5, 5, 3, 7, 3]) == {5: 0, 3: 1, 7: 2}


def test_renumber_dense_ids():
    labels = [9, 4, 9, 4, 1, 8, 1]
    lookup = renumber_communities(labels)
    assert set(lookup) == set(labels)
    assert sorted(lookup.values()) == list(range(len(set(labels))))


def test_aggregate_edges_conserves_weight(two_pairs):
    communities = [0, 0, 2, 2]
    lookup = renumber_communities(communities)
    aggregated = aggregate_edges(two_pairs, communities, lookup)
    assert set(aggregated) == {0, 1}
    summed = sum(w for row in aggregated.values() for w in row.values())
    assert summed == pytest.approx(total_weight(two_pairs))
    assert aggregated[0][1] == aggregated[1][0]


def test_aggregate_edges_rejects_wrong_label_count(two_pairs):
    with pytest.raises(ValueError):
        aggregate_edges(two_pairs, [0, 0, 2], {0: 0, 2: 1})


def test_aggregate_edges_rejects_missing_lookup(two_pairs):
    with pytest.raises(ValueError):
        aggregate_edges(two_pairs, [0, 0, 2, 2], {0: 0})


def test_build_with_singletons_reproduces_graph(two_pairs):
    rebuilt = build_next_level_graph(two_pairs, [0, 1, 2, 3])
    assert rebuilt.num_vertices == two_pairs.num_vertices
    assert rebuilt.num_edges == two_pairs.num_edges
    assert rebuilt.offsets == two_pairs.offsets
    assert as_dict(rebuilt) == as_dict(two_pairs)


def test_build_single_community_gives_self_loop(two_pairs):
    rebuilt = build_next_level_graph(two_pairs, [3, 3, 3, 3])
    assert rebuilt.num_vertices == 1
    assert rebuilt.num_edges == 1
    loop = rebuilt.edge(0)
    assert loop.tail == 0
    assert loop.weight == pytest.approx(total_weight(two_pairs))


def test_build_two_communities(two_pairs):
    rebuilt = build_next_level_graph(two_pairs, [0, 0, 2, 2])
    assert rebuilt.num_vertices == 2
    assert rebuilt.offsets[0] == 0
    assert rebuilt.offsets[-1] == rebuilt.num_edges
    assert total_weight(rebuilt) == pytest.approx(total_weight(two_pairs))
    adjacency = as_dict(rebuilt)
    assert adjacency[0][1] == adjacency[1][0] == pytest.approx(1.0)
    assert adjacency[0][0] == adjacency[1][1]


def test_build_edges_sorted_by_target():
    graph = undirected(5, [(0, 4, 0.5), (0, 2, 2.0), (1, 3, 1.5), (2, 4, 1.0)])
    rebuilt = build_next_level_graph(graph, [4, 3, 2, 1, 0])
    for vertex in range(rebuilt.num_vertices):
        tails = [e.tail for e in rebuilt.neighbors(vertex)]
        assert tails == sorted(tails)
    assert total_weight(rebuilt) == pytest.approx(total_weight(graph))


def test_build_is_stable_when_repeated(two_pairs):
    first = build_next_level_graph(two_pairs, [0, 0, 2, 2])
    second = build_next_level_graph(first, [0, 1])
    assert as_dict(second) == as_dict(first)
    assert second.offsets == first.offsets