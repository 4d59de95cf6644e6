import pytest

from commclust.graph import Edge, Graph


def _triangle():
    g = Graph(3, 6)
    g.offsets = [0, 2, 4, 6]
    pairs = [(1, 0.5), (2, 0.25), (0, 0.5), (2, 2.0), (0, 0.25), (1, 2.0)]
    for edge, (tail, weight) in zip(g.edges, pairs):
        edge.tail = tail
        edge.weight = weight
    return g


def test_edge_defaults():
    e = Edge()
    assert (e.tail, e.weight) == (-1, 0.0)


def test_new_graph_is_zeroed():
    g = Graph(4, 3)
    assert g.num_vertices == 4
    assert g.num_edges == 3
    assert g.offsets == [0] * 5
    assert all(e == Edge() for e in g.edges)
    assert len(g.edges) == 3


def test_negative_sizes_rejected():
    with pytest.raises(ValueError):
        Graph(-1, 0)


def test_edge_range_and_neighbors():
    g = _triangle()
    assert g.edge_range(1) == (2, 4)
    assert [e.tail for e in g.neighbors(1)] == [0, 2]
    assert [e.weight for e in g.neighbors(2)] == [0.25, 2.0]


def test_edge_range_out_of_bounds():
    g = _triangle()
    with pytest.raises(IndexError):
        g.edge_range(3)
    with pytest.raises(IndexError):
        g.edge_range(-1)


def test_edge_returns_live_object():
    g = _triangle()
    g.edge(0).tail = 2
    assert g.edges[0].tail == 2
    with pytest.raises(IndexError):
        g.edge(6)


def test_set_edge_weights_to_one():
    g = _triangle()
    g.set_edge_weights_to_one()
    assert all(e.weight == 1.0 for e in g.edges)
    assert [e.tail for e in g.edges] == [1, 2, 0, 2, 0, 1]


def test_set_num_edges_shrinks_and_grows():
    g = _triangle()
    g.set_num_edges(2)
    assert g.num_edges == 2
    assert [e.tail for e in g.edges] == [1, 2]
    g.set_num_edges(4)
    assert g.num_edges == 4
    assert g.edges[2] == Edge()
    assert g.edges[0].tail == 1
    with pytest.raises(ValueError):
        g.set_num_edges(-1)


def test_set_edge_start_validation():
    g = Graph(2, 3)
    g.set_edge_start(2, 3)
    assert g.offsets[2] == 3
    with pytest.raises(IndexError):
        g.set_edge_start(3, 0)
    with pytest.raises(ValueError):
        g.set_edge_start(1, 4)


def test_copy_is_independent():
    g = _triangle()
    c = g.copy()
    assert c.offsets == g.offsets
    assert c.edges == g.edges
    c.edges[0].weight = 9.0
    c.offsets[1] = 1
    assert g.edges[0].weight == 0.5
    assert g.offsets[1] == 2
    assert c.num_edges == g.num_edges


def test_str_lists_vertices():
    text = str(_triangle())
    assert text.splitlines()[0] == "Number of vertices: 3, number of edges: 6"
    assert text.count("Vertex:") == 3