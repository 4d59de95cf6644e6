# commclust

Building blocks for graph community detection, with no dependencies beyond
the standard library.

- `commclust.graph`: a compressed sparse row (CSR) graph of weighted edges
  (`Graph`, `Edge`). `Graph.offsets` holds `num_vertices + 1` edge offsets.
  `Graph.edges` holds the flat edge list. Use `edge_range`, `edge`,
  `neighbors`, `set_edge_start`, `set_num_edges`, `set_edge_weights_to_one`
  and `copy` to work with it.
- `commclust.utils`: the following helpers.
  - `EdgeTriple`: an edge triple, ordered by `(i, j)`.
  - `WeightType`: the weight policies `RND_WEIGHT`, `ONE_WEIGHT`,
    `ORG_WEIGHT` and `ABS_WEIGHT`.
  - `Timer`: a wall-clock timer.
  - `gen_random(low, high)`: a uniform random number.
  - `process_graph_data(graph, edge_count, edge_list)`: fills a `Graph` in CSR
    form from per-vertex edge counts and an edge list. The edge list is sorted
    by `(i, j)` first if it is not already sorted.
- `commclust.lcg`: `ParallelLCG` produces one rank's share of a single linear
  congruential sequence. The sequence is `x = 16807 * x mod 2^31 - 1`, and
  there must be a power-of-two number of ranks. Each rank jumps straight to
  its starting position through powers of the 2x2 transition matrix.
  - `generate()` returns values in `[0, 1)`.
  - `rescale(idx_start, lo)` maps them into `[lo, lo + 1/nprocs)`.
  - The helpers are `seed_seq_first`, `mat_mul_2x2` and `mat_power`.
- `commclust.rebuild`: coarsening functions.
  - `renumber_communities` gives community ids dense numbers in order of
    first appearance.
  - `aggregate_edges` sums the edge weights between communities.
  - `build_next_level_graph` collapses a graph into its community graph.
    Edges inside a community become self-loops.
  - `partition_ranges` and `owner_of` split vertices into contiguous blocks.
- `commclust.shards`: reads a directory of CSV edge-list shards and writes
  them as one binary CSR graph file. The functions are `load_file_shards`,
  `discover_shards`, `shard_file_name`, `shard_offsets`, `parse_shard_line`,
  `write_binary_graph` and `read_binary_graph`.

## Installing

```
pip install .
```

## Converting shards to a binary graph

```
commclust-convert -f <shard-directory> -o <output-file> -x "<num-files> <start-chunk> <end-chunk> <shard-count>"
```

Options:

- `-f`: directory holding the shard files (required).
- `-o`: binary file to write (required).
- `-x`: four space-separated integers (required).
  - The number of files, used only in the progress messages.
  - The first chunk and the last chunk.
  - The number of vertices per shard block.
- `-z`: vertex ids in the shards start at 1.
- `-w`: set every edge weight to 1.0. Without `-w`, the absolute value of
  each line's weight field is used.
- `-n`: number of aggregating workers. It is accepted but has no effect.

The command prints the elapsed time when it finishes. It returns 1 with a
message on standard error if a shard is malformed or a file cannot be
written.

### Shard format

Shards are named `<ci>__<cj>.csv` for every `ci` and `cj` from the first
chunk to the last chunk. Missing shards are skipped.

Each shard starts with a header line. After it comes one line per edge:
`ai,aj,common,weight`. The ids in a shard are local to it:

- `(ci - 1) * shard_count` is added to `ai`.
- `(cj - 1) * shard_count` is added to `aj`.

Shards hold the upper triangle of the adjacency, so every edge is stored in
both directions. A self-loop is stored once. The vertex count is one more
than the largest id seen.

### Binary layout

All values are little-endian, in this order:

1. The vertex count and the edge count, as 64-bit integers.
2. `num_vertices + 1` 64-bit edge offsets.
3. One record per edge: an `int64` tail followed by a `float64` weight.

`read_binary_graph` reads such a file back into a `Graph`.

## Coarsening a graph

```python
from commclust.utils import EdgeTriple, process_graph_data
from commclust.graph import Graph
from commclust.rebuild import build_next_level_graph

edges = [EdgeTriple(0, 1, 1.0), EdgeTriple(1, 0, 1.0),
         EdgeTriple(2, 3, 1.0), EdgeTriple(3, 2, 1.0)]
counts = [0, 1, 1, 1, 1]
g = Graph(4, len(edges))
process_graph_data(g, counts, edges)

coarse = build_next_level_graph(g, [0, 0, 5, 5])
print(coarse.num_vertices)  # 2
```

## What this package does not do

- It does not run a community detection algorithm itself. It has no
  modularity optimisation, graph colouring or phase loop. It holds only the
  data structures, the coarsening step and the input conversion that such an
  algorithm uses.
- Everything runs in a single process. The partition helpers and
  `ParallelLCG` compute one rank's share, but nothing is exchanged between
  processes.