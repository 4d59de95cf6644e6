"""CSR graphs, community-graph coarsening, a jump-ahead LCG and sharded edge-list conversion."""

__version__ = "0.1.0"