[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "commclust"
version = "0.1.0"
description = "CSR graphs, community-graph coarsening, a jump-ahead LCG and sharded CSV to binary graph conversion"
requires-python = ">=3.10"
dependencies = []
keywords = ["graph", "community detection", "csr", "coarsening", "edge list", "lcg"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Information Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
commclust-convert = "commclust.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["commclust"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
