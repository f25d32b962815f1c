[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "depgraph"
version = "0.1.0"
description = "Dependency graph of stateful items with nested subgraphs, cycle detection, diffing and DOT export"
requires-python = ">=3.10"
dependencies = []
keywords = ["dependency", "graph", "dag", "subgraph", "graphviz", "dot"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["depgraph"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
