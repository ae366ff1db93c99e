[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "vizgraph"
version = "1.0.0"
description = "A dataflow execution graph of sources, filters, actors and mappers for scientific visualization"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["visualization", "dataflow", "graph", "pipeline", "scientific"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Visualization",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["vizgraph"]

[tool.pytest.ini_options]
addopts = "-ra"
