[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sdpcore"
version = "0.1.0"
description = "Block-structured matrix data, solver parameters and sparse Schur-complement patterns for interior-point semidefinite programming"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "semidefinite programming",
    "SDP",
    "interior point",
    "optimization",
    "Schur complement",
    "sparse matrix",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sdpcore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
