[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "saigeassoc"
version = "0.1.0"
description = "Building blocks for single-variant and region-based genetic association testing"
requires-python = ">=3.10"
keywords = ["genetics", "association", "burden test", "gwas", "rare variants", "firth"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["saigeassoc"]

[tool.pytest.ini_options]
addopts = "-ra"
