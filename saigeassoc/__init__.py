"""Settings, genotype helpers, region grouping, Firth logistic fits, variance matrices and result tables for association tests."""

__version__ = "0.1.0"
__all__ = ["settings", "genotype", "regiongroups", "firth", "varmat", "output"]