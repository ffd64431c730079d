"""Variance matrices of region markers assembled from chunked projections.

For the variants of one region that are tested together, the variance
matrix is ``P1 @ P2``. P1 holds one row per marker and P2 one column per
marker. When a region has more markers than fit in memory at once, P1 and
P2 are stored in chunks on disk. The full matrix is then built block by
block.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from .genotype import beta_weight


class ChunkStore:
    """On-disk store of the P1/P2 chunks of one region, keyed by chunk index."""

    def __init__(self, prefix: str | os.PathLike[str]) -> None:
        self.prefix = os.fspath(prefix)

    def p1_path(self, index: int) -> Path:
        """File holding the P1 chunk with this index."""
        return Path(f"{self.prefix}_P1Mat_Chunk_{index}.bin")

    def p2_path(self, index: int) -> Path:
        """File holding the P2 chunk with this index."""
        return Path(f"{self.prefix}_P2Mat_Chunk_{index}.bin")

    def save(self, index: int, p1, p2) -> None:
        """Write the P1 (markers x samples) and P2 (samples x markers) chunks."""
        first = np.asarray(p1, dtype=float)
        second = np.asarray(p2, dtype=float)
        if first.ndim != 2 or second.ndim != 2:
            raise ValueError("P1 and P2 chunks must be two-dimensional")
        if first.shape[1] != second.shape[0]:
            raise ValueError(
                f"P1 chunk has {first.shape[1]} columns but P2 chunk has "
                f"{second.shape[0]} rows"
            )
        for path, matrix in ((self.p1_path(index), first), (self.p2_path(index), second)):
            with open(path, "wb") as handle:
                np.save(handle, matrix, allow_pickle=False)

    def load(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """Read back the P1 and P2 chunks with this index."""
        matrices = []
        for path in (self.p1_path(index), self.p2_path(index)):
            with open(path, "rb") as handle:
                matrices.append(np.load(handle, allow_pickle=False))
        return matrices[0], matrices[1]

    def remove(self, count: int) -> None:
        """Delete the files of chunks 0 to ``count - 1``; missing files are ignored."""
        for index in range(count):
            for path in (self.p1_path(index), self.p2_path(index)):
                path.unlink(missing_ok=True)

    def __enter__(self) -> ChunkStore:
        return self

    def __exit__(self, *exc_info) -> None:
        return None


def assemble_variance_matrix(store: ChunkStore, chunk_sizes: Sequence[int]) -> np.ndarray:
    """Build the full variance matrix from the stored chunks.

    Diagonal blocks are ``P1_i @ P2_i``; an off-diagonal block
    ``P1_i @ P2_j`` (j < i) is placed below the diagonal and its transpose
    above it.
    """
    sizes = [int(s) for s in chunk_sizes]
    if any(s < 0 for s in sizes):
        raise ValueError("chunk sizes must not be negative")
    total = sum(sizes)
    var_mat = np.zeros((total, total))
    if not sizes:
        return var_mat

    offsets = np.concatenate(([0], np.cumsum(sizes))).astype(int)
    p2_cache: dict[int, np.ndarray] = {}

    def p2_of(index: int) -> np.ndarray:
        if index not in p2_cache:
            _, p2 = store.load(index)
            if p2.shape[1] != sizes[index]:
                raise ValueError(
                    f"P2 chunk {index} has {p2.shape[1]} columns, expected {sizes[index]}"
                )
            p2_cache[index] = p2
        return p2_cache[index]

    for i, size_i in enumerate(sizes):
        p1, _ = store.load(i)
        if p1.shape[0] != size_i:
            raise ValueError(f"P1 chunk {i} has {p1.shape[0]} rows, expected {size_i}")
        if p1.shape[1] == 0:
            continue
        rows = slice(offsets[i], offsets[i + 1])
        for j in range(i):
            p2 = p2_of(j)
            if p2.shape[1] == 0:
                continue
            block = p1 @ p2
            cols = slice(offsets[j], offsets[j + 1])
            var_mat[rows, cols] = block
            var_mat[cols, rows] = block.T
        var_mat[rows, rows] = p1 @ p2_of(i)
    return var_mat


def conditional_weights(weight_cond, maf_cond, weights_beta) -> np.ndarray:
    """Weights of the conditioning markers.

    Custom weights are used when any of them is non-zero; otherwise each
    marker gets the beta-density weight of its MAF.
    """
    mafs = np.asarray(maf_cond, dtype=float).ravel()
    custom = None if weight_cond is None else np.asarray(weight_cond, dtype=float).ravel()
    if custom is not None and custom.size and np.any(custom != 0):
        if custom.size < mafs.size:
            raise ValueError(
                f"{custom.size} custom weights given for {mafs.size} conditioning markers"
            )
        return custom[: mafs.size].copy()
    return np.array([beta_weight(float(maf), weights_beta) for maf in mafs])


def weighted_conditional_varmat(var_mat_cond, weights) -> np.ndarray:
    """Scale a conditioning-marker variance matrix by the outer product of the weights."""
    matrix = np.asarray(var_mat_cond, dtype=float)
    w = np.asarray(weights, dtype=float).ravel()
    if matrix.shape != (w.size, w.size):
        raise ValueError(
            f"variance matrix of shape {matrix.shape} does not match {w.size} weights"
        )
    return np.outer(w, w) * matrix