"""Grouping of region variants by annotation and MAF cutoff.

Each group is one (annotation, max-MAF) pair. Its column index is
``annotation * n_mafs + maf_index``.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

_COMMON = 1
_ULTRA_RARE = 2


def maf_indicator(max_mafs: Sequence[float] | np.ndarray, maf: float) -> np.ndarray:
    """Boolean mask of the MAF cutoffs that a variant with this MAF falls under."""
    return np.asarray(max_mafs, dtype=float) >= maf


def group_indices(
    annotation_row: Sequence[float] | np.ndarray,
    max_mafs: Sequence[float] | np.ndarray,
    maf: float,
) -> list[int]:
    """Indices of the groups a variant belongs to, in annotation-major order."""
    mafs = np.asarray(max_mafs, dtype=float)
    n_mafs = mafs.size
    mask = maf_indicator(mafs, maf)
    annotated = np.flatnonzero(np.asarray(annotation_row) == 1)
    return [int(j) * n_mafs + int(m) for j in annotated for m in np.flatnonzero(mask)]


class RegionAccumulator:
    """Collects per-group sums of a region's variants.

    Common variants add to weighted genotype sums, allele counts and rare
    counts; ultra-rare variants are collapsed into one pseudo-marker per group
    by taking the sample-wise maximum dosage.
    """

    def __init__(
        self,
        n_samples: int,
        n_annotations: int,
        max_mafs: Sequence[float] | np.ndarray,
        n_markers: int,
    ) -> None:
        self.max_mafs = np.asarray(max_mafs, dtype=float)
        if self.max_mafs.ndim != 1 or self.max_mafs.size == 0:
            raise ValueError("max_mafs must be a non-empty sequence of cutoffs")
        if n_samples <= 0:
            raise ValueError("n_samples must be positive")
        if n_annotations <= 0:
            raise ValueError("n_annotations must be positive")
        if n_markers < 0:
            raise ValueError("n_markers must not be negative")

        self.n_samples = int(n_samples)
        self.n_annotations = int(n_annotations)
        self.n_markers = int(n_markers)
        n_groups = self.n_groups

        self.geno_ur = np.zeros((self.n_samples, n_groups))
        self.geno_sum = np.zeros((self.n_samples, n_groups))
        self.geno_sum_count = np.zeros(n_groups)
        self.mac_group = np.zeros(n_groups)
        self.mac_case_group = np.zeros(n_groups)
        self.mac_ctrl_group = np.zeros(n_groups)
        self.num_rare = np.zeros(n_groups)
        self.num_ultra_rare = np.zeros(n_groups)
        self.max_maf_per_annotation = np.zeros(self.n_annotations)
        self.anno_maf_indicator = np.zeros(
            (self.n_markers + n_groups, n_groups), dtype=int
        )

    @property
    def n_mafs(self) -> int:
        return int(self.max_mafs.size)

    @property
    def n_groups(self) -> int:
        return self.n_annotations * self.n_mafs

    def _check(self, row_index: int, annotation_row, genotypes) -> tuple[np.ndarray, np.ndarray]:
        if not 0 <= row_index < self.anno_maf_indicator.shape[0]:
            raise IndexError(f"row index {row_index} out of range")
        annotations = np.asarray(annotation_row)
        if annotations.shape != (self.n_annotations,):
            raise ValueError(
                f"annotation row must have {self.n_annotations} entries, "
                f"got shape {annotations.shape}"
            )
        values = np.asarray(genotypes, dtype=float)
        if values.shape != (self.n_samples,):
            raise ValueError(
                f"genotypes must have {self.n_samples} entries, got shape {values.shape}"
            )
        return annotations, values

    def _update_max_maf(self, annotations: np.ndarray, maf: float) -> None:
        annotated = annotations == 1
        self.max_maf_per_annotation[annotated] = np.maximum(
            self.max_maf_per_annotation[annotated], maf
        )

    def add_common(
        self,
        row_index: int,
        annotation_row: Sequence[float] | np.ndarray,
        maf: float,
        mac: float,
        weight: float,
        genotypes: Sequence[float] | np.ndarray,
        case_mac: float | None = None,
        ctrl_mac: float | None = None,
    ) -> list[int]:
        """Add a variant that is not ultra-rare; return the groups it joined."""
        annotations, values = self._check(row_index, annotation_row, genotypes)
        self._update_max_maf(annotations, maf)
        groups = group_indices(annotations, self.max_mafs, maf)
        nonzero = np.flatnonzero(values)

        row = np.zeros(self.n_groups, dtype=int)
        for jm in groups:
            row[jm] = _COMMON
            self.mac_group[jm] += mac
            if case_mac is not None:
                self.mac_case_group[jm] += case_mac
            if ctrl_mac is not None:
                self.mac_ctrl_group[jm] += ctrl_mac
            self.geno_sum[nonzero, jm] += weight * values[nonzero]
            self.geno_sum_count[jm] += values[nonzero].sum()
            self.num_rare[jm] += 1
        self.anno_maf_indicator[row_index] = row
        return groups

    def add_ultra_rare(
        self,
        row_index: int,
        annotation_row: Sequence[float] | np.ndarray,
        maf: float,
        genotypes: Sequence[float] | np.ndarray,
        weight: float | None = None,
    ) -> list[int]:
        """Collapse an ultra-rare variant into its groups; return the groups it joined.

        With a custom weight the weighted dosage takes part in the maximum.
        """
        annotations, values = self._check(row_index, annotation_row, genotypes)
        self._update_max_maf(annotations, maf)
        groups = group_indices(annotations, self.max_mafs, maf)
        nonzero = np.flatnonzero(values)
        scaled = values[nonzero] if weight is None else weight * values[nonzero]

        row = np.zeros(self.n_groups, dtype=int)
        for jm in groups:
            row[jm] = _ULTRA_RARE
            self.geno_ur[nonzero, jm] = np.maximum(self.geno_ur[nonzero, jm], scaled)
            self.num_ultra_rare[jm] += 1
        self.anno_maf_indicator[row_index] = row
        return groups

    def max_maf_index_per_annotation(self) -> np.ndarray:
        """Index of the smallest MAF cutoff covering every variant of each annotation."""
        result = np.empty(self.n_annotations, dtype=int)
        for j, top in enumerate(self.max_maf_per_annotation):
            covering = np.flatnonzero(self.max_mafs >= top)
            if covering.size == 0:
                raise ValueError(
                    f"annotation {j} has MAF {top} above every cutoff"
                )
            result[j] = covering.min()
        return result