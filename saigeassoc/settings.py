"""Run-wide settings for single-variant and region-based association tests."""

from __future__ import annotations

from dataclasses import dataclass, field

_IMPUTE_METHODS = frozenset({"mean", "minor"})


@dataclass(frozen=True)
class AssocSettings:
    """Quality-control cutoffs and output locations shared by all tests."""

    output_prefix: str
    impute_method: str = "mean"
    missing_rate_cutoff: float = 0.15
    min_maf_marker: float = 0.0
    min_mac_marker: float = 0.5
    min_info_marker: float = 0.0
    dosage_zerod_cutoff: float = 0.2
    dosage_zerod_mac_cutoff: float = 10.0
    weights_beta: tuple[float, float] = (1.0, 25.0)
    mac_cutoff_for_er: float = 4.0
    male_indices: tuple[int, ...] | None = None
    x_par_regions: tuple[tuple[int, int], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if self.impute_method not in _IMPUTE_METHODS:
            raise ValueError(
                f"impute_method must be one of {sorted(_IMPUTE_METHODS)}, "
                f"got {self.impute_method!r}"
            )
        weights = tuple(float(w) for w in self.weights_beta)
        if len(weights) != 2:
            raise ValueError("weights_beta must hold exactly two shape parameters")
        if any(w <= 0 for w in weights):
            raise ValueError("weights_beta shape parameters must be positive")
        object.__setattr__(self, "weights_beta", weights)

        if self.male_indices is not None:
            object.__setattr__(
                self, "male_indices", tuple(int(i) for i in self.male_indices)
            )

        regions = []
        for region in self.x_par_regions:
            start, end = (int(v) for v in region)
            if start > end:
                raise ValueError(f"PAR region start {start} exceeds end {end}")
            regions.append((start, end))
        object.__setattr__(self, "x_par_regions", tuple(regions))

    @property
    def rewrite_x_nonpar_for_males(self) -> bool:
        """True when male dosages outside the PAR regions are to be doubled."""
        return self.male_indices is not None

    def single_in_group_path(self) -> str:
        """Path of the per-variant results written during region tests."""
        return self.output_prefix + ".singleAssoc.txt"

    def single_in_group_temp_path(self) -> str:
        """Path of the temporary per-variant results file for fast tests."""
        return self.output_prefix + ".singleAssoc.txt_temp"

    def passes_marker_qc(
        self, missing_rate: float, maf: float, mac: float, impute_info: float
    ) -> bool:
        """Whether a marker passes the missing-rate, MAF, MAC and info cutoffs."""
        return not (
            missing_rate > self.missing_rate_cutoff
            or maf < self.min_maf_marker
            or mac < self.min_mac_marker
            or impute_info < self.min_info_marker
        )


@dataclass(frozen=True)
class RegionSettings:
    """Settings for region-based (gene-level) tests."""

    max_maf_region: tuple[float, ...]
    max_markers_region: int
    mac_cutoff_collapse_ultra_rare: float
    min_group_mac_for_burden_only: float

    def __post_init__(self) -> None:
        mafs = tuple(float(v) for v in self.max_maf_region)
        if not mafs:
            raise ValueError("max_maf_region must hold at least one cutoff")
        if self.max_markers_region <= 0:
            raise ValueError("max_markers_region must be positive")
        object.__setattr__(self, "max_maf_region", mafs)

    def max_maf_limit(self) -> float:
        """Largest MAF cutoff; markers above it are left out of every group."""
        return max(self.max_maf_region)

    def is_ultra_rare(self, mac: float) -> bool:
        """Whether a marker with this MAC is collapsed as an ultra-rare variant."""
        return not mac > self.mac_cutoff_collapse_ultra_rare


@dataclass(frozen=True)
class MarkerSettings:
    """Settings for single-marker tests."""

    is_output_more_details: bool
    marker_chunksize: int

    def __post_init__(self) -> None:
        if self.marker_chunksize <= 0:
            raise ValueError("marker_chunksize must be positive")