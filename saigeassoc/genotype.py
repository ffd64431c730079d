"""Per-marker genotype helpers: X-chromosome handling, case/control summaries, weights."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
from scipy import stats

_HOM_LOW = 1.5
_HOM_HIGH = 2.0
_HET_LOW = 0.5


@dataclass(frozen=True)
class CaseControlSummary:
    """Allele frequencies, counts and genotype classes of one marker in cases and controls."""

    af_case: float
    af_ctrl: float
    n_case: int
    n_ctrl: int
    mac_case: float
    mac_ctrl: float
    n_case_hom: int
    n_case_het: int
    n_ctrl_hom: int
    n_ctrl_het: int


def is_in_par(position: int, par_regions: Iterable[Sequence[int]]) -> bool:
    """Whether a base position lies in any pseudo-autosomal region (bounds inclusive)."""
    return any(start <= position <= end for start, end in par_regions)


def process_male_x_nonpar(
    genotypes: Sequence[float] | np.ndarray,
    position: int,
    par_regions: Iterable[Sequence[int]],
    male_indices: Sequence[int] | np.ndarray,
) -> np.ndarray:
    """Return the dosages with male dosages doubled when the position is outside every PAR region.

    The input is left unchanged.
    """
    result = np.array(genotypes, dtype=float, copy=True)
    if not is_in_par(position, par_regions):
        idx = np.asarray(male_indices, dtype=int)
        if idx.size:
            result[idx] = result[idx] * 2
    return result


def genotype_class_counts(
    dosages: Sequence[float] | np.ndarray, flipped: bool
) -> tuple[int, int]:
    """Count homozygous-alternative and heterozygous carriers as ``(hom, het)``.

    A dosage in [1.5, 2] counts as homozygous and one in [0.5, 1.5) as
    heterozygous. When the alleles were flipped, the homozygous count becomes
    the number of samples that are neither of these classes.
    """
    values = np.asarray(dosages, dtype=float)
    hom = int(np.count_nonzero((values <= _HOM_HIGH) & (values >= _HOM_LOW)))
    het = int(np.count_nonzero((values < _HOM_LOW) & (values >= _HET_LOW)))
    if flipped:
        hom = values.size - het - hom
    return hom, het


def _half_mean(values: np.ndarray) -> float:
    if values.size == 0:
        return math.nan
    return float(values.mean()) / 2


def case_control_summary(
    genotypes: Sequence[float] | np.ndarray,
    case_indices: Sequence[int] | np.ndarray,
    ctrl_indices: Sequence[int] | np.ndarray,
    flipped: bool,
) -> CaseControlSummary:
    """Summarise a marker's dosages separately for cases (events) and controls (censored)."""
    values = np.asarray(genotypes, dtype=float)
    dosage_case = values[np.asarray(case_indices, dtype=int)]
    dosage_ctrl = values[np.asarray(ctrl_indices, dtype=int)]

    af_case = _half_mean(dosage_case)
    af_ctrl = _half_mean(dosage_ctrl)
    if flipped:
        af_case = 1 - af_case
        af_ctrl = 1 - af_ctrl

    case_hom, case_het = genotype_class_counts(dosage_case, flipped)
    ctrl_hom, ctrl_het = genotype_class_counts(dosage_ctrl, flipped)

    return CaseControlSummary(
        af_case=af_case,
        af_ctrl=af_ctrl,
        n_case=int(dosage_case.size),
        n_ctrl=int(dosage_ctrl.size),
        mac_case=float(dosage_case.sum()),
        mac_ctrl=float(dosage_ctrl.sum()),
        n_case_hom=case_hom,
        n_case_het=case_het,
        n_ctrl_hom=ctrl_hom,
        n_ctrl_het=ctrl_het,
    )


def format_max_maf(value: float) -> str:
    """Format a MAF cutoff with six decimals and trailing zeros removed."""
    return f"{value:f}".rstrip("0")


def beta_weight(maf: float, weights_beta: Sequence[float]) -> float:
    """Beta-density weight of a variant with the given minor allele frequency."""
    a, b = (float(w) for w in weights_beta)
    if a <= 0 or b <= 0:
        raise ValueError("beta shape parameters must be positive")
    if not 0.0 <= maf <= 1.0 or math.isnan(maf):
        raise ValueError(f"MAF must lie in [0, 1], got {maf}")
    return float(stats.beta.pdf(maf, a, b))