"""Tab-separated result files of single-variant and burden tests."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TextIO, Union

import numpy as np

_NA = "NA"
_CASE_CONTROL_TRAITS = frozenset({"binary", "survival"})
_TRAIT_TYPES = frozenset({"binary", "survival", "quantitative"})

PValue = Union[str, float, None]


def _check_trait(trait_type: str) -> None:
    if trait_type not in _TRAIT_TYPES:
        raise ValueError(
            f"trait_type must be one of {sorted(_TRAIT_TYPES)}, got {trait_type!r}"
        )


def _is_missing(pval: PValue) -> bool:
    return pval is None or (isinstance(pval, str) and pval == _NA)


@dataclass
class SingleVariantResult:
    """One row of single-variant association results.

    A ``pval`` of ``None`` or ``"NA"`` marks a marker that was not tested;
    such rows are not written.
    """

    chrom: str
    pos: str
    marker_id: str
    allele1: str
    allele2: str
    ac_allele2: float = math.nan
    af_allele2: float = math.nan
    imputation_info: float = math.nan
    missing_rate: float = math.nan
    beta: float = math.nan
    se: float = math.nan
    tstat: float = math.nan
    var: float = math.nan
    pval: PValue = None
    pval_na: PValue = None
    is_spa: bool = False
    beta_c: float = math.nan
    se_c: float = math.nan
    tstat_c: float = math.nan
    var_c: float = math.nan
    pval_c: PValue = None
    pval_na_c: PValue = None
    af_case: float = math.nan
    af_ctrl: float = math.nan
    n_case: float = math.nan
    n_ctrl: float = math.nan
    n_case_hom: float = math.nan
    n_case_het: float = math.nan
    n_ctrl_hom: float = math.nan
    n_ctrl_het: float = math.nan
    n: float = math.nan

    @property
    def is_tested(self) -> bool:
        return not _is_missing(self.pval)

    @property
    def is_ultra_rare(self) -> bool:
        return self.chrom == "UR"


@dataclass
class BurdenResult:
    """Burden-test result of one (annotation, max-MAF) group of a region."""

    annotation: str
    max_maf: str
    pval: PValue
    beta: float
    se: float
    mac: float
    num_rare: float
    num_ultra_rare: float
    pval_c: PValue = None
    beta_c: float = math.nan
    se_c: float = math.nan
    mac_case: float = math.nan
    mac_ctrl: float = math.nan

    @property
    def is_tested(self) -> bool:
        return not _is_missing(self.pval)


def format_value(value) -> str:
    """Format a value as the result files show it.

    Floats use six significant digits in the shortest of fixed and
    scientific notation; booleans are ``true``/``false``; ``None`` is ``NA``.
    """
    if value is None:
        return _NA
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    return format(float(value), "g")


def single_header(
    trait_type: str, is_imputation: bool, is_condition: bool, is_more_output: bool
) -> str:
    """Header line of a single-variant results file, with its newline."""
    _check_trait(trait_type)
    case_control = trait_type in _CASE_CONTROL_TRAITS
    parts = ["CHR", "POS", "MarkerID", "Allele1", "Allele2", "AC_Allele2", "AF_Allele2"]
    parts.append("imputationInfo" if is_imputation else "MissingRate")
    parts += ["BETA", "SE", "Tstat", "var", "p.value"]
    if case_control:
        parts += ["p.value.NA", "Is.SPA"]
    if is_condition:
        parts += ["BETA_c", "SE_c", "Tstat_c", "var_c", "p.value_c"]
        if case_control:
            parts.append("p.value.NA_c")
    if trait_type == "binary":
        parts += ["AF_case", "AF_ctrl", "N_case", "N_ctrl"]
        if is_more_output:
            parts += ["N_case_hom", "N_case_het", "N_ctrl_hom", "N_ctrl_het"]
    elif trait_type == "survival":
        parts += ["AF_event", "AF_censor", "N_event", "N_censor"]
        if is_more_output:
            parts += ["N_event_hom", "N_event_het", "N_censor_hom", "N_censor_het"]
    else:
        parts.append("N")
    return "\t".join(parts) + "\n"


def format_single_row(
    result: SingleVariantResult,
    trait_type: str,
    is_imputation: bool,
    is_condition: bool,
    is_more_output: bool,
) -> str:
    """One tab-separated results line for a marker, with its newline."""
    _check_trait(trait_type)
    case_control = trait_type in _CASE_CONTROL_TRAITS
    values: list = [
        result.chrom,
        result.pos,
        result.marker_id,
        result.allele1,
        result.allele2,
        result.ac_allele2,
        result.af_allele2,
        result.imputation_info if is_imputation else result.missing_rate,
        result.beta,
        result.se,
        result.tstat,
        result.var,
        result.pval,
    ]
    if case_control:
        values += [result.pval_na, bool(result.is_spa)]
    if is_condition:
        values += [result.beta_c, result.se_c, result.tstat_c, result.var_c, result.pval_c]
        if case_control:
            values.append(result.pval_na_c)
    if case_control:
        values += [result.af_case, result.af_ctrl, result.n_case, result.n_ctrl]
        if is_more_output:
            values += [
                result.n_case_hom,
                result.n_case_het,
                result.n_ctrl_hom,
                result.n_ctrl_het,
            ]
    else:
        values.append(result.n)
    return "\t".join(format_value(v) for v in values) + "\n"


def write_single_results(
    stream: TextIO,
    results: Iterable[SingleVariantResult],
    trait_type: str,
    is_imputation: bool,
    is_condition: bool,
    is_more_output: bool,
) -> tuple[int, int]:
    """Write the tested markers; return ``(markers written, ultra-rare markers written)``."""
    _check_trait(trait_type)
    written = 0
    ultra_rare = 0
    for result in results:
        if not result.is_tested:
            continue
        stream.write(
            format_single_row(
                result, trait_type, is_imputation, is_condition, is_more_output
            )
        )
        written += 1
        if result.is_ultra_rare:
            ultra_rare += 1
    return written, ultra_rare


def burden_header(trait_type: str, is_condition: bool) -> str:
    """Header line of a region (burden) results file, with its newline."""
    _check_trait(trait_type)
    parts = ["Region", "Group", "max_MAF", "Pvalue_Burden", "BETA_Burden", "SE_Burden"]
    if is_condition:
        parts += ["Pvalue_Burden_c", "Beta_Burden_c", "seBeta_Burden_c"]
    parts.append("MAC")
    if trait_type == "binary":
        parts += ["MAC_case", "MAC_control"]
    elif trait_type == "survival":
        parts += ["MAC_event", "MAC_censor"]
    parts += ["Number_rare", "Number_ultra_rare"]
    return "\t".join(parts) + "\n"


def write_burden_results(
    stream: TextIO,
    region_name: str,
    results: Iterable[BurdenResult | None],
    cct_pval: float,
    cct_pval_cond: float | None,
    is_condition: bool,
    trait_type: str,
) -> int:
    """Write the tested groups of a region and its Cauchy-combined line.

    Returns the number of group lines written, not counting the Cauchy line.
    """
    _check_trait(trait_type)
    case_control = trait_type in _CASE_CONTROL_TRAITS
    written = 0
    for result in results:
        if result is None or not result.is_tested:
            continue
        values: list = [
            region_name,
            result.annotation,
            result.max_maf,
            result.pval,
            result.beta,
            result.se,
        ]
        if is_condition:
            values += [result.pval_c, result.beta_c, result.se_c]
        values.append(result.mac)
        if case_control:
            values += [result.mac_case, result.mac_ctrl]
        values += [result.num_rare, result.num_ultra_rare]
        stream.write("\t".join(format_value(v) for v in values) + "\n")
        written += 1

    cauchy: list = [region_name, "Cauchy", _NA, cct_pval, _NA, _NA]
    if is_condition:
        cauchy += [math.nan if cct_pval_cond is None else cct_pval_cond, _NA, _NA]
    cauchy.append(_NA)
    if case_control:
        cauchy += [_NA, _NA]
    cauchy += [_NA, _NA]
    stream.write("\t".join(format_value(v) for v in cauchy) + "\n")
    return written


def copy_lines(source_path: str | os.PathLike[str], stream: TextIO) -> int:
    """Append every line of a file to ``stream``, each ended by a newline; return the count."""
    count = 0
    with open(source_path, encoding="utf-8") as source:
        for line in source:
            stream.write(line.rstrip("\n") + "\n")
            count += 1
    return count