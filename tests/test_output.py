import io
import math

import pytest

from saigeassoc.output import (
    BurdenResult,
    SingleVariantResult,
    burden_header,
    copy_lines,
    format_single_row,
    format_value,
    single_header,
    write_burden_results,
    write_single_results,
)


def _result(pval="0.5", chrom="1", marker="1:100:A:G"):
    return SingleVariantResult(
        chrom=chrom,
        pos="100",
        marker_id=marker,
        allele1="A",
        allele2="G",
        ac_allele2=3.0,
        af_allele2=0.25,
        imputation_info=1.0,
        missing_rate=0.0,
        beta=0.5,
        se=0.25,
        tstat=2.0,
        var=4.0,
        pval=pval,
        pval_na="0.5",
        is_spa=True,
        af_case=0.25,
        af_ctrl=0.125,
        n_case=4,
        n_ctrl=8,
        n_case_hom=1,
        n_case_het=2,
        n_ctrl_hom=0,
        n_ctrl_het=2,
        n=12,
    )


def test_format_value_basics():
    assert format_value(0.25) == "0.25"
    assert format_value(math.nan) == "nan"
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(None) == "NA"
    assert format_value("0.001") == "0.001"
    assert format_value(7) == "7"
    assert format_value(12.0) == "12"


def test_format_value_six_significant_digits():
    assert format_value(1234567.0) == "1.23457e+06"


def test_single_header_quantitative():
    header = single_header("quantitative", False, False, False)
    assert header == (
        "CHR\tPOS\tMarkerID\tAllele1\tAllele2\tAC_Allele2\tAF_Allele2\t"
        "MissingRate\tBETA\tSE\tTstat\tvar\tp.value\tN\n"
    )


def test_single_header_binary_imputation():
    header = single_header("binary", True, True, True)
    fields = header.rstrip("\n").split("\t")
    assert "imputationInfo" in fields
    assert fields[-4:] == ["N_case_hom", "N_case_het", "N_ctrl_hom", "N_ctrl_het"]
    assert "p.value.NA_c" in fields


def test_single_header_survival_names():
    fields = single_header("survival", False, False, False).rstrip("\n").split("\t")
    assert fields[-4:] == ["AF_event", "AF_censor", "N_event", "N_censor"]


@pytest.mark.parametrize("trait", ["binary", "survival", "quantitative"])
@pytest.mark.parametrize("imputation", [False, True])
@pytest.mark.parametrize("condition", [False, True])
@pytest.mark.parametrize("more", [False, True])
def test_row_matches_header_width(trait, imputation, condition, more):
    header = single_header(trait, imputation, condition, more)
    row = format_single_row(_result(), trait, imputation, condition, more)
    assert row.endswith("\n")
    assert len(row.split("\t")) == len(header.split("\t"))


def test_row_values_binary():
    row = format_single_row(_result(), "binary", False, False, False)
    fields = row.rstrip("\n").split("\t")
    assert fields[:5] == ["1", "100", "1:100:A:G", "A", "G"]
    assert fields[13] == "0.5"
    assert fields[14] == "true"
    assert fields[-2:] == ["4", "8"]


def test_unknown_trait_rejected():
    with pytest.raises(ValueError):
        single_header("ordinal", False, False, False)
    with pytest.raises(ValueError):
        format_single_row(_result(), "ordinal", False, False, False)


def test_write_single_results_skips_untested_and_counts_ur():
    stream = io.StringIO()
    results = [
        _result(),
        _result(pval="NA"),
        _result(pval=None),
        _result(chrom="UR", marker="gene:lof:0.01"),
    ]
    written, ultra_rare = write_single_results(
        stream, results, "quantitative", False, False, False
    )
    assert (written, ultra_rare) == (2, 1)
    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert lines[1].startswith("UR\t")


def test_burden_header_binary_condition():
    header = burden_header("binary", True)
    assert header.startswith("Region\tGroup\tmax_MAF\tPvalue_Burden\tBETA_Burden\tSE_Burden\t")
    assert "Pvalue_Burden_c\tBeta_Burden_c\tseBeta_Burden_c" in header
    assert header.endswith("MAC_case\tMAC_control\tNumber_rare\tNumber_ultra_rare\n")


@pytest.mark.parametrize("trait", ["binary", "survival", "quantitative"])
@pytest.mark.parametrize("condition", [False, True])
def test_burden_rows_match_header(trait, condition):
    stream = io.StringIO()
    results = [
        BurdenResult("lof", "0.01", "0.02", 0.5, 0.1, 10, 3, 2, pval_c="0.03",
                     beta_c=0.4, se_c=0.1, mac_case=6, mac_ctrl=4),
        None,
        BurdenResult("missense", "0.01", "NA", 0.0, 0.0, 0, 0, 0),
    ]
    written = write_burden_results(stream, "GENE1", results, 0.02, 0.03, condition, trait)
    assert written == 1
    width = len(burden_header(trait, condition).split("\t"))
    lines = stream.getvalue().splitlines()
    assert len(lines) == 2
    assert all(len(line.split("\t")) == width for line in lines)


def test_burden_cauchy_line():
    stream = io.StringIO()
    write_burden_results(stream, "GENE1", [], 0.02, None, False, "quantitative")
    assert stream.getvalue() == "GENE1\tCauchy\tNA\t0.02\tNA\tNA\tNA\tNA\tNA\n"


def test_copy_lines_round_trip(tmp_path):
    path = tmp_path / "temp.txt"
    path.write_text("a\tb\nc\td", encoding="utf-8")
    stream = io.StringIO()
    assert copy_lines(path, stream) == 2
    assert stream.getvalue() == "a\tb\nc\td\n"


def test_copy_lines_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        copy_lines(tmp_path / "absent.txt", io.StringIO())