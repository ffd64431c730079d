import pytest

from saigeassoc.settings import AssocSettings, MarkerSettings, RegionSettings


def _assoc(**kwargs):
    base = dict(
        output_prefix="out/result",
        missing_rate_cutoff=0.1,
        min_maf_marker=0.01,
        min_mac_marker=5.0,
        min_info_marker=0.3,
    )
    base.update(kwargs)
    return AssocSettings(**base)


def test_single_in_group_paths():
    settings = _assoc()
    assert settings.single_in_group_path() == "out/result.singleAssoc.txt"
    assert settings.single_in_group_temp_path() == "out/result.singleAssoc.txt_temp"


def test_passes_qc_at_boundaries():
    settings = _assoc()
    assert settings.passes_marker_qc(0.1, 0.01, 5.0, 0.3) is True


@pytest.mark.parametrize(
    "missing, maf, mac, info",
    [
        (0.11, 0.2, 50.0, 1.0),
        (0.0, 0.009, 50.0, 1.0),
        (0.0, 0.2, 4.9, 1.0),
        (0.0, 0.2, 50.0, 0.29),
    ],
)
def test_fails_qc_on_each_cutoff(missing, maf, mac, info):
    assert _assoc().passes_marker_qc(missing, maf, mac, info) is False


def test_drop_imputation_rejected():
    with pytest.raises(ValueError):
        _assoc(impute_method="drop")


def test_minor_imputation_accepted():
    assert _assoc(impute_method="minor").impute_method == "minor"


def test_weights_beta_must_have_two_values():
    with pytest.raises(ValueError):
        _assoc(weights_beta=(1.0, 25.0, 3.0))


def test_weights_beta_normalised_to_tuple():
    settings = _assoc(weights_beta=[1, 25])
    assert settings.weights_beta == (1.0, 25.0)


def test_male_rewrite_flag_follows_indices():
    assert _assoc().rewrite_x_nonpar_for_males is False
    settings = _assoc(male_indices=[0, 2])
    assert settings.rewrite_x_nonpar_for_males is True
    assert settings.male_indices == (0, 2)


def test_par_region_order_checked():
    with pytest.raises(ValueError):
        _assoc(x_par_regions=[(200, 100)])
    settings = _assoc(x_par_regions=[[10, 20]])
    assert settings.x_par_regions == ((10, 20),)


def test_max_maf_limit_is_largest_cutoff():
    region = RegionSettings((0.0001, 0.01, 0.001), 100, 10.0, 5.0)
    assert region.max_maf_limit() == 0.01


def test_empty_max_maf_rejected():
    with pytest.raises(ValueError):
        RegionSettings((), 100, 10.0, 5.0)


def test_nonpositive_max_markers_rejected():
    with pytest.raises(ValueError):
        RegionSettings((0.01,), 0, 10.0, 5.0)


def test_ultra_rare_boundary():
    region = RegionSettings((0.01,), 100, 10.0, 5.0)
    assert region.is_ultra_rare(10.0) is True
    assert region.is_ultra_rare(9.5) is True
    assert region.is_ultra_rare(10.5) is False


def test_marker_chunksize_must_be_positive():
    with pytest.raises(ValueError):
        MarkerSettings(False, 0)
    assert MarkerSettings(True, 1000).marker_chunksize == 1000