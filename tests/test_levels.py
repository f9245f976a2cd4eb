import pytest

from levelup.utils.levels import LEVEL_TABLE, MAX_LEVEL, band_span, level_for, progress, progress_percent


def test_zero_is_first_level():
    info = level_for(0)
    assert info.level == 1
    assert info.lower == 0
    assert info.upper == LEVEL_TABLE[1].threshold


@pytest.mark.parametrize("max_talent", [0, 1, 999, 1000, 1001, 4321, 8999, 9000, 9001, 250000])
def test_level_band_contains_value(max_talent):
    info = level_for(max_talent)
    assert info.lower <= max_talent
    if info.upper is not None:
        assert max_talent < info.upper
    else:
        assert info.level == MAX_LEVEL


def test_exact_threshold_starts_next_level():
    assert level_for(999).level == 1
    assert level_for(1000).level == 2


def test_top_band_is_clamped():
    info = level_for(10**9)
    assert info.level == MAX_LEVEL
    assert info.name == LEVEL_TABLE[-1].name
    assert info.upper is None


def test_negative_input_treated_as_zero():
    assert level_for(-5) == level_for(0)


def test_table_is_strictly_ordered():
    thresholds = [band.threshold for band in LEVEL_TABLE]
    assert thresholds == sorted(set(thresholds))
    assert thresholds[0] == 0
    assert [band.level for band in LEVEL_TABLE] == list(range(1, len(LEVEL_TABLE) + 1))


@pytest.mark.parametrize("max_talent", [0, 250, 999, 1000, 9000, 9999, 12345])
def test_progress_stays_below_one(max_talent):
    value = progress(max_talent)
    assert 0 <= value < 1


def test_progress_within_band():
    assert progress(1250) == pytest.approx(0.25)
    assert progress_percent(1500) == 50
    assert band_span(9500) == LEVEL_TABLE[-1].threshold - LEVEL_TABLE[-2].threshold
