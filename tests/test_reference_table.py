"""
Tests for the embedded reference table and band interpolation.
Run: pytest tests/test_reference_table.py -v
"""
import numpy as np
import pytest

from src.models.reference_table import (
    ReferenceTable, REFERENCE_PERCENTILES, PERCENTILE_BANDS,
)

TABLE = ReferenceTable()
METRIC_SEX = [(m, s) for m in ('weight', 'height') for s in ('male', 'female')]


class TestAnchors:

    @pytest.mark.parametrize("metric,sex", METRIC_SEX)
    def test_anchor_ages(self, metric, sex):
        ages = [a.age_months for a in TABLE.anchors(metric, sex)]
        assert ages == [0, 1, 2, 3, 6, 9, 12, 18, 24]

    @pytest.mark.parametrize("metric,sex", METRIC_SEX)
    def test_bands_monotone_at_every_anchor(self, metric, sex):
        for anchor in TABLE.anchors(metric, sex):
            bands = anchor.bands()
            assert list(bands) == sorted(bands)

    @pytest.mark.parametrize("metric,sex", METRIC_SEX)
    def test_bands_grow_with_age(self, metric, sex):
        medians = [a.p50 for a in TABLE.anchors(metric, sex)]
        assert medians == sorted(medians)

    def test_male_birth_weight_row(self):
        birth = TABLE.anchors('weight', 'male')[0]
        assert birth.bands() == (2.5, 2.8, 3.3, 3.9, 4.3)

    def test_unknown_metric_raises(self):
        with pytest.raises(KeyError):
            TABLE.anchors('head_circumference', 'male')

    def test_unknown_sex_raises(self):
        with pytest.raises(KeyError):
            TABLE.anchors('weight', 'other')


class TestBracket:

    def test_exact_anchor(self):
        lower, upper, ratio = TABLE.bracket('weight', 'male', 6)
        assert lower.age_months == 3
        assert upper.age_months == 6
        assert ratio == pytest.approx(1.0)

    def test_between_anchors(self):
        lower, upper, ratio = TABLE.bracket('weight', 'male', 4.5)
        assert (lower.age_months, upper.age_months) == (3, 6)
        assert ratio == pytest.approx(0.5)

    def test_below_first_anchor_clamps(self):
        lower, upper, ratio = TABLE.bracket('height', 'female', -2)
        assert (lower.age_months, upper.age_months) == (0, 1)
        assert ratio == 0.0

    def test_above_last_anchor_clamps(self):
        lower, upper, ratio = TABLE.bracket('height', 'female', 30)
        assert (lower.age_months, upper.age_months) == (18, 24)
        assert ratio == 1.0

    def test_single_anchor_table(self):
        table = ReferenceTable({'weight': {'male': {0: (1, 2, 3, 4, 5)}}})
        lower, upper, ratio = table.bracket('weight', 'male', 3)
        assert lower is upper
        assert ratio == 0.0


class TestBandsAt:

    def test_anchor_age_returns_anchor_values(self):
        bands = TABLE.bands_at('weight', 'male', 0)
        assert bands.bands() == pytest.approx((2.5, 2.8, 3.3, 3.9, 4.3))

    def test_midpoint_interpolation(self):
        bands = TABLE.bands_at('weight', 'male', 4.5)
        assert bands.bands() == pytest.approx((5.7, 6.5, 7.2, 8.0, 8.7))

    def test_out_of_range_uses_edge_anchor(self):
        expected = REFERENCE_PERCENTILES['weight']['female'][24]
        assert TABLE.bands_at('weight', 'female', 40).bands() == pytest.approx(expected)

    @pytest.mark.parametrize("metric,sex", METRIC_SEX)
    def test_interpolated_bands_stay_monotone(self, metric, sex):
        for age in np.linspace(-1, 26, 109):
            bands = TABLE.bands_at(metric, sex, float(age)).bands()
            assert all(a <= b for a, b in zip(bands, bands[1:]))


class TestPercentileLines:

    def test_five_lines_over_whole_months(self):
        lines = TABLE.percentile_lines('weight', 'male')
        assert [l['percentile'] for l in lines] == list(PERCENTILE_BANDS)
        assert all(len(l['points']) == 25 for l in lines)

    def test_line_values_match_scoring_bands(self):
        lines = TABLE.percentile_lines('height', 'female', ages=[4.5])
        bands = TABLE.bands_at('height', 'female', 4.5).bands()
        for line, value in zip(lines, bands):
            assert line['points'][0]['value'] == round(value, 2)
