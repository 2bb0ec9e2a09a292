"""
Tests for Phred quality-score encoding.
"""

import pytest

from precise_recal.quality import MAX_PHRED_SCORE, PhredQualityScore


@pytest.mark.parametrize("p, expected", [
    (0.1, 10.0),
    (0.01, 20.0),
    (0.001, 30.0),
    (1.0, 0.0),
])
def test_from_error_probability(p, expected):
    assert PhredQualityScore.from_error_probability(p).phred == pytest.approx(expected)


def test_zero_probability_is_capped():
    assert PhredQualityScore.from_error_probability(0.0).phred == pytest.approx(MAX_PHRED_SCORE)


@pytest.mark.parametrize("p", [-0.1, 1.5])
def test_out_of_range_probability(p):
    with pytest.raises(ValueError):
        PhredQualityScore.from_error_probability(p)


def test_round_trip_probability():
    score = PhredQualityScore(30)
    assert score.error_probability == pytest.approx(0.001)
    assert score.success_probability == pytest.approx(0.999)


def test_ordering_and_min():
    low, high = PhredQualityScore(12.5), PhredQualityScore(50)
    assert low < high
    assert min(high, low) is low


def test_rounding_and_ascii():
    assert PhredQualityScore(29.5).rounded() == 30
    assert PhredQualityScore(29.4).rounded() == 29
    assert PhredQualityScore(30).to_ascii() == "?"


def test_str():
    assert str(PhredQualityScore(50)) == "50.00"
    assert str(PhredQualityScore.from_error_probability(0.5)) == "3.01"


def test_invalid_score():
    with pytest.raises(ValueError):
        PhredQualityScore(-1)
