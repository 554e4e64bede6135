import pytest

from coursework.utils.common_utils import (
    calculate_correlation,
    calculate_cronbach_alpha,
    calculate_difficulty_index,
    calculate_mean,
    calculate_point_biserial,
    calculate_population_variance,
    calculate_standard_deviation,
    calculate_summary_statistics,
)


def test_empty_inputs_yield_zero():
    assert calculate_mean([]) == 0.0
    assert calculate_population_variance([]) == 0.0
    assert calculate_standard_deviation([]) == 0.0
    assert calculate_difficulty_index([]) == 0.0


def test_population_variance_divides_by_n():
    assert calculate_population_variance([1.0, 1.0, 0.0]) == pytest.approx(0.2222222)
    assert calculate_standard_deviation([1.0, 1.0, 0.0]) == pytest.approx(0.4714045)


def test_difficulty_index():
    assert calculate_difficulty_index([True, True, False]) == pytest.approx(2 / 3)


def test_point_biserial():
    totals = [3, 2, 2]
    assert calculate_point_biserial(totals, [1, 1, 0]) == pytest.approx(0.5)
    assert calculate_point_biserial(totals, [0, 0, 1]) == pytest.approx(-0.5)


def test_point_biserial_is_none_without_variance():
    assert calculate_point_biserial([3, 2, 2], [0, 0, 0]) is None
    assert calculate_point_biserial([2, 2, 2], [1, 0, 1]) is None


@pytest.mark.parametrize(
    "x, y",
    [([1.0], [2.0]), ([1.0, 2.0], [1.0]), ([], [])],
)
def test_correlation_undefined_for_short_or_mismatched_input(x, y):
    assert calculate_correlation(x, y) is None


def test_correlation_of_identical_series_is_one():
    assert calculate_correlation([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)


def test_cronbach_alpha():
    item_scores = [
        [1.0, 1.0, 1.0, 1.0],
        [1.0, 0.0, 1.0, 1.0],
        [1.0, 1.0, 0.0, 0.0],
    ]
    assert calculate_cronbach_alpha(item_scores) == pytest.approx(-2.0)


def test_cronbach_alpha_of_consistent_items():
    item_scores = [
        [1.0, 1.0, 0.0, 0.0],
        [1.0, 1.0, 0.0, 0.0],
        [1.0, 0.0, 0.0, 0.0],
    ]
    # item variances 0.25 + 0.25 + 0.1875, total variance 1.6875
    assert calculate_cronbach_alpha(item_scores) == pytest.approx(8 / 9)


def test_cronbach_alpha_undefined_cases():
    assert calculate_cronbach_alpha([[1.0, 0.0]]) is None
    assert calculate_cronbach_alpha([[1.0, 1.0], [0.0, 0.0]]) is None


def test_summary_statistics():
    stats = calculate_summary_statistics([4.0, 1.0, 3.0, 2.0])
    assert stats["count"] == 4
    assert stats["median"] == 2.5
    assert stats["min"] == 1.0
    assert stats["max"] == 4.0
    assert calculate_summary_statistics([])["count"] == 0
