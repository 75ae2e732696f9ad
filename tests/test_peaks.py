"""Tests for the peak pipeline."""

from __future__ import annotations

import numpy as np
import pytest

from sheetscan.sprites import Peak
from sheetscan.sprites.detection import (
    DetectionConfig,
    calculate_prominences,
    estimate_divisions,
    filter_by_distance,
    filter_by_prominence,
    find_local_maxima,
    gaussian_smooth,
    score_confidence,
    snap_to_grid_size,
)


def _spike_signal(length: int, positions, height: float = 100.0) -> np.ndarray:
    signal = np.zeros(length)
    signal[list(positions)] = height
    return signal


# ---------------------------------------------------------------------------
# Smoothing
# ---------------------------------------------------------------------------


class TestGaussianSmooth:
    def test_preserves_length(self):
        for n in (1, 3, 8, 50):
            assert gaussian_smooth(np.arange(n, dtype=float)).shape == (n,)

    def test_constant_signal_is_unchanged(self):
        signal = np.full(40, 7.25)
        assert (gaussian_smooth(signal) == 7.25).all()

    def test_spike_becomes_symmetric_bump(self):
        smoothed = gaussian_smooth(_spike_signal(41, [20]))
        assert smoothed.argmax() == 20
        assert smoothed[19] == pytest.approx(smoothed[21])
        assert smoothed[20] < 100

    def test_ends_are_not_damped(self):
        # A step keeps its plateau height at the signal ends
        signal = np.concatenate([np.full(20, 5.0), np.full(20, 1.0)])
        smoothed = gaussian_smooth(signal)
        assert smoothed[0] == pytest.approx(5.0)
        assert smoothed[-1] == pytest.approx(1.0)

    def test_empty(self):
        assert gaussian_smooth([]).size == 0


# ---------------------------------------------------------------------------
# Maxima and prominence
# ---------------------------------------------------------------------------


class TestMaxima:
    def test_strict_maxima_only(self):
        peaks = find_local_maxima([0, 1, 0, 2, 2, 0, 3])
        assert [p.index for p in peaks] == [1]

    def test_short_signal(self):
        assert find_local_maxima([1, 2]) == []


class TestProminence:
    def test_prominence_uses_higher_key_col(self):
        data = [0, 3, 1, 5, 0]
        peaks = calculate_prominences(find_local_maxima(data), data)
        assert [(p.index, p.prominence) for p in peaks] == [(1, 2.0), (3, 5.0)]

    def test_edge_peaks_have_zero_prominence(self):
        data = [9, 1, 4, 1, 9]
        peaks = calculate_prominences([Peak(0, 9), Peak(2, 4), Peak(4, 9)], data)
        assert peaks[0].prominence == 0
        assert peaks[2].prominence == 0
        assert peaks[1].prominence == 3

    def test_prominence_is_never_negative(self):
        rng = np.random.RandomState(3)
        data = rng.rand(200)
        peaks = calculate_prominences(find_local_maxima(data), data)
        assert peaks
        assert all(p.prominence >= 0 for p in peaks)


# ---------------------------------------------------------------------------
# Filters and confidence
# ---------------------------------------------------------------------------


class TestFilters:
    def test_prominence_filter_is_relative(self):
        peaks = [Peak(1, 0, 10.0), Peak(5, 0, 1.0), Peak(9, 0, 3.0)]
        kept = filter_by_prominence(peaks, 0.2)
        assert [p.index for p in kept] == [1, 9]

    def test_distance_filter_keeps_most_prominent(self):
        peaks = [Peak(10, 0, 5.0), Peak(12, 0, 8.0), Peak(30, 0, 1.0)]
        kept = filter_by_distance(peaks, 5)
        assert [p.index for p in kept] == [12, 30]

    def test_distance_filter_sorted_by_index(self):
        peaks = [Peak(50, 0, 1.0), Peak(5, 0, 9.0), Peak(25, 0, 4.0)]
        assert [p.index for p in filter_by_distance(peaks, 3)] == [5, 25, 50]

    def test_empty(self):
        assert filter_by_prominence([]) == []
        assert filter_by_distance([], 3) == []


class TestConfidence:
    def test_no_peaks(self):
        assert score_confidence([], 1.0) == pytest.approx(0.1)

    def test_regular_strong_peaks_score_full(self):
        peaks = [Peak(i, 1.0, 1.0) for i in (10, 20, 30)]
        assert score_confidence(peaks, 1.0) == pytest.approx(1.0)

    def test_single_peak_has_no_regularity_term(self):
        assert score_confidence([Peak(10, 1.0, 1.0)], 1.0) == pytest.approx(0.6)

    def test_irregular_spacing_scores_lower(self):
        regular = [Peak(i, 1.0, 1.0) for i in (10, 20, 30, 40)]
        irregular = [Peak(i, 1.0, 1.0) for i in (10, 12, 30, 40)]
        assert score_confidence(irregular, 1.0) < score_confidence(regular, 1.0)

    def test_zero_max_prominence_has_no_strength_term(self):
        assert score_confidence([Peak(10, 1.0, 0.0)], 0.0) == pytest.approx(0.2)


# ---------------------------------------------------------------------------
# Snapping
# ---------------------------------------------------------------------------


class TestSnap:
    def test_common_cell_size_match(self):
        # 256 / 64 = 4, within 1 of 5
        assert snap_to_grid_size(5, 256) == 4

    def test_exact_estimate_is_kept(self):
        assert snap_to_grid_size(8, 256) == 8

    def test_divisor_fallback(self):
        # 300 has no common-size match near 10, but 300 / 10 = 30
        assert snap_to_grid_size(10, 300) == 10

    def test_nothing_fits(self):
        assert snap_to_grid_size(7, 101) == 7

    def test_zero_size(self):
        assert snap_to_grid_size(3, 0) == 3

    @pytest.mark.parametrize("size", [64, 96, 100, 128, 240, 256, 300, 384, 512, 1000])
    def test_idempotent(self, size):
        for divisions in range(1, 41):
            once = snap_to_grid_size(divisions, size)
            assert snap_to_grid_size(once, size) == once


# ---------------------------------------------------------------------------
# estimate_divisions
# ---------------------------------------------------------------------------


class TestEstimateDivisions:
    def test_empty_signal(self):
        estimate = estimate_divisions([], 0)
        assert estimate.divisions == 1
        assert estimate.confidence == 0.0

    def test_flat_signal(self):
        estimate = estimate_divisions(np.zeros(100), 100)
        assert estimate.divisions == 1
        assert estimate.confidence == pytest.approx(0.1)

    def test_regular_spikes(self):
        estimate = estimate_divisions(_spike_signal(256, [64, 128, 192]), 256)
        assert estimate.divisions == 4
        assert estimate.confidence > 0.9
        assert [p.index for p in estimate.peaks] == [64, 128, 192]

    def test_close_peaks_are_merged_by_distance(self):
        config = DetectionConfig(min_distance_divisor=10)
        # Two peaks 20 apart on a 256 axis (min distance 25) count once
        signal = _spike_signal(256, [100, 120])
        estimate = estimate_divisions(signal, 256, config)
        assert len(estimate.peaks) == 1
