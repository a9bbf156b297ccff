"""
Tests for the crowd series synthesizer (crowd_synthesizer.py)

Levels are random, so these tests check ranges and shape rather than
exact values, except where a seeded random source is supplied.
"""

import random
import pytest

from crowd_synthesizer import base_level, synthesize_crowd


class TestCrowdShape:
    """Shape invariants that hold for every run."""

    @pytest.mark.parametrize("run", range(20))
    def test_levels_in_range(self, run):
        for sample in synthesize_crowd("Ring Road"):
            assert 10 <= sample.level <= 100

    def test_one_sample_per_hour_ascending(self):
        samples = synthesize_crowd("Ring Road")
        assert [s.hour for s in samples] == [f"{h}:00" for h in range(6, 21)]
        assert len(samples) == 15

    def test_levels_are_integers(self):
        assert all(isinstance(s.level, int) for s in synthesize_crowd("Ring Road"))

    @pytest.mark.parametrize("run", range(20))
    def test_jitter_bounded(self, run):
        for sample in synthesize_crowd("Ring Road"):
            hour = int(sample.hour.split(":")[0])
            expected = base_level(hour)
            assert max(10, expected - 10) <= sample.level <= min(100, expected + 10)

    def test_rush_hours_busier_than_off_peak(self):
        samples = {s.hour: s.level for s in synthesize_crowd("Ring Road")}
        # 80+ at rush versus 40 or less off peak, whatever the jitter
        assert samples["9:00"] > samples["14:00"]
        assert samples["17:00"] > samples["6:00"]


class TestBaseLevel:

    @pytest.mark.parametrize("hour,level", [
        (6, 30), (7, 30), (8, 90), (10, 90), (11, 30), (12, 50),
        (15, 30), (16, 95), (18, 95), (19, 30), (20, 30),
    ])
    def test_base_levels(self, hour, level):
        assert base_level(hour) == level


class TestInjectedRandomSource:

    def test_seeded_source_is_reproducible(self):
        first = synthesize_crowd("Ring Road", rng=random.Random(42))
        second = synthesize_crowd("Ring Road", rng=random.Random(42))
        assert first == second

    def test_clamps_at_upper_bound(self, mocker):
        rng = mocker.Mock()
        rng.uniform.return_value = 10.0
        samples = {s.hour: s.level for s in synthesize_crowd("Ring Road", rng=rng)}
        assert samples["17:00"] == 100
        assert samples["9:00"] == 100
        assert samples["6:00"] == 40

    def test_lowest_jitter(self, mocker):
        rng = mocker.Mock()
        rng.uniform.return_value = -10.0
        samples = {s.hour: s.level for s in synthesize_crowd("Ring Road", rng=rng)}
        assert samples["6:00"] == 20
        assert samples["12:00"] == 40
        assert rng.uniform.call_count == 15
