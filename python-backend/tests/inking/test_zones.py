"""
Tests for the zone aggregation stage
"""

import numpy as np
import pytest

from api.exceptions import ConfigError
from inking.color_conversion import rgb_to_cmyk
from inking.zones import ZoneAccumulator, accumulate, aggregate_zones, zone_indices


class TestZoneIndices:
    """Test column to zone mapping"""

    def test_uneven_split(self):
        # zone width 3.33 px
        assert zone_indices(10, 3).tolist() == [0, 0, 0, 0, 1, 1, 1, 2, 2, 2]

    def test_even_split(self):
        assert zone_indices(6, 2).tolist() == [0, 0, 0, 1, 1, 1]

    def test_single_zone(self):
        assert zone_indices(5, 1).tolist() == [0] * 5

    def test_contiguous_and_complete(self):
        zones = zone_indices(2026, 34)
        assert zones[0] == 0
        assert zones[-1] == 33
        assert (np.diff(zones) >= 0).all()
        assert (np.diff(zones) <= 1).all()
        assert set(zones.tolist()) == set(range(34))

    def test_more_zones_than_columns(self):
        # zone width 0.6 px: zones 2 and 4 get no column
        assert zone_indices(3, 5).tolist() == [0, 1, 3]

    def test_invalid_num_keys(self):
        with pytest.raises(ConfigError):
            zone_indices(10, 0)


class TestZoneAccumulator:
    """Test partial sums and merging"""

    def test_counts_sum_to_pixel_count(self, make_canvas, random_rgb):
        canvas = make_canvas(random_rgb)
        for num_keys in (1, 2, 5, 37, 100):
            accumulator = accumulate(canvas, num_keys, 0.7)
            assert accumulator.total_count == canvas.pixel_count

    def test_merge_of_row_partitions_equals_full_scan(self, make_canvas, random_rgb):
        canvas = make_canvas(random_rgb)
        full = accumulate(canvas, 6, 0.5)

        top = accumulate(canvas, 6, 0.5, rows=slice(0, 10))
        bottom = accumulate(canvas, 6, 0.5, rows=slice(10, None))
        merged = top.merge(bottom)

        assert np.array_equal(merged.sums, full.sums)
        assert np.array_equal(merged.counts, full.counts)

    def test_merge_rejects_mismatched_zones(self):
        with pytest.raises(ValueError):
            ZoneAccumulator(3).merge(ZoneAccumulator(4))

    def test_empty_zone_reads_zero(self):
        accumulator = ZoneAccumulator(2)
        accumulator.sums[0] = [100, 200, 300, 400]
        accumulator.counts[0] = 4

        levels = accumulator.to_levels()
        assert levels.c == [25, 0]
        assert levels.m == [50, 0]
        assert levels.y == [75, 0]
        assert levels.k == [100, 0]

    def test_rounds_half_up(self):
        accumulator = ZoneAccumulator(1)
        accumulator.sums[0] = [1, 3, 5, 0]
        accumulator.counts[0] = 2
        assert accumulator.to_levels().c == [1]
        assert accumulator.to_levels().m == [2]
        assert accumulator.to_levels().y == [3]


class TestAggregateZones:
    """Test per-zone averaging"""

    def test_half_black_half_white(self, make_canvas):
        pixels = np.full((4, 10, 3), 255, dtype=np.uint8)
        pixels[:, :5] = 0
        levels = aggregate_zones(make_canvas(pixels), 2, 1.0)

        assert levels.c == [0, 0]
        assert levels.k == [100, 0]

    def test_single_zone_is_plate_average(self, make_canvas, random_rgb):
        levels = aggregate_zones(make_canvas(random_rgb), 1, 0.7)

        per_pixel = np.array(
            [rgb_to_cmyk(int(r), int(g), int(b), 0.7) for r, g, b in random_rgb.reshape(-1, 3)]
        )
        expected = np.floor(per_pixel.mean(axis=0) + 0.5).astype(int).tolist()
        assert [levels.c[0], levels.m[0], levels.y[0], levels.k[0]] == expected

    def test_band_size_does_not_change_result(self, make_canvas, random_rgb):
        canvas = make_canvas(random_rgb)
        reference = aggregate_zones(canvas, 4, 0.7, band_rows=1000)
        for band_rows in (1, 2, 7, 23):
            assert aggregate_zones(canvas, 4, 0.7, band_rows=band_rows) == reference

    def test_more_zones_than_columns(self, make_canvas):
        pixels = np.zeros((2, 3, 3), dtype=np.uint8)
        levels = aggregate_zones(make_canvas(pixels), 5, 1.0)

        assert levels.k == [100, 100, 0, 100, 0]
        assert levels.num_keys == 5

    def test_output_lengths_and_range(self, make_canvas, random_rgb):
        levels = aggregate_zones(make_canvas(random_rgb), 9, 0.3)
        for channel in ("c", "m", "y", "k"):
            values = levels.channel(channel)
            assert len(values) == 9
            assert all(0 <= v <= 100 for v in values)
