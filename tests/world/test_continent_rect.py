"""Tests for ContinentRect."""

import pytest
from gw2map.world import ContinentRect


@pytest.mark.unit
class TestContinentRect:
    def test_center(self):
        rect = ContinentRect([[1000, 2000], [3000, 4000]])
        assert rect.center() == [2000.0, 3000.0]

    def test_bounds_normalizes_corners(self):
        rect = ContinentRect([[3000, 4000], [1000, 2000]])
        assert rect.bounds() == [[1000.0, 2000.0], [3000.0, 4000.0]]

    def test_to_dict(self):
        d = ContinentRect([[10, 20], [0, 0]]).to_dict()
        assert d == {
            "continent_rect": [[10.0, 20.0], [0.0, 0.0]],
            "map_rect": None,
            "bounds": [[0.0, 0.0], [10.0, 20.0]],
            "center": [5.0, 10.0],
        }

    def test_to_dict_with_map_rect(self):
        d = ContinentRect([[0, 0], [10, 10]], [[-5, -5], [5, 5]]).to_dict()
        assert d["map_rect"] == [[-5.0, -5.0], [5.0, 5.0]]
