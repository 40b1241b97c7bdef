import math

import pytest

from physarum.config import REMAPPABLE_ATTRIBUTES, SPECIES_RANGES
from physarum.errors import InvalidConfiguration
from physarum.settings import AttributeRange, Settings


def test_defaults_fill_every_attribute():
    s = Settings()
    assert set(s.ranges) == set(REMAPPABLE_ATTRIBUTES)
    lo, hi = SPECIES_RANGES['move_speed']
    assert s['move_speed'] == AttributeRange(lo, hi)


def test_partial_ranges_merge_with_defaults():
    s = Settings(ranges={'move_speed': (1, 2)})
    assert s['move_speed'] == (1.0, 2.0)
    assert s['turn_speed'] == AttributeRange(*SPECIES_RANGES['turn_speed'])


def test_degenerate_range_is_allowed():
    s = Settings(ranges={'sensor_distance': (7.0, 7.0)})
    assert s['sensor_distance'].degenerate
    assert s['sensor_distance'].span == 0.0


@pytest.mark.parametrize('bad', [(2.0, 1.0), (0.0, math.inf), (math.nan, 1.0), (-1e308, 1e308), 'ab', 3.0])
def test_invalid_ranges_raise(bad):
    with pytest.raises(InvalidConfiguration):
        Settings(ranges={'move_speed': bad})


def test_unknown_attribute_raises():
    with pytest.raises(InvalidConfiguration):
        Settings(ranges={'wing_span': (0, 1)})


def test_replace_returns_new_settings():
    s = Settings()
    s2 = s.replace(move_speed=(100.0, 200.0), angle_adjustment_weight=0.25)
    assert s2['move_speed'] == (100.0, 200.0)
    assert s2.angle_adjustment_weight == 0.25
    assert s['move_speed'] != s2['move_speed']


def test_json_round_trip(tmp_path):
    s = Settings(ranges={'turn_speed': (1.5, 3.5)}, angle_adjustment_weight=0.4)
    path = tmp_path / 'settings.json'
    s.save(path)
    loaded = Settings.load(path)
    assert loaded == s
    assert Settings.from_dict(s.to_dict()) == s
