import numpy as np
import pytest
from matplotlib.colors import rgb_to_hsv

from physarum.config import REMAPPABLE_ATTRIBUTES
from physarum.errors import InvalidConfiguration
from physarum.settings import Settings
from physarum.species import generate_species


def test_five_species_indices_and_even_hues():
    table = generate_species(5, Settings(), seed=3)
    assert list(table.index) == [0, 1, 2, 3, 4]
    hues = rgb_to_hsv(table.color[:, :3])[:, 0]
    assert np.allclose(hues, [0.0, 0.2, 0.4, 0.6, 0.8])
    assert np.allclose(table.color[:, 3], 1.0)
    assert np.allclose(table.inverse_color, 1.0 - table.color)


def test_values_lie_within_ranges():
    settings = Settings()
    table = generate_species(50, settings, seed=11)
    for name in REMAPPABLE_ATTRIBUTES:
        lo, hi = settings[name]
        vals = table.values[name]
        assert np.all(vals >= lo) and np.all(vals <= hi)


def test_sensor_size_is_floored_integer():
    table = generate_species(20, Settings(ranges={'sensor_size': (0.0, 5.0)}), seed=2)
    assert table.sensor_size.dtype.kind == 'i'
    assert np.array_equal(table.sensor_size, np.floor(table.values['sensor_size']).astype(int))
    assert isinstance(table[0].sensor_size, int)
    records = table.records()
    assert [r.index for r in records] == list(range(20))
    assert records[3].move_speed == table.values['move_speed'][3]


def test_generation_is_deterministic_for_seed():
    a = generate_species(4, Settings(), seed=99)
    b = generate_species(4, Settings(), seed=99)
    c = generate_species(4, Settings(), seed=100)
    assert np.array_equal(a.packed(), b.packed())
    assert not np.array_equal(a.packed(), c.packed())


def test_degenerate_range_generates_its_single_value():
    table = generate_species(3, Settings(ranges={'move_speed': (42.0, 42.0)}), seed=0)
    assert np.all(table.values['move_speed'] == 42.0)


@pytest.mark.parametrize('n', [0, -2])
def test_non_positive_species_count_raises(n):
    with pytest.raises(InvalidConfiguration):
        generate_species(n, Settings(), seed=0)


def test_packed_matrix_column_order():
    table = generate_species(3, Settings(), seed=5)
    packed = table.packed()
    assert packed.shape == (3, len(REMAPPABLE_ATTRIBUTES))
    col = REMAPPABLE_ATTRIBUTES.index('move_speed')
    assert np.array_equal(packed[:, col], table.values['move_speed'])
    assert packed.flags['C_CONTIGUOUS']


def test_sanitize_replaces_non_finite_values():
    settings = Settings()
    table = generate_species(2, settings, seed=1)
    table.values['turn_speed'][1] = np.nan
    assert table.sanitize(settings) == 1
    assert table.values['turn_speed'][1] == settings['turn_speed'].min
