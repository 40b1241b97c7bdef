import os

import numpy as np
import pytest

from physarum.errors import InvalidConfiguration
from physarum.io.log_writer import LogWriter
from physarum.simulation import Simulation


def test_append_writes_npz_and_index(tmp_path):
    out = tmp_path / 'frames'
    with LogWriter(str(out)) as lw:
        fn = lw.append(3, {'field': np.ones((2, 2))}, elapsed_time=0.5)
    assert os.path.basename(fn) == 'tick_000003.npz'
    with np.load(fn) as data:
        assert np.array_equal(data['field'], np.ones((2, 2)))
    lines = (out / 'index.txt').read_text().splitlines()
    assert lines == ['3,0.500000,tick_000003.npz']


def test_run_logs_every_nth_tick(tmp_path):
    sim = Simulation(resolution=16, num_agents=50, num_species=2, seed=1)
    with LogWriter(str(tmp_path)) as lw:
        sim.run(6, 0.1, writer=lw, log_every=2)
        assert lw.written == 3
    assert sim.tick == 6
    names = sorted(p.name for p in tmp_path.glob('tick_*.npz'))
    assert names == ['tick_000002.npz', 'tick_000004.npz', 'tick_000006.npz']
    with np.load(tmp_path / 'tick_000006.npz') as data:
        assert data['field'].shape == (16, 16)
        assert data['position'].shape == (50, 2)


@pytest.mark.parametrize('log_every', [0, -3])
def test_run_rejects_non_positive_log_interval(tmp_path, log_every):
    sim = Simulation(resolution=16, num_agents=10, num_species=1, seed=1)
    with LogWriter(str(tmp_path)) as lw:
        with pytest.raises(InvalidConfiguration):
            sim.run(2, 0.1, writer=lw, log_every=log_every)
    assert sim.tick == 0
