import logging
import os

import numpy as np

logger = logging.getLogger(__name__)


class LogWriter:
    """Per-tick snapshot logger that writes binary .npz files.

    Usage:
        lw = LogWriter(output_dir)
        lw.append(tick, {'field': field, 'position': pos, 'heading': heading, ...})
        lw.close()

    The writer creates files named `tick_{t:06d}.npz` and an index `index.txt`
    with one `tick,elapsed_time,filename` line per snapshot.
    """

    def __init__(self, out_dir):
        self.out_dir = out_dir
        os.makedirs(self.out_dir, exist_ok=True)
        self.index_path = os.path.join(self.out_dir, 'index.txt')
        # line-buffered so a crashed run still leaves a usable index
        self._index_f = open(self.index_path, 'a', buffering=1)
        self.written = 0

    def append(self, t, arrays_dict, elapsed_time=0.0):
        """Write arrays_dict to a single `.npz` for tick `t`.

        Write failures are logged and skipped so a full disk does not stop the simulation.
        """
        fn = os.path.join(self.out_dir, f'tick_{t:06d}.npz')
        try:
            # plain savez (uncompressed) for write speed
            np.savez(fn, **arrays_dict)
        except OSError:
            logger.exception('failed to write snapshot for tick %d to %s', t, fn)
            return None
        self._index_f.write(f'{t},{elapsed_time:.6f},{os.path.basename(fn)}\n')
        self.written += 1
        return fn

    def close(self):
        if not self._index_f.closed:
            self._index_f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False
