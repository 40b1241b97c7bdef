import os


def pytest_configure(config):
    config.addinivalue_line('markers', 'slow: runs kernels in the interpreted executor; deselect with -m "not slow"')


def pytest_collection_modifyitems(config, items):
    """Deselect slow tests when PHYSARUM_SKIP_SLOW is set.

    The interpreted-executor cross-checks run kernel bodies in plain Python,
    which is fine locally but dominates CI time on small runners.
    """
    if not os.environ.get('PHYSARUM_SKIP_SLOW'):
        return

    removed = [item for item in items if item.get_closest_marker('slow')]
    if removed:
        items[:] = [item for item in items if not item.get_closest_marker('slow')]
        config.hook.pytest_deselected(items=removed)
        tr = config.pluginmanager.get_plugin('terminalreporter')
        if tr:
            tr.write_sep('-', f'Deselected {len(removed)} slow tests')
