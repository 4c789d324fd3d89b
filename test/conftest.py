import os
import time

import pytest

HOUR = 60 * 60
NOW = time.time()


@pytest.fixture
def scratch_dir(tmp_path):
    path = tmp_path / "uploads" / "temp"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def make_entry(scratch_dir):
    """Create a file in the scratch dir whose mtime is age_sec before NOW."""
    def _make(name, age_sec, content=b"x"):
        fpath = scratch_dir / name
        fpath.write_bytes(content)
        mtime = NOW - age_sec
        os.utime(fpath, (mtime, mtime))
        return fpath
    return _make
