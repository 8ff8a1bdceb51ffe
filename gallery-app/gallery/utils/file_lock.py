import json
import sys
from pathlib import Path

# Cross-platform file locking
if sys.platform == "win32":
    import msvcrt

    def _lock_shared(f):
        msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK, 1)

    def _lock_exclusive(f):
        msvcrt.locking(f.fileno(), msvcrt.LK_NBLCK, 1)

    def _unlock(f):
        try:
            f.seek(0)
            msvcrt.locking(f.fileno(), msvcrt.LK_UNLCK, 1)
        except OSError:
            pass
else:
    import fcntl

    def _lock_shared(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_SH)

    def _lock_exclusive(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_EX)

    def _unlock(f):
        fcntl.flock(f.fileno(), fcntl.LOCK_UN)


def write_json(filepath, data):
    """Write data to a JSON file with an exclusive lock.

    The file is opened in append mode and only truncated once the lock is held.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "a+") as f:
        _lock_exclusive(f)
        try:
            f.seek(0)
            f.truncate()
            json.dump(data, f, indent=2, default=str)
            f.flush()
        finally:
            _unlock(f)


def read_json(filepath, default=None):
    """Read a JSON file with a shared lock. Missing or empty files give `default`."""
    filepath = Path(filepath)
    if not filepath.exists():
        return default
    with open(filepath, "r") as f:
        _lock_shared(f)
        try:
            content = f.read().strip()
            return json.loads(content) if content else default
        finally:
            _unlock(f)
