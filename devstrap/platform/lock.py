#!/usr/bin/env python3
"""
devstrap Package Manager Lock
Serializes package manager mutations across concurrent devstrap processes
"""

import os
import platform
import time
from pathlib import Path
from typing import Optional

from devstrap.errors import LockError, LockTimeoutError

LOCK_FILENAME = 'package-manager.lock'
DEFAULT_LOCK_TIMEOUT = 300


class PackageManagerLock:
    """
    Exclusive advisory lock on ~/.devstrap/package-manager.lock.

    Uses fcntl.flock() on Unix and msvcrt.locking() on Windows. Only
    devstrap processes honour it; it does not replace the package
    manager's own lock (e.g. the dpkg lock).
    """

    POLL_INTERVAL = 0.5

    def __init__(self, lock_path: Path, timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.lock_path = lock_path
        self.timeout = timeout
        self._fd: Optional[int] = None

    @classmethod
    def for_home(cls, home_dir: Path, timeout: float = DEFAULT_LOCK_TIMEOUT) -> 'PackageManagerLock':
        return cls(home_dir / '.devstrap' / LOCK_FILENAME, timeout=timeout)

    @property
    def is_held(self) -> bool:
        return self._fd is not None

    def acquire(self):
        """
        Block until the lock is held or the timeout expires

        Raises:
            LockError: if the lock file cannot be created
            LockTimeoutError: if another process keeps the lock past the timeout
        """
        if self._fd is not None:
            return

        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LockError(f"Cannot create lock directory {self.lock_path.parent}: {e.strerror or e}") from e
        deadline = time.monotonic() + self.timeout

        while True:
            if self._try_acquire():
                return
            if time.monotonic() >= deadline:
                raise LockTimeoutError(
                    f"Another devstrap process is using the package manager "
                    f"(lock file: {self.lock_path}). If no other install is running, "
                    f"delete the lock file and retry."
                )
            time.sleep(self.POLL_INTERVAL)

    def _try_acquire(self) -> bool:
        try:
            fd = os.open(str(self.lock_path), os.O_CREAT | os.O_RDWR)
        except OSError as e:
            raise LockError(f"Cannot open lock file {self.lock_path}: {e.strerror or e}") from e

        try:
            if platform.system() == 'Windows':
                import msvcrt
                msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)  # type: ignore[attr-defined]
            else:
                import fcntl
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            os.close(fd)
            return False

        # Owner PID, for diagnostics only
        os.ftruncate(fd, 0)
        os.lseek(fd, 0, os.SEEK_SET)
        os.write(fd, str(os.getpid()).encode())
        self._fd = fd
        return True

    def release(self):
        """Release the lock; the file itself is left in place"""
        if self._fd is None:
            return

        fd, self._fd = self._fd, None
        try:
            if platform.system() == 'Windows':
                import msvcrt
                os.lseek(fd, 0, os.SEEK_SET)
                msvcrt.locking(fd, msvcrt.LK_UNLCK, 1)  # type: ignore[attr-defined]
            else:
                import fcntl
                fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            os.close(fd)

    def __enter__(self) -> 'PackageManagerLock':
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
