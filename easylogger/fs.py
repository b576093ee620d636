"""File-system capability used by the writer and the mill.

Tests substitute a subclass to inject faults instead of patching ``os``.
"""

import os
import stat


class OSFileSystem:
    """Thin wrapper over the ``os`` calls the rotation code needs."""

    def stat(self, path: str) -> os.stat_result:
        return os.stat(path)

    def isdir(self, path: str) -> bool:
        try:
            return stat.S_ISDIR(self.stat(path).st_mode)
        except OSError:
            return False

    def listdir(self, path: str) -> list[str]:
        return os.listdir(path)

    def makedirs(self, path: str, mode: int = 0o755):
        os.makedirs(path, mode=mode, exist_ok=True)

    def remove(self, path: str):
        os.remove(path)

    def open(self, path: str, flags: int, mode: int = 0o644):
        """Open *path* with raw ``os.open`` flags and return a binary file object."""
        fd = os.open(path, flags, mode)
        if flags & os.O_WRONLY or flags & os.O_RDWR:
            file_mode = "ab" if flags & os.O_APPEND else "wb"
        else:
            file_mode = "rb"
        try:
            return os.fdopen(fd, file_mode)
        except Exception:
            os.close(fd)
            raise
