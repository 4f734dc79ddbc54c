from __future__ import annotations

from pathlib import Path


class PidFile:
    """A one-line file holding the decimal PID of the running daemon."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> int | None:
        """Return the recorded PID, or None if the file is missing, empty or unreadable."""
        try:
            raw = self.path.read_text(encoding="ascii").strip()
        except (OSError, UnicodeDecodeError):
            return None
        if not raw:
            return None
        try:
            pid = int(raw)
        except ValueError:
            return None
        return pid if pid > 0 else None

    def write(self, pid: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(str(int(pid)), encoding="ascii")

    def remove(self) -> None:
        """Delete the file; a missing file is not an error."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def __str__(self) -> str:
        return str(self.path)
