"""View paths: template lookup within one view root.

A ViewPath pairs a root directory with a current directory inside it.
Lookups start in the current directory, then its ``shared/`` directory,
then walk up one level at a time until the root has been searched.
"""

from functools import lru_cache
from pathlib import Path


@lru_cache(maxsize=1024)
def _lookup(root: Path, dir: Path, name: str, format: str) -> str | None:
    current = dir
    while True:
        for candidate in (name, f"shared/{name}"):
            matches = sorted(current.glob(f"{candidate}.{format}.*"))
            if matches:
                return matches[0].relative_to(root).as_posix()

        if current == root or root not in current.parents:
            return None
        current = current.parent


class ViewPath:
    """One view root plus a current directory within it.

    Attributes:
        root: View root directory
        dir: Current directory (the root unless chdir() was used)
    """

    def __init__(self, root: Path | str, dir: Path | str | None = None) -> None:
        self.root = Path(root).resolve()
        self.dir = self.root if dir is None else Path(dir).resolve()

    def chdir(self, dirname: str) -> "ViewPath":
        """Return a view path for a subdirectory of the current directory."""
        return ViewPath(self.root, self.dir / dirname)

    def lookup(self, name: str, format: str) -> str | None:
        """Find a template file for name and format.

        Args:
            name: Template name without extensions (may contain "/")
            format: Output format (e.g. "html", "txt")

        Returns:
            Path relative to the root in POSIX form, or None if not found
        """
        return _lookup(self.root, self.dir, name, format)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ViewPath):
            return NotImplemented
        return (self.root, self.dir) == (other.root, other.dir)

    def __hash__(self) -> int:
        return hash((self.root, self.dir))

    def __str__(self) -> str:
        return str(self.dir)

    def __repr__(self) -> str:
        return f"ViewPath({str(self.root)!r}, dir={str(self.dir)!r})"
