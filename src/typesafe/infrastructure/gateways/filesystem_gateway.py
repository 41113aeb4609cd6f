"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from typesafe.domain.protocols import FileSystemProtocol

_SKIPPED_DIRS = frozenset({".git", ".hg", ".venv", "venv", "__pycache__", ".tox", ".nox", "build", "dist"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def resolve_path(self, path: str) -> str:
        """Resolve and normalize a path string."""
        return str(Path(path).resolve())

    def is_directory(self, path: str) -> bool:
        """Check if path is a directory."""
        return Path(path).is_dir()

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), sorted, skipping tool dirs."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return sorted(
                str(p)
                for p in path_obj.glob("**/*.py")
                if not _SKIPPED_DIRS.intersection(p.relative_to(path_obj).parts[:-1])
            )
        return [str(path_obj)] if path_obj.suffix == ".py" else []

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content, keeping line endings as written."""
        with open(path, encoding=encoding, newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file without translating line endings."""
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
