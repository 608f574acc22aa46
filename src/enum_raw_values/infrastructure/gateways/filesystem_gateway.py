"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from enum_raw_values.domain.protocols import FileSystemProtocol

_SKIPPED_DIRECTORIES = frozenset({".git", ".venv", "venv", "__pycache__", ".tox", "build", "dist"})


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_python_files(self, path: str) -> list[str]:
        """Get all Python files in path (recursive if directory), sorted."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return sorted(
                str(p)
                for p in path_obj.glob("**/*.py")
                if not _SKIPPED_DIRECTORIES.intersection(p.relative_to(path_obj).parts)
            )
        return [str(path_obj)] if path_obj.suffix == ".py" else []

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file, keeping its newlines untranslated."""
        with open(path, encoding=encoding, newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        with open(path, "w", encoding=encoding, newline="") as f:
            f.write(content)
