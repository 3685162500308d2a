"""File scanner for discovering intraday Parquet data files.

Walks an input directory tree and yields every columnar data file it finds.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Iterator


@dataclass
class DataFile:
    """Metadata for a data file."""

    path: Path
    filename: str
    file_size: int

    @property
    def stem(self) -> str:
        """Base name without the extension; used to name output tables."""
        return self.path.stem


class FileScanner:
    """Scanner for Parquet OHLCV files."""

    SUFFIX = ".parquet"

    def __init__(self, root_dir: str | Path):
        """Initialize scanner.

        Args:
            root_dir: Root directory searched recursively
        """
        self.root_dir = Path(root_dir)

    def scan(self) -> list[DataFile]:
        """Scan the root directory tree for data files.

        Returns:
            List of DataFile objects sorted by path
        """
        if not self.root_dir.exists():
            raise FileNotFoundError(f"Directory not found: {self.root_dir}")

        files = []
        for entry in self.root_dir.rglob(f"*{self.SUFFIX}"):
            data_file = self._parse_file(entry)
            if data_file is not None:
                files.append(data_file)

        files.sort(key=lambda f: f.path)
        return files

    def iter_files(self) -> Iterator[DataFile]:
        """Iterate over discovered files in path order."""
        yield from self.scan()

    def _parse_file(self, path: Path) -> DataFile | None:
        if not path.is_file() or path.suffix != self.SUFFIX:
            return None

        return DataFile(
            path=path,
            filename=path.name,
            file_size=path.stat().st_size,
        )

    def get_file_stats(self) -> dict:
        """Get statistics for the discovered files.

        Returns:
            Dictionary with file statistics
        """
        files = self.scan()

        total_size = sum(f.file_size for f in files)
        return {
            "root_dir": str(self.root_dir),
            "file_count": len(files),
            "total_size_mb": round(total_size / (1024 * 1024), 2),
            "files": [str(f.path) for f in files],
        }
