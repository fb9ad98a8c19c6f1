"""File system helpers shared by the services and the CLI."""

import itertools
import os
import shutil
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from pdfbridge.config.constants import INDESIGN_EXTENSIONS
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


def get_unique_path(path: Path) -> Path:
    """Return ``path``, or ``<stem>_<n><suffix>`` with the first free ``n``."""
    if not path.exists():
        return path
    candidates = (
        path.with_name(f"{path.stem}_{counter}{path.suffix}") for counter in itertools.count(1)
    )
    return next(c for c in candidates if not c.exists())


def is_hidden(path: Path) -> bool:
    """Dot files and the ``__MACOSX`` folder left behind by zipped packages."""
    return path.name.startswith(".") or path.name == "__MACOSX"


def discover_files(
    directory: Path,
    recursive: bool = True,
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """List files under ``directory`` whose suffix is in ``extensions``.

    Hidden files and folders are skipped. Matching is case-insensitive and
    defaults to InDesign documents.

    Returns:
        Sorted list of file paths
    """
    wanted = {ext.lower() for ext in (extensions or INDESIGN_EXTENSIONS)}

    def matches(path: Path) -> bool:
        return not is_hidden(path) and path.suffix.lower() in wanted

    if not recursive:
        return sorted(p for p in directory.iterdir() if p.is_file() and matches(p))

    found: list[Path] = []
    for root, dirs, filenames in os.walk(directory):
        dirs[:] = [d for d in dirs if not is_hidden(Path(d))]
        found.extend(p for p in (Path(root) / name for name in filenames) if matches(p))
    return sorted(found)


def delete_paths(paths: Iterable[Path | None]) -> int:
    """Remove files and directory trees; errors are logged, not raised.

    Returns:
        Number of paths removed
    """
    removed = 0
    for path in paths:
        if path is None or not path.exists():
            continue
        try:
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            log.warning("Failed to clean up path", path=str(path), error=str(e))
        else:
            removed += 1
    return removed


@contextmanager
def temporary_directory(prefix: str = "pdfbridge_") -> Iterator[Path]:
    """Create a temporary directory that is removed however the block exits."""
    temp_path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)
