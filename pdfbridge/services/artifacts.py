"""Locate the report Acrobat saved after a comparison.

Acrobat names the saved report after whichever input it treats as primary,
so the file name is not known in advance. The candidates are probed in order
and the first hit is renamed to the path the caller expects.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from pdfbridge.config.constants import COMPARE_REPORT_PREFIX
from pdfbridge.utils.logging import get_logger

log = get_logger(__name__)


def report_candidates(first: Path, second: Path, extra: Iterable[str] = ()) -> list[str]:
    """Ordered report file names Acrobat may have chosen (newer document first)."""
    names = [
        f"{COMPARE_REPORT_PREFIX}{second.stem}.pdf",
        f"{COMPARE_REPORT_PREFIX}{first.stem}.pdf",
        *extra,
    ]
    return list(dict.fromkeys(names))


def discover_artifact(output_dir: Path, candidates: Iterable[str], expected: Path) -> Path | None:
    """Move the first existing candidate to ``expected``.

    Returns:
        ``expected`` when a candidate was found, otherwise None
    """
    for name in candidates:
        candidate = output_dir / name
        if not candidate.is_file():
            continue
        if candidate != expected:
            expected.parent.mkdir(parents=True, exist_ok=True)
            candidate.replace(expected)
        log.debug("Comparison report found", candidate=name, path=str(expected))
        return expected

    log.warning("No comparison report found", output_dir=str(output_dir))
    return None
