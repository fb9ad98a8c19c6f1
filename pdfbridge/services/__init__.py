"""Service layer for pdfbridge.

Services:
    - InDesignConverter: InDesign document to PDF conversion
    - AcrobatComparer: PDF comparison through Adobe Acrobat
"""

from pdfbridge.services.acrobat import AcrobatComparer
from pdfbridge.services.artifacts import discover_artifact, report_candidates
from pdfbridge.services.indesign import InDesignConverter

__all__ = [
    "AcrobatComparer",
    "InDesignConverter",
    "discover_artifact",
    "report_candidates",
]
