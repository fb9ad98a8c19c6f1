"""pdfbridge - InDesign to PDF conversion and PDF comparison via Adobe desktop apps."""

__version__ = "0.1.0"
