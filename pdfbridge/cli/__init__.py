"""Command line interface for pdfbridge."""
