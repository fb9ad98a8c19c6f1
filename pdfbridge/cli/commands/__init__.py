"""CLI commands for pdfbridge."""
