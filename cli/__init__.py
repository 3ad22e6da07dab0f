"""Command-line interface for the Home Access Center API."""
