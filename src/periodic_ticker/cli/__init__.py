"""Command-line entry point (periodic-ticker)."""
