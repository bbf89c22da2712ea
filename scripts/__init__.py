"""Command-line entry points for the wxkit utilities."""
