"""Command-line interface for Mecenas."""
