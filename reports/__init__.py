"""Report generation entry points."""
