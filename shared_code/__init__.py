"""Shared helpers for market data access and formatting."""
