"""Technical analysis module for kline market data.

This module provides candle parsing, per-candle classification and return
calculation, and aggregation of returns into descriptive risk statistics.
"""
