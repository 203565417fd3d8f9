"""
Analytics module for brand mention dashboards and spike detection.

This module turns a brand's stored mentions into sentiment totals, a daily
trend series and spike flags comparing the current and previous windows.
"""

__version__ = "0.1.0"
